from django.urls import path

from .views.auth import (
    ChangeEmailView,
    ChangePasswordView,
    GoogleAuthView,
    LogoutView,
    RefreshView,
    SigninView,
    SignupView,
    VerifyView,
)
from .views.user import (
    GetProfileView,
    SearchUsersView,
    UpdateProfileImgView,
    UpdateProfileView,
)

urlpatterns = [
    path("signup", SignupView.as_view(), name="signup"),
    path("signin", SigninView.as_view(), name="signin"),
    path("google-auth", GoogleAuthView.as_view(), name="google-auth"),
    path("refresh", RefreshView.as_view(), name="refresh"),
    path("logout", LogoutView.as_view(), name="logout"),
    path("verify", VerifyView.as_view(), name="verify"),
    path("change-password", ChangePasswordView.as_view(), name="change-password"),
    path("change-email", ChangeEmailView.as_view(), name="change-email"),
    path("get-profile", GetProfileView.as_view(), name="get-profile"),
    path("search-users", SearchUsersView.as_view(), name="search-users"),
    path("update-profile", UpdateProfileView.as_view(), name="update-profile"),
    path(
        "update-profile-img",
        UpdateProfileImgView.as_view(),
        name="update-profile-img",
    ),
]
