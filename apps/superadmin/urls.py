from django.urls import path

from . import views

app_name = "superadmin"

urlpatterns = [
    path("stats", views.StatsView.as_view(), name="stats"),
    path("users", views.UserListView.as_view(), name="users"),
    path("users/<int:pk>/role", views.UpdateRoleView.as_view(), name="update-role"),
    path("users/<int:pk>", views.DeleteUserView.as_view(), name="delete-user"),
    path("blogs", views.BlogListView.as_view(), name="blogs"),
    path("blogs/<str:blog_id>", views.DeleteBlogView.as_view(), name="delete-blog"),
    path("admins", views.AdminListView.as_view(), name="admins"),
]
