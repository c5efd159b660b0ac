from django.urls import path

from . import views

urlpatterns = [
    path("notifications", views.NotificationListView.as_view(), name="notifications"),
    path(
        "notifications/unread-count",
        views.UnreadCountView.as_view(),
        name="notifications-unread-count",
    ),
    path(
        "notifications/seen",
        views.MarkAllSeenView.as_view(),
        name="notifications-mark-all-seen",
    ),
    path(
        "new-notification",
        views.NewNotificationView.as_view(),
        name="new-notification",
    ),
    path(
        "notification/<int:pk>/seen",
        views.MarkSeenView.as_view(),
        name="notification-mark-seen",
    ),
    path(
        "notification/<int:pk>",
        views.DeleteNotificationView.as_view(),
        name="notification-delete",
    ),
]
