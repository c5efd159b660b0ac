from rest_framework.exceptions import NotFound


class NotificationNotFound(NotFound):
    """Exception raised when a notification is missing or not the requester's."""

    default_detail = "Notification not found."
    default_code = "notification_not_found"
