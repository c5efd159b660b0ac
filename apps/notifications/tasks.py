import logging
from typing import Any, Dict

from celery import shared_task

from .models import Notification

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3)
def send_notification(self, notification_data: Dict[str, Any]):
    """
    Create an inbox notification.

    Args:
        notification_data: model field values keyed by attname, e.g.
            ``{"type": "comment", "notification_for_id": 1, "user_id": 2,
            "blog_id": 3, "comment_id": 4}``
    """
    try:
        notification = Notification.objects.create(**notification_data)
        logger.info(
            f"Created {notification.type} notification {notification.pk} "
            f"for user {notification.notification_for_id}"
        )
        return notification.pk
    except Exception as exc:
        logger.error(f"Error creating notification: {exc}", exc_info=True)
        raise self.retry(countdown=60, exc=exc)
