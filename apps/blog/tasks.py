import logging
from typing import Optional

from celery import shared_task
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F

from apps.notifications.models import Notification
from apps.notifications.tasks import send_notification as send_user_notification

from .models import Blog, Comment
from .tutorial import (
    TUTORIAL_DESCRIPTION,
    TUTORIAL_TAGS,
    TUTORIAL_TITLE,
    tutorial_content,
    tutorial_link,
)

logger = logging.getLogger(__name__)
User = get_user_model()


@shared_task(bind=True, max_retries=3)
def record_blog_read(self, blog_pk: int):
    """
    Count one read of a blog.

    Increments both the blog's and its author's ``total_reads``.
    """
    try:
        with transaction.atomic():
            blog = Blog.objects.only("pk", "author_id").get(pk=blog_pk)
            Blog.objects.filter(pk=blog.pk).update(total_reads=F("total_reads") + 1)
            User.objects.filter(pk=blog.author_id).update(
                total_reads=F("total_reads") + 1
            )
    except Blog.DoesNotExist:
        logger.warning(f"Blog {blog_pk} not found for read tracking")
    except Exception as exc:
        logger.error(f"Error recording blog read: {exc}")
        raise self.retry(countdown=60, exc=exc)


@shared_task(bind=True, max_retries=3)
def send_comment_notification(
    self, comment_id: int, notification_id: Optional[int] = None
):
    """
    Notify about a new comment.

    Top level comments notify the blog author; replies notify the author of
    the parent comment. When the reply was written from the inbox,
    ``notification_id`` points at the notification being answered and its
    ``reply`` is set to the new comment.
    """
    try:
        comment = Comment.objects.select_related("parent").get(id=comment_id)
    except Comment.DoesNotExist:
        logger.warning(f"Comment {comment_id} not found for notification")
        return

    if comment.is_reply and comment.parent_id:
        notification_data = {
            "type": Notification.NotificationType.REPLY,
            "notification_for_id": comment.parent.commented_by_id,
            "user_id": comment.commented_by_id,
            "blog_id": comment.blog_id,
            "comment_id": comment.pk,
            "replied_on_comment_id": comment.parent_id,
        }
    else:
        notification_data = {
            "type": Notification.NotificationType.COMMENT,
            "notification_for_id": comment.blog_author_id,
            "user_id": comment.commented_by_id,
            "blog_id": comment.blog_id,
            "comment_id": comment.pk,
        }

    try:
        send_user_notification.delay(notification_data)

        if notification_id:
            Notification.objects.filter(
                pk=notification_id, notification_for_id=comment.commented_by_id
            ).update(reply=comment)

        logger.info(
            f"Sent {notification_data['type']} notification for comment {comment_id}"
        )
    except Exception as exc:
        logger.error(f"Error sending comment notification: {exc}")
        raise self.retry(countdown=60, exc=exc)


@shared_task(bind=True, max_retries=3)
def seed_tutorial(self, user_pk: int):
    """
    Give a new account the tutorial draft and a ``tutorial`` notification
    linking to it in the editor. Accounts that already got one are skipped.
    """
    already_seeded = Notification.objects.filter(
        notification_for_id=user_pk, type=Notification.NotificationType.TUTORIAL
    ).exists()
    if already_seeded or not User.objects.filter(pk=user_pk).exists():
        return None

    try:
        with transaction.atomic():
            blog = Blog.objects.create(
                author_id=user_pk,
                title=TUTORIAL_TITLE,
                des=TUTORIAL_DESCRIPTION,
                content=tutorial_content(),
                draft=True,
            )
            blog.set_tags(TUTORIAL_TAGS)
            notification = Notification.objects.create(
                type=Notification.NotificationType.TUTORIAL,
                notification_for_id=user_pk,
                blog=blog,
                tutorial_link=tutorial_link(blog),
            )
        logger.info(f"Seeded tutorial draft {blog.blog_id} for user {user_pk}")
        return notification.pk
    except Exception as exc:
        logger.error(f"Error seeding tutorial for user {user_pk}: {exc}")
        raise self.retry(countdown=60, exc=exc)
