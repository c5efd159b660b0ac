from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils.translation import gettext_lazy as _


class NotificationQuerySet(models.QuerySet):
    def for_recipient(self, user):
        """Notifications addressed to ``user``, minus the user's own actions."""
        return self.filter(notification_for=user).exclude(user=user)

    def unread(self):
        return self.filter(seen=False)


class Notification(models.Model):
    """
    Inbox entry for likes, comments, replies and tutorial announcements.

    A ``like`` notification doubles as the like itself: it exists exactly
    while ``user`` likes ``blog``.
    """

    class NotificationType(models.TextChoices):
        LIKE = "like", _("Like")
        COMMENT = "comment", _("Comment")
        REPLY = "reply", _("Reply")
        TUTORIAL = "tutorial", _("Tutorial")

    type = models.CharField(max_length=20, choices=NotificationType.choices)
    notification_for = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications_sent",
        null=True,
        blank=True,
    )
    blog = models.ForeignKey(
        "blog.Blog",
        on_delete=models.CASCADE,
        related_name="notifications",
        null=True,
        blank=True,
    )
    comment = models.ForeignKey(
        "blog.Comment",
        on_delete=models.CASCADE,
        related_name="notifications",
        null=True,
        blank=True,
    )
    reply = models.ForeignKey(
        "blog.Comment",
        on_delete=models.SET_NULL,
        related_name="reply_notifications",
        null=True,
        blank=True,
    )
    replied_on_comment = models.ForeignKey(
        "blog.Comment",
        on_delete=models.SET_NULL,
        related_name="replied_on_notifications",
        null=True,
        blank=True,
    )
    tutorial_link = models.URLField(max_length=500, blank=True, default="")
    seen = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = NotificationQuerySet.as_manager()

    class Meta:
        verbose_name = _("notification")
        verbose_name_plural = _("notifications")
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["notification_for", "seen"],
                name="notificatio_notific_3b9d41_idx",
            ),
            models.Index(
                fields=["type", "blog", "user"], name="notificatio_type_6f0a2c_idx"
            ),
        ]

    def __str__(self):
        return f"{self.type} notification for {self.notification_for_id}"

    def clean(self):
        if self.type == self.NotificationType.TUTORIAL:
            if not self.tutorial_link:
                raise ValidationError(
                    {"tutorial_link": _("Tutorial notifications need a link.")}
                )
        else:
            if self.blog_id is None or self.user_id is None:
                raise ValidationError(
                    _("Blog and user are required for this notification type.")
                )

    def mark_as_seen(self):
        """Mark notification as seen."""
        if not self.seen:
            self.seen = True
            self.save(update_fields=["seen", "updated_at"])
