from io import StringIO

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.blog.models import Blog, Comment

from .models import Notification
from .tasks import send_notification

User = get_user_model()


class NotificationTestMixin:
    def setUp(self):
        self.client = APIClient()
        self.author = User.objects.create_user(
            username="author",
            email="author@example.com",
            password="Testpass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
        )
        self.fan = User.objects.create_user(
            username="fan",
            email="fan@example.com",
            password="Testpass123",
            fullname="Big Fan",
        )
        self.blog = Blog.objects.create(
            author=self.author, title="Notifications 101", des="About inboxes"
        )
        self.comment = Comment.objects.create(
            blog=self.blog,
            blog_author=self.author,
            commented_by=self.fan,
            comment="Nice one",
        )

    def notify(self, type, seen=False, actor=None, **fields):
        return Notification.objects.create(
            type=type,
            notification_for=self.author,
            user=actor or self.fan,
            blog=self.blog,
            seen=seen,
            **fields,
        )


class NotificationModelTest(NotificationTestMixin, TestCase):
    def test_for_recipient_excludes_own_actions(self):
        mine = self.notify(Notification.NotificationType.LIKE)
        self.notify(Notification.NotificationType.LIKE, actor=self.author)

        inbox = Notification.objects.for_recipient(self.author)

        self.assertEqual(list(inbox), [mine])

    def test_mark_as_seen(self):
        notification = self.notify(Notification.NotificationType.LIKE)
        notification.mark_as_seen()

        notification.refresh_from_db()
        self.assertTrue(notification.seen)

    def test_clean_requires_blog_and_user(self):
        notification = Notification(
            type=Notification.NotificationType.COMMENT, notification_for=self.author
        )
        with self.assertRaises(ValidationError):
            notification.clean()

    def test_clean_tutorial_needs_link(self):
        notification = Notification(
            type=Notification.NotificationType.TUTORIAL, notification_for=self.author
        )
        with self.assertRaises(ValidationError):
            notification.clean()

        notification.tutorial_link = "https://example.com/tour"
        notification.clean()

    def test_send_notification_task(self):
        pk = send_notification(
            {
                "type": "comment",
                "notification_for_id": self.author.pk,
                "user_id": self.fan.pk,
                "blog_id": self.blog.pk,
                "comment_id": self.comment.pk,
            }
        )

        notification = Notification.objects.get(pk=pk)
        self.assertEqual(notification.comment, self.comment)
        self.assertFalse(notification.seen)


class NotificationViewTest(NotificationTestMixin, APITestCase):
    """Test cases for the notification inbox."""

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.author)

    def test_list_notifications(self):
        self.notify(Notification.NotificationType.LIKE, seen=True)
        comment = self.notify(
            Notification.NotificationType.COMMENT, comment=self.comment
        )
        self.notify(Notification.NotificationType.LIKE, actor=self.author)

        response = self.client.get(reverse("notifications"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["totalCount"], 2)
        self.assertEqual(response.data["unreadCount"], 1)
        self.assertEqual(response.data["totalPages"], 1)
        self.assertEqual(response.data["currentPage"], 1)

        newest = response.data["notifications"][0]
        self.assertEqual(newest["_id"], comment.pk)
        self.assertEqual(newest["comment"]["comment"], "Nice one")
        self.assertEqual(newest["blog"]["blog_id"], self.blog.blog_id)
        self.assertEqual(newest["user"]["personal_info"]["username"], "fan")

    def test_list_filter_by_type(self):
        self.notify(Notification.NotificationType.LIKE)
        self.notify(Notification.NotificationType.COMMENT, comment=self.comment)

        likes = self.client.get(reverse("notifications"), {"filter": "like"})
        everything = self.client.get(reverse("notifications"), {"filter": "all"})

        self.assertEqual(likes.data["totalCount"], 1)
        self.assertEqual(likes.data["notifications"][0]["type"], "like")
        self.assertEqual(everything.data["totalCount"], 2)

    def test_list_paginates_by_ten(self):
        for _ in range(12):
            self.notify(Notification.NotificationType.LIKE)

        second = self.client.get(reverse("notifications"), {"page": 2})

        self.assertEqual(len(second.data["notifications"]), 2)
        self.assertEqual(second.data["totalPages"], 2)

    def test_unread_count_and_new_flag(self):
        self.assertFalse(
            self.client.get(reverse("new-notification")).data[
                "new_notification_available"
            ]
        )

        self.notify(Notification.NotificationType.LIKE)
        self.notify(Notification.NotificationType.LIKE, seen=True)

        count = self.client.get(reverse("notifications-unread-count"))
        new = self.client.get(reverse("new-notification"))

        self.assertEqual(count.data, {"unreadCount": 1})
        self.assertTrue(new.data["new_notification_available"])

    def test_mark_one_seen(self):
        notification = self.notify(Notification.NotificationType.LIKE)

        response = self.client.patch(
            reverse("notification-mark-seen", kwargs={"pk": notification.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["seen"])

    def test_mark_all_seen(self):
        self.notify(Notification.NotificationType.LIKE)
        self.notify(Notification.NotificationType.COMMENT, comment=self.comment)

        response = self.client.patch(reverse("notifications-mark-all-seen"))

        self.assertEqual(response.data, {"modified": 2})
        self.assertFalse(Notification.objects.filter(seen=False).exists())

    def test_mark_all_seen_matches_unread_count(self):
        """Test self-action notifications hidden from the inbox aren't counted."""
        self.notify(Notification.NotificationType.LIKE)
        own = self.notify(Notification.NotificationType.LIKE, actor=self.author)

        unread = self.client.get(reverse("notifications-unread-count"))
        response = self.client.patch(reverse("notifications-mark-all-seen"))

        self.assertEqual(unread.data["unreadCount"], 1)
        self.assertEqual(response.data, {"modified": 1})
        own.refresh_from_db()
        self.assertFalse(own.seen)

    def test_delete_notification(self):
        notification = self.notify(Notification.NotificationType.LIKE)

        response = self.client.delete(
            reverse("notification-delete", kwargs={"pk": notification.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.exists())

    def test_cannot_touch_someone_elses_notification(self):
        notification = self.notify(Notification.NotificationType.LIKE)
        self.client.force_authenticate(user=self.fan)

        seen = self.client.patch(
            reverse("notification-mark-seen", kwargs={"pk": notification.pk})
        )
        deleted = self.client.delete(
            reverse("notification-delete", kwargs={"pk": notification.pk})
        )

        self.assertEqual(seen.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(deleted.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Notification.objects.filter(pk=notification.pk).exists())

    def test_requires_auth(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse("notifications"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class AddSampleNotificationsCommandTest(NotificationTestMixin, TestCase):
    def test_creates_samples(self):
        for i in range(3):
            User.objects.create_user(
                username=f"extra{i}",
                email=f"extra{i}@example.com",
                password="Testpass123",
                fullname=f"Extra User {i}",
            )
        out = StringIO()

        call_command("add_sample_notifications", users=5, blogs=3, stdout=out)

        self.assertIn("sample notifications", out.getvalue())
        self.assertTrue(
            Notification.objects.filter(type=Notification.NotificationType.LIKE).exists()
        )
        self.assertTrue(
            Notification.objects.filter(type=Notification.NotificationType.REPLY).exists()
        )

    def test_needs_two_users(self):
        User.objects.exclude(pk=self.author.pk).delete()
        out = StringIO()

        call_command("add_sample_notifications", stdout=out)

        self.assertIn("Need at least 2 users", out.getvalue())
        self.assertFalse(Notification.objects.exists())
