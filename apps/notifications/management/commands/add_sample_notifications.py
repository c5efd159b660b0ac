from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.blog.models import Blog, Comment
from apps.notifications.models import Notification

User = get_user_model()


class Command(BaseCommand):
    help = "Create like, comment and reply sample notifications from existing users and blogs"

    def add_arguments(self, parser):
        parser.add_argument(
            "--users", type=int, default=5, help="Number of users to draw actors from"
        )
        parser.add_argument(
            "--blogs", type=int, default=3, help="Number of blogs to attach to"
        )

    def handle(self, *args, **options):
        users = list(User.objects.order_by("date_joined")[: options["users"]])
        blogs = list(
            Blog.objects.published().select_related("author")[: options["blogs"]]
        )

        if len(users) < 2:
            self.stdout.write(
                self.style.WARNING(
                    "Need at least 2 users in the database to create sample notifications"
                )
            )
            return

        if not blogs:
            self.stdout.write(
                self.style.WARNING(
                    "Need at least 1 blog in the database to create sample notifications"
                )
            )
            return

        self.stdout.write(f"Found {len(users)} users and {len(blogs)} blogs")

        now = timezone.now()
        created = []

        with transaction.atomic():
            # Likes on the first blog, the oldest one already seen
            for i in range(min(3, len(users) - 1)):
                created.append(
                    self._create(
                        type=Notification.NotificationType.LIKE,
                        blog=blogs[0],
                        notification_for=blogs[0].author,
                        user=users[i + 1],
                        seen=i == 0,
                        created_at=now - timedelta(hours=i + 1),
                    )
                )

            if len(blogs) > 1 and len(users) > 2:
                created.append(
                    self._create(
                        type=Notification.NotificationType.COMMENT,
                        blog=blogs[1],
                        notification_for=blogs[1].author,
                        user=users[2],
                        created_at=now - timedelta(minutes=30),
                    )
                )

            if len(users) > 3:
                comment = Comment.objects.create(
                    blog=blogs[0],
                    blog_author=blogs[0].author,
                    commented_by=users[2],
                    comment="This is a great blog post! Really enjoyed reading it.",
                    commented_at=now - timedelta(hours=2),
                )
                self.stdout.write("Created sample comment for reply notification")

                created.append(
                    self._create(
                        type=Notification.NotificationType.REPLY,
                        blog=blogs[0],
                        notification_for=users[2],
                        user=users[3],
                        comment=comment,
                        replied_on_comment=comment,
                        created_at=now - timedelta(minutes=15),
                    )
                )

        self.stdout.write(
            self.style.SUCCESS(f"Created {len(created)} sample notifications:")
        )
        for index, notification in enumerate(created, start=1):
            self.stdout.write(
                f"{index}. {notification.type.upper()} notification for user "
                f"{notification.notification_for.username} from user "
                f"{notification.user.username}"
            )

        self.stdout.write(
            f"\nTotal notifications in database: {Notification.objects.count()}"
        )
        for user in users:
            unread = Notification.objects.filter(
                notification_for=user, seen=False
            ).count()
            self.stdout.write(
                f"User {user.username} has {unread} unread notifications"
            )

    def _create(self, created_at, **fields):
        notification = Notification.objects.create(**fields)
        # created_at is auto_now_add, so backdate it afterwards
        Notification.objects.filter(pk=notification.pk).update(created_at=created_at)
        notification.created_at = created_at
        return notification
