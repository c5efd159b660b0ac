from datetime import timedelta

from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from apps.blog.models import Blog, Comment
from apps.notifications.models import Notification

User = get_user_model()


class SuperAdminAPITestCase(APITestCase):
    """Base test case with a superadmin, an admin author and a reader."""

    def setUp(self):
        self.client = APIClient()
        self.root = User.objects.create_superuser(
            username="root", email="root@example.com", password="Rootpass123"
        )
        self.author = User.objects.create_user(
            username="author",
            email="author@example.com",
            password="Testpass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
            total_posts=1,
        )
        self.reader = User.objects.create_user(
            username="reader",
            email="reader@example.com",
            password="Testpass123",
            fullname="Avid Reader",
        )
        self.blog = Blog.objects.create(
            author=self.author, title="Managed post", des="Some description"
        )
        self.draft = Blog.objects.create(
            author=self.author, title="Unfinished", draft=True
        )
        self.client.force_authenticate(user=self.root)


class SuperAdminAccessTest(SuperAdminAPITestCase):
    def test_non_superadmins_are_rejected(self):
        urls = [
            reverse("superadmin:stats"),
            reverse("superadmin:users"),
            reverse("superadmin:blogs"),
            reverse("superadmin:admins"),
        ]
        for user in (self.author, self.reader):
            self.client.force_authenticate(user=user)
            for url in urls:
                with self.subTest(user=user.username, url=url):
                    response = self.client.get(url)
                    self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(user=None)
        response = self.client.get(reverse("superadmin:stats"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class StatsViewTest(SuperAdminAPITestCase):
    def test_stats(self):
        Comment.objects.create(
            blog=self.blog,
            blog_author=self.author,
            commented_by=self.reader,
            comment="First!",
        )
        User.objects.filter(pk=self.reader.pk).update(
            date_joined=timezone.now() - timedelta(days=90)
        )

        response = self.client.get(reverse("superadmin:stats"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["totalUsers"], 3)
        self.assertEqual(response.data["totalBlogs"], 1)
        self.assertEqual(response.data["totalDrafts"], 1)
        self.assertEqual(response.data["totalComments"], 1)
        self.assertEqual(response.data["totalAdmins"], 2)
        self.assertEqual(
            response.data["growth"], {"newUsers": 2, "newBlogs": 1, "newComments": 1}
        )


class ListViewsTest(SuperAdminAPITestCase):
    def test_users_filtered(self):
        everyone = self.client.get(reverse("superadmin:users"))
        readers = self.client.get(reverse("superadmin:users"), {"role": "user"})
        search = self.client.get(reverse("superadmin:users"), {"search": "avid"})

        self.assertEqual(len(everyone.data["users"]), 3)
        self.assertEqual(
            [u["username"] for u in readers.data["users"]], ["reader"]
        )
        self.assertEqual([u["username"] for u in search.data["users"]], ["reader"])
        self.assertIn("email", everyone.data["users"][0])

    def test_blogs_search(self):
        everything = self.client.get(reverse("superadmin:blogs"))
        matched = self.client.get(reverse("superadmin:blogs"), {"search": "unfin"})

        self.assertEqual(len(everything.data["blogs"]), 2)
        self.assertEqual(
            [b["blog_id"] for b in matched.data["blogs"]], [self.draft.blog_id]
        )

    def test_admins(self):
        response = self.client.get(reverse("superadmin:admins"))

        self.assertEqual(
            sorted(u["username"] for u in response.data["admins"]), ["author", "root"]
        )


class UpdateRoleViewTest(SuperAdminAPITestCase):
    def url(self, user):
        return reverse("superadmin:update-role", kwargs={"pk": user.pk})

    def test_promote_and_demote(self):
        promoted = self.client.put(self.url(self.reader), {"role": "admin"}, format="json")
        demoted = self.client.put(self.url(self.author), {"role": "user"}, format="json")

        self.assertEqual(promoted.status_code, status.HTTP_200_OK)
        self.assertEqual(promoted.data["user"]["role"], "admin")
        self.assertEqual(demoted.status_code, status.HTTP_200_OK)
        self.reader.refresh_from_db()
        self.author.refresh_from_db()
        self.assertEqual(self.reader.role, User.Role.ADMIN)
        self.assertEqual(self.author.role, User.Role.USER)

    def test_cannot_grant_superadmin(self):
        response = self.client.put(
            self.url(self.reader), {"role": "superadmin"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_change_superadmin(self):
        other_root = User.objects.create_superuser(
            username="root2", email="root2@example.com", password="Rootpass123"
        )
        response = self.client.put(self.url(other_root), {"role": "user"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        other_root.refresh_from_db()
        self.assertEqual(other_root.role, User.Role.SUPERADMIN)

    def test_unknown_user(self):
        response = self.client.put(
            reverse("superadmin:update-role", kwargs={"pk": 9999}),
            {"role": "admin"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class DeleteViewsTest(SuperAdminAPITestCase):
    def test_delete_user_fixes_counters_on_other_blogs(self):
        """Test deleting a reader removes their likes and comment threads."""
        root_comment = Comment.objects.create(
            blog=self.blog,
            blog_author=self.author,
            commented_by=self.reader,
            comment="Reader comment",
        )
        Comment.objects.create(
            blog=self.blog,
            blog_author=self.author,
            commented_by=self.author,
            comment="Author reply",
            parent=root_comment,
            is_reply=True,
        )
        Comment.objects.create(
            blog=self.blog,
            blog_author=self.author,
            commented_by=self.author,
            comment="Author note",
        )
        Notification.objects.create(
            type=Notification.NotificationType.LIKE,
            notification_for=self.author,
            user=self.reader,
            blog=self.blog,
        )
        Blog.objects.filter(pk=self.blog.pk).update(
            total_comments=3, total_parent_comments=2, total_likes=1
        )

        response = self.client.delete(
            reverse("superadmin:delete-user", kwargs={"pk": self.reader.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(pk=self.reader.pk).exists())
        self.blog.refresh_from_db()
        self.assertEqual(self.blog.total_comments, 1)
        self.assertEqual(self.blog.total_parent_comments, 1)
        self.assertEqual(self.blog.total_likes, 0)
        self.assertEqual(Comment.objects.count(), 1)

    def test_delete_author_removes_blogs(self):
        response = self.client.delete(
            reverse("superadmin:delete-user", kwargs={"pk": self.author.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Blog.objects.exists())

    def test_cannot_delete_superadmin(self):
        response = self.client.delete(
            reverse("superadmin:delete-user", kwargs={"pk": self.root.pk})
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(User.objects.filter(pk=self.root.pk).exists())

    def test_delete_blog(self):
        response = self.client.delete(
            reverse("superadmin:delete-blog", kwargs={"blog_id": self.blog.blog_id})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Blog.objects.filter(pk=self.blog.pk).exists())
        self.author.refresh_from_db()
        self.assertEqual(self.author.total_posts, 0)

    def test_delete_unknown_blog(self):
        response = self.client.delete(
            reverse("superadmin:delete-blog", kwargs={"blog_id": "missing"})
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
