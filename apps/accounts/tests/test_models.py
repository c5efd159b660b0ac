from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.test import TestCase

from apps.accounts.models import SOCIAL_PLATFORMS

User = get_user_model()


class UserModelTest(TestCase):
    """Test cases for the User model."""

    def test_create_user_defaults(self):
        user = User.objects.create_user(
            username="reader",
            email="Reader@Example.COM",
            password="Testpass123",
            fullname="Avid Reader",
        )

        self.assertEqual(user.email, "reader@example.com")
        self.assertEqual(user.role, User.Role.USER)
        self.assertFalse(user.google_auth)
        self.assertEqual(user.total_posts, 0)
        self.assertEqual(user.total_reads, 0)
        self.assertEqual(set(user.social_links), set(SOCIAL_PLATFORMS))
        self.assertTrue(user.profile_img.endswith("seed=reader"))
        self.assertEqual(str(user), "reader")

    def test_explicit_profile_img_kept(self):
        user = User.objects.create_user(
            username="pictured",
            email="pictured@example.com",
            password="Testpass123",
            fullname="Has Picture",
            profile_img="https://example.com/me.png",
        )
        self.assertEqual(user.profile_img, "https://example.com/me.png")

    def test_email_unique_case_insensitive(self):
        User.objects.create_user(
            username="first", email="same@example.com", fullname="First One"
        )
        with self.assertRaises(IntegrityError):
            User.objects.create_user(
                username="second", email="SAME@example.com", fullname="Second One"
            )

    def test_create_superuser_gets_superadmin_role(self):
        user = User.objects.create_superuser(
            username="root", email="root@example.com", password="Testpass123"
        )

        self.assertEqual(user.role, User.Role.SUPERADMIN)
        self.assertTrue(user.is_superadmin)
        self.assertTrue(user.is_admin_role)
        self.assertTrue(user.is_staff)

    def test_role_properties(self):
        user = User(username="a", email="a@example.com", role=User.Role.ADMIN)
        self.assertTrue(user.is_admin_role)
        self.assertFalse(user.is_superadmin)

        user.role = User.Role.USER
        self.assertFalse(user.is_admin_role)
