from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

User = get_user_model()


class BaseUserAPITestCase(APITestCase):
    """Base test case with two users, the first one signed in."""

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="testuser",
            email="test@example.com",
            password="Testpass123",
            fullname="Test User",
            bio="Writes about tests",
        )
        self.user2 = User.objects.create_user(
            username="testuser2",
            email="test2@example.com",
            password="Testpass123",
            fullname="Second User",
        )
        self.client.force_authenticate(user=self.user)


class GetProfileViewTest(BaseUserAPITestCase):
    def test_get_profile(self):
        """Test the public profile shape."""
        self.client.force_authenticate(user=None)
        response = self.client.post(
            reverse("get-profile"), {"username": "testuser"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["_id"], self.user.pk)
        self.assertEqual(response.data["personal_info"]["bio"], "Writes about tests")
        self.assertEqual(
            response.data["account_info"], {"total_posts": 0, "total_reads": 0}
        )
        self.assertIn("github", response.data["social_links"])
        self.assertNotIn("email", response.data["personal_info"])

    def test_get_profile_unknown(self):
        response = self.client.post(
            reverse("get-profile"), {"username": "ghost"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SearchUsersViewTest(BaseUserAPITestCase):
    def test_search_users(self):
        response = self.client.post(
            reverse("search-users"), {"query": "USER2"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["users"]), 1)
        self.assertEqual(
            response.data["users"][0]["personal_info"]["username"], "testuser2"
        )

    def test_search_users_empty_query(self):
        response = self.client.post(reverse("search-users"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["users"], [])


class UpdateProfileViewTest(BaseUserAPITestCase):
    def test_update_profile(self):
        """Test updating username, bio and social links."""
        data = {
            "username": "renamed",
            "bio": "New bio",
            "social_links": {
                "github": "https://github.com/renamed",
                "website": "https://renamed.dev",
            },
        }
        response = self.client.post(reverse("update-profile"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"username": "renamed"})

        self.user.refresh_from_db()
        self.assertEqual(self.user.bio, "New bio")
        self.assertEqual(self.user.social_links["github"], "https://github.com/renamed")
        self.assertEqual(self.user.social_links["youtube"], "")

    def test_update_profile_username_taken(self):
        response = self.client.post(
            reverse("update-profile"), {"username": "testuser2"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "username_taken")

    def test_update_profile_validation(self):
        cases = [
            {"username": "ab"},
            {"username": "valid", "bio": "x" * 151},
            {
                "username": "valid",
                "social_links": {"twitter": "https://facebook.com/someone"},
            },
            {"username": "valid", "social_links": {"github": "github.com/no-scheme"}},
        ]
        for data in cases:
            with self.subTest(data=data):
                response = self.client.post(
                    reverse("update-profile"), data, format="json"
                )
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_profile_requires_auth(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(
            reverse("update-profile"), {"username": "renamed"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_profile_img(self):
        url = "https://res.cloudinary.com/demo/image/upload/avatar.png"
        response = self.client.post(
            reverse("update-profile-img"), {"url": url}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["profile_img"], url)
        self.user.refresh_from_db()
        self.assertEqual(self.user.profile_img, url)

    def test_update_profile_img_invalid_url(self):
        response = self.client.post(
            reverse("update-profile-img"), {"url": "nope"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
