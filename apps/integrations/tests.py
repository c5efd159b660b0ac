from unittest import mock

import requests
from django.contrib.auth import get_user_model
from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

User = get_user_model()


@override_settings(
    CLOUDINARY={"CLOUD_NAME": "demo", "API_KEY": "key", "API_SECRET": "secret"}
)
class CloudinaryDeleteViewTest(APITestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="uploader",
            email="uploader@example.com",
            password="Testpass123",
            fullname="Image Uploader",
        )
        self.client.force_authenticate(user=self.user)
        self.url = reverse("cloudinary-delete")

    @mock.patch("apps.integrations.views.cloudinary.uploader.destroy")
    @mock.patch("apps.integrations.views.cloudinary.config")
    def test_delete_image(self, mock_config, mock_destroy):
        mock_destroy.return_value = {"result": "ok"}

        response = self.client.post(self.url, {"publicId": "banners/abc"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {"result": "ok"})
        mock_destroy.assert_called_once_with("banners/abc")
        self.assertEqual(mock_config.call_args.kwargs["cloud_name"], "demo")

    @mock.patch("apps.integrations.views.cloudinary.uploader.destroy")
    def test_cloudinary_reports_failure(self, mock_destroy):
        mock_destroy.return_value = {"result": "not found"}

        response = self.client.post(self.url, {"publicId": "missing"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["code"], "image_delete_failed")

    @mock.patch("apps.integrations.views.cloudinary.uploader.destroy")
    def test_cloudinary_raises(self, mock_destroy):
        mock_destroy.side_effect = Exception("connection reset")

        response = self.client.post(self.url, {"publicId": "x"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    def test_public_id_required(self):
        response = self.client.post(self.url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Public ID is required")

    def test_requires_auth(self):
        self.client.force_authenticate(user=None)
        response = self.client.post(self.url, {"publicId": "x"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class UnsplashViewTest(APITestCase):
    """Test cases for the Unsplash proxy."""

    def setUp(self):
        self.client = APIClient()

    @mock.patch("apps.integrations.views.requests.get")
    def test_search_photos(self, mock_get):
        mock_get.return_value.json.return_value = {"total": 1, "results": [{"id": "p1"}]}

        response = self.client.get(
            reverse("unsplash-search"), {"query": "mountains", "per_page": 100}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"], [{"id": "p1"}])

        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], "https://api.unsplash.com/search/photos")
        self.assertEqual(kwargs["params"]["query"], "mountains")
        self.assertEqual(kwargs["params"]["per_page"], 30)
        self.assertEqual(kwargs["params"]["page"], 1)
        self.assertEqual(
            kwargs["headers"]["Authorization"], "Client-ID test-unsplash-key"
        )

    def test_search_requires_query(self):
        response = self.client.get(reverse("unsplash-search"))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "Search query is required")

    @mock.patch("apps.integrations.views.requests.get")
    def test_search_upstream_error(self, mock_get):
        mock_get.return_value.raise_for_status.side_effect = requests.HTTPError(
            "403 Rate Limit Exceeded"
        )

        response = self.client.get(reverse("unsplash-search"), {"query": "sea"})

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data["code"], "unsplash_error")

    @mock.patch("apps.integrations.views.requests.get")
    def test_search_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout()

        response = self.client.get(reverse("unsplash-search"), {"query": "sea"})

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)

    @mock.patch("apps.integrations.views.requests.get")
    def test_track_download(self, mock_get):
        location = "https://api.unsplash.com/photos/p1/download?ixid=abc"
        mock_get.return_value.json.return_value = {
            "url": "https://images.unsplash.com/photo-p1"
        }

        response = self.client.post(
            reverse("unsplash-track-download"),
            {"downloadLocation": location},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["url"], "https://images.unsplash.com/photo-p1")
        self.assertEqual(mock_get.call_args.args[0], location)

    @mock.patch("apps.integrations.views.requests.get")
    def test_track_download_rejects_foreign_urls(self, mock_get):
        response = self.client.post(
            reverse("unsplash-track-download"),
            {"downloadLocation": "https://evil.example.com/download"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        mock_get.assert_not_called()

    def test_track_download_requires_location(self):
        response = self.client.post(
            reverse("unsplash-track-download"), {}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
