from django.test import TestCase
from django_ratelimit.exceptions import Ratelimited
from rest_framework import status
from rest_framework.exceptions import NotFound, Throttled, ValidationError
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from apps.blog.exceptions import BlogNotFound
from apps.common.exceptions import api_exception_handler


class ExceptionHandlerTest(TestCase):
    """Test cases for the project-wide error body."""

    def setUp(self):
        self.request = APIRequestFactory().get("/latest-blogs")
        self.context = {"request": self.request, "view": APIView()}

    def test_api_exception_body(self):
        response = api_exception_handler(BlogNotFound(), self.context)

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(
            response.data,
            {"error": "Blog not found.", "code": "blog_not_found", "status_code": 404},
        )

    def test_custom_detail_keeps_code(self):
        response = api_exception_handler(NotFound("Nothing here"), self.context)

        self.assertEqual(response.data["error"], "Nothing here")
        self.assertEqual(response.data["code"], "not_found")

    def test_validation_error_carries_field_errors(self):
        exc = ValidationError({"title": ["You must provide a title"]})

        response = api_exception_handler(exc, self.context)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "You must provide a title")
        self.assertEqual(response.data["code"], "invalid")
        self.assertEqual(
            response.data["field_errors"], {"title": ["You must provide a title"]}
        )

    def test_throttled_includes_retry_after(self):
        response = api_exception_handler(Throttled(wait=30), self.context)

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.data["retry_after"], 30)

    def test_ratelimited_becomes_429(self):
        response = api_exception_handler(Ratelimited(), self.context)

        self.assertEqual(response.status_code, status.HTTP_429_TOO_MANY_REQUESTS)
        self.assertEqual(response.data["code"], "throttled")

    def test_unhandled_exception_is_500(self):
        response = api_exception_handler(RuntimeError("boom"), self.context)

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["error"], "Internal server error")
        self.assertNotIn("boom", str(response.data))
