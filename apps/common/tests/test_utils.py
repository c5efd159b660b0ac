from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIRequestFactory

from apps.common.utils import (
    generate_random_string,
    get_client_ip,
    parse_int,
    slugify_title,
)


class UtilsTest(SimpleTestCase):
    @override_settings(TRUST_PROXY_HEADERS=True)
    def test_get_client_ip_prefers_forwarded_for(self):
        request = APIRequestFactory().get(
            "/", HTTP_X_FORWARDED_FOR="203.0.113.7, 10.0.0.1", REMOTE_ADDR="10.0.0.1"
        )
        self.assertEqual(get_client_ip(request), "203.0.113.7")

    @override_settings(TRUST_PROXY_HEADERS=False)
    def test_get_client_ip_ignores_proxy_headers_by_default(self):
        request = APIRequestFactory().get(
            "/",
            HTTP_X_FORWARDED_FOR="203.0.113.7",
            HTTP_X_REAL_IP="203.0.113.8",
            REMOTE_ADDR="192.0.2.1",
        )
        self.assertEqual(get_client_ip(request), "192.0.2.1")

    @override_settings(TRUST_PROXY_HEADERS=True)
    def test_get_client_ip_ignores_garbage(self):
        request = APIRequestFactory().get(
            "/", HTTP_X_FORWARDED_FOR="not-an-ip", REMOTE_ADDR="192.0.2.1"
        )
        self.assertEqual(get_client_ip(request), "192.0.2.1")

    def test_generate_random_string(self):
        value = generate_random_string(12)
        self.assertEqual(len(value), 12)
        self.assertTrue(value.isalnum())

    def test_slugify_title(self):
        self.assertEqual(
            slugify_title("  What's new in Django 5?  "), "What-s-new-in-Django-5"
        )
        self.assertEqual(slugify_title("!!!"), "")

    def test_parse_int(self):
        self.assertEqual(parse_int("7", 1), 7)
        self.assertEqual(parse_int(None, 1), 1)
        self.assertEqual(parse_int("x", 3), 3)
        self.assertEqual(parse_int("-4", 1, minimum=1), 1)
