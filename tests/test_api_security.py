import json
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import override_settings
from rest_framework.test import APIClient, APITestCase
from rest_framework_simplejwt.tokens import AccessToken

from apps.accounts.authentication import get_tokens_for_user
from apps.blog.models import Blog

User = get_user_model()


def make_blog(author, title="Security notes", draft=False):
    blog = Blog.objects.create(
        author=author,
        title=title,
        banner="https://example.com/banner.png",
        des="About staying safe",
        content=[{"blocks": [{"type": "paragraph", "data": {"text": "Stay safe"}}]}],
        draft=draft,
    )
    blog.set_tags(["security"])
    return blog


class AuthenticationSecurityTestCase(APITestCase):
    """Test authentication and authorization security"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="testuser",
            email="test@test.com",
            password="SecurePass123",
            fullname="Test User",
        )
        self.admin = User.objects.create_user(
            username="author",
            email="author@test.com",
            password="AuthorPass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
        )

    def test_weak_password_rejection(self):
        """Test that weak passwords are rejected"""
        weak_passwords = [
            "123",
            "password",
            "12345678",
            "qwerty",
            "PASSWORD1",
            "Ab1",
            "Averyveryverylongpassword1",
        ]

        for weak_password in weak_passwords:
            with self.subTest(password=weak_password):
                response = self.client.post(
                    "/signup",
                    {
                        "fullname": "Weak Password",
                        "email": "weak@test.com",
                        "password": weak_password,
                    },
                    format="json",
                )
                self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.filter(email="weak@test.com").exists())

    def test_token_validation(self):
        """Test JWT token validation and security"""
        # Malformed token
        self.client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        response = self.client.get("/verify")
        self.assertEqual(response.status_code, 401)

        # Expired token
        token = AccessToken.for_user(self.user)
        token.set_exp(lifetime=-timedelta(minutes=1))
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get("/verify")
        self.assertEqual(response.status_code, 401)

    def test_refresh_token_is_not_an_access_token(self):
        """Test a refresh token can't be used to call protected endpoints"""
        tokens = get_tokens_for_user(self.user)
        self.client.cookies["access_token"] = tokens["refresh_token"]

        response = self.client.get("/verify")

        self.assertEqual(response.status_code, 401)

    def test_auth_cookies_are_http_only(self):
        response = self.client.post(
            "/signin",
            {"email": "test@test.com", "password": "SecurePass123"},
            format="json",
        )

        self.assertEqual(response.status_code, 200)
        for name in ("access_token", "refresh_token"):
            self.assertTrue(response.cookies[name]["httponly"])
        self.assertNotIn("access_token", response.data)

    def test_privilege_escalation_prevention(self):
        """Test prevention of privilege escalation"""
        self.client.force_authenticate(user=self.user)

        superadmin_endpoints = [
            "/superadmin/stats",
            "/superadmin/users",
            "/superadmin/blogs",
            "/superadmin/admins",
        ]
        for endpoint in superadmin_endpoints:
            response = self.client.get(endpoint)
            self.assertEqual(response.status_code, 403)

        response = self.client.put(
            f"/superadmin/users/{self.user.pk}/role", {"role": "admin"}, format="json"
        )
        self.assertEqual(response.status_code, 403)
        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.Role.USER)

        # Regular users can't write blogs
        response = self.client.post(
            "/create-blog", {"title": "Sneaky", "draft": True}, format="json"
        )
        self.assertEqual(response.status_code, 403)

    def test_role_not_writable_through_profile(self):
        self.client.force_authenticate(user=self.user)

        self.client.post(
            "/update-profile",
            {"username": "testuser", "role": "superadmin"},
            format="json",
        )

        self.user.refresh_from_db()
        self.assertEqual(self.user.role, User.Role.USER)


class InputValidationSecurityTestCase(APITestCase):
    """Test input validation and sanitization security"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="author",
            email="author@test.com",
            password="AuthorPass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
        )
        make_blog(self.admin)

    def test_sql_injection_prevention(self):
        """Test SQL injection prevention"""
        sql_payloads = [
            "'; DROP TABLE blog_blog; --",
            "' UNION SELECT * FROM accounts_user --",
            "' OR '1'='1' --",
            "admin'--",
        ]

        for payload in sql_payloads:
            with self.subTest(payload=payload):
                response = self.client.get("/search", {"query": payload})
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.data["results"]["total"], 0)

                response = self.client.post(
                    "/search-blogs", {"query": payload, "tag": payload}, format="json"
                )
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.data["totalDocs"], 0)

        self.assertEqual(Blog.objects.count(), 1)

    def test_non_numeric_ids_do_not_crash(self):
        self.client.force_authenticate(user=self.admin)
        requests = [
            ("post", "/like-blog", {"_id": "1 OR 1=1", "islikedByUser": False}),
            ("post", "/get-blog-comments", {"blog_id": {"$ne": None}}),
            ("post", "/get-replies", {"_id": ["1"]}),
            ("delete", "/delete-comment", {"_id": "../../etc/passwd"}),
        ]
        for method, url, data in requests:
            with self.subTest(url=url):
                response = getattr(self.client, method)(url, data, format="json")
                self.assertNotEqual(response.status_code, 500)

    def test_xss_payload_stored_verbatim_as_json(self):
        """Test comment text is returned as JSON data, never rendered"""
        user = User.objects.create_user(
            username="commenter",
            email="commenter@test.com",
            password="Commenter123",
            fullname="Comment Writer",
        )
        self.client.force_authenticate(user=user)
        blog = Blog.objects.get()
        payload = "<script>alert('xss')</script>"

        response = self.client.post(
            "/add-comment", {"_id": blog.pk, "comment": payload}, format="json"
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response["Content-Type"], "application/json")
        self.assertEqual(json.loads(response.content)["comment"], payload)

    def test_oversized_comment_rejected(self):
        self.client.force_authenticate(user=self.admin)
        blog = Blog.objects.get()

        response = self.client.post(
            "/add-comment", {"_id": blog.pk, "comment": "x" * 1001}, format="json"
        )

        self.assertEqual(response.status_code, 400)


class DataProtectionSecurityTestCase(APITestCase):
    """Test that private data does not leak"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = User.objects.create_user(
            username="author",
            email="author@test.com",
            password="AuthorPass123",
            fullname="Blog Author",
            role=User.Role.ADMIN,
        )
        self.blog = make_blog(self.admin)
        self.draft = make_blog(self.admin, title="Secret plans", draft=True)

    def test_sensitive_data_exposure(self):
        """Test sensitive data is not exposed in public responses"""
        responses = [
            self.client.post("/get-profile", {"username": "author"}, format="json"),
            self.client.post("/latest-blogs", {}, format="json"),
            self.client.get(f"/get-blog/{self.blog.blog_id}"),
            self.client.post("/search-users", {"query": "auth"}, format="json"),
        ]
        for response in responses:
            body = json.dumps(response.data)
            self.assertNotIn("author@test.com", body)
            self.assertNotIn("password", body)

    def test_drafts_hidden_from_public_lists(self):
        search = self.client.post("/search-blogs", {"query": "Secret"}, format="json")
        listings = [
            self.client.post("/latest-blogs", {}, format="json").data["blogs"],
            self.client.get("/trending-blogs").data["blogs"],
            search.data["blogs"],
            self.client.get("/search", {"query": "Secret"}).data["results"]["blogs"],
        ]
        for blogs in listings:
            self.assertNotIn(self.draft.blog_id, [b["blog_id"] for b in blogs])

    def test_user_data_isolation(self):
        """Test users can only reach their own inbox and drafts"""
        other = User.objects.create_user(
            username="other",
            email="other@test.com",
            password="OtherPass123",
            fullname="Other User",
        )
        self.client.force_authenticate(user=other)

        drafts = self.client.get("/user-blogs").data["drafts"]
        draft = self.client.get(f"/get-blog/{self.draft.blog_id}", {"draft": "true"})
        deleted = self.client.delete(f"/blog/{self.blog.blog_id}")

        self.assertEqual(drafts, [])
        self.assertEqual(draft.status_code, 403)
        self.assertEqual(deleted.status_code, 403)


class RateLimitingSecurityTestCase(APITestCase):
    """Test rate limiting on auth endpoints"""

    def setUp(self):
        cache.clear()
        self.client = APIClient()

    def tearDown(self):
        cache.clear()

    @override_settings(RATELIMIT_ENABLE=True)
    def test_login_rate_limiting(self):
        """Test login brute force is throttled per IP"""
        statuses = []
        for attempt in range(12):
            response = self.client.post(
                "/signin",
                {"email": "nobody@test.com", "password": "WrongPass123"},
                format="json",
            )
            statuses.append(response.status_code)

        self.assertIn(429, statuses)
        self.assertEqual(statuses[0], 404)

        final = self.client.post(
            "/signin",
            {"email": "nobody@test.com", "password": "WrongPass123"},
            format="json",
        )
        self.assertEqual(final.status_code, 429)
        self.assertEqual(final.data["code"], "throttled")


class HeaderSecurityTestCase(APITestCase):
    def test_content_type_enforcement(self):
        """Test non-JSON bodies are refused"""
        response = self.client.post(
            "/signin", "<xml/>", content_type="application/xml"
        )
        self.assertEqual(response.status_code, 415)

    def test_clickjacking_header(self):
        response = self.client.post("/latest-blogs", {}, format="json")
        self.assertEqual(response["X-Frame-Options"], "DENY")
