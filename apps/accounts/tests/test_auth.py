from unittest import mock

import jwt
from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.accounts.authentication import get_tokens_for_user
from apps.accounts.exceptions import GoogleAuthUnavailable, InvalidGoogleToken
from apps.accounts.google import verify_firebase_token
from apps.blog.tutorial import TUTORIAL_TITLE
from apps.notifications.models import Notification

User = get_user_model()

STRONG_PASSWORD = "Secret123"


class AuthAPITestCase(APITestCase):
    """Base test case with a password account."""

    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create_user(
            username="writer",
            email="writer@example.com",
            password=STRONG_PASSWORD,
            fullname="Jane Writer",
        )

    def sign_in(self, user=None):
        tokens = get_tokens_for_user(user or self.user)
        self.client.cookies["access_token"] = tokens["access_token"]
        self.client.cookies["refresh_token"] = tokens["refresh_token"]
        return tokens


class SignupViewTest(AuthAPITestCase):
    def test_signup_creates_account_and_sets_cookies(self):
        """Test signing up returns the session payload with auth cookies."""
        data = {
            "fullname": "New Person",
            "email": "New.Person@Example.com",
            "password": STRONG_PASSWORD,
        }
        response = self.client.post(reverse("signup"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["email"], "new.person@example.com")
        self.assertEqual(response.data["username"], "new.person")
        self.assertEqual(response.data["role"], "user")
        self.assertIn("access_token", response.cookies)
        self.assertIn("refresh_token", response.cookies)
        self.assertTrue(response.cookies["access_token"]["httponly"])

        user = User.objects.get(email="new.person@example.com")
        self.assertTrue(user.check_password(STRONG_PASSWORD))
        self.assertIn("seed=new.person", user.profile_img)

    def test_signup_username_collision_gets_suffix(self):
        """Test a taken email local part gets a random suffix."""
        data = {
            "fullname": "Another Writer",
            "email": "writer@other.org",
            "password": STRONG_PASSWORD,
        }
        response = self.client.post(reverse("signup"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        username = response.data["username"]
        self.assertTrue(username.startswith("writer"))
        self.assertEqual(len(username), len("writer") + 4)

    def test_signup_duplicate_email(self):
        data = {
            "fullname": "Copy Cat",
            "email": "WRITER@example.com",
            "password": STRONG_PASSWORD,
        }
        response = self.client.post(reverse("signup"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "Email already registered.")

    def test_signup_validation(self):
        """Test short names, bad emails and weak passwords are rejected."""
        cases = [
            {"fullname": "Al", "email": "al@example.com", "password": STRONG_PASSWORD},
            {"fullname": "Alice", "email": "not-an-email", "password": STRONG_PASSWORD},
            {"fullname": "Alice", "email": "al@example.com", "password": "weakpass"},
        ]
        for data in cases:
            with self.subTest(data=data):
                response = self.client.post(reverse("signup"), data, format="json")
                self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
                self.assertIn("field_errors", response.data)

    def test_signup_seeds_tutorial(self):
        """Test a new account gets the tutorial draft and its notification."""
        data = {
            "fullname": "New Person",
            "email": "new.person@example.com",
            "password": STRONG_PASSWORD,
        }
        self.client.post(reverse("signup"), data, format="json")
        self.client.cookies.clear()
        user = User.objects.get(email="new.person@example.com")
        self.client.force_authenticate(user=user)

        drafts = self.client.get(reverse("user-blogs")).data["drafts"]
        inbox = self.client.get(reverse("notifications"), {"filter": "tutorial"})

        self.assertEqual(len(drafts), 1)
        self.assertEqual(drafts[0]["title"], TUTORIAL_TITLE)
        self.assertEqual(inbox.data["totalCount"], 1)
        notification = inbox.data["notifications"][0]
        self.assertEqual(notification["type"], "tutorial")
        self.assertIsNone(notification["user"])
        self.assertEqual(notification["blog"]["blog_id"], drafts[0]["blog_id"])
        self.assertTrue(
            notification["tutorial_link"].endswith(f"/editor/{drafts[0]['blog_id']}")
        )


class SigninViewTest(AuthAPITestCase):
    def test_signin_success(self):
        data = {"email": "Writer@Example.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("signin"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["_id"], self.user.pk)
        self.assertEqual(response.data["fullname"], "Jane Writer")
        self.assertIn("access_token", response.cookies)

        self.user.refresh_from_db()
        self.assertIsNotNone(self.user.last_login)

    def test_signin_unknown_email(self):
        data = {"email": "nobody@example.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("signin"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Email not found.")

    def test_signin_wrong_password(self):
        data = {"email": "writer@example.com", "password": "Wrong1234"}
        response = self.client.post(reverse("signin"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "Incorrect password.")
        self.assertNotIn("access_token", response.cookies)

    def test_signin_google_account_rejected(self):
        """Test accounts created with Google can't use a password."""
        User.objects.create_user(
            username="googler",
            email="googler@gmail.com",
            password=STRONG_PASSWORD,
            fullname="Goo Gler",
            google_auth=True,
        )
        data = {"email": "googler@gmail.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("signin"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn("Google", response.data["error"])


class GoogleAuthViewTest(AuthAPITestCase):
    claims = {
        "email": "Fresh@Gmail.com",
        "name": "Fresh Face",
        "picture": "https://lh3.googleusercontent.com/a/photo=s96-c",
    }

    @mock.patch("apps.accounts.views.auth.verify_firebase_token")
    def test_google_signup_creates_account(self, mock_verify):
        """Test a first Google sign in creates a google_auth account."""
        mock_verify.return_value = self.claims

        response = self.client.post(
            reverse("google-auth"), {"access_token": "id-token"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        mock_verify.assert_called_once_with("id-token")
        user = User.objects.get(email="fresh@gmail.com")
        self.assertTrue(user.google_auth)
        self.assertFalse(user.has_usable_password())
        self.assertEqual(user.fullname, "Fresh Face")
        self.assertTrue(user.profile_img.endswith("s384-c"))
        self.assertIn("access_token", response.cookies)

    @mock.patch("apps.accounts.views.auth.verify_firebase_token")
    def test_google_signin_existing_account(self, mock_verify):
        mock_verify.return_value = self.claims
        self.client.post(reverse("google-auth"), {"access_token": "t"}, format="json")

        response = self.client.post(
            reverse("google-auth"), {"access_token": "t"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(User.objects.filter(email="fresh@gmail.com").count(), 1)
        self.assertEqual(
            Notification.objects.filter(
                notification_for__email="fresh@gmail.com", type="tutorial"
            ).count(),
            1,
        )

    @mock.patch("apps.accounts.views.auth.verify_firebase_token")
    def test_google_signin_password_account_rejected(self, mock_verify):
        mock_verify.return_value = {"email": "writer@example.com", "name": "Jane"}

        response = self.client.post(
            reverse("google-auth"), {"access_token": "t"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    @mock.patch("apps.accounts.views.auth.verify_firebase_token")
    def test_google_invalid_token(self, mock_verify):
        mock_verify.side_effect = InvalidGoogleToken()

        response = self.client.post(
            reverse("google-auth"), {"access_token": "t"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["code"], "invalid_google_token")


class VerifyFirebaseTokenTest(TestCase):
    """Test cases for the Firebase ID token check."""

    @override_settings(FIREBASE_PROJECT_ID="")
    def test_unconfigured_project(self):
        with self.assertRaises(GoogleAuthUnavailable):
            verify_firebase_token("token")

    @mock.patch("apps.accounts.google.get_jwks_client")
    def test_bad_signature(self, mock_client):
        mock_client.return_value.get_signing_key_from_jwt.side_effect = (
            jwt.PyJWTError("bad key")
        )

        with self.assertRaises(InvalidGoogleToken):
            verify_firebase_token("token")

    @mock.patch("apps.accounts.google.jwt.decode")
    @mock.patch("apps.accounts.google.get_jwks_client")
    def test_decode_checks_project(self, mock_client, mock_decode):
        mock_decode.return_value = {"email": "someone@gmail.com"}

        claims = verify_firebase_token("token")

        self.assertEqual(claims["email"], "someone@gmail.com")
        kwargs = mock_decode.call_args.kwargs
        self.assertEqual(kwargs["audience"], "inkwell-test")
        self.assertEqual(kwargs["issuer"], "https://securetoken.google.com/inkwell-test")
        self.assertEqual(kwargs["algorithms"], ["RS256"])

    @mock.patch("apps.accounts.google.jwt.decode")
    @mock.patch("apps.accounts.google.get_jwks_client")
    def test_missing_email_claim(self, mock_client, mock_decode):
        mock_decode.return_value = {"sub": "123"}

        with self.assertRaises(InvalidGoogleToken):
            verify_firebase_token("token")


class SessionViewTest(AuthAPITestCase):
    """Test cases for refresh, logout and verify."""

    def test_verify_with_cookie(self):
        self.sign_in()
        response = self.client.get(reverse("verify"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["username"], "writer")

    def test_verify_with_bearer_header(self):
        """Test the Authorization header works when no cookie is sent."""
        tokens = get_tokens_for_user(self.user)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {tokens['access_token']}")

        response = self.client.get(reverse("verify"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_verify_anonymous(self):
        response = self.client.get(reverse("verify"))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_invalid_cookie_is_ignored_on_public_endpoints(self):
        self.client.cookies["access_token"] = "garbage"

        public = self.client.post(reverse("latest-blogs"), {}, format="json")
        private = self.client.get(reverse("verify"))

        self.assertEqual(public.status_code, status.HTTP_200_OK)
        self.assertEqual(private.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cookie_of_deleted_user_is_ignored_on_public_endpoints(self):
        """Test a cookie outliving its account doesn't break public feeds."""
        self.sign_in()
        self.user.delete()

        public = self.client.get(reverse("latest-blogs"))
        private = self.client.get(reverse("verify"))

        self.assertEqual(public.status_code, status.HTTP_200_OK)
        self.assertEqual(private.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_cookie_of_inactive_user_is_ignored(self):
        self.sign_in()
        User.objects.filter(pk=self.user.pk).update(is_active=False)

        response = self.client.post(reverse("latest-blogs"), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_token_carries_role_claim(self):
        tokens = get_tokens_for_user(self.user)
        refresh = RefreshToken(tokens["refresh_token"])

        self.assertEqual(refresh["role"], "user")
        self.assertEqual(refresh["username"], "writer")

    def test_refresh_rotates_token(self):
        """Test refresh blacklists the old token and issues new cookies."""
        tokens = self.sign_in()

        response = self.client.post(reverse("refresh"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["_id"], self.user.pk)
        self.assertNotEqual(
            response.cookies["refresh_token"].value, tokens["refresh_token"]
        )

        # The rotated token can't be replayed
        self.client.cookies["refresh_token"] = tokens["refresh_token"]
        replay = self.client.post(reverse("refresh"))
        self.assertEqual(replay.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_without_cookie(self):
        response = self.client.post(reverse("refresh"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["error"], "Refresh token not found.")

    def test_refresh_with_garbage_cookie(self):
        self.client.cookies["refresh_token"] = "not-a-jwt"
        response = self.client.post(reverse("refresh"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_clears_cookies(self):
        tokens = self.sign_in()

        response = self.client.post(reverse("logout"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies["access_token"].value, "")
        self.assertEqual(response.cookies["refresh_token"].value, "")

        self.client.cookies["refresh_token"] = tokens["refresh_token"]
        replay = self.client.post(reverse("refresh"))
        self.assertEqual(replay.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_logout_without_session(self):
        response = self.client.post(reverse("logout"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class CredentialChangeTest(AuthAPITestCase):
    """Test cases for change-password and change-email."""

    def setUp(self):
        super().setUp()
        self.client.force_authenticate(user=self.user)

    def test_change_password(self):
        data = {"currentPassword": STRONG_PASSWORD, "newPassword": "Newpass456"}
        response = self.client.post(reverse("change-password"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "password changed")
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password("Newpass456"))

    def test_change_password_wrong_current(self):
        data = {"currentPassword": "Wrong1234", "newPassword": "Newpass456"}
        response = self.client.post(reverse("change-password"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "Incorrect current password")

    def test_change_password_weak_new(self):
        data = {"currentPassword": STRONG_PASSWORD, "newPassword": "short"}
        response = self.client.post(reverse("change-password"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_password_google_account(self):
        self.user.google_auth = True
        self.user.save()

        data = {"currentPassword": STRONG_PASSWORD, "newPassword": "Newpass456"}
        response = self.client.post(reverse("change-password"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_change_email(self):
        data = {"newEmail": "Moved@Example.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("change-email"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["email"], "moved@example.com")
        self.user.refresh_from_db()
        self.assertEqual(self.user.email, "moved@example.com")

    def test_change_email_same_address(self):
        data = {"newEmail": "writer@example.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("change-email"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_change_email_taken(self):
        User.objects.create_user(
            username="other",
            email="other@example.com",
            password=STRONG_PASSWORD,
            fullname="Other One",
        )
        data = {"newEmail": "other@example.com", "password": STRONG_PASSWORD}
        response = self.client.post(reverse("change-email"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_change_email_wrong_password(self):
        data = {"newEmail": "moved@example.com", "password": "Wrong1234"}
        response = self.client.post(reverse("change-email"), data, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
