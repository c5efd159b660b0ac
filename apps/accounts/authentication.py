import logging
from typing import Dict

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken

logger = logging.getLogger(__name__)


class CookieJWTAuthentication(JWTAuthentication):
    """
    JWT authentication reading the access token from the auth cookie.

    Falls back to the ``Authorization: Bearer`` header when no cookie is
    present. A bad cookie, or one whose user is gone or inactive, is ignored
    so public endpoints keep working; protected endpoints then answer 401
    through the permission check.
    """

    def authenticate(self, request):
        raw_token = request.COOKIES.get(settings.AUTH_COOKIES["ACCESS"])
        if not raw_token:
            return super().authenticate(request)

        try:
            validated_token = self.get_validated_token(raw_token)
            return self.get_user(validated_token), validated_token
        except (AuthenticationFailed, TokenError) as e:
            logger.debug(f"Ignoring invalid access cookie: {e}")
            return None


def get_tokens_for_user(user) -> Dict[str, str]:
    """Generate a refresh/access pair carrying the user's role."""
    refresh = RefreshToken.for_user(user)
    refresh["username"] = user.username
    refresh["role"] = user.role

    return {
        "access_token": str(refresh.access_token),
        "refresh_token": str(refresh),
    }


def _cookie_kwargs():
    cookies = settings.AUTH_COOKIES
    return {
        "httponly": True,
        "secure": cookies["SECURE"],
        "samesite": cookies["SAMESITE"],
        "path": cookies["PATH"],
    }


def set_auth_cookies(response, tokens: Dict[str, str]):
    """Attach the access and refresh cookies to ``response``."""
    lifetimes = settings.SIMPLE_JWT
    response.set_cookie(
        settings.AUTH_COOKIES["ACCESS"],
        tokens["access_token"],
        max_age=int(lifetimes["ACCESS_TOKEN_LIFETIME"].total_seconds()),
        **_cookie_kwargs(),
    )
    response.set_cookie(
        settings.AUTH_COOKIES["REFRESH"],
        tokens["refresh_token"],
        max_age=int(lifetimes["REFRESH_TOKEN_LIFETIME"].total_seconds()),
        **_cookie_kwargs(),
    )
    return response


def clear_auth_cookies(response):
    cookies = settings.AUTH_COOKIES
    for name in (cookies["ACCESS"], cookies["REFRESH"]):
        response.delete_cookie(
            name, path=cookies["PATH"], samesite=cookies["SAMESITE"]
        )
    return response


def login_response(response, user):
    """Issue a fresh token pair for ``user`` and set it on ``response``."""
    return set_auth_cookies(response, get_tokens_for_user(user))
