import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings as jwt_settings
from rest_framework_simplejwt.tokens import RefreshToken

from apps.blog.tasks import seed_tutorial
from apps.common.utils import generate_random_string, get_client_ip

from ..authentication import clear_auth_cookies, login_response
from ..exceptions import (
    EmailAlreadyRegistered,
    EmailNotFound,
    EmailTaken,
    GoogleAccountLogin,
    GoogleAuthMismatch,
    IncorrectPassword,
    RefreshTokenInvalid,
    RefreshTokenMissing,
)
from ..google import verify_firebase_token
from ..serializers import (
    ChangeEmailSerializer,
    ChangePasswordSerializer,
    GoogleAuthSerializer,
    SigninSerializer,
    SignupSerializer,
    UserPayloadSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()


def generate_username(email: str) -> str:
    """
    Derive a username from the email local part, appending a random
    suffix while it collides with an existing account.
    """
    base = email.split("@")[0]
    username = base
    while User.objects.filter(username=username).exists():
        username = f"{base}{generate_random_string(4)}"
    return username


def session_response(user, request, status_code=status.HTTP_200_OK) -> Response:
    """Respond with the user payload and fresh auth cookies."""
    data = UserPayloadSerializer(user, context={"request": request}).data
    return login_response(Response(data, status=status_code), user)


class LoginRateThrottle(AnonRateThrottle):
    """Custom throttle for login attempts"""

    scope = "anon"


@extend_schema_view(
    post=extend_schema(
        summary="Sign up",
        description="Create an account with email and password and start a session.",
        request=SignupSerializer,
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
@method_decorator(
    ratelimit(key="ip", rate="20/h", method="POST", block=True), name="post"
)
class SignupView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    def post(self, request: Request) -> Response:
        serializer = SignupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if User.objects.filter(email=data["email"]).exists():
            raise EmailAlreadyRegistered()

        with transaction.atomic():
            user = User(
                fullname=data["fullname"],
                email=data["email"],
                username=generate_username(data["email"]),
            )
            user.set_password(data["password"])
            user.save()

        logger.info(f"New account created: {user.username}")
        seed_tutorial.delay(user.pk)
        return session_response(user, request)


@extend_schema_view(
    post=extend_schema(
        summary="Sign in",
        description="Authenticate with email and password and set the auth cookies.",
        request=SigninSerializer,
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
@method_decorator(
    ratelimit(key="ip", rate="10/m", method="POST", block=True), name="post"
)
class SigninView(APIView):
    """
    Password sign in.

    Rate limited per client IP. Accounts created through Google must use
    Google sign in.
    """

    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    def post(self, request: Request) -> Response:
        serializer = SigninSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]

        user = User.objects.filter(email=email).first()
        if user is None:
            logger.warning(f"Sign in for unknown email from {get_client_ip(request)}")
            raise EmailNotFound()

        if user.google_auth:
            raise GoogleAccountLogin(
                "Account was created using Google. Try logging in with Google."
            )

        if not user.check_password(serializer.validated_data["password"]):
            logger.warning(
                f"Failed sign in for {user.username} from {get_client_ip(request)}"
            )
            raise IncorrectPassword()

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])

        logger.info(f"User signed in: {user.username}")
        return session_response(user, request)


@extend_schema_view(
    post=extend_schema(
        summary="Google sign in",
        description="Sign in or sign up with a Firebase ID token from Google sign in.",
        request=GoogleAuthSerializer,
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
class GoogleAuthView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [LoginRateThrottle]

    def post(self, request: Request) -> Response:
        serializer = GoogleAuthSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        claims = verify_firebase_token(serializer.validated_data["access_token"])
        email = claims["email"].lower()

        user = User.objects.filter(email=email).first()
        if user is not None:
            if not user.google_auth:
                raise GoogleAuthMismatch()
        else:
            # Google serves the 96px avatar by default
            picture = (claims.get("picture") or "").replace("s96-c", "s384-c")
            with transaction.atomic():
                user = User(
                    fullname=claims.get("name") or email.split("@")[0],
                    email=email,
                    username=generate_username(email),
                    profile_img=picture,
                    google_auth=True,
                )
                user.set_unusable_password()
                user.save()
            logger.info(f"New Google account created: {user.username}")
            seed_tutorial.delay(user.pk)

        user.last_login = timezone.now()
        user.save(update_fields=["last_login"])
        return session_response(user, request)


@extend_schema_view(
    post=extend_schema(
        summary="Refresh session",
        description="Rotate the refresh cookie and issue a new access cookie.",
        request=None,
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        raw_token = request.COOKIES.get(settings.AUTH_COOKIES["REFRESH"])
        if not raw_token:
            raise RefreshTokenMissing()

        try:
            refresh = RefreshToken(raw_token)
            user = User.objects.get(pk=refresh[jwt_settings.USER_ID_CLAIM])
            refresh.blacklist()
        except (TokenError, KeyError, User.DoesNotExist) as e:
            logger.warning(f"Refresh rejected: {e}")
            raise RefreshTokenInvalid()

        if not user.is_active:
            raise RefreshTokenInvalid()

        return session_response(user, request)


@extend_schema_view(
    post=extend_schema(
        summary="Log out",
        description="Blacklist the refresh token and clear the auth cookies.",
        request=None,
        responses={200: None},
        tags=["Authentication"],
    )
)
class LogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request: Request) -> Response:
        raw_token = request.COOKIES.get(settings.AUTH_COOKIES["REFRESH"])
        if raw_token:
            try:
                RefreshToken(raw_token).blacklist()
            except TokenError as e:
                logger.info(f"Logout with unusable refresh token: {e}")

        response = Response({"message": "Logged out successfully"})
        return clear_auth_cookies(response)


@extend_schema_view(
    get=extend_schema(
        summary="Current session",
        description="Return the signed in user.",
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
class VerifyView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(UserPayloadSerializer(request.user).data)


@extend_schema_view(
    post=extend_schema(
        summary="Change password",
        request=ChangePasswordSerializer,
        responses={200: None},
        tags=["Authentication"],
    )
)
class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        user = request.user
        if user.google_auth:
            raise GoogleAccountLogin(
                "You can't change account's password because you logged in through google"
            )

        serializer = ChangePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        if not user.check_password(serializer.validated_data["currentPassword"]):
            raise IncorrectPassword("Incorrect current password")

        user.set_password(serializer.validated_data["newPassword"])
        user.save(update_fields=["password"])

        logger.info(f"Password changed for {user.username}")
        return Response({"status": "password changed"})


@extend_schema_view(
    post=extend_schema(
        summary="Change email",
        request=ChangeEmailSerializer,
        responses={200: UserPayloadSerializer},
        tags=["Authentication"],
    )
)
class ChangeEmailView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        user = request.user
        if user.google_auth:
            raise GoogleAccountLogin(
                "Cannot change email for Google authenticated accounts"
            )

        serializer = ChangeEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        new_email = serializer.validated_data["newEmail"]

        if not user.check_password(serializer.validated_data["password"]):
            raise IncorrectPassword()

        if new_email == user.email:
            raise ValidationError(
                {"newEmail": ["New email must be different from current email"]}
            )

        if User.objects.filter(email=new_email).exclude(pk=user.pk).exists():
            raise EmailTaken()

        user.email = new_email
        user.save(update_fields=["email"])

        logger.info(f"Email changed for {user.username}")
        return Response(
            {
                "message": "Email updated successfully",
                "user": UserPayloadSerializer(user).data,
            }
        )
