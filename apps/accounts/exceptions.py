from rest_framework import status
from rest_framework.exceptions import (
    APIException,
    AuthenticationFailed,
    NotFound,
    PermissionDenied,
)


class EmailAlreadyRegistered(PermissionDenied):
    """Raised on signup with an email that already has an account."""

    default_detail = "Email already registered."
    default_code = "email_already_registered"


class EmailNotFound(NotFound):
    default_detail = "Email not found."
    default_code = "email_not_found"


class IncorrectPassword(PermissionDenied):
    default_detail = "Incorrect password."
    default_code = "incorrect_password"


class GoogleAccountLogin(PermissionDenied):
    """Raised when a password operation targets a Google-created account."""

    default_detail = (
        "This account was created using Google. Please sign in with Google."
    )
    default_code = "google_account"


class GoogleAuthMismatch(PermissionDenied):
    """Raised when Google sign-in hits an account created with a password."""

    default_detail = (
        "This email was signed up without Google. Please log in with password "
        "to access the account."
    )
    default_code = "google_auth_mismatch"


class InvalidGoogleToken(AuthenticationFailed):
    default_detail = "Failed to authenticate with Google. Try another account."
    default_code = "invalid_google_token"


class GoogleAuthUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Google sign-in is not configured."
    default_code = "google_auth_unavailable"


class RefreshTokenMissing(AuthenticationFailed):
    default_detail = "Refresh token not found."
    default_code = "refresh_token_missing"


class RefreshTokenInvalid(AuthenticationFailed):
    default_detail = "Invalid or expired refresh token."
    default_code = "refresh_token_invalid"


class UsernameTaken(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Username is already taken."
    default_code = "username_taken"


class EmailTaken(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Email is already in use."
    default_code = "email_taken"


class UserNotFound(NotFound):
    default_detail = "User not found."
    default_code = "user_not_found"
