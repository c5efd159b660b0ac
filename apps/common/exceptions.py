import logging

from django_ratelimit.exceptions import Ratelimited
from rest_framework import status
from rest_framework.exceptions import APIException, Throttled, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

STATUS_CODES = {
    status.HTTP_400_BAD_REQUEST: "bad_request",
    status.HTTP_401_UNAUTHORIZED: "not_authenticated",
    status.HTTP_403_FORBIDDEN: "permission_denied",
    status.HTTP_404_NOT_FOUND: "not_found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "method_not_allowed",
    status.HTTP_429_TOO_MANY_REQUESTS: "throttled",
}


def _first_message(data):
    """Dig the first human readable message out of a DRF error payload."""
    if isinstance(data, dict):
        if "detail" in data:
            return _first_message(data["detail"])
        for value in data.values():
            return _first_message(value)
        return "Invalid request."
    if isinstance(data, (list, tuple)):
        return _first_message(data[0]) if data else "Invalid request."
    return str(data)


def _error_code(exc, status_code):
    if isinstance(exc, APIException):
        codes = exc.get_codes()
        if isinstance(codes, str):
            return codes
        return exc.default_code
    return STATUS_CODES.get(status_code, "error")


def api_exception_handler(exc, context):
    """
    Project-wide exception handler.

    Wraps DRF's handler and reshapes every error body to
    ``{"error": ..., "code": ..., "status_code": ...}``. Validation errors
    also carry ``field_errors``; unexpected exceptions are logged and
    answered with a 500.
    """
    if isinstance(exc, Ratelimited):
        exc = Throttled(detail="Too many requests. Please try again later.")

    response = exception_handler(exc, context)
    request = context.get("request")
    view = context.get("view")
    view_name = view.__class__.__name__ if view else None

    if response is None:
        logger.error(
            f"Unhandled exception in {view_name}: {exc}",
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return Response(
            {
                "error": "Internal server error",
                "code": "server_error",
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            },
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    user = getattr(request, "user", None) if request else None
    logger.warning(
        f"API error in {view_name}: {exc.__class__.__name__} - {exc}",
        extra={
            "user": user.id if user and user.is_authenticated else None,
            "path": request.path if request else None,
            "method": request.method if request else None,
            "status_code": response.status_code,
        },
    )

    body = {
        "error": _first_message(response.data),
        "code": _error_code(exc, response.status_code),
        "status_code": response.status_code,
    }

    if isinstance(exc, ValidationError):
        body["field_errors"] = response.data

    if isinstance(exc, Throttled):
        body["retry_after"] = exc.wait

    response.data = body
    return response
