from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError


class UpstreamServiceError(APIException):
    """Exception raised when a third-party service fails or rejects a call."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Upstream service error."
    default_code = "upstream_error"


class ImageDeleteFailed(UpstreamServiceError):
    default_detail = "Failed to delete image."
    default_code = "image_delete_failed"


class UnsplashUnavailable(UpstreamServiceError):
    default_detail = "Failed to fetch images from Unsplash."
    default_code = "unsplash_error"


class InvalidDownloadLocation(ValidationError):
    default_detail = "Invalid download location."
    default_code = "invalid_download_location"
