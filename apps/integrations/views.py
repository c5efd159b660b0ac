import logging

import cloudinary
import cloudinary.uploader
import requests
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema, inline_serializer
from rest_framework import permissions, serializers
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import ImageDeleteFailed, InvalidDownloadLocation, UnsplashUnavailable
from .serializers import (
    CloudinaryDeleteSerializer,
    TrackDownloadSerializer,
    UnsplashSearchSerializer,
)

logger = logging.getLogger(__name__)

UNSPLASH_DOWNLOAD_PREFIX = "https://api.unsplash.com/"


def configure_cloudinary():
    config = settings.CLOUDINARY
    cloudinary.config(
        cloud_name=config["CLOUD_NAME"],
        api_key=config["API_KEY"],
        api_secret=config["API_SECRET"],
        secure=True,
    )


def unsplash_headers():
    return {
        "Authorization": f"Client-ID {settings.UNSPLASH_ACCESS_KEY}",
        "Accept-Version": "v1",
    }


class CloudinaryDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Integrations"],
        request=CloudinaryDeleteSerializer,
        responses={
            200: inline_serializer(
                "CloudinaryDeleteResponse", {"result": serializers.CharField()}
            )
        },
    )
    def post(self, request: Request) -> Response:
        serializer = CloudinaryDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        public_id = serializer.validated_data["publicId"]

        configure_cloudinary()
        try:
            result = cloudinary.uploader.destroy(public_id)
        except Exception as e:
            logger.error(f"Cloudinary delete failed for {public_id}: {e}", exc_info=True)
            raise ImageDeleteFailed()

        if result.get("result") != "ok":
            logger.warning(f"Cloudinary refused to delete {public_id}: {result}")
            raise ImageDeleteFailed()

        logger.info(f"User {request.user.pk} deleted image {public_id}")
        return Response({"result": result["result"]})


class UnsplashSearchView(APIView):
    """Proxy to the Unsplash photo search so the access key stays on the server."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Integrations"],
        parameters=[
            OpenApiParameter("query", str, required=True),
            OpenApiParameter("page", int),
            OpenApiParameter("per_page", int, description="Capped at 30"),
        ],
    )
    def get(self, request: Request) -> Response:
        serializer = UnsplashSearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        try:
            response = requests.get(
                f"{settings.UNSPLASH_API_URL}/search/photos",
                params=serializer.validated_data,
                headers=unsplash_headers(),
                timeout=settings.UNSPLASH_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Unsplash search failed: {e}", exc_info=True)
            raise UnsplashUnavailable()

        return Response(response.json())


class UnsplashTrackDownloadView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Integrations"],
        request=TrackDownloadSerializer,
        responses={
            200: inline_serializer(
                "TrackDownloadResponse",
                {"message": serializers.CharField(), "url": serializers.URLField()},
            )
        },
    )
    def post(self, request: Request) -> Response:
        serializer = TrackDownloadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        location = serializer.validated_data["downloadLocation"]

        if not location.startswith(UNSPLASH_DOWNLOAD_PREFIX):
            raise InvalidDownloadLocation()

        try:
            response = requests.get(
                location,
                headers=unsplash_headers(),
                timeout=settings.UNSPLASH_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Unsplash download tracking failed: {e}", exc_info=True)
            raise UnsplashUnavailable("Failed to track download.")

        return Response(
            {
                "message": "Download tracked successfully",
                "url": response.json().get("url"),
            }
        )
