import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from ..exceptions import UserNotFound, UsernameTaken
from ..serializers import (
    PublicProfileSerializer,
    UpdateProfileImgSerializer,
    UpdateProfileSerializer,
    UserSummarySerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()

USER_SEARCH_LIMIT = 50


class GetProfileView(APIView):
    """Public profile looked up by username."""

    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Users"],
        request=inline_serializer(
            "GetProfileRequest", {"username": serializers.CharField()}
        ),
        responses={200: PublicProfileSerializer},
    )
    def post(self, request: Request) -> Response:
        username = request.data.get("username")
        user = User.objects.filter(username=username).first() if username else None
        if user is None:
            raise UserNotFound()
        return Response(PublicProfileSerializer(user).data)


class SearchUsersView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(
        tags=["Users"],
        request=inline_serializer(
            "SearchUsersRequest", {"query": serializers.CharField()}
        ),
        responses={200: UserSummarySerializer(many=True)},
    )
    def post(self, request: Request) -> Response:
        query = (request.data.get("query") or "").strip()
        if not query:
            return Response({"users": []})

        users = User.objects.filter(username__icontains=query).order_by("username")[
            :USER_SEARCH_LIMIT
        ]
        return Response({"users": UserSummarySerializer(users, many=True).data})


class UpdateProfileView(APIView):
    """
    Update username, bio and social links of the signed in user.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Users"], request=UpdateProfileSerializer)
    def post(self, request: Request) -> Response:
        serializer = UpdateProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = request.user

        if (
            User.objects.filter(username=data["username"])
            .exclude(pk=user.pk)
            .exists()
        ):
            raise UsernameTaken()

        user.username = data["username"]
        user.bio = data.get("bio", "")
        update_fields = ["username", "bio"]
        if "social_links" in data:
            user.social_links = data["social_links"]
            update_fields.append("social_links")
        user.save(update_fields=update_fields)

        logger.info(f"Profile updated for user {user.pk}")
        return Response({"username": user.username})


class UpdateProfileImgView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Users"], request=UpdateProfileImgSerializer)
    def post(self, request: Request) -> Response:
        serializer = UpdateProfileImgSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.profile_img = serializer.validated_data["url"]
        user.save(update_fields=["profile_img"])
        return Response({"profile_img": user.profile_img})
