import logging
from collections import Counter
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import F, Q
from django.db.models.functions import Greatest
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, permissions
from rest_framework.exceptions import PermissionDenied
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.exceptions import UserNotFound
from apps.accounts.filters import UserFilter
from apps.accounts.permissions import IsSuperAdmin
from apps.blog.exceptions import BlogNotFound
from apps.blog.models import Blog, Comment
from apps.notifications.models import Notification

from .serializers import (
    ManagedBlogSerializer,
    ManagedUserSerializer,
    RoleUpdateSerializer,
    SiteStatsSerializer,
)

logger = logging.getLogger(__name__)
User = get_user_model()

LIST_LIMIT = 100
GROWTH_WINDOW_DAYS = 30


class SuperAdminMixin:
    permission_classes = [permissions.IsAuthenticated, IsSuperAdmin]

    def get_target_user(self, pk):
        user = User.objects.filter(pk=pk).first()
        if user is None:
            raise UserNotFound()
        if user.is_superadmin:
            logger.warning(
                f"Superadmin {self.request.user.pk} tried to modify superadmin {pk}"
            )
            raise PermissionDenied("Superadmin accounts can not be modified.")
        return user


class StatsView(SuperAdminMixin, APIView):
    @extend_schema(tags=["Superadmin"], responses={200: SiteStatsSerializer})
    def get(self, request: Request) -> Response:
        since = timezone.now() - timedelta(days=GROWTH_WINDOW_DAYS)
        stats = {
            "totalUsers": User.objects.count(),
            "totalBlogs": Blog.objects.published().count(),
            "totalDrafts": Blog.objects.drafts().count(),
            "totalComments": Comment.objects.count(),
            "totalAdmins": User.objects.filter(
                role__in=[User.Role.ADMIN, User.Role.SUPERADMIN]
            ).count(),
            "growth": {
                "newUsers": User.objects.filter(date_joined__gte=since).count(),
                "newBlogs": Blog.objects.published()
                .filter(published_at__gte=since)
                .count(),
                "newComments": Comment.objects.filter(commented_at__gte=since).count(),
            },
        }
        return Response(SiteStatsSerializer(stats).data)


@extend_schema(
    tags=["Superadmin"],
    parameters=[
        OpenApiParameter("search", str),
        OpenApiParameter("role", str, enum=[choice for choice, _ in User.Role.choices]),
    ],
)
class UserListView(SuperAdminMixin, generics.ListAPIView):
    serializer_class = ManagedUserSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = UserFilter
    pagination_class = None

    def get_queryset(self):
        return User.objects.order_by("-date_joined")

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())[:LIST_LIMIT]
        return Response({"users": self.get_serializer(queryset, many=True).data})


class BlogListView(SuperAdminMixin, APIView):
    @extend_schema(tags=["Superadmin"], parameters=[OpenApiParameter("search", str)])
    def get(self, request: Request) -> Response:
        queryset = Blog.objects.select_related("author").prefetch_related("tags")
        search = (request.query_params.get("search") or "").strip()
        if search:
            queryset = queryset.filter(
                Q(title__icontains=search) | Q(blog_id__icontains=search)
            )
        blogs = queryset.order_by("-published_at")[:LIST_LIMIT]
        return Response({"blogs": ManagedBlogSerializer(blogs, many=True).data})


class AdminListView(SuperAdminMixin, APIView):
    @extend_schema(tags=["Superadmin"])
    def get(self, request: Request) -> Response:
        admins = User.objects.filter(
            role__in=[User.Role.ADMIN, User.Role.SUPERADMIN]
        ).order_by("-date_joined")
        return Response({"admins": ManagedUserSerializer(admins, many=True).data})


class UpdateRoleView(SuperAdminMixin, APIView):
    @extend_schema(tags=["Superadmin"], request=RoleUpdateSerializer)
    def put(self, request: Request, pk: int) -> Response:
        user = self.get_target_user(pk)
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user.role = serializer.validated_data["role"]
        user.save(update_fields=["role"])

        logger.info(f"Superadmin {request.user.pk} set role of {user.pk} to {user.role}")
        return Response(
            {
                "message": "User role updated successfully",
                "user": ManagedUserSerializer(user).data,
            }
        )


class DeleteUserView(SuperAdminMixin, APIView):
    """
    Delete a user with their blogs, comments and notifications.

    Counters on other authors' blogs are adjusted for the comments and
    likes that disappear with the user.
    """

    @extend_schema(tags=["Superadmin"])
    def delete(self, request: Request, pk: int) -> Response:
        user = self.get_target_user(pk)

        with transaction.atomic():
            self.release_comment_counters(user)
            self.release_like_counters(user)
            user.delete()

        logger.info(f"Superadmin {request.user.pk} deleted user {pk}")
        return Response({"message": "User deleted successfully"})

    def release_comment_counters(self, user):
        authored = Comment.objects.filter(commented_by=user).exclude(blog__author=user)
        removed = {}
        for comment in authored:
            for pk in [comment.pk] + comment.get_descendant_ids():
                removed[pk] = comment
        if not removed:
            return

        total = Counter()
        parents = Counter()
        for comment in Comment.objects.filter(pk__in=removed).only(
            "pk", "blog_id", "parent_id"
        ):
            total[comment.blog_id] += 1
            if comment.parent_id is None:
                parents[comment.blog_id] += 1

        for blog_pk, count in total.items():
            Blog.objects.filter(pk=blog_pk).update(
                total_comments=Greatest(F("total_comments") - count, 0),
                total_parent_comments=Greatest(
                    F("total_parent_comments") - parents[blog_pk], 0
                ),
            )

    def release_like_counters(self, user):
        liked = (
            Notification.objects.filter(
                type=Notification.NotificationType.LIKE, user=user
            )
            .exclude(blog__author=user)
            .values_list("blog_id", flat=True)
        )
        for blog_pk, count in Counter(liked).items():
            Blog.objects.filter(pk=blog_pk).update(
                total_likes=Greatest(F("total_likes") - count, 0)
            )


class DeleteBlogView(SuperAdminMixin, APIView):
    @extend_schema(tags=["Superadmin"])
    def delete(self, request: Request, blog_id: str) -> Response:
        blog = Blog.objects.filter(blog_id=blog_id).first()
        if blog is None:
            raise BlogNotFound()

        blog.delete()
        logger.info(f"Superadmin {request.user.pk} deleted blog {blog_id}")
        return Response({"message": "Blog deleted successfully"})
