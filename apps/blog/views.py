import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.db import transaction
from django.db.models import F, Q
from django.db.models.functions import Greatest
from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema, inline_serializer
from rest_framework import permissions, serializers
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdminRole
from apps.accounts.serializers import UserSummarySerializer
from apps.common.pagination import BlogFeedPagination
from apps.common.utils import get_client_ip, parse_int
from apps.notifications.exceptions import NotificationNotFound
from apps.notifications.models import Notification

from .exceptions import (
    BlogNotFound,
    CommentNotFound,
    UnauthorizedBlogAccess,
    UnauthorizedBlogDelete,
    UnauthorizedBlogEdit,
    UnauthorizedCommentDelete,
)
from .models import Blog, Comment
from .permissions import can_delete_blog, can_delete_comment, can_view_blog
from .serializers import (
    AddCommentSerializer,
    BlogCardSerializer,
    BlogDetailSerializer,
    BlogWriteSerializer,
    CommentSerializer,
)
from .tasks import record_blog_read, send_comment_notification

logger = logging.getLogger(__name__)
User = get_user_model()

TRENDING_LIMIT = 5
COMMENTS_PER_PAGE = 5
SEARCH_DEFAULT_LIMIT = 10
SEARCH_MAX_LIMIT = 50
SEARCH_TYPES = ("all", "blogs", "users")


def card_queryset():
    return Blog.objects.published().select_related("author").prefetch_related("tags")


def as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("1", "true", "yes")


class CommentThrottle(UserRateThrottle):
    """Custom throttle for comment creation."""

    scope = "comments"


# Posts


class CreateBlogView(APIView):
    """
    Create a blog, or update one through the draft/publish workflow.

    With ``id`` the target blog must belong to the requester:

    - an edit-copy draft being published overwrites its original and is
      removed;
    - a plain draft being published is flipped to published;
    - a published blog saved as draft gets (or refreshes) its edit-copy,
      leaving the live post untouched;
    - otherwise the blog is updated in place.
    """

    permission_classes = [permissions.IsAuthenticated, IsAdminRole]

    @extend_schema(
        tags=["Blogs"],
        request=BlogWriteSerializer,
        responses={
            200: inline_serializer("BlogIdResponse", {"id": serializers.CharField()})
        },
    )
    def post(self, request: Request) -> Response:
        serializer = BlogWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = request.user

        with transaction.atomic():
            if data.get("id"):
                blog = self._update(user, data)
            else:
                blog = self._create(user, data)

        return Response({"id": blog.blog_id})

    def _apply(self, blog, data):
        blog.title = data["title"]
        blog.banner = data.get("banner", "")
        blog.des = data.get("des", "")
        blog.content = data.get("content", [])

    def _create(self, user, data):
        blog = Blog(author=user, draft=data["draft"])
        self._apply(blog, data)
        blog.save()
        blog.set_tags(data["tags"])

        if not blog.draft:
            User.objects.filter(pk=user.pk).update(total_posts=F("total_posts") + 1)

        logger.info(
            f"{'Draft' if blog.draft else 'Blog'} {blog.blog_id} created by {user.pk}"
        )
        return blog

    def _update(self, user, data):
        blog = Blog.objects.select_for_update().filter(blog_id=data["id"]).first()
        if blog is None:
            raise BlogNotFound()
        if blog.author_id != user.pk:
            logger.warning(f"User {user.pk} tried to edit blog {blog.blog_id}")
            raise UnauthorizedBlogEdit()

        publishing = not data["draft"]

        if blog.draft and blog.original_blog_id and publishing:
            original = blog.original_blog
            self._apply(original, data)
            original.save()
            original.set_tags(data["tags"])
            blog.delete()
            logger.info(f"Edit-copy published over {original.blog_id}")
            return original

        if blog.draft and publishing:
            self._apply(blog, data)
            blog.draft = False
            blog.published_at = timezone.now()
            blog.save()
            blog.set_tags(data["tags"])
            User.objects.filter(pk=user.pk).update(total_posts=F("total_posts") + 1)
            logger.info(f"Draft {blog.blog_id} published")
            return blog

        if not blog.draft and not publishing:
            edit_copy = blog.edit_drafts.filter(draft=True).first()
            if edit_copy is None:
                edit_copy = Blog(author=user, draft=True, original_blog=blog)
            self._apply(edit_copy, data)
            edit_copy.save()
            edit_copy.set_tags(data["tags"])
            logger.info(f"Edit-copy {edit_copy.blog_id} saved for {blog.blog_id}")
            return edit_copy

        self._apply(blog, data)
        blog.save()
        blog.set_tags(data["tags"])
        return blog


class LatestBlogsView(APIView):
    permission_classes = [permissions.AllowAny]
    pagination_class = BlogFeedPagination

    @extend_schema(
        tags=["Blogs"],
        parameters=[
            OpenApiParameter("page", int, description="Page number, from 1"),
            OpenApiParameter("limit", int, description="Page size, at most 50"),
        ],
        responses={200: BlogCardSerializer(many=True)},
    )
    def get(self, request: Request) -> Response:
        paginator = self.pagination_class()
        page = paginator.paginate_queryset(
            card_queryset().order_by("-published_at"), request, view=self
        )
        return paginator.get_paginated_response(
            BlogCardSerializer(page, many=True).data
        )

    @extend_schema(tags=["Blogs"], responses={200: BlogCardSerializer(many=True)})
    def post(self, request: Request) -> Response:
        return self.get(request)


class AllLatestBlogsCountView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Blogs"], request=None)
    def post(self, request: Request) -> Response:
        return Response({"totalDocs": Blog.objects.published().count()})


class TrendingBlogsView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Blogs"], responses={200: BlogCardSerializer(many=True)})
    def get(self, request: Request) -> Response:
        blogs = card_queryset().order_by(
            "-total_reads", "-total_likes", "-published_at"
        )[:TRENDING_LIMIT]
        return Response({"blogs": BlogCardSerializer(blogs, many=True).data})


class BlogSearchMixin:
    """Filters shared by ``/search-blogs`` and ``/search-blogs-count``."""

    def get_search_queryset(self, request: Request):
        data = request.data
        queryset = card_queryset()

        tag = (data.get("tag") or "").strip().lower()
        if tag:
            queryset = queryset.filter(tags__name=tag)

        query = (data.get("query") or "").strip()
        if query:
            queryset = queryset.filter(title__icontains=query)

        author = data.get("author")
        if author:
            queryset = queryset.filter(author_id=parse_int(author, 0))

        eliminate_blog = data.get("eliminate_blog")
        if eliminate_blog:
            queryset = queryset.exclude(blog_id=eliminate_blog)

        return queryset.distinct().order_by("-published_at")


class SearchBlogsView(BlogSearchMixin, APIView):
    """
    Published blogs by tag, title, or author.

    ``eliminate_blog`` with ``tag`` is the "similar blogs" list of a blog
    page and defaults to two results; other searches default to five.
    """

    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Blogs"], responses={200: BlogCardSerializer(many=True)})
    def post(self, request: Request) -> Response:
        paginator = BlogFeedPagination()
        if request.data.get("tag") and request.data.get("eliminate_blog"):
            paginator.page_size = 2

        page = paginator.paginate_queryset(
            self.get_search_queryset(request), request, view=self
        )
        return paginator.get_paginated_response(
            BlogCardSerializer(page, many=True).data
        )


class SearchBlogsCountView(BlogSearchMixin, APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Blogs"])
    def post(self, request: Request) -> Response:
        return Response({"totalDocs": self.get_search_queryset(request).count()})


class SearchView(APIView):
    """Site-wide search over published blogs and users."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Blogs"],
        parameters=[
            OpenApiParameter("query", str, required=True),
            OpenApiParameter("type", str, enum=list(SEARCH_TYPES)),
            OpenApiParameter("limit", int),
        ],
    )
    def get(self, request: Request) -> Response:
        query = (request.query_params.get("query") or "").strip()
        if not query:
            raise ValidationError({"query": ["Search query is required"]})

        search_type = request.query_params.get("type", "all")
        if search_type not in SEARCH_TYPES:
            raise ValidationError(
                {"type": [f"type must be one of {', '.join(SEARCH_TYPES)}"]}
            )

        limit = min(
            parse_int(request.query_params.get("limit"), SEARCH_DEFAULT_LIMIT, 1),
            SEARCH_MAX_LIMIT,
        )

        blogs = []
        users = []
        if search_type in ("all", "blogs"):
            blogs = BlogCardSerializer(
                card_queryset()
                .filter(
                    Q(title__icontains=query)
                    | Q(des__icontains=query)
                    | Q(tags__name__icontains=query)
                )
                .distinct()
                .order_by("-published_at")[:limit],
                many=True,
            ).data
        if search_type in ("all", "users"):
            users = UserSummarySerializer(
                User.objects.filter(
                    Q(username__icontains=query) | Q(fullname__icontains=query)
                ).order_by("username")[:limit],
                many=True,
            ).data

        return Response(
            {
                "results": {
                    "blogs": blogs,
                    "users": users,
                    "total": len(blogs) + len(users),
                }
            }
        )


class GetBlogView(APIView):
    """
    Full blog for the reader or the editor.

    Drafts are only served to their author or admins, and only when the
    draft is explicitly requested or the requester owns it. Unless opened
    in edit mode, a read is counted once per viewer per throttle window.
    """

    permission_classes = [permissions.AllowAny]

    @extend_schema(
        tags=["Blogs"],
        parameters=[
            OpenApiParameter("draft", bool),
            OpenApiParameter("mode", str, description="'edit' skips read counting"),
        ],
        responses={200: BlogDetailSerializer},
    )
    def get(self, request: Request, blog_id: str = None) -> Response:
        return self.retrieve(
            request,
            blog_id,
            draft=as_bool(request.query_params.get("draft", False)),
            mode=request.query_params.get("mode"),
        )

    @extend_schema(tags=["Blogs"], responses={200: BlogDetailSerializer})
    def post(self, request: Request, blog_id: str = None) -> Response:
        return self.retrieve(
            request,
            blog_id or request.data.get("blog_id"),
            draft=as_bool(request.data.get("draft", False)),
            mode=request.data.get("mode"),
        )

    def retrieve(self, request, blog_id, draft=False, mode=None) -> Response:
        blog = (
            Blog.objects.select_related("author", "original_blog")
            .prefetch_related("tags")
            .filter(blog_id=blog_id)
            .first()
            if blog_id
            else None
        )
        if blog is None:
            raise BlogNotFound()

        if blog.draft:
            user = request.user
            is_owner = user.is_authenticated and blog.author_id == user.pk
            if not can_view_blog(user, blog) or not (draft or is_owner):
                raise UnauthorizedBlogAccess()

        if mode != "edit" and not blog.draft:
            self.track_read(request, blog)

        return Response({"blog": BlogDetailSerializer(blog).data})

    def track_read(self, request, blog):
        if request.user.is_authenticated:
            viewer = f"user:{request.user.pk}"
        else:
            viewer = f"ip:{get_client_ip(request)}"

        key = f"blog-read:{blog.pk}:{viewer}"
        if cache.add(key, 1, timeout=settings.BLOG_READ_THROTTLE_SECONDS):
            record_blog_read.delay(blog.pk)


class UserBlogsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Blogs"])
    def get(self, request: Request) -> Response:
        queryset = (
            Blog.objects.filter(author=request.user)
            .select_related("author")
            .prefetch_related("tags")
            .order_by("-updated_at")
        )
        return Response(
            {
                "blogs": BlogCardSerializer(queryset.published(), many=True).data,
                "drafts": BlogCardSerializer(queryset.drafts(), many=True).data,
            }
        )


class DeleteBlogView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Blogs"], responses={200: None})
    def delete(self, request: Request, blog_id: str) -> Response:
        blog = Blog.objects.filter(blog_id=blog_id).first()
        if blog is None:
            raise BlogNotFound()
        if not can_delete_blog(request.user, blog):
            logger.warning(f"User {request.user.pk} tried to delete blog {blog_id}")
            raise UnauthorizedBlogDelete()

        blog.delete()
        logger.info(f"Blog {blog_id} deleted by user {request.user.pk}")
        return Response({"status": "done", "message": "Blog deleted successfully"})


class LikeBlogView(APIView):
    """
    Toggle the requester's like on a blog.

    ``islikedByUser`` is the state the client currently shows; the like is
    removed when it is true and added otherwise.
    """

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        tags=["Blogs"],
        request=inline_serializer(
            "LikeBlogRequest",
            {"_id": serializers.IntegerField(), "islikedByUser": serializers.BooleanField()},
        ),
    )
    def post(self, request: Request) -> Response:
        blog = Blog.objects.published().filter(
            pk=parse_int(request.data.get("_id"), 0)
        ).first()
        if blog is None:
            raise BlogNotFound()

        user = request.user
        currently_liked = as_bool(request.data.get("islikedByUser", False))
        like_filter = {
            "type": Notification.NotificationType.LIKE,
            "blog": blog,
            "user": user,
        }

        with transaction.atomic():
            if not currently_liked:
                if not Notification.objects.filter(**like_filter).exists():
                    Notification.objects.create(
                        notification_for_id=blog.author_id, **like_filter
                    )
                    Blog.objects.filter(pk=blog.pk).update(
                        total_likes=F("total_likes") + 1
                    )
                liked = True
            else:
                deleted, _ = Notification.objects.filter(**like_filter).delete()
                if deleted:
                    Blog.objects.filter(pk=blog.pk).update(
                        total_likes=Greatest(F("total_likes") - deleted, 0)
                    )
                liked = False

        return Response({"liked_by_user": liked})


class IsLikedByUserView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Blogs"])
    def post(self, request: Request) -> Response:
        exists = Notification.objects.filter(
            type=Notification.NotificationType.LIKE,
            blog_id=parse_int(request.data.get("_id"), 0),
            user=request.user,
        ).exists()
        return Response({"result": exists})


# Comments


class AddCommentView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_classes = [CommentThrottle]

    @extend_schema(tags=["Comments"], request=AddCommentSerializer)
    def post(self, request: Request) -> Response:
        serializer = AddCommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        blog = Blog.objects.published().filter(pk=data["_id"]).first()
        if blog is None:
            raise BlogNotFound()

        parent = None
        if data.get("replying_to"):
            parent = Comment.objects.filter(pk=data["replying_to"], blog=blog).first()
            if parent is None:
                raise CommentNotFound()

        notification_id = data.get("notification_id")
        if notification_id and not Notification.objects.filter(
            pk=notification_id, notification_for=request.user
        ).exists():
            raise NotificationNotFound()

        with transaction.atomic():
            comment = Comment.objects.create(
                blog=blog,
                blog_author_id=blog.author_id,
                commented_by=request.user,
                comment=data["comment"],
                parent=parent,
                is_reply=parent is not None,
            )
            Blog.objects.filter(pk=blog.pk).update(
                total_comments=F("total_comments") + 1,
                total_parent_comments=F("total_parent_comments")
                + (0 if parent else 1),
            )

        send_comment_notification.delay(comment.pk, notification_id)

        return Response(
            {
                "_id": comment.pk,
                "comment": comment.comment,
                "commentedAt": comment.commented_at,
                "user_id": request.user.pk,
                "children": [],
            }
        )


class BlogCommentsView(APIView):
    """Top level comments of a blog, newest first, five per call."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Comments"], responses={200: CommentSerializer(many=True)})
    def post(self, request: Request) -> Response:
        skip = parse_int(request.data.get("skip"), 0)
        comments = (
            Comment.objects.filter(
                blog_id=parse_int(request.data.get("blog_id"), 0), parent__isnull=True
            )
            .select_related("commented_by")
            .prefetch_related("children")
            .order_by("-commented_at")[skip : skip + COMMENTS_PER_PAGE]
        )
        return Response(CommentSerializer(comments, many=True).data)


class RepliesView(APIView):
    """Replies of a comment, oldest first, five per call."""

    permission_classes = [permissions.AllowAny]

    @extend_schema(tags=["Comments"], responses={200: CommentSerializer(many=True)})
    def post(self, request: Request) -> Response:
        skip = parse_int(request.data.get("skip"), 0)
        replies = (
            Comment.objects.filter(parent_id=parse_int(request.data.get("_id"), 0))
            .select_related("commented_by")
            .prefetch_related("children")
            .order_by("commented_at")[skip : skip + COMMENTS_PER_PAGE]
        )
        return Response({"replies": CommentSerializer(replies, many=True).data})


class DeleteCommentView(APIView):
    """
    Delete a comment with all of its replies and their notifications.
    """

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Comments"])
    def delete(self, request: Request) -> Response:
        comment_id = request.data.get("_id") or request.query_params.get("_id")
        comment = Comment.objects.filter(pk=parse_int(comment_id, 0)).first()
        if comment is None:
            raise CommentNotFound()
        if not can_delete_comment(request.user, comment):
            logger.warning(
                f"User {request.user.pk} tried to delete comment {comment.pk}"
            )
            raise UnauthorizedCommentDelete()

        removed = 1 + len(comment.get_descendant_ids())
        parent_removed = 0 if comment.parent_id else 1

        with transaction.atomic():
            Blog.objects.filter(pk=comment.blog_id).update(
                total_comments=Greatest(F("total_comments") - removed, 0),
                total_parent_comments=Greatest(
                    F("total_parent_comments") - parent_removed, 0
                ),
            )
            comment.delete()

        logger.info(f"Comment {comment_id} and {removed - 1} replies deleted")
        return Response({"status": "done", "deleted": removed})
