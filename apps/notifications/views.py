import logging

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import generics, permissions
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.pagination import NotificationPagination

from .exceptions import NotificationNotFound
from .filters import NotificationFilter
from .models import Notification
from .serializers import NotificationSerializer

logger = logging.getLogger(__name__)


class RecipientNotificationMixin:
    """Restricts every lookup to the requester's own inbox."""

    def get_inbox(self):
        return Notification.objects.for_recipient(self.request.user)

    def get_own_notification(self, pk):
        notification = Notification.objects.filter(
            pk=pk, notification_for=self.request.user
        ).first()
        if notification is None:
            raise NotificationNotFound()
        return notification


@extend_schema(
    tags=["Notifications"],
    parameters=[
        OpenApiParameter("page", int),
        OpenApiParameter(
            "filter", str, enum=["all", "like", "comment", "reply", "tutorial"]
        ),
    ],
)
class NotificationListView(RecipientNotificationMixin, generics.ListAPIView):
    """
    The requester's notifications, newest first, ten per page.

    Notifications about the requester's own actions are left out.
    """

    permission_classes = [permissions.IsAuthenticated]
    serializer_class = NotificationSerializer
    pagination_class = NotificationPagination
    filter_backends = [DjangoFilterBackend]
    filterset_class = NotificationFilter

    def get_queryset(self):
        return (
            self.get_inbox()
            .select_related("user", "blog", "comment", "reply", "replied_on_comment")
            .order_by("-created_at")
        )

    def get_unread_count(self) -> int:
        return self.get_inbox().unread().count()


class UnreadCountView(RecipientNotificationMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Notifications"])
    def get(self, request: Request) -> Response:
        return Response({"unreadCount": self.get_inbox().unread().count()})


class NewNotificationView(RecipientNotificationMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Notifications"])
    def get(self, request: Request) -> Response:
        return Response(
            {"new_notification_available": self.get_inbox().unread().exists()}
        )


class MarkSeenView(RecipientNotificationMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Notifications"], request=None)
    def patch(self, request: Request, pk: int) -> Response:
        notification = self.get_own_notification(pk)
        notification.mark_as_seen()
        return Response(NotificationSerializer(notification).data)


class MarkAllSeenView(RecipientNotificationMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Notifications"], request=None)
    def patch(self, request: Request) -> Response:
        modified = self.get_inbox().unread().update(seen=True)
        logger.info(f"Marked {modified} notifications seen for user {request.user.pk}")
        return Response({"modified": modified})


class DeleteNotificationView(RecipientNotificationMixin, APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(tags=["Notifications"])
    def delete(self, request: Request, pk: int) -> Response:
        notification = self.get_own_notification(pk)
        notification.delete()
        return Response({"message": "Notification deleted"})
