import math
from typing import Optional

from django.db.models import QuerySet
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from .utils import parse_int


class OffsetPageNumberPagination(PageNumberPagination):
    """
    Page number pagination that never raises on an out of range page.

    Pages past the end come back empty, which is what infinite scroll
    clients expect. Parameters are read from the query string, and from
    the JSON body on POST requests.
    """

    page_size = 10
    page_size_query_param = None
    max_page_size = 50
    page_query_param = "page"

    def get_param(self, request, name):
        value = request.query_params.get(name)
        if value is None and request.method == "POST" and hasattr(request.data, "get"):
            value = request.data.get(name)
        return value

    def get_page_size(self, request) -> int:
        if self.page_size_query_param:
            size = parse_int(
                self.get_param(request, self.page_size_query_param), 0, minimum=0
            )
            if size > 0:
                return min(size, self.max_page_size)
        return self.page_size

    def paginate_queryset(
        self, queryset: QuerySet, request, view=None
    ) -> Optional[list]:
        self.request = request
        self.limit = self.get_page_size(request)
        self.page_number = parse_int(
            self.get_param(request, self.page_query_param), 1, minimum=1
        )
        self.total_count = queryset.count()

        offset = (self.page_number - 1) * self.limit
        return list(queryset[offset : offset + self.limit])

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.limit) if self.limit else 0

    def get_paginated_response(self, data: list) -> Response:
        return Response(
            {
                "results": data,
                "page": self.page_number,
                "totalDocs": self.total_count,
            }
        )


class BlogFeedPagination(OffsetPageNumberPagination):
    """Feed pagination: ``{blogs, page, totalDocs}``."""

    page_size = 5
    page_size_query_param = "limit"
    max_page_size = 50

    def get_paginated_response(self, data: list) -> Response:
        return Response(
            {
                "blogs": data,
                "page": self.page_number,
                "totalDocs": self.total_count,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "blogs": schema,
                "page": {"type": "integer", "example": 1},
                "totalDocs": {"type": "integer", "example": 42},
            },
        }


class NotificationPagination(OffsetPageNumberPagination):
    """
    Inbox pagination, ten per page, with the recipient's unread count.

    The view must provide ``get_unread_count()``.
    """

    page_size = 10

    def paginate_queryset(self, queryset, request, view=None):
        self.unread_count = view.get_unread_count() if view else 0
        return super().paginate_queryset(queryset, request, view)

    def get_paginated_response(self, data: list) -> Response:
        return Response(
            {
                "notifications": data,
                "unreadCount": self.unread_count,
                "totalPages": self.total_pages,
                "currentPage": self.page_number,
                "totalCount": self.total_count,
            }
        )

    def get_paginated_response_schema(self, schema):
        return {
            "type": "object",
            "properties": {
                "notifications": schema,
                "unreadCount": {"type": "integer"},
                "totalPages": {"type": "integer"},
                "currentPage": {"type": "integer"},
                "totalCount": {"type": "integer"},
            },
        }
