from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.parsers import JSONParser
from rest_framework.request import Request
from rest_framework.test import APIRequestFactory

from apps.common.pagination import BlogFeedPagination, OffsetPageNumberPagination

User = get_user_model()


class PaginationTest(TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()
        for i in range(12):
            User.objects.create_user(
                username=f"user{i:02d}",
                email=f"user{i}@example.com",
                fullname=f"User Number {i}",
            )
        self.queryset = User.objects.order_by("username")

    def paginate(self, paginator, request):
        page = paginator.paginate_queryset(self.queryset, Request(request))
        return [user.username for user in page]

    def test_query_string_page(self):
        paginator = OffsetPageNumberPagination()
        names = self.paginate(paginator, self.factory.get("/", {"page": 2}))

        self.assertEqual(names, ["user10", "user11"])
        self.assertEqual(paginator.total_count, 12)
        self.assertEqual(paginator.total_pages, 2)

    def test_page_past_end_is_empty(self):
        paginator = OffsetPageNumberPagination()
        names = self.paginate(paginator, self.factory.get("/", {"page": 5}))

        self.assertEqual(names, [])
        self.assertEqual(paginator.page_number, 5)

    def test_invalid_page_falls_back_to_first(self):
        paginator = OffsetPageNumberPagination()
        names = self.paginate(paginator, self.factory.get("/", {"page": "abc"}))

        self.assertEqual(len(names), 10)
        self.assertEqual(paginator.page_number, 1)

    def test_post_body_params(self):
        paginator = BlogFeedPagination()
        request = self.factory.post("/", {"page": 2, "limit": 4}, format="json")
        request = Request(request, parsers=[JSONParser()])

        page = paginator.paginate_queryset(self.queryset, request)

        self.assertEqual(
            [u.username for u in page], ["user04", "user05", "user06", "user07"]
        )
        response = paginator.get_paginated_response([])
        self.assertEqual(response.data, {"blogs": [], "page": 2, "totalDocs": 12})

    def test_limit_capped(self):
        paginator = BlogFeedPagination()
        self.paginate(paginator, self.factory.get("/", {"limit": 500}))
        self.assertEqual(paginator.limit, 50)
