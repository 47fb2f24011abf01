"""Pagination classes shared by list endpoints."""

from __future__ import annotations

from rest_framework.pagination import PageNumberPagination  # type: ignore


class StandardResultsPagination(PageNumberPagination):
    """`?page=2&limit=50`; limit is capped at 100."""

    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 100


class StorefrontPagination(PageNumberPagination):
    page_size = 12
    page_size_query_param = None
