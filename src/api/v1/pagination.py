"""Pagination classes for API v1."""

from rest_framework.pagination import PageNumberPagination


class StandardResultsSetPagination(PageNumberPagination):
    """Default listing pagination; the client may pick ``page_size``."""

    page_size = 25
    page_size_query_param = "page_size"
    max_page_size = 200


class ReviewQueuePagination(StandardResultsSetPagination):
    """Review screens show a whole month of submissions on one page."""

    page_size = 100
    max_page_size = 500
