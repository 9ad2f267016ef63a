"""
Page/limit pagination for list endpoints.
"""
import math

from rest_framework.pagination import BasePagination
from rest_framework.response import Response

DEFAULT_LIMIT = 20
MAX_LIMIT = 1000


def _positive_int(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class PageLimitPagination(BasePagination):
    """
    `?page=N&limit=M` (limit clamped to 1..max_limit, default 20).

    Response: {<results_key>: [...], "pagination": {page, limit, total,
    totalPages, hasNext, hasPrev}}
    """
    results_key = 'results'
    default_limit = DEFAULT_LIMIT
    max_limit = MAX_LIMIT

    def paginate_queryset(self, queryset, request, view=None):
        self.limit = min(max(_positive_int(request.query_params.get('limit'), self.default_limit), 1), self.max_limit)
        self.page = max(_positive_int(request.query_params.get('page'), 1), 1)
        self.total = queryset.count()

        offset = (self.page - 1) * self.limit
        return list(queryset[offset:offset + self.limit])

    def get_paginated_response(self, data):
        total_pages = math.ceil(self.total / self.limit) if self.total else 0
        return Response({
            self.results_key: data,
            'pagination': {
                'page': self.page,
                'limit': self.limit,
                'total': self.total,
                'totalPages': total_pages,
                'hasNext': self.page < total_pages,
                'hasPrev': self.page > 1,
            },
        })


class EventPagination(PageLimitPagination):
    results_key = 'events'


class ReportPagination(PageLimitPagination):
    results_key = 'reports'
    default_limit = 10


class AdminListPagination(PageLimitPagination):
    """Admin listings: default 50, at most 100 per page."""
    default_limit = 50
    max_limit = 100


class UserPagination(AdminListPagination):
    results_key = 'users'


class AuditLogPagination(AdminListPagination):
    results_key = 'entries'
