"""
Pagination shared by list endpoints.
"""
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardPagination(PageNumberPagination):
    """`page` / `limit` query params, answered as { data, pagination }."""
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 200

    def get_paginated_response(self, data):
        return Response({
            'data': data,
            'pagination': {
                'total_items': self.page.paginator.count,
                'total_pages': self.page.paginator.num_pages,
                'current_page': self.page.number,
                'limit': self.get_page_size(self.request),
            },
        })
