"""
Pagination for Mobile API
Lists are returned as {data, links, meta} so the mobile clients can page through them
"""
from django.core.paginator import EmptyPage, Page, PageNotAnInteger
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.utils.urls import replace_query_param

from .constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, PROFILE_PAGE_SIZE


class StandardPagination(PageNumberPagination):
    page_size = DEFAULT_PAGE_SIZE
    page_size_query_param = 'per_page'
    max_page_size = MAX_PAGE_SIZE

    def paginate_queryset(self, queryset, request, view=None):
        """
        Pages past the last one come back empty with their meta instead of a 404,
        invalid page numbers fall back to the first page.
        """
        self.request = request
        page_size = self.get_page_size(request)
        if not page_size:
            return None

        paginator = self.django_paginator_class(queryset, page_size)
        page_number = self.get_page_number(request, paginator)
        try:
            self.page = paginator.page(page_number)
        except PageNotAnInteger:
            self.page = paginator.page(1)
        except EmptyPage:
            number = int(page_number)
            self.page = paginator.page(1) if number < 1 else Page([], number, paginator)
        return list(self.page)

    def get_previous_link(self):
        if self.page.number <= 1:
            return None
        return self._page_link(self.page.number - 1)

    def get_paginated_response(self, data):
        paginator = self.page.paginator
        has_items = len(self.page) > 0
        return Response({
            'data': data,
            'links': {
                'first': self._page_link(1),
                'last': self._page_link(paginator.num_pages),
                'prev': self.get_previous_link(),
                'next': self.get_next_link(),
            },
            'meta': {
                'current_page': self.page.number,
                'last_page': paginator.num_pages,
                'per_page': paginator.per_page,
                'total': paginator.count,
                'from': self.page.start_index() if has_items else None,
                'to': self.page.end_index() if has_items else None,
            },
        })

    def _page_link(self, number):
        url = self.request.build_absolute_uri()
        return replace_query_param(url, self.page_query_param, number)

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'properties': {
                'data': schema,
                'links': {'type': 'object'},
                'meta': {'type': 'object'},
            },
        }


class ProfilePagination(StandardPagination):
    """Public profile lists default to a shorter page"""
    page_size = PROFILE_PAGE_SIZE
