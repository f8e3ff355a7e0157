"""
Custom filters for Mobile API
"""
from django_filters import rest_framework as filters

from apps.stores.models import Store
from apps.stores.search import search_stores

TRUE_VALUES = ('1', 'true', 'yes', 'on')


class StoreFilter(filters.FilterSet):
    """
    Filtering for the store search endpoint
    """
    q = filters.CharFilter(method='filter_search')
    category = filters.CharFilter(field_name='categories__slug')
    city = filters.CharFilter(field_name='city', lookup_expr='icontains')
    verified = filters.CharFilter(method='filter_verified')

    class Meta:
        model = Store
        fields = ['q', 'category', 'city', 'verified']

    def filter_search(self, queryset, name, value):
        return search_stores(queryset, value)

    def filter_verified(self, queryset, name, value):
        # Only a truthy value narrows the list, verified=0 shows every store
        if value.lower() in TRUE_VALUES:
            return queryset.filter(is_verified=True)
        return queryset
