import django_filters
from django.db.models import Q
from .models import Gemstone


class GemstoneFilter(django_filters.FilterSet):
    """Filter for the inventory list using django-filter"""

    # Searches stone id, type and origin
    search = django_filters.CharFilter(method='filter_search', label='Search')

    status = django_filters.CharFilter(field_name='status', lookup_expr='exact')
    type = django_filters.CharFilter(field_name='type', lookup_expr='iexact')
    origin = django_filters.CharFilter(field_name='origin', lookup_expr='iexact')
    grade = django_filters.CharFilter(field_name='grade', lookup_expr='exact')
    certified = django_filters.BooleanFilter(field_name='certified')
    supplier = django_filters.NumberFilter(field_name='supplier_id', lookup_expr='exact')
    min_carat = django_filters.NumberFilter(field_name='carat', lookup_expr='gte')
    max_carat = django_filters.NumberFilter(field_name='carat', lookup_expr='lte')
    min_price = django_filters.NumberFilter(field_name='selling_price', lookup_expr='gte')
    max_price = django_filters.NumberFilter(field_name='selling_price', lookup_expr='lte')
    tag = django_filters.CharFilter(method='filter_tag', label='Tag')

    class Meta:
        model = Gemstone
        fields = ['search', 'status', 'type', 'origin', 'grade', 'certified', 'supplier',
                  'min_carat', 'max_carat', 'min_price', 'max_price', 'tag']

    def filter_search(self, queryset, name, value):
        """Case-insensitive match on type, origin or stone id"""
        value = (value or '').strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(type__icontains=value) |
            Q(origin__icontains=value) |
            Q(stone_id__icontains=value)
        )

    def filter_tag(self, queryset, name, value):
        # JSON containment lookups are not supported on SQLite
        if not value:
            return queryset
        ids = [stone.id for stone in queryset.only('id', 'tags') if value in (stone.tags or [])]
        return queryset.filter(id__in=ids)
