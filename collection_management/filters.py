import django_filters

from pricing.rates import WasteCategory
from .models import CollectionRecord


class CollectionRecordFilter(django_filters.FilterSet):
    category = django_filters.ChoiceFilter(
        field_name='items__category', choices=WasteCategory.choices, distinct=True,
    )
    # Half-open range: collected_after <= collected_at < collected_before
    collected_after = django_filters.IsoDateTimeFilter(field_name='collected_at', lookup_expr='gte')
    collected_before = django_filters.IsoDateTimeFilter(field_name='collected_at', lookup_expr='lt')
    date = django_filters.DateFilter(field_name='collected_at', lookup_expr='date')

    class Meta:
        model = CollectionRecord
        fields = ['collector', 'resident', 'category', 'source_request']
