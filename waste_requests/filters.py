import django_filters

from .models import WasteRequest


class WasteRequestFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(field_name='request_status', choices=WasteRequest.Status.choices)
    requested_after = django_filters.IsoDateTimeFilter(field_name='requested_at', lookup_expr='gte')
    requested_before = django_filters.IsoDateTimeFilter(field_name='requested_at', lookup_expr='lt')

    class Meta:
        model = WasteRequest
        fields = ['resident', 'collector', 'status', 'payment_status']
