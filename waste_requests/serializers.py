from rest_framework import serializers

from pricing.serializers import PricedItemSerializer, WasteItemInputSerializer
from .models import WasteRequest



class WasteRequestListSerializer(serializers.ModelSerializer):
    """
    Lightweight serializer for listing requests
    """
    resident_name = serializers.CharField(source='resident.get_full_name', read_only=True)
    collector_name = serializers.CharField(source='collector.get_full_name', read_only=True, default=None)
    total_price = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)

    class Meta:
        model = WasteRequest
        fields = [
            'request_id',
            'resident',
            'resident_name',
            'collector',
            'collector_name',
            'total_price',
            'payment_status',
            'request_status',
            'requested_at',
        ]
        read_only_fields = fields


class WasteRequestDetailSerializer(serializers.ModelSerializer):
    """
    Detailed serializer for viewing a specific request
    """
    resident_name = serializers.CharField(source='resident.get_full_name', read_only=True)
    collector_name = serializers.CharField(source='collector.get_full_name', read_only=True, default=None)
    items = PricedItemSerializer(many=True, read_only=True)
    is_terminal = serializers.BooleanField(read_only=True)
    # Rounded for display only
    total_price = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)

    class Meta:
        model = WasteRequest
        fields = [
            'request_id',
            'resident',
            'resident_name',
            'collector',
            'collector_name',
            'items',
            'total_price',
            'payment_status',
            'request_status',
            'is_terminal',
            'version',
            'requested_at',
            'assigned_at',
            'completed_at',
            'cancelled_at',
            'paid_at',
            'cancellation_reason',
            'updated_at',
        ]
        read_only_fields = fields


class WasteRequestCreateSerializer(serializers.Serializer):
    """
    Serializer for creating new requests
    """
    items = WasteItemInputSerializer(many=True)


class AssignCollectorSerializer(serializers.Serializer):
    collector = serializers.IntegerField(help_text="Collector user ID")


class CompleteRequestSerializer(serializers.Serializer):
    """
    Collector completes a request, optionally with the weights actually collected.
    """
    items = WasteItemInputSerializer(many=True, required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CancelRequestSerializer(serializers.Serializer):
    cancellation_reason = serializers.CharField(required=False, allow_blank=True, default="")


class StatusSummarySerializer(serializers.Serializer):
    pending = serializers.IntegerField()
    assigned = serializers.IntegerField()
    completed = serializers.IntegerField()
    cancelled = serializers.IntegerField()
    total = serializers.IntegerField()
