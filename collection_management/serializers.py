from rest_framework import serializers

from pricing.serializers import PricedItemSerializer, WasteItemInputSerializer
from .models import CollectionRecord


class CollectionRecordSerializer(serializers.ModelSerializer):
    resident_name = serializers.CharField(source="resident.get_full_name", read_only=True)
    collector_name = serializers.CharField(source="collector.get_full_name", read_only=True)
    request_id = serializers.IntegerField(source="source_request_id", read_only=True)
    items = PricedItemSerializer(many=True, read_only=True)
    total_weight_kg = serializers.DecimalField(max_digits=14, decimal_places=3, read_only=True)
    # Rounded for display only
    total_price = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)

    weight_description = serializers.SerializerMethodField()

    class Meta:
        model = CollectionRecord
        fields = [
            "collection_id",
            "collector",
            "collector_name",
            "resident",
            "resident_name",
            "request_id",
            "items",
            "total_weight_kg",
            "total_price",
            "collected_at",
            "notes",
            "weight_description",
            "created_at",
        ]
        read_only_fields = fields

    def get_weight_description(self, obj):
        return obj.get_weight_description()


class CollectionRecordCreateSerializer(serializers.Serializer):
    resident = serializers.IntegerField(help_text="Resident user ID")
    items = WasteItemInputSerializer(many=True)
    collected_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class CategorySummarySerializer(serializers.Serializer):
    category = serializers.CharField()
    total_weight_kg = serializers.DecimalField(max_digits=14, decimal_places=3)
    amount = serializers.DecimalField(max_digits=20, decimal_places=2)
    items = serializers.IntegerField()
