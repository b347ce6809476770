from rest_framework import serializers

from .rates import WasteCategory


class RateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=WasteCategory.choices)
    label = serializers.CharField()
    rate_per_kg = serializers.DecimalField(max_digits=10, decimal_places=2)


class WasteItemInputSerializer(serializers.Serializer):
    """
    A raw line item as submitted by residents and collectors.
    Category and weight are checked by the pricing layer so the client gets
    unknown_category / invalid_weight errors; prices are never accepted
    from the client.
    """
    category = serializers.CharField(help_text="Waste category, e.g. food, cardboard, plastic")
    weight_kg = serializers.CharField(help_text="Weight in kilograms (up to 3 decimal places)")


class PricedItemSerializer(serializers.Serializer):
    category = serializers.CharField()
    weight_kg = serializers.DecimalField(max_digits=10, decimal_places=3)
    rate_per_kg = serializers.DecimalField(max_digits=10, decimal_places=2)
    # Output rounding only; the stored value keeps full precision
    line_total = serializers.DecimalField(max_digits=18, decimal_places=2)
