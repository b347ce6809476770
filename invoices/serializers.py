from decimal import Decimal

from rest_framework import serializers

from .models import Invoice

CENTS = Decimal('0.01')


class InvoiceSerializer(serializers.ModelSerializer):
    resident_name = serializers.CharField(source='resident.get_full_name', read_only=True)
    waste_details = serializers.SerializerMethodField()
    # Rounded for display only
    total_amount = serializers.DecimalField(max_digits=20, decimal_places=2, read_only=True)

    class Meta:
        model = Invoice
        fields = [
            'invoice_id',
            'resident',
            'resident_name',
            'period_start',
            'period_end',
            'waste_details',
            'total_amount',
            'record_count',
            'generated_at',
        ]
        read_only_fields = fields

    def get_waste_details(self, obj):
        return {
            category: {
                "total_weight_kg": entry["total_weight_kg"],
                "rate_per_kg": entry["rate_per_kg"],
                "amount": str(Decimal(entry["amount"]).quantize(CENTS)),
            }
            for category, entry in obj.waste_details.items()
        }


class GenerateInvoiceSerializer(serializers.Serializer):
    resident = serializers.IntegerField(
        required=False,
        help_text="Resident user ID (admins only; residents always bill themselves)",
    )
    period_start = serializers.DateTimeField()
    period_end = serializers.DateTimeField(help_text="Exclusive end of the billing period")
