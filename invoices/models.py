from decimal import Decimal

from django.conf import settings
from django.core.serializers.json import DjangoJSONEncoder
from django.db import models


class Invoice(models.Model):
    """
    Billing summary for one resident over a half-open period
    [period_start, period_end), aggregated from collection records.
    Regenerating the same period replaces the stored figures.
    """

    invoice_id = models.AutoField(primary_key=True)

    resident = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='invoices',
        limit_choices_to={'role': 'resident'},
    )

    period_start = models.DateTimeField()
    period_end = models.DateTimeField()

    # {category: {"total_weight_kg": "15.000", "rate_per_kg": "50.00", "amount": "750.00000"}}
    waste_details = models.JSONField(default=dict, encoder=DjangoJSONEncoder)
    total_amount = models.DecimalField(max_digits=20, decimal_places=5, default=Decimal('0'))
    record_count = models.PositiveIntegerField(default=0)

    generated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-period_start', '-invoice_id']
        constraints = [
            models.UniqueConstraint(
                fields=['resident', 'period_start', 'period_end'],
                name='unique_invoice_per_resident_period',
            ),
        ]

    def __str__(self):
        return f"Invoice #{self.invoice_id} - {self.resident.username} - {self.period_start:%Y-%m-%d}"
