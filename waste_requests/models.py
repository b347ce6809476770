from decimal import Decimal

from django.conf import settings
from django.db import models

from pricing.models import PricedItem


class WasteRequest(models.Model):
    """
    A resident's pickup request for one or more categories of waste.
    Status only changes through the transitions in ``waste_requests.services``.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        ASSIGNED = 'assigned', 'Assigned to Collector'
        COMPLETED = 'completed', 'Completed'
        CANCELLED = 'cancelled', 'Cancelled'

    class PaymentStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        PAID = 'paid', 'Paid'

    TERMINAL_STATUSES = (Status.COMPLETED, Status.CANCELLED)

    request_id = models.AutoField(primary_key=True)

    resident = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='waste_requests',
        limit_choices_to={'role': 'resident'},
    )
    collector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='assigned_waste_requests',
        limit_choices_to={'role': 'collector'},
    )

    # Pricing (sum of item line totals, fixed at creation)
    total_price = models.DecimalField(max_digits=20, decimal_places=5, default=Decimal('0'), editable=False)

    payment_status = models.CharField(max_length=20, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)
    request_status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)

    # Bumped by every transition
    version = models.PositiveIntegerField(default=0, editable=False)

    # Timestamps
    requested_at = models.DateTimeField(auto_now_add=True)
    assigned_at = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    paid_at = models.DateTimeField(null=True, blank=True)
    cancellation_reason = models.TextField(blank=True)

    # Audit
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-requested_at', '-request_id']
        indexes = [
            models.Index(fields=['resident', '-requested_at'], name='wreq_resident_requested_idx'),
            models.Index(fields=['collector', 'request_status'], name='wreq_collector_status_idx'),
            models.Index(fields=['request_status'], name='wreq_status_idx'),
        ]

    def __str__(self):
        return f"WasteRequest #{self.request_id} - {self.resident.username} - {self.request_status}"

    @property
    def is_terminal(self):
        return self.request_status in self.TERMINAL_STATUSES

    def recalculate_total(self):
        """Sum of the stored line totals."""
        return sum((item.line_total for item in self.items.all()), Decimal('0'))


class RequestItem(PricedItem):
    request = models.ForeignKey(
        WasteRequest,
        on_delete=models.CASCADE,
        related_name='items'
    )

    class Meta(PricedItem.Meta):
        pass
