from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from pricing.models import PricedItem


class CollectionRecord(models.Model):
    """
    Immutable record of a waste collection performed by a collector for a
    resident. Append-only billing evidence: invoices are built from these.
    """

    collection_id = models.AutoField(primary_key=True)

    # Relationships
    collector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='collections_made',
        limit_choices_to={'role': 'collector'},
    )
    resident = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='collections',
        limit_choices_to={'role': 'resident'},
    )
    # Set when the record was produced by completing a pickup request
    source_request = models.OneToOneField(
        'waste_requests.WasteRequest',
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='collection_record'
    )

    # Derived totals, fixed at creation
    total_weight_kg = models.DecimalField(max_digits=14, decimal_places=3, default=Decimal('0'))
    total_price = models.DecimalField(max_digits=20, decimal_places=5, default=Decimal('0'))

    collected_at = models.DateTimeField(default=timezone.now)
    notes = models.TextField(blank=True)

    # Audit
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-collected_at', '-collection_id']
        indexes = [
            models.Index(fields=['resident', 'collected_at'], name='coll_resident_collected_idx'),
            models.Index(fields=['collector', '-collected_at'], name='coll_collector_collected_idx'),
        ]

    def __str__(self):
        return f"Collection #{self.collection_id} - {self.resident.username} - {self.total_weight_kg}kg"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Collection records are append-only and cannot be modified.")
        super().save(*args, **kwargs)

    def get_weight_description(self):
        parts = [f"{item.weight_kg}kg {item.category}" for item in self.items.all()]
        return ", ".join(parts) if parts else "No items"


class CollectionItem(PricedItem):
    record = models.ForeignKey(
        CollectionRecord,
        on_delete=models.CASCADE,
        related_name='items'
    )

    class Meta(PricedItem.Meta):
        indexes = [
            models.Index(fields=['category'], name='collitem_category_idx'),
        ]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError("Collection items are append-only and cannot be modified.")
        super().save(*args, **kwargs)
