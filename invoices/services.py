import logging
from decimal import Decimal

from django.db import transaction

from accounts.services import ensure_role, get_resident
from collection_management.models import CollectionRecord, CollectionItem
from pricing.exceptions import InvalidPeriod, Unauthorized
from pricing.rates import WasteCategory
from .models import Invoice

logger = logging.getLogger(__name__)


class InvoiceAggregator:
    """
    Groups the collection items of one resident over [period_start, period_end)
    by category.

    Per category the weight and line totals are summed; ``rate_per_kg`` is the
    rate of the most recent item in the period and is informational only,
    ``amount`` is always the sum of the stored line totals.
    """

    def __init__(self, resident, period_start, period_end):
        if period_start >= period_end:
            raise InvalidPeriod(
                f"Invoice period start ({period_start:%Y-%m-%d %H:%M}) must be before "
                f"its end ({period_end:%Y-%m-%d %H:%M})."
            )
        self.resident = resident
        self.period_start = period_start
        self.period_end = period_end

    def records(self):
        return CollectionRecord.objects.filter(
            resident=self.resident,
            collected_at__gte=self.period_start,
            collected_at__lt=self.period_end,
        )

    def items(self):
        # Oldest first so the last rate seen per category is the latest one
        return CollectionItem.objects.filter(record__in=self.records()).order_by(
            'record__collected_at', 'record__collection_id', 'position', 'id'
        ).values_list('category', 'weight_kg', 'rate_per_kg', 'line_total')

    @staticmethod
    def build_details(items):
        """
        ``items`` is an iterable of (category, weight_kg, rate_per_kg, line_total)
        in chronological order. Returns (details, total_amount).
        """
        grouped = {}
        for category, weight, rate, line_total in items:
            entry = grouped.setdefault(category, {
                "total_weight_kg": Decimal('0'),
                "rate_per_kg": rate,
                "amount": Decimal('0'),
            })
            entry["total_weight_kg"] += Decimal(weight)
            entry["amount"] += Decimal(line_total)
            entry["rate_per_kg"] = rate

        details = {}
        for category in WasteCategory.values:
            if category in grouped:
                entry = grouped[category]
                details[category] = {
                    "total_weight_kg": str(entry["total_weight_kg"]),
                    "rate_per_kg": str(entry["rate_per_kg"]),
                    "amount": str(entry["amount"]),
                }
        total_amount = sum((grouped[c]["amount"] for c in grouped), Decimal('0'))
        return details, total_amount

    def aggregate(self):
        details, total_amount = self.build_details(self.items())
        return details, total_amount, self.records().count()


def generate_invoice(actor, resident_id, period_start, period_end):
    """
    Builds (or rebuilds) the invoice of ``resident_id`` for the period.
    An empty period is a valid invoice with no details and a zero total.
    """
    ensure_role(actor, "admin", "resident", action="generate invoices")
    resident = get_resident(resident_id)
    if actor.role == "resident" and actor.pk != resident.pk:
        raise Unauthorized("Residents can only generate their own invoices.")

    aggregator = InvoiceAggregator(resident, period_start, period_end)

    with transaction.atomic():
        details, total_amount, record_count = aggregator.aggregate()
        invoice, created = Invoice.objects.update_or_create(
            resident=resident,
            period_start=period_start,
            period_end=period_end,
            defaults={
                "waste_details": details,
                "total_amount": total_amount,
                "record_count": record_count,
            },
        )

    logger.info(
        "Invoice #%s %s for %s (%s - %s): %d records, total %s",
        invoice.invoice_id, "generated" if created else "regenerated", resident.username,
        period_start, period_end, record_count, total_amount,
    )
    return invoice
