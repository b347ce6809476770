import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from accounts.services import ensure_role, get_resident
from pricing.exceptions import InvalidWeight
from pricing.rates import WasteCategory
from pricing.valuation import value_items, sum_line_totals, sum_weights
from .models import CollectionRecord, CollectionItem

logger = logging.getLogger(__name__)


def record_collection(actor, resident_id, items, collected_at=None, notes="",
                      source_request=None, rate_table=None):
    """
    Appends an immutable collection record for ``resident_id``.

    - ``actor`` must be a collector.
    - Every item needs a positive weight; items are priced against the
      current rate table and keep that rate.
    - Totals are computed before the record is written, record and items
      are stored in one transaction.
    - No pickup request is touched here; ``source_request`` only links the
      record to the request it came from.
    """
    ensure_role(actor, "collector", action="record collections")
    resident = get_resident(resident_id)
    valued = price_collected_items(items, rate_table)
    return append_record(actor, resident, valued, collected_at, notes, source_request)


def price_collected_items(items, rate_table=None):
    """
    Prices the weights a collector actually picked up. The list must be
    non-empty and every weight positive.
    """
    items = list(items or [])
    if not items:
        raise InvalidWeight("A collection needs at least one waste item.")

    valued = value_items(items, rate_table)
    for index, item in enumerate(valued, start=1):
        if item.weight_kg <= 0:
            raise InvalidWeight(f"Item {index} ({item.category}) must have a weight greater than zero.")
    return valued


def append_record(collector, resident, valued, collected_at=None, notes="", source_request=None):
    """
    Writes a record and its already-priced items. Callers validate first.
    """
    with transaction.atomic():
        record = CollectionRecord.objects.create(
            collector=collector,
            resident=resident,
            source_request=source_request,
            total_weight_kg=sum_weights(valued),
            total_price=sum_line_totals(valued),
            collected_at=collected_at or timezone.now(),
            notes=notes or "",
        )
        CollectionItem.objects.bulk_create([
            CollectionItem.from_valued(item, position, record=record)
            for position, item in enumerate(valued)
        ])

    logger.info(
        "Collection #%s recorded by %s for %s: %s kg, %s",
        record.collection_id, collector.username, resident.username,
        record.total_weight_kg, record.total_price,
    )
    return record


def summarize_by_category(records, category=None):
    """
    Total weight, amount and line count per waste category over ``records``
    (a CollectionRecord queryset), optionally for one ``category`` only.
    Categories follow declaration order.
    """
    totals = {}
    items = CollectionItem.objects.filter(record__in=records)
    if category:
        items = items.filter(category=category)
    items = items.values_list(
        'category', 'weight_kg', 'line_total'
    )
    for item_category, weight, line_total in items:
        entry = totals.setdefault(item_category, {
            "total_weight_kg": Decimal('0'),
            "amount": Decimal('0'),
            "items": 0,
        })
        entry["total_weight_kg"] += weight
        entry["amount"] += line_total
        entry["items"] += 1

    return [
        {"category": name, **totals[name]}
        for name in WasteCategory.values
        if name in totals
    ]
