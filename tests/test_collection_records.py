"""
Tests for recording collections and the per-category summary.
"""
from decimal import Decimal

import pytest

from collection_management.models import CollectionRecord, CollectionItem
from collection_management.services import record_collection, summarize_by_category
from pricing.exceptions import InvalidWeight, NotFound, Unauthorized, UnknownCategory

pytestmark = pytest.mark.django_db


def test_record_collection_prices_items(collector, resident, billing_rates):
    record = record_collection(collector, resident.pk, [
        {"category": "food", "weight_kg": "10"},
        {"category": "cardboard", "weight_kg": "2"},
    ], notes="Gate")

    assert record.collector == collector
    assert record.resident == resident
    assert record.source_request is None
    assert record.total_weight_kg == Decimal("12")
    assert record.total_price == Decimal("700")
    items = list(record.items.all())
    assert [(i.category, i.rate_per_kg, i.line_total) for i in items] == [
        ("food", Decimal("50"), Decimal("500")),
        ("cardboard", Decimal("100"), Decimal("200")),
    ]
    assert record.get_weight_description() == "10.000kg food, 2.000kg cardboard"


def test_only_collectors_record(resident, admin_user, billing_rates):
    for actor in (resident, admin_user):
        with pytest.raises(Unauthorized):
            record_collection(actor, resident.pk, [{"category": "food", "weight_kg": "1"}])
    assert not CollectionRecord.objects.exists()


def test_every_item_needs_positive_weight(collector, resident, billing_rates):
    with pytest.raises(InvalidWeight):
        record_collection(collector, resident.pk, [
            {"category": "food", "weight_kg": "4"},
            {"category": "cardboard", "weight_kg": "0"},
        ])
    with pytest.raises(InvalidWeight):
        record_collection(collector, resident.pk, [{"category": "food", "weight_kg": "-2"}])
    with pytest.raises(InvalidWeight):
        record_collection(collector, resident.pk, [])
    assert not CollectionRecord.objects.exists()
    assert not CollectionItem.objects.exists()


def test_unknown_category(collector, resident, billing_rates):
    with pytest.raises(UnknownCategory):
        record_collection(collector, resident.pk, [{"category": "uranium", "weight_kg": "1"}])


def test_unknown_resident(collector, other_collector, billing_rates):
    with pytest.raises(NotFound):
        record_collection(collector, 31337, [{"category": "food", "weight_kg": "1"}])
    with pytest.raises(NotFound):
        record_collection(collector, other_collector.pk, [{"category": "food", "weight_kg": "1"}])


def test_records_are_append_only(collector, resident, billing_rates):
    record = record_collection(collector, resident.pk, [{"category": "food", "weight_kg": "1"}])
    record.notes = "edited"
    with pytest.raises(ValueError):
        record.save()
    item = record.items.get()
    item.weight_kg = Decimal("100")
    with pytest.raises(ValueError):
        item.save()


def test_summarize_by_category(collector, resident, other_resident, billing_rates):
    record_collection(collector, resident.pk, [
        {"category": "cardboard", "weight_kg": "2"},
        {"category": "food", "weight_kg": "10"},
    ])
    record_collection(collector, resident.pk, [{"category": "food", "weight_kg": "5"}])
    record_collection(collector, other_resident.pk, [{"category": "plastic", "weight_kg": "1"}])

    rows = summarize_by_category(CollectionRecord.objects.filter(resident=resident))
    assert [row["category"] for row in rows] == ["food", "cardboard"]
    assert rows[0]["total_weight_kg"] == Decimal("15")
    assert rows[0]["amount"] == Decimal("750")
    assert rows[0]["items"] == 2
    assert rows[1]["amount"] == Decimal("200")

    only_food = summarize_by_category(CollectionRecord.objects.all(), category="food")
    assert len(only_food) == 1
    assert only_food[0]["items"] == 2


def test_inactive_collector_cannot_record(collector, resident, billing_rates):
    collector.is_active = False
    collector.save()
    with pytest.raises(Unauthorized) as excinfo:
        record_collection(collector, resident.pk, [{"category": "food", "weight_kg": "1"}])
    assert "inactive" in str(excinfo.value.detail)
    assert not CollectionRecord.objects.exists()


def test_oversized_weight_rejected(collector, resident, billing_rates):
    with pytest.raises(InvalidWeight):
        record_collection(collector, resident.pk, [{"category": "food", "weight_kg": "100000000"}])
    assert not CollectionRecord.objects.exists()
