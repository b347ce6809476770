"""
Request lifecycle: the only place a WasteRequest changes status.

    pending --assign--> assigned --complete--> completed
       |                  |  ^
       |                  |  '--reassign
       '----cancel--------'--cancel--> cancelled

Each transition locks the row, validates the current status and then
commits with an update filtered on the status and version it validated
against, so two concurrent transitions can never both succeed.
"""

import logging

from django.conf import settings
from django.db import transaction
from django.db.models import Count, F
from django.utils import timezone

from accounts.services import ensure_role, get_collector
from collection_management.services import append_record, price_collected_items
from pricing.exceptions import InvalidTransition, InvalidWeight, NotFound, Unauthorized
from pricing.valuation import ValuedItem, value_items, sum_line_totals
from .models import WasteRequest, RequestItem

logger = logging.getLogger(__name__)

Status = WasteRequest.Status

# Statuses each named operation may start from
ALLOWED_SOURCES = {
    "assign": (Status.PENDING,),
    "reassign": (Status.ASSIGNED,),
    "complete": (Status.ASSIGNED,),
    "cancel": (Status.PENDING, Status.ASSIGNED),
    "delete": (Status.COMPLETED,),
}


def billing_policy(name, default=False):
    return getattr(settings, "WASTE_BILLING", {}).get(name, default)


def create_request(actor, items, rate_table=None):
    """
    Creates a pending request for the resident ``actor``.
    Rates are snapshotted onto each item; ``total_price`` is their sum.
    """
    ensure_role(actor, "resident", action="create pickup requests")

    items = list(items or [])
    if not items:
        raise InvalidWeight("A pickup request needs at least one waste item.")

    valued = value_items(items, rate_table)
    if not any(item.weight_kg > 0 for item in valued):
        raise InvalidWeight("Enter a positive weight for at least one waste type.")

    with transaction.atomic():
        waste_request = WasteRequest.objects.create(
            resident=actor,
            total_price=sum_line_totals(valued),
        )
        RequestItem.objects.bulk_create([
            RequestItem.from_valued(item, position, request=waste_request)
            for position, item in enumerate(valued)
        ])

    logger.info(
        "Request #%s created by %s with %d items, total %s",
        waste_request.request_id, actor.username, len(valued), waste_request.total_price,
    )
    return waste_request


def assign_collector(actor, request_id, collector_id):
    ensure_role(actor, "admin", action="assign collectors")
    collector = get_collector(collector_id)

    with transaction.atomic():
        waste_request = _lock(request_id)
        _check_source(waste_request, "assign")
        waste_request = _commit(
            waste_request, Status.ASSIGNED,
            collector=collector, assigned_at=timezone.now(),
        )

    logger.info("Request #%s assigned to %s", waste_request.request_id, collector.username)
    return waste_request


def reassign_collector(actor, request_id, collector_id):
    """Replaces the collector of an assigned request; there is only ever one."""
    ensure_role(actor, "admin", action="reassign collectors")
    collector = get_collector(collector_id)

    with transaction.atomic():
        waste_request = _lock(request_id)
        _check_source(waste_request, "reassign")
        previous = waste_request.collector
        waste_request = _commit(
            waste_request, Status.ASSIGNED,
            collector=collector, assigned_at=timezone.now(),
        )

    logger.info(
        "Request #%s reassigned from %s to %s",
        waste_request.request_id, previous.username if previous else None, collector.username,
    )
    return waste_request


def complete_request(actor, request_id, items=None, notes="", rate_table=None):
    """
    Marks an assigned request completed and appends the collection record
    that bills it. ``items`` are the weights actually collected; without
    them the requested items are billed at their snapshotted rates.
    """
    ensure_role(actor, "collector", "admin", action="complete pickup requests")

    with transaction.atomic():
        waste_request = _lock(request_id)
        _check_source(waste_request, "complete")

        if actor.role == "collector" and waste_request.collector_id != actor.pk:
            raise Unauthorized(f"Request #{waste_request.request_id} is assigned to another collector.")

        collector = waste_request.collector
        if collector is None or not collector.is_active:
            raise InvalidTransition(
                f"Request #{waste_request.request_id} has no active collector; reassign it before completing."
            )

        if (billing_policy("REQUIRE_PAYMENT_BEFORE_COMPLETION")
                and waste_request.payment_status != WasteRequest.PaymentStatus.PAID):
            raise InvalidTransition(
                f"Request #{waste_request.request_id} cannot be completed before payment is confirmed."
            )

        waste_request = _commit(waste_request, Status.COMPLETED, completed_at=timezone.now())
        _record_completion(waste_request, items, notes, rate_table)

    logger.info("Request #%s completed by %s", waste_request.request_id, actor.username)
    return waste_request


def cancel_request(actor, request_id, reason=""):
    ensure_role(actor, "resident", "admin", action="cancel pickup requests")

    with transaction.atomic():
        waste_request = _lock(request_id)
        _check_owner(actor, waste_request)
        _check_source(waste_request, "cancel")
        waste_request = _commit(
            waste_request, Status.CANCELLED,
            cancelled_at=timezone.now(), cancellation_reason=reason or "",
        )

    logger.info("Request #%s cancelled by %s", waste_request.request_id, actor.username)
    return waste_request


def delete_request(actor, request_id):
    """
    Removes a completed request. In-flight requests must be cancelled (and
    completed ones stay billable through their collection record).
    """
    ensure_role(actor, "resident", "admin", action="delete pickup requests")

    with transaction.atomic():
        waste_request = _lock(request_id)
        _check_owner(actor, waste_request)
        _check_source(waste_request, "delete")
        deleted, _ = WasteRequest.objects.filter(
            pk=waste_request.pk,
            request_status=Status.COMPLETED,
            version=waste_request.version,
        ).delete()
        if not deleted:
            raise InvalidTransition(
                f"Request #{waste_request.request_id} changed while it was being deleted."
            )

    logger.info("Request #%s deleted by %s", request_id, actor.username)


def confirm_payment(actor, request_id):
    """
    Applies the payment gateway's confirmation. Repeated confirmations are
    no-ops; a cancelled request cannot be paid.
    """
    ensure_role(actor, "admin", action="confirm payments")

    with transaction.atomic():
        waste_request = _lock(request_id)
        if waste_request.payment_status == WasteRequest.PaymentStatus.PAID:
            return waste_request
        if waste_request.request_status == Status.CANCELLED:
            raise InvalidTransition(f"Request #{waste_request.request_id} is cancelled and cannot be paid.")

        updated = WasteRequest.objects.filter(
            pk=waste_request.pk, version=waste_request.version,
        ).update(
            payment_status=WasteRequest.PaymentStatus.PAID,
            paid_at=timezone.now(),
            version=F("version") + 1,
            updated_at=timezone.now(),
        )
        if not updated:
            raise InvalidTransition(
                f"Request #{waste_request.request_id} changed concurrently; reload and retry."
            )
        waste_request.refresh_from_db()

    logger.info("Payment confirmed for request #%s", waste_request.request_id)
    return waste_request


def status_summary(queryset):
    counts = {status: 0 for status in Status.values}
    rows = queryset.order_by().values("request_status").annotate(n=Count("pk"))
    for row in rows:
        counts[row["request_status"]] = row["n"]
    counts["total"] = sum(counts.values())
    return counts


# ---------------------------
# Internals
# ---------------------------

def _lock(request_id):
    try:
        return WasteRequest.objects.select_for_update().get(pk=request_id)
    except (WasteRequest.DoesNotExist, ValueError, TypeError):
        raise NotFound(f"Waste request #{request_id} does not exist.")


def _check_source(waste_request, operation):
    allowed = ALLOWED_SOURCES[operation]
    if waste_request.request_status not in allowed:
        logger.warning(
            "Rejected %s on request #%s in status %s",
            operation, waste_request.request_id, waste_request.request_status,
        )
        if waste_request.is_terminal:
            raise InvalidTransition(
                f"Cannot {operation} request #{waste_request.request_id}: "
                f"it is already {waste_request.request_status}."
            )
        expected = " or ".join(allowed)
        raise InvalidTransition(
            f"Cannot {operation} request #{waste_request.request_id}: "
            f"status is {waste_request.request_status}, expected {expected}."
        )


def _check_owner(actor, waste_request):
    if actor.role == "resident" and waste_request.resident_id != actor.pk:
        raise Unauthorized(f"Request #{waste_request.request_id} belongs to another resident.")


def _commit(waste_request, target, **fields):
    """
    Compare-and-set: status, version and ``fields`` change together or not at all.
    """
    updated = WasteRequest.objects.filter(
        pk=waste_request.pk,
        request_status=waste_request.request_status,
        version=waste_request.version,
    ).update(
        request_status=target,
        version=F("version") + 1,
        updated_at=timezone.now(),
        **fields,
    )
    if not updated:
        raise InvalidTransition(
            f"Request #{waste_request.request_id} changed concurrently; reload and retry."
        )
    waste_request.refresh_from_db()
    return waste_request


def _record_completion(waste_request, items, notes, rate_table):
    if items:
        valued = price_collected_items(items, rate_table)
    else:
        # Bill what was requested, at the rates it was quoted with
        valued = [
            ValuedItem(item.category, item.weight_kg, item.rate_per_kg, item.line_total)
            for item in waste_request.items.all()
            if item.weight_kg > 0
        ]
    return append_record(
        waste_request.collector, waste_request.resident, valued,
        collected_at=waste_request.completed_at, notes=notes, source_request=waste_request,
    )
