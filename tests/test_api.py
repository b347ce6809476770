"""
End-to-end tests through the REST endpoints.
"""
from datetime import timedelta

import pytest
from django.utils import timezone

from waste_requests.models import WasteRequest

pytestmark = pytest.mark.django_db

REQUESTS = "/api/waste-requests/"
RECORDS = "/api/collection-records/"
INVOICES = "/api/invoices/"


@pytest.fixture
def created(api_client, resident, billing_rates):
    response = api_client(resident).post(REQUESTS, {
        "items": [
            {"category": "food", "weight_kg": "3"},
            {"category": "cardboard", "weight_kg": "1.5"},
        ]
    }, format="json")
    assert response.status_code == 201, response.data
    return response.data


def test_create_request(created, resident):
    assert created["request_status"] == "pending"
    assert created["payment_status"] == "pending"
    assert created["resident"] == resident.pk
    assert created["collector"] is None
    assert created["total_price"] == "300.00"
    assert [item["line_total"] for item in created["items"]] == ["150.00", "150.00"]


def test_create_request_requires_resident(api_client, collector):
    response = api_client(collector).post(
        REQUESTS, {"items": [{"category": "food", "weight_kg": "1"}]}, format="json",
    )
    assert response.status_code == 403


def test_unauthenticated_is_rejected(api_client):
    assert api_client().get(REQUESTS).status_code == 401


def test_validation_errors_carry_their_kind(api_client, resident, billing_rates):
    client = api_client(resident)

    response = client.post(REQUESTS, {"items": [{"category": "glitter", "weight_kg": "1"}]}, format="json")
    assert response.status_code == 400
    assert response.data["error"] == "unknown_category"

    response = client.post(REQUESTS, {"items": [{"category": "food", "weight_kg": "0"}]}, format="json")
    assert response.status_code == 400
    assert response.data["error"] == "invalid_weight"
    assert response.data["detail"]

    response = client.post(REQUESTS, {"items": [{"category": "food", "weight_kg": "-1"}]}, format="json")
    assert response.data["error"] == "invalid_weight"


def test_complete_pending_returns_conflict(api_client, created, collector):
    response = api_client(collector).post(f"{REQUESTS}{created['request_id']}/complete/", {}, format="json")
    assert response.status_code == 409
    assert response.data["error"] == "invalid_transition"
    assert "pending" in response.data["detail"]


def test_full_lifecycle(api_client, created, admin_user, collector, resident):
    pk = created["request_id"]
    admin = api_client(admin_user)

    response = admin.post(f"{REQUESTS}{pk}/assign/", {"collector": collector.pk}, format="json")
    assert response.status_code == 200
    assert response.data["request_status"] == "assigned"
    assert response.data["collector"] == collector.pk

    response = admin.post(f"{REQUESTS}{pk}/assign/", {"collector": collector.pk}, format="json")
    assert response.status_code == 409

    response = api_client(collector).get(REQUESTS)
    assert [r["request_id"] for r in response.data] == [pk]

    response = api_client(collector).post(f"{REQUESTS}{pk}/complete/", {
        "items": [{"category": "food", "weight_kg": "4"}],
        "notes": "Bins were full",
    }, format="json")
    assert response.status_code == 200
    assert response.data["request_status"] == "completed"

    response = api_client(resident).get(RECORDS)
    assert response.status_code == 200
    assert len(response.data) == 1
    assert response.data[0]["request_id"] == pk
    assert response.data[0]["total_price"] == "200.00"

    response = api_client(resident).delete(f"{REQUESTS}{pk}/")
    assert response.status_code == 204
    assert not WasteRequest.objects.filter(pk=pk).exists()


def test_delete_pending_is_rejected(api_client, created, resident):
    response = api_client(resident).delete(f"{REQUESTS}{created['request_id']}/")
    assert response.status_code == 409
    assert response.data["error"] == "invalid_transition"


def test_assign_unknown_collector(api_client, created, admin_user):
    response = api_client(admin_user).post(
        f"{REQUESTS}{created['request_id']}/assign/", {"collector": 5555}, format="json",
    )
    assert response.status_code == 404
    assert response.data["error"] == "not_found"


def test_cancel_and_pay(api_client, created, admin_user, resident):
    pk = created["request_id"]
    response = api_client(resident).post(f"{REQUESTS}{pk}/cancel/", {"cancellation_reason": "Away"}, format="json")
    assert response.status_code == 200
    assert response.data["request_status"] == "cancelled"
    assert response.data["cancellation_reason"] == "Away"

    response = api_client(admin_user).post(f"{REQUESTS}{pk}/confirm_payment/")
    assert response.status_code == 409


def test_residents_only_see_their_requests(api_client, created, other_resident):
    response = api_client(other_resident).get(REQUESTS)
    assert response.status_code == 200
    assert response.data == []
    response = api_client(other_resident).get(f"{REQUESTS}{created['request_id']}/")
    assert response.status_code == 404


def test_status_filter_and_summary(api_client, created, resident, admin_user):
    client = api_client(resident)
    client.post(f"{REQUESTS}{created['request_id']}/cancel/", {}, format="json")
    client.post(REQUESTS, {"items": [{"category": "food", "weight_kg": "1"}]}, format="json")

    response = client.get(REQUESTS, {"status": "cancelled"})
    assert [r["request_id"] for r in response.data] == [created["request_id"]]

    response = api_client(admin_user).get(f"{REQUESTS}summary/")
    assert response.status_code == 200
    assert response.data["pending"] == 1
    assert response.data["cancelled"] == 1
    assert response.data["total"] == 2


def test_record_collection_endpoint(api_client, collector, resident, billing_rates):
    response = api_client(collector).post(RECORDS, {
        "resident": resident.pk,
        "items": [{"category": "food", "weight_kg": "10"}, {"category": "cardboard", "weight_kg": "2"}],
    }, format="json")
    assert response.status_code == 201, response.data
    assert response.data["total_price"] == "700.00"
    assert response.data["total_weight_kg"] == "12.000"

    response = api_client(resident).post(RECORDS, {
        "resident": resident.pk, "items": [{"category": "food", "weight_kg": "1"}],
    }, format="json")
    assert response.status_code == 403

    response = api_client(collector).get(f"{RECORDS}category_summary/")
    assert [row["category"] for row in response.data] == ["food", "cardboard"]
    assert response.data[0]["amount"] == "500.00"


def test_generate_invoice_endpoint(api_client, collector, resident, admin_user, billing_rates):
    client = api_client(collector)
    for category, weight in (("food", "10"), ("food", "5"), ("cardboard", "2")):
        client.post(RECORDS, {
            "resident": resident.pk, "items": [{"category": category, "weight_kg": weight}],
        }, format="json")

    now = timezone.now()
    payload = {
        "period_start": (now - timedelta(days=1)).isoformat(),
        "period_end": (now + timedelta(days=1)).isoformat(),
    }
    response = api_client(resident).post(f"{INVOICES}generate/", payload, format="json")
    assert response.status_code == 200, response.data
    assert response.data["total_amount"] == "950.00"
    assert response.data["waste_details"]["food"]["amount"] == "750.00"
    assert response.data["waste_details"]["cardboard"]["amount"] == "200.00"

    response = api_client(admin_user).post(f"{INVOICES}generate/", payload, format="json")
    assert response.status_code == 400

    response = api_client(admin_user).post(
        f"{INVOICES}generate/", {**payload, "resident": resident.pk}, format="json",
    )
    assert response.status_code == 200
    assert api_client(admin_user).get(INVOICES).data[0]["invoice_id"] == response.data["invoice_id"]

    bad = {"period_start": payload["period_end"], "period_end": payload["period_start"]}
    response = api_client(resident).post(f"{INVOICES}generate/", bad, format="json")
    assert response.status_code == 400
    assert response.data["error"] == "invalid_period"


def test_rate_table_endpoint(api_client, resident, billing_rates):
    response = api_client(resident).get("/api/rates/")
    assert response.status_code == 200
    assert response.data[0] == {"category": "food", "label": "Food Waste", "rate_per_kg": "50.00"}
    assert [row["category"] for row in response.data] == ["food", "cardboard", "plastic"]


def test_login_returns_tokens(api_client, resident):
    response = api_client().post("/api/auth/login/", {
        "identifier": resident.phone_number, "password": "secret-pass-123",
    }, format="json")
    assert response.status_code == 200
    assert response.data["user"]["role"] == "resident"
    assert response.data["tokens"]["access"]

    response = api_client().post("/api/auth/login/", {
        "identifier": resident.username, "password": "wrong",
    }, format="json")
    assert response.status_code == 400


def test_refresh_and_logout(api_client, resident):
    tokens = api_client().post("/api/auth/login/", {
        "identifier": resident.username, "password": "secret-pass-123",
    }, format="json").data["tokens"]

    response = api_client().post("/api/auth/token/refresh/", {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 200
    assert response.data["access"]

    response = api_client(resident).post("/api/auth/logout/", {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 205

    response = api_client().post("/api/auth/token/refresh/", {"refresh": tokens["refresh"]}, format="json")
    assert response.status_code == 400


def test_oversized_weights_are_rejected(api_client, resident, collector, billing_rates):
    response = api_client(resident).post(
        REQUESTS, {"items": [{"category": "food", "weight_kg": "100000000"}]}, format="json",
    )
    assert response.status_code == 400
    assert response.data["error"] == "invalid_weight"
    assert not WasteRequest.objects.exists()

    response = api_client(collector).post(RECORDS, {
        "resident": resident.pk, "items": [{"category": "food", "weight_kg": "10000000"}],
    }, format="json")
    assert response.status_code == 400
    assert response.data["error"] == "invalid_weight"


def test_detail_reports_terminal_state(api_client, created, resident):
    pk = created["request_id"]
    assert created["is_terminal"] is False
    response = api_client(resident).post(f"{REQUESTS}{pk}/cancel/", {}, format="json")
    assert response.data["is_terminal"] is True
