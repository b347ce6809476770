"""
Shared fixtures: one user per role and an authenticated API client factory.
"""
import pytest
from rest_framework.test import APIClient

from accounts.models import User


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(role=User.RESIDENT, **extra):
        counter["n"] += 1
        extra.setdefault("first_name", role.title())
        extra.setdefault("last_name", str(counter["n"]))
        return User.objects.create_user(
            phone_number=f"07710000{counter['n']:02d}",
            password="secret-pass-123",
            role=role,
            **extra,
        )

    return _make


@pytest.fixture
def resident(make_user):
    return make_user(User.RESIDENT)


@pytest.fixture
def other_resident(make_user):
    return make_user(User.RESIDENT)


@pytest.fixture
def collector(make_user):
    return make_user(User.COLLECTOR)


@pytest.fixture
def other_collector(make_user):
    return make_user(User.COLLECTOR)


@pytest.fixture
def admin_user(make_user):
    return make_user(User.ADMIN)


@pytest.fixture
def billing_rates(settings):
    """Rates used by the billing examples: food=50, cardboard=100."""
    settings.WASTE_RATES = {"food": "50.00", "cardboard": "100.00", "plastic": "60.00"}
    return settings.WASTE_RATES


@pytest.fixture
def api_client():
    def _client(user=None):
        client = APIClient()
        if user is not None:
            client.force_authenticate(user=user)
        return client

    return _client
