"""
Tests for user accounts and generated usernames.
"""
import pytest

from accounts.models import User

pytestmark = pytest.mark.django_db


def test_usernames_are_numbered_per_role(make_user):
    assert make_user(User.RESIDENT).username == "RES001"
    assert make_user(User.RESIDENT).username == "RES002"
    assert make_user(User.COLLECTOR).username == "COL001"
    assert make_user(User.ADMIN).username == "ADM001"


def test_numbering_continues_past_three_digits(make_user):
    make_user(User.RESIDENT, username="RES999")
    assert make_user(User.RESIDENT).username == "RES1000"
    assert make_user(User.RESIDENT).username == "RES1001"
    assert make_user(User.RESIDENT).username == "RES1002"


def test_custom_usernames_do_not_break_numbering(make_user):
    make_user(User.RESIDENT, username="RESIDENT-DESK")
    make_user(User.RESIDENT, username="RES042")
    assert make_user(User.RESIDENT).username == "RES043"
