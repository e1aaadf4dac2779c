"""Tests for compute_user_stats — pure stats from user records, no IO."""

from datetime import datetime, timedelta, timezone

from userhub.core.domain_types import UserStatus
from userhub.core.user_stats import compute_user_stats
from userhub.models.user import User

NOW = datetime(2024, 6, 30, 12, 0, tzinfo=timezone.utc)


def _user(uid, age, dept, status=UserStatus.ACTIVE, created=None):
    return User(
        uid, f"U{uid}", f"u{uid}@x.io", age, dept, status,
        created or NOW - timedelta(days=100),
    )


def test_empty_list_returns_zero_stats():
    stats = compute_user_stats([], NOW)
    assert stats["total"] == 0
    assert stats["active"] == 0
    assert stats["inactive"] == 0
    assert stats["recent"] == 0
    assert stats["departments"] == {}
    assert stats["age"] == {"average": None, "min": None, "max": None}


def test_counts_active_and_inactive():
    users = [
        _user(1, 30, "Eng"),
        _user(2, 40, "Eng", UserStatus.INACTIVE),
        _user(3, 50, "HR"),
    ]
    stats = compute_user_stats(users, NOW)
    assert stats["total"] == 3
    assert stats["active"] == 2
    assert stats["inactive"] == 1


def test_department_counts_preserve_first_seen_order():
    users = [_user(1, 30, "Sales"), _user(2, 30, "Eng"), _user(3, 30, "Sales")]
    stats = compute_user_stats(users, NOW)
    assert list(stats["departments"].items()) == [("Sales", 2), ("Eng", 1)]


def test_age_average_rounds_half_up():
    users = [_user(1, 28, "Eng"), _user(2, 29, "Eng")]
    stats = compute_user_stats(users, NOW)
    assert stats["age"] == {"average": 29, "min": 28, "max": 29}


def test_recent_counts_trailing_thirty_days_only():
    users = [
        _user(1, 30, "Eng", created=NOW - timedelta(days=1)),
        _user(2, 30, "Eng", created=NOW - timedelta(days=29, hours=23)),
        _user(3, 30, "Eng", created=NOW - timedelta(days=30)),
        _user(4, 30, "Eng", created=NOW - timedelta(days=45)),
    ]
    stats = compute_user_stats(users, NOW)
    assert stats["recent"] == 2


def test_generated_at_is_the_given_clock():
    stats = compute_user_stats([], NOW)
    assert stats["generatedAt"] == NOW.isoformat()
