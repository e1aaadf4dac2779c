"""User Stats — pure computation of aggregate statistics over user records.

Invariants:
    - All inputs come from the given list and clock value (no IO, no store access)
    - "recent" counts users created strictly after now - 30 days
    - Age average rounds half up to an int; age block is all None for an empty list
    - departments preserves first-seen order

Design Decisions:
    - Pure function, not a method on UserStore (ADR: store is storage, stats are presentation)
    - now passed in explicitly so tests pin the trailing window
"""

import math
from datetime import datetime, timedelta
from typing import Sequence

from userhub.core.domain_types import UserStatus
from userhub.models.user import User

RECENT_WINDOW = timedelta(days=30)


def compute_user_stats(users: Sequence[User], now: datetime) -> dict:
    """Compute summary statistics from user records. Pure, no IO."""
    cutoff = now - RECENT_WINDOW
    departments: dict[str, int] = {}
    for user in users:
        departments[user.department] = departments.get(user.department, 0) + 1

    ages = [u.age for u in users]
    if ages:
        age = {
            "average": math.floor(sum(ages) / len(ages) + 0.5),
            "min": min(ages),
            "max": max(ages),
        }
    else:
        age = {"average": None, "min": None, "max": None}

    return {
        "total": len(users),
        "active": sum(1 for u in users if u.status == UserStatus.ACTIVE),
        "inactive": sum(1 for u in users if u.status == UserStatus.INACTIVE),
        "recent": sum(1 for u in users if u.created_at > cutoff),
        "departments": departments,
        "age": age,
        "generatedAt": now.isoformat(),
    }
