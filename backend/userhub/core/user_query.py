"""User Query — pure sorting, pagination and search over user lists.

Invariants:
    - sort_users is stable: ties keep their input order in both directions
    - Strings compare case-folded, numbers numerically, datetimes chronologically
    - paginate: start = (page-1)*limit, end = start+limit; hasNext iff end < total
    - search_users de-duplicates by id, preserving name → email → department order

Design Decisions:
    - Pure functions over lists (no IO): routes fetch from the service, then shape here
    - Unknown sort field is rejected by the caller, so every key here is a real attribute
"""

import math
from datetime import datetime
from enum import Enum
from typing import Any, Sequence

from userhub.core.domain_types import SearchField
from userhub.models.user import SORTABLE_FIELDS, User


def _sort_key(value: Any) -> Any:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, datetime):
        return value.timestamp()
    return value


def sort_users(users: Sequence[User], sort_by: str, descending: bool) -> list[User]:
    """Return users sorted by a public field name (e.g. "createdAt", "age")."""
    attr = SORTABLE_FIELDS[sort_by]
    return sorted(
        users, key=lambda u: _sort_key(getattr(u, attr)), reverse=descending,
    )


def paginate(items: Sequence[Any], page: int, limit: int) -> tuple[list[Any], dict]:
    """Slice one page out of items and describe it."""
    total = len(items)
    start = (page - 1) * limit
    end = start + limit
    return list(items[start:end]), {
        "current": page,
        "total": total,
        "pages": math.ceil(total / limit),
        "hasNext": end < total,
        "hasPrev": start > 0,
    }


def _matches(user: User, field: SearchField, needle: str) -> bool:
    return needle in getattr(user, field.value).lower()


def search_users(users: Sequence[User], query: str, field: SearchField) -> list[User]:
    """Case-insensitive substring search on one field, or the union of all three."""
    needle = query.lower()
    if field == SearchField.ALL:
        fields = [SearchField.NAME, SearchField.EMAIL, SearchField.DEPARTMENT]
    else:
        fields = [field]

    results: list[User] = []
    seen: set[int] = set()
    for f in fields:
        for user in users:
            if user.id not in seen and _matches(user, f, needle):
                results.append(user)
                seen.add(user.id)
    return results
