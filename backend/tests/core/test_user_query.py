"""User Query — sorting, pagination and search over plain user lists.

Tests:
    - Sorting is stable and type-aware (strings case-folded, numbers, datetimes)
    - Pagination counts, hasNext/hasPrev boundaries
    - Search de-duplicates by id across fields
"""

from datetime import datetime, timezone

import pytest

from userhub.core.domain_types import SearchField, UserStatus
from userhub.core.user_query import paginate, search_users, sort_users
from userhub.models.user import User


def _user(uid, name, email, age, dept, day):
    return User(
        uid, name, email, age, dept, UserStatus.ACTIVE,
        datetime(2024, 1, day, tzinfo=timezone.utc),
    )


@pytest.fixture
def users():
    return [
        _user(1, "bob", "bob@eng.io", 30, "Engineering", 3),
        _user(2, "Alice", "alice@sales.io", 25, "Sales", 1),
        _user(3, "carol", "carol@eng.io", 30, "engineering", 2),
    ]


def test_sort_by_name_ignores_case(users):
    ordered = sort_users(users, "name", descending=False)
    assert [u.name for u in ordered] == ["Alice", "bob", "carol"]


def test_sort_by_age_is_numeric_and_stable_on_ties(users):
    asc = sort_users(users, "age", descending=False)
    assert [u.id for u in asc] == [2, 1, 3]
    desc = sort_users(users, "age", descending=True)
    assert [u.id for u in desc] == [1, 3, 2]


def test_sort_by_created_at_is_chronological(users):
    ordered = sort_users(users, "createdAt", descending=True)
    assert [u.id for u in ordered] == [1, 3, 2]


def test_sort_does_not_mutate_input(users):
    sort_users(users, "name", descending=True)
    assert [u.id for u in users] == [1, 2, 3]


def test_paginate_first_page():
    items, meta = paginate(list(range(25)), page=1, limit=10)
    assert items == list(range(10))
    assert meta == {
        "current": 1, "total": 25, "pages": 3, "hasNext": True, "hasPrev": False,
    }


def test_paginate_last_partial_page():
    items, meta = paginate(list(range(25)), page=3, limit=10)
    assert items == [20, 21, 22, 23, 24]
    assert meta["hasNext"] is False
    assert meta["hasPrev"] is True


def test_paginate_exact_boundary_has_no_next():
    items, meta = paginate(list(range(20)), page=2, limit=10)
    assert len(items) == 10
    assert meta["hasNext"] is False


def test_paginate_past_end_is_empty():
    items, meta = paginate([1, 2, 3], page=5, limit=2)
    assert items == []
    assert meta["pages"] == 2


@pytest.mark.parametrize("page,limit,total", [(1, 1, 3), (2, 2, 3), (3, 1, 3), (1, 5, 0)])
def test_has_next_iff_page_times_limit_below_total(page, limit, total):
    items, meta = paginate(list(range(total)), page=page, limit=limit)
    assert len(items) <= limit
    assert meta["hasNext"] == (page * limit < total)


def test_search_single_field(users):
    results = search_users(users, "ENG", SearchField.DEPARTMENT)
    assert [u.id for u in results] == [1, 3]


def test_search_all_fields_deduplicates_by_id(users):
    # "bob" matches user 1 by name and by email
    results = search_users(users, "bob", SearchField.ALL)
    assert [u.id for u in results] == [1]


def test_search_all_orders_name_matches_first(users):
    # names: bob, carol; alice only via ".io" in her email
    results = search_users(users, "o", SearchField.ALL)
    assert [u.id for u in results] == [1, 3, 2]
