"""User Service — uniqueness, not-found translation and store error wrapping."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from userhub.core.errors import (
    DatabaseError, DuplicateEmailError, ResourceNotFoundError,
)
from userhub.infrastructure.user_store import UserStore, sample_users
from userhub.services.user_service import UserService


@pytest.fixture
def service():
    return UserService(UserStore(sample_users(), latency_min_ms=0, latency_max_ms=0))


def _data(email="new@example.com"):
    return {
        "name": "New", "email": email, "age": 40,
        "department": "Ops", "status": "active",
    }


async def test_create_rejects_duplicate_email_case_insensitively(service):
    with pytest.raises(DuplicateEmailError) as exc:
        await service.create(_data("JOHN.DOE@EXAMPLE.COM"))
    assert exc.value.http_status == 400
    assert "already exists" in exc.value.message


async def test_concurrent_creates_with_same_email_admit_one(service):
    results = await asyncio.gather(
        service.create(_data("race@example.com")),
        service.create(_data("RACE@example.com")),
        return_exceptions=True,
    )
    assert sum(isinstance(r, DuplicateEmailError) for r in results) == 1


async def test_update_does_not_enforce_email_uniqueness(service):
    updated = await service.update(2, {"email": "john.doe@example.com"})
    assert updated.email == "john.doe@example.com"


async def test_find_by_id_missing_raises_not_found(service):
    with pytest.raises(ResourceNotFoundError) as exc:
        await service.find_by_id(999)
    assert exc.value.http_status == 404


async def test_update_and_delete_missing_raise_not_found(service):
    with pytest.raises(ResourceNotFoundError):
        await service.update(999, {"name": "x"})
    with pytest.raises(ResourceNotFoundError):
        await service.delete(999)


async def test_delete_twice_second_is_not_found(service):
    await service.delete(1)
    with pytest.raises(ResourceNotFoundError):
        await service.delete(1)
    with pytest.raises(ResourceNotFoundError):
        await service.find_by_id(1)


async def test_store_failure_is_wrapped_as_database_error(service):
    service.store.find_users = AsyncMock(side_effect=RuntimeError("disk gone"))
    with pytest.raises(DatabaseError) as exc:
        await service.find_all()
    assert exc.value.message == "Database error: disk gone"
    assert exc.value.operation == "find"


async def test_invalid_status_in_patch_is_a_database_error(service):
    with pytest.raises(DatabaseError):
        await service.update(1, {"status": "archived"})


async def test_filtered_helpers(service):
    assert [u.id for u in await service.find_active()] == [1, 2, 4, 5]
    assert [u.id for u in await service.find_inactive()] == [3]
    assert [u.id for u in await service.find_by_department("eng")] == [1, 4]


async def test_find_by_email(service):
    assert (await service.find_by_email("Jane.Smith@Example.com")).id == 2
    assert await service.find_by_email("ghost@example.com") is None


async def test_find_by_date_range_is_inclusive(service):
    start = datetime(2023, 2, 20, 14, 30, tzinfo=timezone.utc)
    end = datetime(2023, 4, 5, 16, 45, tzinfo=timezone.utc)
    assert [u.id for u in await service.find_by_date_range(start, end)] == [2, 3, 4]


async def test_find_by_date_range_empty_window(service):
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    end = datetime(2024, 12, 31, tzinfo=timezone.utc)
    assert await service.find_by_date_range(start, end) == []


async def test_count_by_status(service):
    assert await service.count_by_status() == {"active": 4, "inactive": 1, "total": 5}
