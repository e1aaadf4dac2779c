"""User Service — validation and uniqueness wrapper over UserStore.

Invariants:
    - create() rejects an email already present (case-insensitive) among all users
    - find_by_id/update/delete raise ResourceNotFoundError instead of returning None
    - Unexpected store exceptions surface as DatabaseError ("Database error: <msg>")
    - Domain errors (AppError) pass through unwrapped
    - The duplicate check and the insert run under one lock (no check-then-act race)

Design Decisions:
    - Single translation layer between store and routes (ADR: routes only see AppError)
    - Email uniqueness enforced at create time only, as the store allows any update
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from userhub.core.domain_types import UserStatus
from userhub.core.errors import (
    AppError, DatabaseError, DuplicateEmailError, ResourceNotFoundError,
)
from userhub.infrastructure.user_store import UserStore
from userhub.models.user import User

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _store_call(operation: str) -> AsyncIterator[None]:
    """Map non-domain exceptions raised inside the block to DatabaseError."""
    try:
        yield
    except AppError:
        raise
    except Exception as e:
        logger.error(f"Store {operation} failed: {e}", exc_info=True)
        raise DatabaseError(str(e), operation) from e


class UserService:
    """User operations with the business rules the store doesn't know about."""

    def __init__(self, store: UserStore):
        self.store = store
        self._create_lock = asyncio.Lock()

    async def find_all(self, filters: dict | None = None) -> list[User]:
        filters = filters or {}
        async with _store_call("find"):
            return await self.store.find_users(
                department=filters.get("department"),
                status=filters.get("status"),
                email=filters.get("email"),
            )

    async def find_by_id(self, user_id: object) -> User:
        async with _store_call("find"):
            user = await self.store.find_user_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def find_by_email(self, email: str) -> User | None:
        async with _store_call("find"):
            users = await self.store.find_users()
        target = email.lower()
        return next((u for u in users if u.email.lower() == target), None)

    async def create(self, data: dict) -> User:
        async with self._create_lock:
            if await self.find_by_email(data["email"]) is not None:
                raise DuplicateEmailError(data["email"])
            async with _store_call("create"):
                user = await self.store.create_user(data)
        logger.info(f"User {user.id} created")
        return user

    async def update(self, user_id: object, patch: dict) -> User:
        async with _store_call("update"):
            user = await self.store.update_user(user_id, patch)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        return user

    async def delete(self, user_id: object) -> User:
        async with _store_call("delete"):
            user = await self.store.delete_user(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id)
        logger.info(f"User {user.id} deleted")
        return user

    async def get_stats(self) -> dict:
        async with _store_call("stats"):
            return await self.store.get_user_stats()

    async def find_by_department(self, department: str) -> list[User]:
        return await self.find_all({"department": department})

    async def find_active(self) -> list[User]:
        return await self.find_all({"status": UserStatus.ACTIVE.value})

    async def find_inactive(self) -> list[User]:
        return await self.find_all({"status": UserStatus.INACTIVE.value})

    async def find_by_date_range(self, start: datetime, end: datetime) -> list[User]:
        """Users whose created_at falls within [start, end], both ends inclusive."""
        users = await self.find_all()
        return [u for u in users if start <= u.created_at <= end]

    async def count_by_status(self) -> dict:
        stats = await self.get_stats()
        return {
            "active": stats["active"],
            "inactive": stats["inactive"],
            "total": stats["total"],
        }

    def store_info(self) -> dict:
        return self.store.info()
