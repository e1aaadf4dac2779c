"""User Store — in-memory, list-backed user storage with simulated IO latency.

Invariants:
    - Every public coroutine awaits a uniform random delay in [latency_min_ms, latency_max_ms]
    - ids are assigned from a per-instance counter, never reused
    - update_user never changes id or created_at, whatever the patch contains
    - No uniqueness checks here: UserService owns them
    - Mutations are serialized by an asyncio.Lock

Design Decisions:
    - Explicitly constructed instance, injected via app.state (no module-level singleton)
    - Latency of 0/0 skips the sleep entirely (tests)
"""

import asyncio
import logging
import random
from datetime import datetime, timezone

from userhub.core.domain_types import UserStatus
from userhub.core.user_stats import compute_user_stats
from userhub.models.user import MUTABLE_FIELDS, User

logger = logging.getLogger(__name__)

SUPPORTED_OPERATIONS = [
    "find_users", "find_user_by_id", "create_user",
    "update_user", "delete_user", "get_user_stats",
]


def _utc(*args: int) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def sample_users() -> list[User]:
    """The five demo accounts loaded on startup."""
    return [
        User(1, "John Doe", "john.doe@example.com", 28, "Engineering",
             UserStatus.ACTIVE, _utc(2023, 1, 15, 10, 0)),
        User(2, "Jane Smith", "jane.smith@example.com", 32, "Marketing",
             UserStatus.ACTIVE, _utc(2023, 2, 20, 14, 30)),
        User(3, "Mike Johnson", "mike.johnson@example.com", 25, "Sales",
             UserStatus.INACTIVE, _utc(2023, 3, 10, 9, 15)),
        User(4, "Sarah Wilson", "sarah.wilson@example.com", 29, "Engineering",
             UserStatus.ACTIVE, _utc(2023, 4, 5, 16, 45)),
        User(5, "David Brown", "david.brown@example.com", 35, "HR",
             UserStatus.ACTIVE, _utc(2023, 5, 12, 11, 20)),
    ]


def parse_id(raw: object) -> int | None:
    """Coerce a path/body id to int. Non-numeric ids never match anything."""
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


class UserStore:
    """Async in-memory user storage."""

    def __init__(
        self,
        users: list[User] | None = None,
        latency_min_ms: int = 50,
        latency_max_ms: int = 150,
    ):
        self._users: list[User] = list(users or [])
        self._next_id = max((u.id for u in self._users), default=0) + 1
        self.latency_min_ms = latency_min_ms
        self.latency_max_ms = max(latency_min_ms, latency_max_ms)
        self._lock = asyncio.Lock()

    async def _simulate_delay(self) -> None:
        if self.latency_max_ms <= 0:
            return
        delay_ms = random.uniform(self.latency_min_ms, self.latency_max_ms)
        await asyncio.sleep(delay_ms / 1000)

    def _index_of(self, user_id: object) -> int | None:
        target = parse_id(user_id)
        if target is None:
            return None
        for index, user in enumerate(self._users):
            if user.id == target:
                return index
        return None

    async def find_users(
        self,
        department: str | None = None,
        status: str | None = None,
        email: str | None = None,
    ) -> list[User]:
        """Filter users; department/email are case-insensitive substrings, status exact."""
        await self._simulate_delay()
        users = list(self._users)
        if department:
            needle = department.lower()
            users = [u for u in users if needle in u.department.lower()]
        if status:
            users = [u for u in users if u.status.value == status]
        if email:
            needle = email.lower()
            users = [u for u in users if needle in u.email.lower()]
        return users

    async def find_user_by_id(self, user_id: object) -> User | None:
        await self._simulate_delay()
        index = self._index_of(user_id)
        return None if index is None else self._users[index]

    async def create_user(self, data: dict) -> User:
        """Append a new user with the next id and a fresh created_at."""
        await self._simulate_delay()
        async with self._lock:
            user = User(
                id=self._next_id,
                name=data["name"],
                email=data["email"],
                age=int(data["age"]),
                department=data["department"],
                status=UserStatus(data.get("status") or UserStatus.ACTIVE),
                created_at=datetime.now(timezone.utc),
            )
            self._next_id += 1
            self._users.append(user)
        logger.debug(f"User {user.id} created")
        return user

    async def update_user(self, user_id: object, patch: dict) -> User | None:
        """Merge known fields from patch onto the user; id/created_at stay put."""
        await self._simulate_delay()
        async with self._lock:
            index = self._index_of(user_id)
            if index is None:
                return None
            user = self._users[index]
            for name in MUTABLE_FIELDS:
                if name not in patch or patch[name] is None:
                    continue
                value = patch[name]
                if name == "status":
                    value = UserStatus(value)
                elif name == "age":
                    value = int(value)
                setattr(user, name, value)
            return user

    async def delete_user(self, user_id: object) -> User | None:
        await self._simulate_delay()
        async with self._lock:
            index = self._index_of(user_id)
            if index is None:
                return None
            return self._users.pop(index)

    async def get_user_stats(self) -> dict:
        await self._simulate_delay()
        return compute_user_stats(self._users, datetime.now(timezone.utc))

    def reset(self) -> None:
        """Restore the two-user fixture used by integration suites."""
        self._users = sample_users()[:2]
        self._next_id = 3

    def info(self) -> dict:
        return {
            "type": "memory",
            "totalUsers": len(self._users),
            "nextId": self._next_id,
            "supportedOperations": list(SUPPORTED_OPERATIONS),
        }
