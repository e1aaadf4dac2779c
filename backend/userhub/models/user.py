"""User Record — the in-memory representation of a user account.

Invariants:
    - id and created_at are assigned by UserStore and never change afterwards
    - email uniqueness is checked by UserService at create time only
    - to_dict() emits camelCase keys with ISO-8601 timestamps (public JSON shape)

Design Decisions:
    - Mutable dataclass: UserStore replaces fields in place under its lock
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from userhub.core.domain_types import UserStatus

# Fields a patch may overwrite. id / created_at are deliberately absent.
MUTABLE_FIELDS = ("name", "email", "age", "department", "status")

# Public (camelCase) name -> attribute name, used for sorting by query param.
SORTABLE_FIELDS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "age": "age",
    "department": "department",
    "status": "status",
    "createdAt": "created_at",
}


@dataclass
class User:
    """A user account."""
    id: int
    name: str
    email: str
    age: int
    department: str
    status: UserStatus = UserStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "age": self.age,
            "department": self.department,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }
