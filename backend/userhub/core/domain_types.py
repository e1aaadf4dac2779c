"""Domain Types — enums and identity types shared across the codebase.

Invariants:
    - All valid states encoded as Enums — no raw string matching
    - Identity is immutable once resolved for a request

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from dataclasses import dataclass
from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class UserStatus(str, Enum):
    """User account states."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class ContactStatus(str, Enum):
    """Contact submission states — transitions are free-form."""
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Role(str, Enum):
    """Caller roles. SYSTEM bypasses rate limiting."""
    GUEST = "guest"
    USER = "user"
    TESTER = "tester"
    SYSTEM = "system"


class SearchField(str, Enum):
    """Fields the user search endpoint can match against."""
    ALL = "all"
    NAME = "name"
    EMAIL = "email"
    DEPARTMENT = "department"


@dataclass(frozen=True)
class Identity:
    """Caller context resolved from an API key, or the guest identity."""
    id: int
    name: str
    role: Role
    authenticated: bool = True

    @property
    def is_system(self) -> bool:
        return self.role == Role.SYSTEM

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "authenticated": self.authenticated,
        }


GUEST_IDENTITY = Identity(id=0, name="Guest User", role=Role.GUEST, authenticated=False)
