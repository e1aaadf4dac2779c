"""User Schemas — request bodies for the user endpoints.

Invariants:
    - Every field is optional at the schema level: presence rules are enforced by the
      route so missing fields produce "Missing required fields", not a generic 400
    - Unknown fields (including id / createdAt) are ignored, never stored
    - String fields are stripped

Design Decisions:
    - Literal for status: Pydantic rejects anything but active/inactive natively
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator


class _UserFields(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    email: str | None = None
    age: int | None = None
    department: str | None = None
    status: Literal["active", "inactive"] | None = None

    @field_validator("name", "email", "department")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return v.strip() if isinstance(v, str) else v


class UserCreate(_UserFields):
    """User creation — required: name, email, age, department."""


class UserUpdate(_UserFields):
    """Partial user update — only the provided fields change."""
