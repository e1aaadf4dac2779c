"""Contact Schemas — request bodies for the contact endpoints.

Invariants:
    - Fields optional at the schema level; ContactStore.submit owns required-field
      and email checks so its messages reach the client unchanged
"""

from pydantic import BaseModel


class ContactSubmit(BaseModel):
    """Contact form submission."""
    name: str | None = None
    email: str | None = None
    subject: str | None = None
    message: str | None = None


class ContactStatusUpdate(BaseModel):
    """Admin status change."""
    status: str | None = None
