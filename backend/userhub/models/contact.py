"""Contact Record — a contact-form submission.

Invariants:
    - subject defaults to "General Inquiry"
    - email stored stripped and lowercased
    - updated_at is None until the first status change
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from userhub.core.domain_types import ContactStatus

DEFAULT_SUBJECT = "General Inquiry"


@dataclass
class Contact:
    """A contact-form submission."""
    id: int
    name: str
    email: str
    message: str
    subject: str = DEFAULT_SUBJECT
    status: ContactStatus = ContactStatus.PENDING
    submitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "submittedAt": self.submitted_at.isoformat(),
            "status": self.status.value,
        }
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at.isoformat()
        return data
