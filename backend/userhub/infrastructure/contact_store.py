"""Contact Store — in-memory storage and validation for contact-form submissions.

Invariants:
    - submit() requires name, email and message; subject defaults to "General Inquiry"
    - All string fields are stripped; email is lowercased
    - update_status() accepts only ContactStatus values and never mutates on rejection
    - ids come from a per-instance counter starting at 1

Design Decisions:
    - Validation lives here, not in the route: the store is the only write path for contacts
    - Synchronous methods guarded by a threading.Lock (no simulated latency, as before)
"""

import logging
import threading
from datetime import datetime, timezone

from userhub.core.domain_types import ContactStatus
from userhub.core.errors import ResourceNotFoundError, ValidationError
from userhub.core.validation import is_blank, is_valid_email, missing_fields
from userhub.infrastructure.user_store import parse_id
from userhub.models.contact import DEFAULT_SUBJECT, Contact

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "email", "message")
VALID_STATUSES = [s.value for s in ContactStatus]


class ContactStore:
    """In-memory contact submissions."""

    def __init__(self) -> None:
        self._contacts: list[Contact] = []
        self._next_id = 1
        self._lock = threading.Lock()

    def submit(self, data: dict) -> Contact:
        """Validate and store a submission."""
        missing = missing_fields(data, REQUIRED_FIELDS)
        if missing:
            raise ValidationError(
                "Name, email, and message are required fields",
                field=missing[0],
            )
        email = str(data["email"]).strip()
        if not is_valid_email(email):
            raise ValidationError("Invalid email format", field="email")

        subject = data.get("subject")
        with self._lock:
            contact = Contact(
                id=self._next_id,
                name=str(data["name"]).strip(),
                email=email.lower(),
                subject=DEFAULT_SUBJECT if is_blank(subject) else str(subject).strip(),
                message=str(data["message"]).strip(),
            )
            self._next_id += 1
            self._contacts.append(contact)
        logger.info(f"Contact {contact.id} submitted")
        return contact

    def list(self, status: str | None = None) -> list[Contact]:
        if status:
            return [c for c in self._contacts if c.status.value == status]
        return list(self._contacts)

    def get_by_id(self, contact_id: object) -> Contact:
        target = parse_id(contact_id)
        for contact in self._contacts:
            if contact.id == target:
                return contact
        raise ResourceNotFoundError("Contact", contact_id)

    def update_status(self, contact_id: object, status: object) -> Contact:
        if status not in VALID_STATUSES:
            raise ValidationError(
                f"Status must be one of: {', '.join(VALID_STATUSES)}",
                field="status",
            )
        with self._lock:
            contact = self.get_by_id(contact_id)
            contact.status = ContactStatus(status)
            contact.updated_at = datetime.now(timezone.utc)
        return contact

    def delete(self, contact_id: object) -> Contact:
        with self._lock:
            contact = self.get_by_id(contact_id)
            self._contacts.remove(contact)
        return contact

    def stats(self) -> dict:
        def count(status: ContactStatus) -> int:
            return sum(1 for c in self._contacts if c.status == status)

        return {
            "total": len(self._contacts),
            "pending": count(ContactStatus.PENDING),
            "inProgress": count(ContactStatus.IN_PROGRESS),
            "resolved": count(ContactStatus.RESOLVED),
            "closed": count(ContactStatus.CLOSED),
        }
