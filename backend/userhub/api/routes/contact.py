"""Contact Routes — public form submission plus admin listing/status/delete.

Invariants:
    - POST /api/contact is the only unauthenticated write path
    - Every other contact route resolves an identity and passes the rate limiter, so
      strict mode rejects anonymous callers (401); development still admits guests
    - Validation messages come from ContactStore unchanged

Design Decisions:
    - /stats declared before /{contact_id}
    - Admin routes require an identity, not a role: no admin keys are provisioned
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from userhub.api.auth import enforce_rate_limit
from userhub.api.dependencies import get_contact_store
from userhub.infrastructure.contact_store import ContactStore
from userhub.schemas.contact import ContactStatusUpdate, ContactSubmit

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/contact", tags=["contact"])

_ADMIN = [Depends(enforce_rate_limit)]


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_contact(
    body: ContactSubmit, store: ContactStore = Depends(get_contact_store),
):
    """Submit the public contact form."""
    contact = store.submit(body.model_dump())
    return {
        "success": True,
        "message": "Thank you for contacting us! We will get back to you soon.",
        "data": {
            "id": contact.id,
            "submittedAt": contact.submitted_at.isoformat(),
        },
    }


@router.get("", dependencies=_ADMIN)
async def list_contacts(
    status_filter: str | None = Query(None, alias="status"),
    store: ContactStore = Depends(get_contact_store),
):
    contacts = store.list(status_filter)
    return {
        "success": True,
        "count": len(contacts),
        "data": [c.to_dict() for c in contacts],
    }


@router.get("/stats", dependencies=_ADMIN)
async def contact_stats(store: ContactStore = Depends(get_contact_store)):
    return {"success": True, "data": store.stats()}


@router.get("/{contact_id}", dependencies=_ADMIN)
async def get_contact(
    contact_id: str, store: ContactStore = Depends(get_contact_store),
):
    return {"success": True, "data": store.get_by_id(contact_id).to_dict()}


@router.patch("/{contact_id}/status", dependencies=_ADMIN)
async def update_contact_status(
    contact_id: str,
    body: ContactStatusUpdate,
    store: ContactStore = Depends(get_contact_store),
):
    contact = store.update_status(contact_id, body.status)
    logger.info(f"Contact {contact.id} moved to {contact.status.value}")
    return {
        "success": True,
        "message": "Contact status updated successfully",
        "data": contact.to_dict(),
    }


@router.delete("/{contact_id}", dependencies=_ADMIN)
async def delete_contact(
    contact_id: str, store: ContactStore = Depends(get_contact_store),
):
    store.delete(contact_id)
    return {"success": True, "message": "Contact deleted successfully"}
