"""Request Dependencies — hand the per-app components to route handlers.

Invariants:
    - Components are created in create_app() and live on app.state
    - Handlers never import store instances directly (tests get isolated apps)
"""

from fastapi import Request

from userhub.infrastructure.contact_store import ContactStore
from userhub.infrastructure.notifier import Notifier
from userhub.services.user_service import UserService


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service


def get_contact_store(request: Request) -> ContactStore:
    return request.app.state.contact_store


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
