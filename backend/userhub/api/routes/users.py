"""User Routes — CRUD, listing, search and stats over the user store.

Invariants:
    - Every route passes authenticate + enforce_rate_limit (router dependency)
    - Board notifications are scheduled only after the action succeeded, as background
      tasks: they never delay or alter the response
    - Listing: filter (service) → stable sort → paginate; filters echoed as "all" when unset
    - Create validates presence, email shape, then age range, in that order

Design Decisions:
    - Fixed-segment paths (/stats/count, /search/all, ...) declared before /{user_id}
    - user_id kept as str: non-numeric ids are a 404, not a validation error
"""

import logging
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from userhub.api.auth import enforce_rate_limit, require_roles
from userhub.api.dependencies import get_notifier, get_user_service
from userhub.core.domain_types import Role, SearchField
from userhub.core.errors import DatabaseError, ValidationError
from userhub.core.user_query import paginate, search_users, sort_users
from userhub.core.validation import is_valid_age, is_valid_email, missing_fields
from userhub.infrastructure.notifier import Notifier, dispatch_notification
from userhub.models.user import SORTABLE_FIELDS
from userhub.schemas.user import UserCreate, UserUpdate
from userhub.services.user_service import UserService

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/users", tags=["users"],
    dependencies=[Depends(enforce_rate_limit)],
)

REQUIRED_USER_FIELDS = ("name", "email", "age", "department")


def _invalid_age() -> ValidationError:
    return ValidationError("Age must be between 18 and 100", title="Invalid age", field="age")


@router.get("")
async def list_users(
    background_tasks: BackgroundTasks,
    department: str | None = None,
    status_filter: str | None = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    """List users with filtering, sorting and pagination."""
    if sort_by not in SORTABLE_FIELDS:
        raise ValidationError(
            f"sortBy must be one of: {', '.join(SORTABLE_FIELDS)}",
            title="Invalid sort field", field="sortBy",
        )
    filters = {}
    if department:
        filters["department"] = department
    if status_filter:
        filters["status"] = status_filter

    users = await service.find_all(filters)
    ordered = sort_users(users, sort_by, descending=sort_order == "desc")
    page_items, pagination = paginate(ordered, page, limit)

    background_tasks.add_task(
        dispatch_notification, notifier,
        "API_ACCESS", f"Users list accessed - Page {page}",
    )
    return {
        "success": True,
        "data": [u.to_dict() for u in page_items],
        "pagination": pagination,
        "total": len(users),
        "filters": {
            "department": department or "all",
            "status": status_filter or "all",
        },
    }


@router.get("/stats/count")
async def get_user_stats(
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    stats = await service.get_stats()
    background_tasks.add_task(
        dispatch_notification, notifier, "STATS_ACCESS", "User statistics accessed",
    )
    return {
        "success": True,
        "data": stats,
        "generatedAt": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/search/all")
async def search(
    background_tasks: BackgroundTasks,
    q: str | None = None,
    field: str = "all",
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    """Case-insensitive substring search over name, email and/or department."""
    if not q:
        raise ValidationError(
            "Please provide a search query (q parameter)",
            title="Search query required", field="q",
        )
    try:
        search_field = SearchField(field)
    except ValueError:
        raise ValidationError(
            f"field must be one of: {', '.join(f.value for f in SearchField)}",
            title="Invalid search field", field="field",
        )

    users = await service.find_all()
    results = search_users(users, q, search_field)

    background_tasks.add_task(
        dispatch_notification, notifier,
        "USER_SEARCH", f"Search performed for: {q} in field: {field}",
    )
    return {
        "success": True,
        "data": [u.to_dict() for u in results],
        "total": len(results),
        "query": q,
        "field": field,
        "searchPerformedAt": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/department/{dept}")
async def list_department_users(
    dept: str,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    users = await service.find_by_department(dept)
    background_tasks.add_task(
        dispatch_notification, notifier,
        "DEPT_ACCESS", f"Department {dept} users accessed",
    )
    return {
        "success": True,
        "data": [u.to_dict() for u in users],
        "department": dept,
        "total": len(users),
    }


@router.get("/status/active")
async def list_active_users(
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    users = await service.find_active()
    background_tasks.add_task(
        dispatch_notification, notifier,
        "ACTIVE_USERS_ACCESS", "Active users list accessed",
    )
    return {
        "success": True,
        "data": [u.to_dict() for u in users],
        "total": len(users),
        "status": "active",
    }


@router.get("/status/inactive")
async def list_inactive_users(
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    users = await service.find_inactive()
    background_tasks.add_task(
        dispatch_notification, notifier,
        "INACTIVE_USERS_ACCESS", "Inactive users list accessed",
    )
    return {
        "success": True,
        "data": [u.to_dict() for u in users],
        "total": len(users),
        "status": "inactive",
    }


@router.get(
    "/system/info",
    dependencies=[Depends(require_roles(Role.SYSTEM))],
)
async def get_store_info(service: UserService = Depends(get_user_service)):
    """Store diagnostics for CI/CD callers."""
    return {"success": True, "data": service.store_info()}


@router.get("/{user_id}")
async def get_user(
    user_id: str,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    user = await service.find_by_id(user_id)
    background_tasks.add_task(
        dispatch_notification, notifier, "USER_ACCESS", f"User {user_id} accessed",
    )
    return {"success": True, "data": user.to_dict()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    body: UserCreate,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    """Create a user. Duplicate emails and store failures are 400s."""
    data = body.model_dump()
    if missing_fields(data, REQUIRED_USER_FIELDS):
        raise ValidationError(
            "All fields are required: name, email, age, department",
            title="Missing required fields",
        )
    if not is_valid_email(data["email"]):
        raise ValidationError(
            "Please provide a valid email address",
            title="Invalid email format", field="email",
        )
    if not is_valid_age(data["age"]):
        raise _invalid_age()
    data["status"] = data["status"] or "active"

    try:
        user = await service.create(data)
    except DatabaseError as e:
        raise ValidationError(e.message, title="Failed to create user") from e

    background_tasks.add_task(
        dispatch_notification, notifier,
        "USER_CREATED", f"New user created: {user.name} ({user.email})",
    )
    return {
        "success": True,
        "message": "User created successfully",
        "data": user.to_dict(),
    }


@router.put("/{user_id}")
async def update_user(
    user_id: str,
    body: UserUpdate,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    """Partial update; id and createdAt can never change."""
    patch = body.model_dump(exclude_none=True)
    if "age" in patch and not is_valid_age(patch["age"]):
        raise _invalid_age()

    user = await service.update(user_id, patch)
    background_tasks.add_task(
        dispatch_notification, notifier, "USER_UPDATED", f"User {user_id} updated",
    )
    return {
        "success": True,
        "message": "User updated successfully",
        "data": user.to_dict(),
    }


@router.delete("/{user_id}")
async def delete_user(
    user_id: str,
    background_tasks: BackgroundTasks,
    service: UserService = Depends(get_user_service),
    notifier: Notifier = Depends(get_notifier),
):
    user = await service.delete(user_id)
    background_tasks.add_task(
        dispatch_notification, notifier,
        "USER_DELETED", f"User {user_id} ({user.name}) deleted",
    )
    return {
        "success": True,
        "message": "User deleted successfully",
        "data": user.to_dict(),
    }
