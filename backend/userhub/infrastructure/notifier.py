"""Board Notifier — fire-and-forget status updates to a Monday.com style board.

Invariants:
    - Notifications are best-effort: dispatch_notification() never raises
    - Failures are logged at WARNING with the action tag, then discarded
    - No retries
    - The real client is used only in production with all three credentials set

Design Decisions:
    - Routes schedule dispatch_notification via BackgroundTasks, so the response is
      sent before the notifier runs (ADR: notifier latency never on the response path)
    - MockNotifier keeps the same return shape as the real client for log parity
"""

import logging
import asyncio
from datetime import datetime, timezone
from typing import Protocol

import httpx

from userhub.config import Settings

logger = logging.getLogger(__name__)

MONDAY_API_URL = "https://api.monday.com/v2"

_CREATE_UPDATE_MUTATION = """
mutation ($itemId: ID!, $body: String!) {
  create_update (item_id: $itemId, body: $body) { id }
}
"""


class Notifier(Protocol):
    """Contract for board notifiers."""
    async def notify(self, action: str, message: str) -> dict: ...


class MockNotifier:
    """Logs the update instead of sending it."""

    def __init__(self, delay_ms: int = 200):
        self.delay_ms = delay_ms

    async def notify(self, action: str, message: str) -> dict:
        timestamp = datetime.now(timezone.utc)
        logger.info(
            f"[MOCK] Board update {action}: {message}",
            extra={"action": action},
        )
        if self.delay_ms > 0:
            await asyncio.sleep(self.delay_ms / 1000)
        return {
            "success": True,
            "mock": True,
            "data": {
                "update_id": f"mock_{int(timestamp.timestamp() * 1000)}",
                "status": "success",
                "message": "Mock update processed successfully",
            },
        }


class MondayNotifier:
    """Posts a create_update mutation to the Monday.com GraphQL API."""

    def __init__(
        self,
        api_key: str,
        item_id: str,
        api_url: str = MONDAY_API_URL,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.item_id = item_id
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def notify(self, action: str, message: str) -> dict:
        body = f"{datetime.now(timezone.utc).isoformat()} - {action}: {message}"
        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        ) as client:
            response = await client.post(
                self.api_url,
                json={
                    "query": _CREATE_UPDATE_MUTATION,
                    "variables": {"itemId": self.item_id, "body": body},
                },
                headers={"Authorization": self.api_key},
            )
        response.raise_for_status()
        payload = response.json()
        if payload.get("errors"):
            raise RuntimeError(f"Monday.com rejected update: {payload['errors']}")
        logger.info(f"Board update {action} sent", extra={"action": action})
        return {"success": True, "mock": False, "data": payload.get("data")}


def build_notifier(settings: Settings) -> Notifier:
    """Pick the real client in production when credentials exist, else the mock."""
    if (
        settings.is_production
        and settings.monday_api_key
        and settings.monday_board_id
        and settings.monday_item_id
    ):
        return MondayNotifier(
            api_key=settings.monday_api_key,
            item_id=settings.monday_item_id,
            api_url=settings.monday_api_url,
        )
    return MockNotifier(delay_ms=settings.notifier_delay_ms)


async def dispatch_notification(notifier: Notifier, action: str, message: str) -> None:
    """Background-task entrypoint. Swallows every failure after logging it."""
    try:
        await notifier.notify(action, message)
    except Exception as e:
        logger.warning(
            f"Board update {action} failed: {e}",
            extra={"action": action},
        )
