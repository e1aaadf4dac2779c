"""API test fixtures — isolated app per test + async HTTP client.

Invariants:
    - Every test gets a fresh create_app(): its own stores, limiter and notifier
    - The notifier is replaced by a recorder so tests can assert what was sent
    - No store latency, no notifier delay

Design Decisions:
    - httpx AsyncClient over ASGITransport: background tasks complete before the
      response is returned to the test, so notifier calls can be asserted directly
"""

import pytest
from httpx import ASGITransport, AsyncClient

from userhub.main import create_app
from tests.api.fakes import RecordingNotifier


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(settings, notifier):
    application = create_app(settings)
    application.state.notifier = notifier
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
