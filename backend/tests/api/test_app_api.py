"""Application wiring — health, root map, unknown routes and the catch-all handler."""

import pytest
from httpx import ASGITransport, AsyncClient

from userhub.main import create_app
from tests.api.fakes import DEMO_KEY


async def test_health(client):
    res = await client.get("/health")
    body = res.json()
    assert res.status_code == 200
    assert body["status"] == "OK"
    assert body["environment"] == "test"
    assert body["uptime"] >= 0
    assert "maxRss" in body["memory"]


async def test_root_lists_endpoints(client):
    res = await client.get("/")
    body = res.json()
    assert body["message"] == "Welcome to Sample Test API"
    assert body["endpoints"]["users"] == "/api/users"
    assert body["version"] == "1.0.0"


async def test_unknown_route(client):
    res = await client.get("/nope", params={"x": "1"})
    body = res.json()
    assert res.status_code == 404
    assert body["error"] == "Route not found"
    assert body["message"] == "Cannot GET /nope?x=1"
    assert body["availableEndpoints"]["health"] == "GET /health"


@pytest.mark.parametrize("method,path", [
    ("PATCH", "/api/users/1"),
    ("POST", "/health"),
    ("DELETE", "/api/contact"),
])
async def test_unserved_method_is_reported_as_unknown_route(client, method, path):
    res = await client.request(method, path)
    body = res.json()
    assert res.status_code == 404
    assert body["error"] == "Route not found"
    assert body["code"] == "ROUTE_NOT_FOUND"
    assert body["message"] == f"Cannot {method} {path}"
    assert "availableEndpoints" in body


async def test_trailing_slash_is_served_without_redirect(client):
    res = await client.post(
        "/api/contact/", json={"name": "A", "email": "a@b.com", "message": "hi"},
    )
    assert res.status_code == 201

    res = await client.get("/api/users/")
    assert res.status_code == 200
    assert res.json()["total"] == 5

    res = await client.get("/api/users/1/")
    assert res.status_code == 200
    assert res.json()["data"]["id"] == 1


async def test_root_path_is_not_rewritten(client):
    assert (await client.get("/")).status_code == 200


@pytest.mark.parametrize("path", ["/health", "/nope", "/api/users/999"])
async def test_security_headers_on_every_routed_response(client, path):
    res = await client.get(path)
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "SAMEORIGIN"
    assert res.headers["Referrer-Policy"] == "no-referrer"
    assert "Strict-Transport-Security" in res.headers
    assert "Content-Security-Policy" not in res.headers


async def test_apps_do_not_share_state(settings):
    first, second = create_app(settings), create_app(settings)
    async with AsyncClient(
        transport=ASGITransport(app=first), base_url="http://test",
    ) as client:
        await client.delete("/api/users/1")
    async with AsyncClient(
        transport=ASGITransport(app=second), base_url="http://test",
    ) as client:
        assert (await client.get("/api/users/1")).status_code == 200


@pytest.mark.parametrize("environment,expected", [
    ("production", "Something went wrong!"),
    ("development", "stats exploded"),
])
async def test_unhandled_errors_hide_detail_in_production(
    settings, environment, expected,
):
    app = create_app(settings.model_copy(update={"environment": environment}))

    def explode():
        raise RuntimeError("stats exploded")

    app.state.contact_store.stats = explode
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        res = await client.get("/api/contact/stats", headers=DEMO_KEY)

    assert res.status_code == 500
    assert res.json()["error"] == "Internal Server Error"
    assert res.json()["message"] == expected
