"""Contact Routes — public submission, admin listing and status workflow."""

import pytest
from httpx import ASGITransport, AsyncClient

from userhub.main import create_app
from tests.api.fakes import DEMO_KEY

FORM = {"name": "A", "email": "a@b.com", "message": "hi"}


async def _submit(client, **overrides) -> int:
    res = await client.post("/api/contact", json={**FORM, **overrides})
    assert res.status_code == 201
    return res.json()["data"]["id"]


async def test_submit_returns_id_and_timestamp(client):
    res = await client.post("/api/contact", json=FORM)
    body = res.json()
    assert res.status_code == 201
    assert body["success"] is True
    assert body["message"].startswith("Thank you for contacting us")
    assert set(body["data"]) == {"id", "submittedAt"}


async def test_submitted_contact_has_default_subject_and_pending_status(client):
    contact_id = await _submit(client)
    res = await client.get(f"/api/contact/{contact_id}")
    data = res.json()["data"]
    assert data["subject"] == "General Inquiry"
    assert data["status"] == "pending"


@pytest.mark.parametrize("missing", ["name", "email", "message"])
async def test_submit_missing_field_is_400(client, missing):
    body = {k: v for k, v in FORM.items() if k != missing}
    res = await client.post("/api/contact", json=body)
    assert res.status_code == 400
    assert "required" in res.json()["message"]


async def test_submit_invalid_email_is_400(client):
    res = await client.post("/api/contact", json={**FORM, "email": "invalid-email"})
    assert res.status_code == 400
    assert res.json()["message"] == "Invalid email format"


async def test_list_and_filter_by_status(client):
    first = await _submit(client)
    await _submit(client)
    await client.patch(f"/api/contact/{first}/status", json={"status": "resolved"})

    res = await client.get("/api/contact")
    assert res.json()["count"] == 2

    res = await client.get("/api/contact", params={"status": "resolved"})
    assert [c["id"] for c in res.json()["data"]] == [first]


async def test_status_update_sets_updated_at(client):
    contact_id = await _submit(client)
    res = await client.patch(
        f"/api/contact/{contact_id}/status", json={"status": "in-progress"},
    )
    data = res.json()["data"]
    assert res.status_code == 200
    assert data["status"] == "in-progress"
    assert "updatedAt" in data


@pytest.mark.parametrize("body", [{"status": "done"}, {}])
async def test_status_update_rejects_unknown_values(client, body):
    contact_id = await _submit(client)
    res = await client.patch(f"/api/contact/{contact_id}/status", json=body)
    assert res.status_code == 400
    assert "Status must be one of" in res.json()["message"]
    fetched = (await client.get(f"/api/contact/{contact_id}")).json()["data"]
    assert fetched["status"] == "pending"


async def test_missing_contact_is_404(client):
    assert (await client.get("/api/contact/99")).status_code == 404
    res = await client.patch("/api/contact/99/status", json={"status": "closed"})
    assert res.status_code == 404
    assert (await client.delete("/api/contact/99")).status_code == 404


async def test_stats_and_delete(client):
    first = await _submit(client)
    await _submit(client)
    await client.patch(f"/api/contact/{first}/status", json={"status": "closed"})

    res = await client.get("/api/contact/stats")
    assert res.json()["data"] == {
        "total": 2, "pending": 1, "inProgress": 0, "resolved": 0, "closed": 1,
    }

    res = await client.delete(f"/api/contact/{first}")
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Contact deleted successfully"}
    assert (await client.get(f"/api/contact/{first}")).status_code == 404


async def test_strict_mode_guards_admin_routes_but_not_the_form(settings):
    app = create_app(settings.model_copy(update={"require_api_key": True}))
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as client:
        contact_id = await _submit(client)

        assert (await client.get("/api/contact")).status_code == 401
        assert (await client.get("/api/contact/stats")).status_code == 401
        assert (await client.get(f"/api/contact/{contact_id}")).status_code == 401

        res = await client.get(f"/api/contact/{contact_id}", headers=DEMO_KEY)
        assert res.status_code == 200
