"""Tests for form configuration endpoints and activation."""

import pytest

from namingops.core.config import settings
from namingops.db.models import FormConfiguration

BASE = "/api/v1/form-configurations"


def _payload(name: str, active: bool = False) -> dict:
    return {
        "name": name,
        "description": f"{name} description",
        "isActive": active,
        "fields": [
            {"name": "requestTitle", "label": "Request Title", "type": "text", "required": True},
            {"name": "teamName", "label": "Team", "fieldType": "text"},
        ],
    }


@pytest.mark.asyncio
async def test_create_and_get(client, admin_headers):
    res = await client.post(BASE, json=_payload("Form A"), headers=admin_headers)
    assert res.status_code == 201
    body = res.json()
    assert body["name"] == "Form A"
    assert body["isActive"] is False
    assert [f["name"] for f in body["fields"]] == ["requestTitle", "teamName"]
    assert body["fields"][1]["type"] == "text"

    res = await client.get(f"{BASE}/{body['id']}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["id"] == body["id"]


@pytest.mark.asyncio
async def test_list_newest_first(client, admin_headers):
    await client.post(BASE, json=_payload("First"), headers=admin_headers)
    await client.post(BASE, json=_payload("Second"), headers=admin_headers)

    res = await client.get(BASE, headers=admin_headers)
    assert res.status_code == 200
    assert [c["name"] for c in res.json()] == ["Second", "First"]


@pytest.mark.asyncio
async def test_duplicate_name_is_conflict(client, admin_headers):
    await client.post(BASE, json=_payload("Same"), headers=admin_headers)
    res = await client.post(BASE, json=_payload("Same"), headers=admin_headers)
    assert res.status_code == 409


@pytest.mark.asyncio
async def test_invalid_fields_are_bad_request(client, admin_headers):
    payload = _payload("Broken")
    payload["fields"] = [{"name": "kind", "label": "Kind", "type": "select"}]
    res = await client.post(BASE, json=payload, headers=admin_headers)
    assert res.status_code == 400
    assert res.json()["detail"]["message"] == "Validation failed"


@pytest.mark.asyncio
async def test_empty_field_list_rejected(client, admin_headers):
    payload = _payload("Empty")
    payload["fields"] = []
    res = await client.post(BASE, json=payload, headers=admin_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_active_returns_404_when_none(client, submitter_headers):
    res = await client.get(f"{BASE}/active", headers=submitter_headers)
    assert res.status_code == 404
    assert res.json()["detail"] == "No active form configuration found"


@pytest.mark.asyncio
async def test_active_is_visible_to_any_role(client, submitter_headers, active_config):
    res = await client.get(f"{BASE}/active", headers=submitter_headers)
    assert res.status_code == 200
    assert res.json()["id"] == str(active_config.id)


@pytest.mark.asyncio
async def test_dev_default_config_when_enabled(client, submitter_headers, monkeypatch):
    monkeypatch.setattr(settings, "ENV", "dev")
    monkeypatch.setattr(settings, "DEV_DEFAULT_FORM_CONFIG", True)
    res = await client.get(f"{BASE}/active", headers=submitter_headers)
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == "default-dev-config"
    assert [f["name"] for f in body["fields"]] == ["requestTitle", "description"]


@pytest.mark.asyncio
async def test_admin_only_management(client, submitter_headers, reviewer_headers):
    assert (await client.get(BASE, headers=submitter_headers)).status_code == 403
    res = await client.post(BASE, json=_payload("Nope"), headers=reviewer_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_requires_authentication(client):
    res = await client.get(f"{BASE}/active")
    assert res.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["put", "patch"])
async def test_activation_leaves_exactly_one_active(client, db, admin_headers, method):
    ids = []
    for name in ("One", "Two", "Three"):
        res = await client.post(BASE, json=_payload(name, active=True), headers=admin_headers)
        ids.append(res.json()["id"])

    res = await getattr(client, method)(f"{BASE}/{ids[0]}/activate", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["isActive"] is True

    db.expire_all()
    active = db.query(FormConfiguration).filter(FormConfiguration.is_active.is_(True)).all()
    assert [str(c.id) for c in active] == [ids[0]]


@pytest.mark.asyncio
async def test_creating_active_config_deactivates_others(client, db, admin_headers, active_config):
    res = await client.post(BASE, json=_payload("Newer", active=True), headers=admin_headers)
    assert res.status_code == 201

    db.expire_all()
    active = db.query(FormConfiguration).filter(FormConfiguration.is_active.is_(True)).all()
    assert [c.name for c in active] == ["Newer"]


@pytest.mark.asyncio
async def test_update_replaces_supplied_keys(client, admin_headers, active_config):
    res = await client.put(
        f"{BASE}/{active_config.id}",
        json={"description": "Updated"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["description"] == "Updated"
    assert body["name"] == "Standard Request"
    assert body["isActive"] is True


@pytest.mark.asyncio
async def test_delete(client, admin_headers, active_config):
    res = await client.delete(f"{BASE}/{active_config.id}", headers=admin_headers)
    assert res.status_code == 200
    assert res.json() == {"msg": "Form configuration deleted"}

    res = await client.get(f"{BASE}/{active_config.id}", headers=admin_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_activate_unknown_is_404(client, admin_headers):
    res = await client.patch(
        f"{BASE}/00000000-0000-0000-0000-000000000000/activate", headers=admin_headers
    )
    assert res.status_code == 404
