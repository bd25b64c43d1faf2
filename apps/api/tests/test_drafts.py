"""Tests for the auto-saved submission draft."""

import pytest

from namingops.services import draft_service

BASE = "/api/v1/drafts/me"


@pytest.mark.asyncio
async def test_no_draft_is_404(client, submitter_headers):
    res = await client.get(BASE, headers=submitter_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_save_merges_values(client, submitter_headers, active_config):
    res = await client.put(
        BASE, json={"formData": {"requestTitle": "Falcon"}}, headers=submitter_headers
    )
    assert res.status_code == 200
    assert res.json()["formConfigId"] == str(active_config.id)

    res = await client.put(
        BASE, json={"formData": {"description": "Analytics"}}, headers=submitter_headers
    )
    assert res.json()["formData"] == {"requestTitle": "Falcon", "description": "Analytics"}

    res = await client.get(BASE, headers=submitter_headers)
    assert res.status_code == 200
    assert res.json()["formData"]["requestTitle"] == "Falcon"


@pytest.mark.asyncio
async def test_replace_overwrites(client, submitter_headers, active_config):
    await client.put(BASE, json={"formData": {"requestTitle": "Falcon"}}, headers=submitter_headers)
    res = await client.put(
        BASE,
        json={"formData": {"description": "Only this"}, "replace": True},
        headers=submitter_headers,
    )
    assert res.json()["formData"] == {"description": "Only this"}


@pytest.mark.asyncio
async def test_blank_required_values_are_accepted(client, submitter_headers, active_config):
    res = await client.put(
        BASE,
        json={"formData": {"requestTitle": "", "contactEmail": ""}},
        headers=submitter_headers,
    )
    assert res.status_code == 200


@pytest.mark.asyncio
async def test_present_values_are_still_checked(client, submitter_headers, active_config):
    res = await client.put(
        BASE, json={"formData": {"contactEmail": "not-an-email"}}, headers=submitter_headers
    )
    assert res.status_code == 400
    assert set(res.json()["detail"]["errors"]) == {"contactEmail"}


@pytest.mark.asyncio
async def test_saved_without_active_config(client, submitter_headers):
    res = await client.put(BASE, json={"formData": {"anything": 1}}, headers=submitter_headers)
    assert res.status_code == 200
    assert res.json()["formConfigId"] is None


@pytest.mark.asyncio
async def test_drafts_are_per_user(client, submitter_headers, other_headers, active_config):
    await client.put(BASE, json={"formData": {"requestTitle": "Mine"}}, headers=submitter_headers)
    res = await client.get(BASE, headers=other_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_delete(client, submitter_headers, active_config):
    await client.put(BASE, json={"formData": {"requestTitle": "Falcon"}}, headers=submitter_headers)
    res = await client.delete(BASE, headers=submitter_headers)
    assert res.json() == {"msg": "Draft deleted"}
    res = await client.delete(BASE, headers=submitter_headers)
    assert res.json() == {"msg": "No draft saved"}


def test_has_content():
    assert draft_service.has_content({"a": "", "b": None}) is False
    assert draft_service.has_content({"a": "  "}) is False
    assert draft_service.has_content({"a": False}) is True
    assert draft_service.has_content({"a": 0}) is True
    assert draft_service.has_content(None) is False
