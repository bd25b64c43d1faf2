"""Tests for Gemini configuration, prompt composition and generation endpoints."""

import httpx
import pytest

from namingops.core.config import settings
from namingops.db.enums import GeminiItemKind
from namingops.db.models import GeminiConfig
from namingops.services import gemini_service
from namingops.services.ai_provider import ChatMessage, ChatResponse, GeminiProvider

BASE = "/api/v1/gemini"


def _response(text: str, model: str = "gemini-test") -> ChatResponse:
    return ChatResponse(
        content=text, prompt_tokens=5, completion_tokens=7, total_tokens=12, model=model
    )


@pytest.fixture
def captured_chat(monkeypatch):
    """Replace the provider call; records the messages it was given."""
    calls: list[list[ChatMessage]] = []

    async def fake_chat(self, messages, model=None, temperature=0.7, max_tokens=2000):
        calls.append(messages)
        return _response("1. Falcon - fast\n2. **Kestrel**: sharp\n- Osprey\nThanks!")

    monkeypatch.setattr(GeminiProvider, "chat", fake_chat)
    return calls


@pytest.fixture
def env_api_key(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "env-key-1234567890")


# =============================================================================
# Configuration
# =============================================================================


@pytest.mark.asyncio
async def test_config_masks_stored_key(client, db, admin_headers):
    res = await client.post(
        f"{BASE}/config",
        json={"apiKey": "AIzaSyTESTKEY12345", "defaultPrompt": "Suggest names"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    body = res.json()
    assert body["apiKey"] == "AIza...2345"
    assert body["hasApiKey"] is True
    assert body["defaultPrompt"] == "Suggest names"

    stored = db.query(GeminiConfig).one()
    assert stored.api_key_encrypted
    assert "AIzaSyTESTKEY12345" not in stored.api_key_encrypted

    res = await client.get(f"{BASE}/config", headers=admin_headers)
    assert res.json()["apiKey"] == "AIza...2345"


@pytest.mark.asyncio
async def test_config_ignores_non_string_values(client, admin_headers):
    await client.post(f"{BASE}/config", json={"defaultPrompt": "Keep me"}, headers=admin_headers)
    res = await client.post(f"{BASE}/config", json={"apiKey": None}, headers=admin_headers)
    assert res.json()["defaultPrompt"] == "Keep me"
    assert res.json()["hasApiKey"] is False


@pytest.mark.asyncio
async def test_empty_key_clears_it(client, admin_headers):
    await client.post(f"{BASE}/config", json={"apiKey": "secret-key-123456"}, headers=admin_headers)
    res = await client.post(f"{BASE}/config", json={"apiKey": ""}, headers=admin_headers)
    assert res.json()["hasApiKey"] is False


@pytest.mark.asyncio
async def test_config_is_admin_only(client, reviewer_headers):
    res = await client.get(f"{BASE}/config", headers=reviewer_headers)
    assert res.status_code == 403


@pytest.mark.asyncio
async def test_prompt_item_crud(client, admin_headers):
    res = await client.post(
        f"{BASE}/config/principles", json={"text": "Short and memorable"}, headers=admin_headers
    )
    assert res.status_code == 200
    item = res.json()["principles"][0]
    assert item["text"] == "Short and memorable"
    assert item["active"] is True

    res = await client.patch(
        f"{BASE}/config/principles/{item['id']}", json={"active": False}, headers=admin_headers
    )
    assert res.json()["principles"][0]["active"] is False

    res = await client.delete(f"{BASE}/config/principles/{item['id']}", headers=admin_headers)
    assert res.json()["principles"] == []

    res = await client.delete(f"{BASE}/config/principles/{item['id']}", headers=admin_headers)
    assert res.status_code == 404


@pytest.mark.asyncio
async def test_unknown_element_rejected(client, admin_headers):
    res = await client.post(f"{BASE}/config/maybes", json={"text": "x"}, headers=admin_headers)
    assert res.status_code == 400


@pytest.mark.asyncio
async def test_base_prompt_toggle(client, admin_headers):
    res = await client.patch(
        f"{BASE}/config/basePrompt",
        json={"text": "You name things.", "active": False},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["basePrompt"] == {"text": "You name things.", "active": False}


# =============================================================================
# Prompt composition
# =============================================================================


def test_compose_prompt_orders_sections_and_skips_inactive(db):
    gemini_service.update_base_prompt(db, text="You are a naming expert.", active=True)
    gemini_service.add_item(db, GeminiItemKind.PRINCIPLES, "Be brief")
    config = gemini_service.add_item(db, GeminiItemKind.DONTS, "No acronyms")
    hidden = gemini_service.add_item(db, GeminiItemKind.DOS, "Hidden")
    dos_item = next(i for i in hidden.items if i.kind == GeminiItemKind.DOS.value)
    config = gemini_service.update_item(db, GeminiItemKind.DOS, dos_item.id, active=False)

    prompt = gemini_service.compose_prompt(config, "A data platform")

    assert prompt == (
        "You are a naming expert.\n"
        "User Input:\n"
        "A data platform\n"
        "Principles:\n"
        "- Be brief\n"
        "Don'ts:\n"
        "- No acronyms"
    )


def test_compose_prompt_without_base(db):
    config = gemini_service.update_base_prompt(db, active=False)
    assert gemini_service.compose_prompt(config, "Hello") == "User Input:\nHello"


def test_parse_name_suggestions():
    text = "Here you go:\n1. Falcon - fast\n2) **Kestrel**: sharp\n* `Osprey`\n- Falcon\nEnjoy"
    assert gemini_service.parse_name_suggestions(text) == ["Falcon", "Kestrel", "Osprey"]


# =============================================================================
# Generation
# =============================================================================


@pytest.mark.asyncio
async def test_naming_requires_prompt(client, submitter_headers, env_api_key):
    res = await client.post("/api/gemini/naming", json={}, headers=submitter_headers)
    assert res.status_code == 400
    assert res.json()["detail"] == "Prompt is required"


@pytest.mark.asyncio
async def test_naming_without_key_is_503(client, submitter_headers, captured_chat):
    res = await client.post(
        "/api/gemini/naming", json={"prompt": "A data platform"}, headers=submitter_headers
    )
    assert res.status_code == 503
    assert captured_chat == []


@pytest.mark.asyncio
async def test_naming_composes_prompt_and_parses_names(
    client, db, submitter_headers, env_api_key, captured_chat
):
    gemini_service.add_item(db, GeminiItemKind.PRINCIPLES, "Two syllables max")

    res = await client.post(
        "/api/gemini/naming", json={"prompt": "A data platform"}, headers=submitter_headers
    )
    assert res.status_code == 200
    body = res.json()
    assert body["names"] == ["Falcon", "Kestrel", "Osprey"]
    assert body["model"] == "gemini-test"

    sent = captured_chat[0][0].content
    assert "User Input:\nA data platform" in sent
    assert "Principles:\n- Two syllables max" in sent
    assert body["prompt"] == sent


@pytest.mark.asyncio
async def test_stored_key_takes_precedence(client, admin_headers, monkeypatch):
    seen: list[str] = []

    async def fake_chat(self, messages, model=None, temperature=0.7, max_tokens=2000):
        seen.append(self.api_key)
        return _response("- Nimbus")

    monkeypatch.setattr(GeminiProvider, "chat", fake_chat)
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "env-key")
    await client.post(f"{BASE}/config", json={"apiKey": "stored-key-123"}, headers=admin_headers)

    res = await client.post(f"{BASE}/naming", json={"prompt": "Cloud"}, headers=admin_headers)
    assert res.status_code == 200
    assert seen == ["stored-key-123"]


@pytest.mark.asyncio
async def test_provider_failure_is_502(client, submitter_headers, env_api_key, monkeypatch):
    async def failing_chat(self, messages, model=None, temperature=0.7, max_tokens=2000):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(GeminiProvider, "chat", failing_chat)
    res = await client.post(
        "/api/gemini/naming", json={"prompt": "Anything"}, headers=submitter_headers
    )
    assert res.status_code == 502


@pytest.mark.asyncio
async def test_evaluate(client, submitter_headers, env_api_key, captured_chat):
    res = await client.post(
        f"{BASE}/evaluate",
        json={"name": "Falcon", "context": "Analytics product"},
        headers=submitter_headers,
    )
    assert res.status_code == 200
    assert res.json()["name"] == "Falcon"

    system, user = captured_chat[0]
    assert system.role == "system"
    assert "Proposed name: Falcon" in user.content
    assert "Analytics product" in user.content


@pytest.mark.asyncio
async def test_models(client, submitter_headers, env_api_key, monkeypatch):
    async def fake_list(self):
        return [{"name": "models/gemini-1.5-pro-latest"}]

    monkeypatch.setattr(GeminiProvider, "list_models", fake_list)
    res = await client.get(f"{BASE}/models", headers=submitter_headers)
    assert res.status_code == 200
    assert res.json() == {"models": [{"name": "models/gemini-1.5-pro-latest"}]}


# =============================================================================
# Provider
# =============================================================================


@pytest.mark.asyncio
async def test_provider_builds_generate_content_request(monkeypatch):
    captured = {}

    async def capture_post(self, url, **kwargs):
        captured["url"] = url
        captured.update(kwargs)
        request = httpx.Request("POST", url)
        return httpx.Response(
            200,
            request=request,
            json={
                "candidates": [{"content": {"parts": [{"text": "- Falcon"}]}}],
                "usageMetadata": {"promptTokenCount": 3, "candidatesTokenCount": 2},
            },
        )

    monkeypatch.setattr(httpx.AsyncClient, "post", capture_post)
    provider = GeminiProvider("key-123", default_model="gemini-test")
    response = await provider.chat(
        [ChatMessage(role="system", content="Be nice"), ChatMessage(role="user", content="Hi")]
    )

    assert captured["url"].endswith("/models/gemini-test:generateContent")
    assert captured["params"] == {"key": "key-123"}
    assert captured["json"]["systemInstruction"] == {"parts": [{"text": "Be nice"}]}
    assert captured["json"]["contents"] == [{"role": "user", "parts": [{"text": "Hi"}]}]
    assert response.content == "- Falcon"
    assert response.total_tokens == 5


@pytest.mark.asyncio
async def test_provider_without_candidates_raises(monkeypatch):
    async def empty_post(self, url, **kwargs):
        return httpx.Response(200, request=httpx.Request("POST", url), json={"candidates": []})

    monkeypatch.setattr(httpx.AsyncClient, "post", empty_post)
    with pytest.raises(ValueError):
        await GeminiProvider("key").chat([ChatMessage(role="user", content="Hi")])
