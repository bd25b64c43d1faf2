"""Gemini configuration and naming service.

The configuration is a singleton row holding the (encrypted) API key, the
default prompt, a base prompt that can be toggled, and three ordered item
lists (principles, dos, donts) composed into every naming prompt.
"""

import logging
import re
from uuid import UUID

import httpx
from sqlalchemy.orm import Session

from namingops.core.config import settings
from namingops.core.encryption import (
    decrypt_secret,
    encrypt_secret,
    is_encryption_configured,
    mask_secret,
)
from namingops.db.enums import GeminiItemKind
from namingops.db.models import GeminiConfig, GeminiPromptItem
from namingops.services.ai_provider import ChatMessage, GeminiProvider

logger = logging.getLogger(__name__)

SECTION_HEADINGS = {
    GeminiItemKind.PRINCIPLES: "Principles:",
    GeminiItemKind.DOS: "Do's:",
    GeminiItemKind.DONTS: "Don'ts:",
}

EVALUATION_INSTRUCTIONS = (
    "Evaluate the proposed name below. Comment on memorability, clarity, "
    "pronunciation, fit with the naming principles and any obvious trademark "
    "or cultural risks. Finish with an overall rating from 1 to 10."
)

_LIST_MARKER = re.compile(r"^\s*(?:[-*•]|\d+[.)])\s+")
_NAME_SEPARATORS = re.compile(r"\s+[-–—]\s+|:\s+")


class GeminiNotConfiguredError(RuntimeError):
    """No API key in the stored config or the environment."""


class GeminiProviderError(RuntimeError):
    """Upstream call failed."""


class PromptItemNotFoundError(LookupError):
    pass


# =============================================================================
# Configuration
# =============================================================================


def get_or_create_config(db: Session) -> GeminiConfig:
    config = db.query(GeminiConfig).order_by(GeminiConfig.created_at.asc()).first()
    if config:
        return config
    config = GeminiConfig()
    db.add(config)
    db.commit()
    db.refresh(config)
    return config


def _stored_api_key(config: GeminiConfig) -> str:
    if not config.api_key_encrypted:
        return ""
    return decrypt_secret(config.api_key_encrypted)


def resolve_api_key(config: GeminiConfig) -> str:
    """Stored key first, then GEMINI_API_KEY."""
    api_key = _stored_api_key(config) or settings.GEMINI_API_KEY
    if not api_key:
        raise GeminiNotConfiguredError("Gemini API key is not configured")
    return api_key


def _items(config: GeminiConfig, kind: GeminiItemKind) -> list[GeminiPromptItem]:
    return [item for item in config.items if item.kind == kind.value]


def config_payload(config: GeminiConfig) -> dict:
    stored = _stored_api_key(config)
    return {
        "api_key": mask_secret(stored) or "",
        "has_api_key": bool(stored),
        "default_prompt": config.default_prompt or "",
        "model": config.model,
    }


def full_config_payload(config: GeminiConfig) -> dict:
    payload = config_payload(config)
    payload["base_prompt"] = {
        "text": config.base_prompt_text,
        "active": config.base_prompt_active,
    }
    for kind in GeminiItemKind:
        payload[kind.value] = [
            {"id": item.id, "text": item.text, "active": item.active}
            for item in _items(config, kind)
        ]
    return payload


def save_config(
    db: Session,
    *,
    api_key: str | None = None,
    default_prompt: str | None = None,
    model: str | None = None,
) -> GeminiConfig:
    """Apply the values that were provided as strings; an empty key clears it."""
    config = get_or_create_config(db)
    if isinstance(api_key, str):
        if api_key and not is_encryption_configured():
            raise GeminiNotConfiguredError("FERNET_KEY not configured; cannot store API key")
        config.api_key_encrypted = encrypt_secret(api_key) if api_key else None
    if isinstance(default_prompt, str):
        config.default_prompt = default_prompt
    if isinstance(model, str):
        config.model = model or None
    db.commit()
    db.refresh(config)
    logger.info("Gemini config saved (api key set: %s)", bool(config.api_key_encrypted))
    return config


def add_item(db: Session, kind: GeminiItemKind, text: str) -> GeminiConfig:
    config = get_or_create_config(db)
    existing = _items(config, kind)
    position = max((item.position for item in existing), default=-1) + 1
    config.items.append(
        GeminiPromptItem(kind=kind.value, text=text.strip(), active=True, position=position)
    )
    db.commit()
    db.refresh(config)
    return config


def _get_item(config: GeminiConfig, kind: GeminiItemKind, item_id: UUID) -> GeminiPromptItem:
    for item in _items(config, kind):
        if item.id == item_id:
            return item
    raise PromptItemNotFoundError(f"{kind.value} item not found")


def update_item(
    db: Session,
    kind: GeminiItemKind,
    item_id: UUID,
    *,
    text: str | None = None,
    active: bool | None = None,
) -> GeminiConfig:
    config = get_or_create_config(db)
    item = _get_item(config, kind, item_id)
    if text is not None:
        item.text = text.strip()
    if active is not None:
        item.active = active
    db.commit()
    db.refresh(config)
    return config


def delete_item(db: Session, kind: GeminiItemKind, item_id: UUID) -> GeminiConfig:
    config = get_or_create_config(db)
    item = _get_item(config, kind, item_id)
    config.items.remove(item)
    db.commit()
    db.refresh(config)
    return config


def update_base_prompt(
    db: Session, *, text: str | None = None, active: bool | None = None
) -> GeminiConfig:
    config = get_or_create_config(db)
    if text is not None:
        config.base_prompt_text = text
    if active is not None:
        config.base_prompt_active = active
    db.commit()
    db.refresh(config)
    return config


# =============================================================================
# Prompt composition
# =============================================================================


def compose_prompt(config: GeminiConfig, user_input: str = "") -> str:
    """
    Build the naming prompt.

    Order: active base prompt, user input, then the active principles, dos
    and donts as bullet lists. Sections with no active items are left out.
    """
    lines: list[str] = []
    if config.base_prompt_active and config.base_prompt_text:
        lines.append(config.base_prompt_text)
    if user_input:
        lines.append("User Input:")
        lines.append(user_input)
    for kind, heading in SECTION_HEADINGS.items():
        active = [item.text for item in _items(config, kind) if item.active]
        if active:
            lines.append(heading)
            lines.extend(f"- {text}" for text in active)
    return "\n".join(lines).strip()


def parse_name_suggestions(text: str, limit: int = 20) -> list[str]:
    """Pull candidate names out of a bulleted or numbered model answer."""
    names: list[str] = []
    for line in text.splitlines():
        if not _LIST_MARKER.match(line):
            continue
        candidate = _LIST_MARKER.sub("", line, count=1)
        candidate = _NAME_SEPARATORS.split(candidate, maxsplit=1)[0]
        candidate = candidate.replace("**", "").replace("`", "").strip(" \"'*_")
        if candidate and candidate not in names:
            names.append(candidate)
        if len(names) >= limit:
            break
    return names


# =============================================================================
# Provider calls
# =============================================================================


def _provider(config: GeminiConfig) -> GeminiProvider:
    return GeminiProvider(resolve_api_key(config), default_model=config.model)


async def generate_names(db: Session, prompt: str, model: str | None = None) -> dict:
    if not prompt or not prompt.strip():
        raise ValueError("Prompt is required")
    config = get_or_create_config(db)
    provider = _provider(config)
    full_prompt = compose_prompt(config, prompt.strip())

    try:
        response = await provider.chat(
            [ChatMessage(role="user", content=full_prompt)], model=model
        )
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.warning("Gemini naming call failed: %s", exc)
        raise GeminiProviderError("Failed to generate names") from exc

    return {
        "text": response.content,
        "names": parse_name_suggestions(response.content),
        "model": response.model,
        "prompt": full_prompt,
    }


async def evaluate_name(
    db: Session, name: str, context: str | None = None, model: str | None = None
) -> dict:
    config = get_or_create_config(db)
    provider = _provider(config)

    user_content = f"Proposed name: {name.strip()}"
    if context:
        user_content += f"\nContext:\n{context.strip()}"
    messages = [
        ChatMessage(role="system", content=compose_prompt(config)),
        ChatMessage(role="user", content=f"{EVALUATION_INSTRUCTIONS}\n\n{user_content}"),
    ]

    try:
        response = await provider.chat(messages, model=model, temperature=0.3)
    except (httpx.HTTPError, ValueError, KeyError) as exc:
        logger.warning("Gemini evaluation call failed: %s", exc)
        raise GeminiProviderError("Failed to evaluate name") from exc

    return {"name": name.strip(), "evaluation": response.content, "model": response.model}


async def list_models(db: Session) -> list[dict]:
    config = get_or_create_config(db)
    provider = _provider(config)
    try:
        return await provider.list_models()
    except httpx.HTTPError as exc:
        logger.warning("Gemini model listing failed: %s", exc)
        raise GeminiProviderError("Failed to list models") from exc
