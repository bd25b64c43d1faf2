"""Persisted client state in a single JSON key/value file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from namingops.client.config import client_settings

logger = logging.getLogger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"
DRAFT_KEY = "namingRequestDraft"
THEME_MODE_KEY = "theme-mode"
AUTH_KEY = "auth"

KNOWN_KEYS = (USER_KEY, TOKEN_KEY, DRAFT_KEY, THEME_MODE_KEY, AUTH_KEY)


class LocalStorage:
    """JSON file holding client values. Every write rewrites the file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or client_settings.STORAGE_PATH)

    def _read(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable client storage at %s", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)

    def clear_session(self) -> None:
        """Drop auth data (token, user, auth) but keep draft and theme."""
        data = self._read()
        for key in (TOKEN_KEY, USER_KEY, AUTH_KEY):
            data.pop(key, None)
        self._write(data)

    def items(self) -> dict[str, Any]:
        return dict(self._read())
