"""Structured logging helpers."""

import logging
from typing import Any

from namingops.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """Configure root logging once at startup."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def build_log_context(
    *,
    user_id: str | None = None,
    request_id: str | None = None,
    route: str | None = None,
    method: str | None = None,
    entity_id: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict without form answers or secrets."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if request_id:
        context["request_id"] = request_id
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    if entity_id:
        context["entity_id"] = entity_id
    return context
