"""Debounced draft auto-save."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from namingops.client.api_client import ApiError
from namingops.client.storage import DRAFT_KEY, LocalStorage

logger = logging.getLogger(__name__)

AUTOSAVE_DELAY_SECONDS = 2.0

SaveFn = Callable[[dict[str, Any]], Awaitable[Any]]


class DraftAutosaver:
    """
    Coalesces form changes into a single save.

    Every ``schedule`` call replaces the pending form data and restarts the
    delay; the save runs once the form has been quiet for ``delay`` seconds.
    The latest values are also written to local storage right away so a
    crash between keystrokes and the save loses nothing.
    """

    def __init__(
        self,
        save: SaveFn,
        *,
        delay: float = AUTOSAVE_DELAY_SECONDS,
        storage: LocalStorage | None = None,
    ):
        self._save = save
        self.delay = delay
        self.storage = storage
        self._pending: dict[str, Any] | None = None
        # Debounce timer; only cancelled while it is still sleeping
        self._timer: asyncio.Task | None = None
        self._in_flight: asyncio.Task | None = None
        self._lock = asyncio.Lock()
        self.save_count = 0
        self.last_saved: dict[str, Any] | None = None
        self.last_error: dict[str, Any] | None = None

    @property
    def has_pending(self) -> bool:
        timer_running = self._timer is not None and not self._timer.done()
        return timer_running or self._lock.locked()

    def schedule(self, form_data: dict[str, Any]) -> None:
        self._pending = dict(form_data)
        if self.storage is not None:
            self.storage.set(DRAFT_KEY, self._pending)
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._run())

    def cancel(self) -> None:
        """Drop the scheduled save. A save already talking to the API is left to finish."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    async def flush(self) -> None:
        """Save pending data immediately instead of waiting out the delay."""
        self.cancel()
        await self._save_pending()

    async def _run(self) -> None:
        await asyncio.sleep(self.delay)
        # Past the delay the save must not be cancelled by a later schedule/flush
        self._in_flight, self._timer = self._timer, None
        await self._save_pending()

    async def _save_pending(self) -> None:
        # Serialises saves so a flush waits for an in-flight save, then sends newer data
        async with self._lock:
            data, self._pending = self._pending, None
            if data is None:
                return
            try:
                await self._save(data)
            except ApiError as e:
                # Keep the data so the next change or flush retries it
                if self._pending is None:
                    self._pending = data
                self.last_error = e.serialize()
                logger.warning("Draft auto-save failed: %s", e.message)
                return
            except asyncio.CancelledError:
                if self._pending is None:
                    self._pending = data
                raise
            self.save_count += 1
            self.last_saved = data
            self.last_error = None
