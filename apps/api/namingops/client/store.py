"""Client-side state stores mirroring server data.

Each store keeps the last payloads it received together with ``loading``,
``error`` (a serialized ApiError or None) and ``last_fetched``. Reads are
served from the cached copy until it is older than STALE_AFTER_SECONDS,
unless the caller forces a refresh.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from namingops.client.api_client import ApiClient, ApiError
from namingops.schemas.form_config import FieldDescriptor
from namingops.services.form_renderer import FormState

logger = logging.getLogger(__name__)

STALE_AFTER_SECONDS = 5 * 60

FORM_CONFIG_PATH = "/api/v1/form-configurations"
NAME_REQUESTS_PATH = "/api/v1/name-requests"
DRAFT_PATH = "/api/v1/drafts/me"


def _same_id(item: dict[str, Any], item_id: Any) -> bool:
    return str(item.get("id")) == str(item_id)


def select_form_config_by_id(
    state: "FormConfigStore", config_id: Any
) -> dict[str, Any] | None:
    for config in state.form_configs:
        if _same_id(config, config_id):
            return config
    return None


def select_active_fields(state: "FormConfigStore") -> list[FieldDescriptor]:
    """Field descriptors of the active configuration (empty if none loaded)."""
    if not state.active_form_config:
        return []
    return [FieldDescriptor.model_validate(f) for f in state.active_form_config.get("fields", [])]


class _Store:
    def __init__(self, api: ApiClient, *, clock: Callable[[], float] = time.monotonic):
        self.api = api
        self.clock = clock
        self.loading = False
        self.error: dict[str, Any] | None = None

    def _is_stale(self, last_fetched: float | None) -> bool:
        if last_fetched is None:
            return True
        return self.clock() - last_fetched >= STALE_AFTER_SECONDS

    def _begin(self) -> None:
        self.loading = True
        self.error = None

    def _fail(self, exc: ApiError) -> None:
        logger.info("Store call failed: %s (status=%s)", exc.message, exc.status)
        self.error = exc.serialize()

    def reset_error(self) -> None:
        self.error = None


class FormConfigStore(_Store):
    def __init__(self, api: ApiClient, *, clock: Callable[[], float] = time.monotonic):
        super().__init__(api, clock=clock)
        self.form_configs: list[dict[str, Any]] = []
        self.active_form_config: dict[str, Any] | None = None
        self.last_fetched: float | None = None
        self.active_last_fetched: float | None = None

    @property
    def is_stale(self) -> bool:
        return self._is_stale(self.last_fetched)

    async def fetch_form_configurations(self, *, force: bool = False) -> list[dict[str, Any]]:
        if not force and not self._is_stale(self.last_fetched):
            return self.form_configs
        self._begin()
        try:
            self.form_configs = await self.api.get(
                FORM_CONFIG_PATH, default_message="Failed to fetch form configurations"
            )
            self.last_fetched = self.clock()
        except ApiError as e:
            self._fail(e)
        finally:
            self.loading = False
        return self.form_configs

    async def load_active_form_config(self, *, force: bool = False) -> dict[str, Any] | None:
        """Load the active configuration. A 404 means "none active", not an error."""
        if not force and not self._is_stale(self.active_last_fetched):
            return self.active_form_config
        self._begin()
        try:
            self.active_form_config = await self.api.get(
                f"{FORM_CONFIG_PATH}/active",
                default_message="Failed to load active form configuration",
            )
            self.active_last_fetched = self.clock()
        except ApiError as e:
            if e.status == 404:
                self.active_form_config = None
                self.active_last_fetched = self.clock()
            else:
                self._fail(e)
        finally:
            self.loading = False
        return self.active_form_config

    async def create_form_configuration(self, payload: dict[str, Any]) -> dict[str, Any] | None:
        self._begin()
        try:
            created = await self.api.post(
                FORM_CONFIG_PATH, json=payload, default_message="Failed to create form configuration"
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        if created.get("isActive"):
            self._mark_active(created)
        self.form_configs.insert(0, created)
        return created

    async def update_form_configuration(
        self, config_id: Any, payload: dict[str, Any]
    ) -> dict[str, Any] | None:
        self._begin()
        try:
            updated = await self.api.put(
                f"{FORM_CONFIG_PATH}/{config_id}",
                json=payload,
                default_message="Failed to update form configuration",
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        self.form_configs = [updated if _same_id(c, config_id) else c for c in self.form_configs]
        if updated.get("isActive"):
            self._mark_active(updated)
        return updated

    async def activate_form_configuration(self, config_id: Any) -> dict[str, Any] | None:
        self._begin()
        try:
            activated = await self.api.patch(
                f"{FORM_CONFIG_PATH}/{config_id}/activate",
                default_message="Failed to activate form configuration",
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        self._mark_active(activated)
        return activated

    async def delete_form_configuration(self, config_id: Any) -> bool:
        self._begin()
        try:
            await self.api.delete(
                f"{FORM_CONFIG_PATH}/{config_id}",
                default_message="Failed to delete form configuration",
            )
        except ApiError as e:
            self._fail(e)
            return False
        finally:
            self.loading = False
        self.form_configs = [c for c in self.form_configs if not _same_id(c, config_id)]
        if self.active_form_config and _same_id(self.active_form_config, config_id):
            self.active_form_config = None
        return True

    def _mark_active(self, active: dict[str, Any]) -> None:
        self.active_form_config = active
        self.active_last_fetched = self.clock()
        self.form_configs = [
            {**c, "isActive": _same_id(c, active.get("id"))} for c in self.form_configs
        ]


class NamingRequestStore(_Store):
    def __init__(self, api: ApiClient, *, clock: Callable[[], float] = time.monotonic):
        super().__init__(api, clock=clock)
        self.requests: list[dict[str, Any]] = []
        self.my_requests: list[dict[str, Any]] = []
        self.current_request: dict[str, Any] | None = None
        self.pagination: dict[str, int] = {"page": 1, "perPage": 20, "total": 0, "pages": 1}
        self.last_fetched: float | None = None

    async def submit_form(
        self, form: FormState, *, title: str | None = None, as_draft: bool = False
    ) -> dict[str, Any] | None:
        """Validate locally, then send the form values as one request."""
        if not as_draft and not form.validate():
            self.error = ApiError(
                "Form data is invalid", details={"errors": dict(form.errors)}
            ).serialize()
            return None
        return await self.create_request(
            form.submission_data(), title=title, status="draft" if as_draft else "submitted"
        )

    async def create_request(
        self,
        form_data: dict[str, Any],
        *,
        title: str | None = None,
        status: str = "submitted",
    ) -> dict[str, Any] | None:
        body: dict[str, Any] = {"formData": form_data, "status": status}
        if title:
            body["title"] = title
        self._begin()
        try:
            created = await self.api.post(
                NAME_REQUESTS_PATH, json=body, default_message="Failed to create naming request"
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        self.my_requests.insert(0, created)
        self.current_request = created
        self.pagination["total"] += 1
        return created

    async def fetch_my_requests(self, *, force: bool = False) -> list[dict[str, Any]]:
        if not force and not self._is_stale(self.last_fetched):
            return self.my_requests
        self._begin()
        try:
            self.my_requests = await self.api.get(
                f"{NAME_REQUESTS_PATH}/my-requests", default_message="Failed to fetch my requests"
            )
            self.last_fetched = self.clock()
        except ApiError as e:
            self._fail(e)
        finally:
            self.loading = False
        return self.my_requests

    async def fetch_requests(
        self,
        *,
        status: str | None = None,
        search: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> list[dict[str, Any]]:
        self._begin()
        try:
            data = await self.api.get(
                NAME_REQUESTS_PATH,
                params={"status": status, "search": search, "page": page, "per_page": per_page},
                default_message="Failed to fetch naming requests",
            )
        except ApiError as e:
            self._fail(e)
            return self.requests
        finally:
            self.loading = False
        self.requests = data["items"]
        self.pagination = {
            "page": data["page"],
            "perPage": data["perPage"],
            "total": data["total"],
            "pages": data["pages"],
        }
        return self.requests

    async def fetch_request(self, request_id: Any) -> dict[str, Any] | None:
        self._begin()
        try:
            self.current_request = await self.api.get(
                f"{NAME_REQUESTS_PATH}/{request_id}", default_message="Failed to fetch request"
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        return self.current_request

    async def hold(self, request_id: Any, comment: str | None = None) -> dict[str, Any] | None:
        return await self._change(request_id, "hold", comment, "Failed to put request on hold")

    async def cancel(self, request_id: Any, comment: str | None = None) -> dict[str, Any] | None:
        return await self._change(request_id, "cancel", comment, "Failed to cancel request")

    async def activate(self, request_id: Any, comment: str | None = None) -> dict[str, Any] | None:
        return await self._change(request_id, "activate", comment, "Failed to resume request")

    async def _change(
        self, request_id: Any, action: str, comment: str | None, message: str
    ) -> dict[str, Any] | None:
        self._begin()
        try:
            updated = await self.api.patch(
                f"{NAME_REQUESTS_PATH}/{request_id}/{action}",
                json={"comment": comment},
                default_message=message,
            )
        except ApiError as e:
            self._fail(e)
            return None
        finally:
            self.loading = False
        self._replace(updated)
        return updated

    def _replace(self, updated: dict[str, Any]) -> None:
        self.requests = [updated if _same_id(r, updated["id"]) else r for r in self.requests]
        self.my_requests = [updated if _same_id(r, updated["id"]) else r for r in self.my_requests]
        if self.current_request and _same_id(self.current_request, updated["id"]):
            self.current_request = updated

    async def load_draft(self) -> dict[str, Any] | None:
        """Server-side draft for the current user, or None when there is none."""
        try:
            return await self.api.get(DRAFT_PATH, default_message="Failed to load draft")
        except ApiError as e:
            if e.status == 404:
                return None
            self._fail(e)
            return None

    async def save_draft(self, form_data: dict[str, Any]) -> dict[str, Any]:
        """Persist the in-progress form. Raises ApiError so callers can retry."""
        return await self.api.put(
            DRAFT_PATH, json={"formData": form_data}, default_message="Failed to save draft"
        )

    async def discard_draft(self) -> None:
        await self.api.delete(DRAFT_PATH, default_message="Failed to delete draft")
