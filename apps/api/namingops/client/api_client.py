"""Async HTTP client for the NamingOps API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from namingops.client.config import client_settings
from namingops.client.storage import TOKEN_KEY, LocalStorage

logger = logging.getLogger(__name__)

MOCK_ROLE_HEADER = "X-Mock-Role"


class ApiError(Exception):
    """A failed API call, reduced to plain serializable data."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        details: Any = None,
        debug: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details
        self.debug = debug

    @property
    def validation_errors(self) -> dict[str, str]:
        if isinstance(self.details, dict):
            detail = self.details.get("detail")
            if isinstance(detail, dict) and isinstance(detail.get("errors"), dict):
                return detail["errors"]
        return {}

    def serialize(self, include_debug: bool | None = None) -> dict[str, Any]:
        """Shape stored in a store's ``error`` field. ``_debug`` only in dev."""
        if include_debug is None:
            include_debug = client_settings.is_dev
        data: dict[str, Any] = {
            "message": self.message,
            "status": self.status,
            "details": self.details,
        }
        if include_debug and self.debug is not None:
            data["_debug"] = self.debug
        return data

    @classmethod
    def from_response(cls, response: httpx.Response, default_message: str) -> "ApiError":
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text or None

        message = default_message
        if isinstance(body, dict):
            detail = body.get("detail", body.get("message"))
            if isinstance(detail, str):
                message = detail
            elif isinstance(detail, dict) and isinstance(detail.get("message"), str):
                message = detail["message"]

        request = response.request
        debug = {
            "url": str(request.url),
            "method": request.method,
            "statusText": response.reason_phrase,
            "contentType": response.headers.get("content-type"),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return cls(message, status=response.status_code, details=body, debug=debug)

    @classmethod
    def from_transport_error(cls, exc: httpx.HTTPError, default_message: str) -> "ApiError":
        debug = {
            "error": type(exc).__name__,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        return cls(default_message, status=None, details=str(exc), debug=debug)


class ApiClient:
    """
    Thin wrapper over httpx.AsyncClient.

    Adds the bearer token (explicit, or read from local storage) and the
    development role override header to every request. Non-2xx responses
    and transport failures are raised as ApiError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        mock_role: str | None = None,
        storage: LocalStorage | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | None = None,
    ):
        self.token = token
        self.mock_role = mock_role
        self.storage = storage
        self._client = httpx.AsyncClient(
            base_url=base_url or client_settings.API_URL,
            transport=transport,
            timeout=timeout or client_settings.API_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        token = self.token
        if token is None and self.storage is not None:
            token = self.storage.get(TOKEN_KEY)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self.mock_role:
            headers[MOCK_ROLE_HEADER] = self.mock_role
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        default_message: str = "Request failed",
    ) -> Any:
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self._headers()
            )
        except httpx.HTTPError as exc:
            logger.warning("API %s %s failed: %s", method, path, type(exc).__name__)
            raise ApiError.from_transport_error(exc, default_message) from exc

        if response.is_error:
            raise ApiError.from_response(response, default_message)
        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs) -> Any:
        return await self.request("DELETE", path, **kwargs)
