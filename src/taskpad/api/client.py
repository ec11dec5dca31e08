# src/taskpad/api/client.py

"""HTTP clients for the task backend.

Two channels with different trust levels:
- AuthenticatedApiClient attaches `Authorization: Bearer <token>` per request,
  taking the token from an injected CredentialProvider.
- PublicApiClient never sends a credential.

All calls use httpx.AsyncClient so they do not block the event loop.
Reads are JSON; task create/update bodies are multipart/form-data.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import httpx

from ..core.models import Category, TaskRecord, User
from ..core.ports import CredentialProvider
from ..logging_setup import SERVER_DETAIL

if TYPE_CHECKING:
    from ..forms.payload import TaskPayload

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for non-2xx responses and transport failures."""

    def __init__(self, message: str, *, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class TaskNotFoundError(ApiError):
    """GET /api/tasks/{id}/ returned 404."""


def friendly_api_error_message(err: Exception) -> str:
    """Non-technical text for an API failure. Never includes the raw server body."""
    if isinstance(err, ApiError):
        if err.status_code is None:
            return "Cannot reach the server. Check your connection and try again."
        if err.status_code in (401, 403):
            return "You are not signed in or your session has expired."
        if err.status_code == 404:
            return "The requested item was not found."
        if err.status_code == 413:
            return "The attached files are too large."
        if 400 <= err.status_code < 500:
            return "The server rejected the request. Check the form and try again."
        return "The server had a problem. Try again later."
    return "Unexpected error. Try again later."


def _decode_json(resp: httpx.Response) -> Any:
    if not resp.content:
        return {}
    try:
        return resp.json()
    except ValueError:
        return resp.text


def _results(data: Any) -> list[dict[str, Any]]:
    # Plain lists and DRF paginated objects are both accepted.
    if isinstance(data, dict):
        data = data.get("results", [])
    if not isinstance(data, list):
        raise ApiError("Expected a JSON list", detail=data)
    return [item for item in data if isinstance(item, dict)]


class _BaseApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_http = http_client is None
        self._http = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(base_url=base_url, timeout=timeout)
        )

    def _auth_headers(self) -> dict[str, str]:
        return {}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}
        try:
            resp = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            raise ApiError(f"{method} {path} failed: {e.__class__.__name__}") from e

        if resp.is_success:
            return _decode_json(resp)

        detail = _decode_json(resp)
        logger.warning("%s %s -> %s: %s", method, path, resp.status_code, detail, extra=SERVER_DETAIL)
        cls = TaskNotFoundError if resp.status_code == 404 and path.startswith("/api/tasks/") else ApiError
        raise cls(f"{method} {path} -> {resp.status_code}", status_code=resp.status_code, detail=detail)

    async def aclose(self) -> None:
        if self._owns_http:
            await self._http.aclose()


class AuthenticatedApiClient(_BaseApiClient):
    def __init__(
        self,
        base_url: str,
        credentials: CredentialProvider,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, http_client=http_client)
        self._credentials = credentials

    def _auth_headers(self) -> dict[str, str]:
        token = self._credentials.get_token()
        if not token:
            logger.debug("No access token available; sending request without credentials")
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def get_task(self, task_id: int | str) -> TaskRecord:
        data = await self._request("GET", f"/api/tasks/{task_id}/")
        if not isinstance(data, dict):
            raise ApiError("Expected a JSON object", detail=data)
        return TaskRecord.from_api(data)

    async def list_users(self) -> list[User]:
        data = await self._request("GET", "/api/users/")
        return [User.from_api(item) for item in _results(data)]

    async def create_task(self, payload: TaskPayload) -> dict[str, Any]:
        return await self._request("POST", "/api/tasks/", files=payload.to_multipart())

    async def update_task(self, task_id: int | str, payload: TaskPayload) -> dict[str, Any]:
        return await self._request("PUT", f"/api/tasks/{task_id}/", files=payload.to_multipart())


class PublicApiClient(_BaseApiClient):
    def __init__(
        self,
        base_url: str,
        *,
        category_defaults_path: str = "/api/categories/",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(base_url, timeout=timeout, http_client=http_client)
        self._category_defaults_path = category_defaults_path

    async def list_categories(self) -> list[Category]:
        data = await self._request("GET", "/api/categories/")
        return [Category.from_api(item) for item in _results(data)]

    async def ensure_default_categories(self) -> None:
        # The backend seeds its defaults when this endpoint is hit; the body is not used.
        await self._request("GET", self._category_defaults_path)

    async def register(self, body: dict[str, str], *, timeout: float | None = None) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"json": body}
        if timeout is not None:
            kwargs["timeout"] = timeout
        return await self._request("POST", "/api/register/", **kwargs)
