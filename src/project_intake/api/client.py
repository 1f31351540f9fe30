"""
API Client.

Thin async wrapper over httpx. Every authenticated request carries the
bearer token supplied by the injected token provider; the provider is the
only thing this package knows about authentication.

Responses are unwrapped the same way for every endpoint: if the JSON body
has a `data` key its value is returned, otherwise the body itself.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable

import httpx

from project_intake.config import settings
from project_intake.errors import (
    ApiError,
    AuthExpiredError,
    NotFoundError,
    TransportError,
    UploadError,
)

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None | Awaitable[str | None]]


class ApiClient:
    """Async JSON client for the marketplace API."""

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _auth_headers(self) -> dict[str, str]:
        if self._token_provider is None:
            return {}
        token = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        headers = await self._auth_headers()
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.TransportError as e:
            logger.warning(f"{method} {path} failed before a response: {e}")
            raise TransportError(f"Could not reach the server: {e}") from e

        _raise_for_status(method, path, response)
        return _unwrap(response)

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json if json is not None else {})

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def patch(self, path: str, json: Any = None) -> Any:
        return await self.request("PATCH", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def put_bytes(self, url: str, content: bytes, content_type: str) -> None:
        """
        Direct binary transfer to a pre-signed URL.

        The URL is absolute and already authorizes the write, so no bearer
        token is attached.
        """
        try:
            response = await self._client.put(
                url, content=content, headers={"Content-Type": content_type}
            )
        except httpx.TransportError as e:
            raise UploadError(f"Failed to upload file: {e}") from e
        if response.is_error:
            raise UploadError(f"Failed to upload file (HTTP {response.status_code})")


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message") or ""
        if isinstance(error, str):
            return error
        return body.get("message") or ""
    return ""


def _raise_for_status(method: str, path: str, response: httpx.Response) -> None:
    if response.is_success:
        return
    message = _error_message(response)
    status = response.status_code
    if status == 401:
        raise AuthExpiredError(message or "Authentication expired")
    if status == 404:
        raise NotFoundError(message or f"{path} not found")
    logger.error(f"{method} {path} returned HTTP {status}: {message}")
    raise ApiError(status, message)


def _unwrap(response: httpx.Response) -> Any:
    if response.status_code == 204 or not response.content:
        return None
    try:
        body = response.json()
    except ValueError as e:
        # e.g. an HTML page from a proxy in front of the API
        logger.warning(f"Non-JSON body from {response.request.url}: {e}")
        raise ApiError(response.status_code, "Invalid response body") from e
    if isinstance(body, dict) and body.get("data") is not None:
        return body["data"]
    return body


def build_client(
    token_provider: TokenProvider | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ApiClient:
    """Build a client from settings. Falls back to the static token in settings."""
    if token_provider is None and settings.intake_api_token:
        static_token = settings.intake_api_token
        token_provider = lambda: static_token  # noqa: E731
    return ApiClient(
        base_url=settings.intake_api_url,
        token_provider=token_provider,
        timeout=settings.request_timeout_seconds,
        transport=transport,
    )
