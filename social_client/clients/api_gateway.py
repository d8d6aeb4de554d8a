"""Async HTTP gateway: credentials, envelope normalization and error classification."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

import httpx
from fastapi import status

from ..config import get_settings
from ..constants import AUTH_ENDPOINTS
from ..security.token_store import TokenStore
from .results import (
    ApiError,
    ApiResult,
    ClientError,
    Forbidden,
    ServerError,
    Unauthorized,
    Unreachable,
    field_errors_from,
)

logger = logging.getLogger(__name__)

_BODYLESS_METHODS = frozenset({"GET", "DELETE"})


def normalize_envelope(envelope: Any) -> Any:
    """Extract the meaningful payload from a server response envelope.

    Endpoints wrap their payloads inconsistently, so the lookup order below is
    significant and callers rely on it:

    1. ``data.user``
    2. ``data.post``
    3. the paginated shape ``{data: [...], pagination}`` (or a bare ``data`` array)
    4. ``data`` when it is any other non-empty object
    5. top-level ``user`` then ``post``
    6. the envelope itself
    """

    if not isinstance(envelope, dict):
        return envelope

    data = envelope.get("data")
    if isinstance(data, dict) and data:
        if data.get("user") is not None:
            return data["user"]
        if data.get("post") is not None:
            return data["post"]
        # Nested ``{data, pagination}`` page, or any other object payload
        return data
    if isinstance(data, list):
        # A sibling pagination block means the envelope itself is the page
        if "pagination" in envelope:
            return envelope
        return data

    if envelope.get("user") is not None:
        return envelope["user"]
    if envelope.get("post") is not None:
        return envelope["post"]
    return envelope


def _message_from(payload: Any) -> str | None:
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def classify_status(status_code: int, payload: Any = None, *, path: str | None = None) -> ApiError:
    """Map a non-success HTTP status onto the client error taxonomy."""

    message = _message_from(payload)
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return Unauthorized(message, status=status_code, path=path)
    if status_code == status.HTTP_403_FORBIDDEN:
        return Forbidden(message, status=status_code, path=path)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ServerError(message, status=status_code, path=path)
    return ClientError(
        message or f"Request failed with status {status_code}",
        status=status_code,
        path=path,
        field_errors=field_errors_from(payload),
    )


def is_auth_endpoint(path: str) -> bool:
    """True for the login/signup endpoints, whose 401s mean bad credentials."""

    bare = path.split("?", 1)[0].rstrip("/")
    return any(bare.endswith(endpoint) for endpoint in AUTH_ENDPOINTS)


class ApiGateway:
    """Single entry point for every request the client sends to the service.

    The gateway never raises for HTTP or transport failures. Each call returns an
    :class:`ApiResult` holding either the normalized payload or one classified
    :class:`ApiError`.
    """

    def __init__(
        self,
        token_store: TokenStore,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._token_store = token_store
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._timeout = float(timeout if timeout is not None else settings.request_timeout)
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=transport,
            follow_redirects=True,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token_store(self) -> TokenStore:
        return self._token_store

    async def __aenter__(self) -> "ApiGateway":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _build_headers(self, method: str) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        token = self._token_store.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if method not in _BODYLESS_METHODS:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _parse_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        params: Mapping[str, Any] | None = None,
        normalize: bool = True,
    ) -> ApiResult[Any]:
        """Send ``method path`` and return the normalized payload or a classified error.

        ``normalize=False`` hands back the parsed envelope untouched, for the few
        endpoints whose callers need sibling fields (the auth token, health data).
        """

        verb = method.upper()
        headers = self._build_headers(verb)
        kwargs: dict[str, Any] = {"headers": headers}
        if params:
            kwargs["params"] = {key: value for key, value in params.items() if value is not None}
        if body is not None and verb not in _BODYLESS_METHODS:
            kwargs["json"] = body

        try:
            # httpx times each phase separately; bound the request as a whole
            response = await asyncio.wait_for(
                self._client.request(verb, path, **kwargs),
                timeout=self._timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError, TimeoutError) as exc:
            logger.error(
                "ApiGateway timeout | method=%s path=%s timeout=%s error=%s",
                verb,
                path,
                self._timeout,
                type(exc).__name__,
            )
            return ApiResult.failure(Unreachable("Request timed out", path=path, cause=exc))
        except httpx.HTTPError as exc:
            logger.error(
                "ApiGateway transport error | method=%s path=%s error=%s",
                verb,
                path,
                type(exc).__name__,
            )
            return ApiResult.failure(Unreachable(path=path, cause=exc))

        payload = self._parse_body(response)

        if response.is_success:
            if not isinstance(payload, (dict, list)):
                return ApiResult.success(None)
            return ApiResult.success(normalize_envelope(payload) if normalize else payload)

        error = classify_status(response.status_code, payload, path=path)
        if isinstance(error, Unauthorized):
            logger.warning("ApiGateway unauthorized | method=%s path=%s", verb, path)
            if not is_auth_endpoint(path):
                self._token_store.remove_token()
                logger.info("Stored token removed after 401 | path=%s", path)
        elif isinstance(error, Forbidden):
            logger.warning("Access forbidden | method=%s path=%s", verb, path)
        else:
            logger.debug("ApiGateway request failed | method=%s path=%s status=%s", verb, path, response.status_code)
        return ApiResult.failure(error)

    async def get(self, path: str, *, params: Mapping[str, Any] | None = None, normalize: bool = True) -> ApiResult[Any]:
        return await self.request("GET", path, params=params, normalize=normalize)

    async def post(self, path: str, body: Any = None, *, normalize: bool = True) -> ApiResult[Any]:
        return await self.request("POST", path, body, normalize=normalize)

    async def put(self, path: str, body: Any = None) -> ApiResult[Any]:
        return await self.request("PUT", path, body)

    async def delete(self, path: str) -> ApiResult[Any]:
        return await self.request("DELETE", path)


__all__ = ["ApiGateway", "classify_status", "is_auth_endpoint", "normalize_envelope"]
