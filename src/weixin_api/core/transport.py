"""Shared HTTP transport for WeChat API helpers.

This module provides the transport every API helper holds by reference:
- ``Transport`` protocol (``get`` / ``post`` returning raw bytes)
- ``WeixinClient``, the default httpx implementation
- ``TokenSource`` protocol for injecting access tokens
- JSON decoding helpers that surface the raw body on failure
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

import httpx

from ..exceptions import DecodeError, TransportError
from .config import DEFAULT_API_BASE_URL
from .logger import get_logger

if TYPE_CHECKING:
    from .config import HTTPClientConfig

logger = get_logger("transport")

JSON_CONTENT_TYPE = "application/json;charset=utf-8"

T = TypeVar("T")


class TokenSource(Protocol):
    """Anything able to hand out the current access token.

    Storage, caching and refreshing of the token are the implementer's concern.
    """

    async def get_access_token(self) -> str: ...


class StaticTokenSource:
    """Token source returning a fixed token."""

    def __init__(self, token: str):
        self.token = token

    async def get_access_token(self) -> str:
        return self.token


class Transport(Protocol):
    """HTTP primitives required by the API helpers."""

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        authorized: bool = True,
    ) -> bytes: ...

    async def post(
        self,
        path: str,
        body: bytes,
        content_type: str = JSON_CONTENT_TYPE,
        *,
        authorized: bool = True,
    ) -> bytes: ...


class WeixinClient:
    """httpx based transport for WeChat APIs.

    Requests are sent relative to ``base_url``. When a token source is set and a
    request is ``authorized``, the token is appended as the ``token_param``
    query parameter (``access_token`` for most APIs, ``component_access_token``
    for the open platform).

    No retries are performed; every failure is raised to the caller.

    Example:
        ```python
        async with WeixinClient(token_source=StaticTokenSource("TOKEN")) as client:
            body = await client.get("/cgi-bin/ticket/getticket", {"type": "jsapi"})
        ```
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        token_source: TokenSource | None = None,
        token_param: str = "access_token",
        timeout: float = 10.0,
    ):
        """Initialize the transport.

        Args:
            base_url: API host, e.g. ``https://api.weixin.qq.com``.
            token_source: Provider of the access token for authorized calls.
            token_param: Query parameter name carrying the token.
            timeout: HTTP request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token_source = token_source
        self.token_param = token_param
        self.timeout = timeout

        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_config(
        cls,
        config: HTTPClientConfig,
        token_source: TokenSource | None = None,
        *,
        token_param: str = "access_token",
        work: bool = False,
    ) -> WeixinClient:
        """Create a transport from HTTP client settings.

        Args:
            config: HTTP client configuration.
            token_source: Provider of the access token.
            token_param: Query parameter name carrying the token.
            work: Target the WeCom API host instead of the public one.
        """
        return cls(
            base_url=config.work_api_base_url if work else config.api_base_url,
            token_source=token_source,
            token_param=token_param,
            timeout=config.timeout,
        )

    async def __aenter__(self) -> WeixinClient:
        """Async context manager entry."""
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def connect(self) -> None:
        """Initialize HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                base_url=self.base_url,
            )
            logger.debug("WeixinClient connected to %s", self.base_url)

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.debug("WeixinClient closed")

    def _ensure_client(self) -> httpx.AsyncClient:
        """Ensure HTTP client is initialized."""
        if self._client is None:
            raise RuntimeError(
                "WeixinClient not connected. Use 'async with' or call connect() first."
            )
        return self._client

    async def _build_params(
        self, params: Mapping[str, Any] | None, authorized: bool
    ) -> dict[str, Any]:
        query = dict(params or {})
        if authorized and self.token_source is not None:
            query[self.token_param] = await self.token_source.get_access_token()
        return query

    async def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        authorized: bool = True,
    ) -> bytes:
        """Send a GET request with query parameters.

        Args:
            path: API path relative to the base URL.
            params: Query parameters.
            authorized: Whether to append the access token.

        Returns:
            Raw response body.

        Raises:
            TransportError: On network, timeout or HTTP status failure.
        """
        query = await self._build_params(params, authorized)
        return await self._send("GET", path, params=query)

    async def post(
        self,
        path: str,
        body: bytes,
        content_type: str = JSON_CONTENT_TYPE,
        *,
        authorized: bool = True,
    ) -> bytes:
        """Send a POST request with a raw body.

        Args:
            path: API path relative to the base URL.
            body: Request body, usually serialized JSON.
            content_type: Value of the Content-Type header.
            authorized: Whether to append the access token.

        Returns:
            Raw response body.

        Raises:
            TransportError: On network, timeout or HTTP status failure.
        """
        query = await self._build_params(None, authorized)
        return await self._send(
            "POST",
            path,
            params=query,
            content=body,
            headers={"Content-Type": content_type},
        )

    async def _send(self, method: str, path: str, **kwargs: Any) -> bytes:
        client = self._ensure_client()
        logger.debug("%s %s", method, path)

        try:
            response = await client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "%s %s failed with status %d", method, path, exc.response.status_code
            )
            raise TransportError(
                f"{method} {path} returned HTTP {exc.response.status_code}", path=path
            ) from exc
        except httpx.HTTPError as exc:
            # httpx error text embeds the full URL, credentials included
            reason = type(exc).__name__
            logger.error("%s %s failed: %s", method, path, reason)
            raise TransportError(f"{method} {path} failed: {reason}", path=path) from exc

        return response.content


def encode_json(payload: Any) -> bytes:
    """Serialize a payload the way WeChat expects it (UTF-8, no ASCII escaping)."""
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def json_field(data: dict[str, Any], key: str, default: Any) -> Any:
    """Read a response field, treating JSON null like a missing key."""
    value = data.get(key)
    return default if value is None else value


def decode_json(body: bytes) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        DecodeError: If the body is not a JSON object. The error message is the
            raw body.
    """
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise DecodeError(body) from exc

    if not isinstance(data, dict):
        raise DecodeError(body)
    return data


def decode_model(body: bytes, factory: Callable[[dict[str, Any]], T]) -> T:
    """Decode a response body and build a result record from it.

    Args:
        body: Raw response body.
        factory: Callable turning the decoded object into a record,
            typically a ``from_dict`` classmethod.

    Raises:
        DecodeError: If the body is not JSON or does not fit the record.
    """
    data = decode_json(body)
    try:
        return factory(data)
    except (TypeError, ValueError) as exc:
        raise DecodeError(body) from exc
