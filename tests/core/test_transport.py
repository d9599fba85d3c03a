"""Tests for the core transport module."""

from __future__ import annotations

import logging

import httpx
import pytest
from pytest_httpx import HTTPXMock

from weixin_api.core import HTTPClientConfig, StaticTokenSource, WeixinClient
from weixin_api.core.transport import decode_json, decode_model, encode_json, json_field
from weixin_api.exceptions import DecodeError, TransportError


class TestWeixinClient:
    """Tests for WeixinClient lifecycle and requests."""

    def test_init_defaults(self) -> None:
        """Test client initialization."""
        client = WeixinClient()

        assert client.base_url == "https://api.weixin.qq.com"
        assert client.token_source is None
        assert client.token_param == "access_token"
        assert client.timeout == 10.0
        assert client._client is None

    def test_from_config(self) -> None:
        """Test building clients from HTTP settings."""
        config = HTTPClientConfig(timeout=3.0)

        client = WeixinClient.from_config(config)
        work_client = WeixinClient.from_config(config, work=True)

        assert client.base_url == "https://api.weixin.qq.com"
        assert client.timeout == 3.0
        assert work_client.base_url == "https://qyapi.weixin.qq.com"

    @pytest.mark.anyio
    async def test_connect_and_close(self) -> None:
        """Test connecting and closing client."""
        client = WeixinClient()

        await client.connect()
        assert client._client is not None

        await client.close()
        assert client._client is None

    def test_ensure_client_raises_when_not_connected(self) -> None:
        """Test _ensure_client raises when not connected."""
        with pytest.raises(RuntimeError, match="not connected"):
            WeixinClient()._ensure_client()

    @pytest.mark.anyio
    async def test_get_appends_token(self, httpx_mock: HTTPXMock) -> None:
        """Test authorized GET requests carry the access token."""
        httpx_mock.add_response(content=b'{"ok": true}')

        async with WeixinClient(token_source=StaticTokenSource("TOKEN")) as client:
            body = await client.get("/cgi-bin/ticket/getticket", {"type": "jsapi"})

        assert body == b'{"ok": true}'
        request = httpx_mock.get_request()
        assert request.method == "GET"
        assert request.url.host == "api.weixin.qq.com"
        assert request.url.path == "/cgi-bin/ticket/getticket"
        assert dict(request.url.params) == {"type": "jsapi", "access_token": "TOKEN"}

    @pytest.mark.anyio
    async def test_get_unauthorized_skips_token(self, httpx_mock: HTTPXMock) -> None:
        """Test unauthorized requests never carry the token."""
        httpx_mock.add_response(content=b"{}")

        async with WeixinClient(token_source=StaticTokenSource("TOKEN")) as client:
            await client.get("/sns/auth", {"openid": "O"}, authorized=False)

        request = httpx_mock.get_request()
        assert "access_token" not in request.url.params
        assert request.url.params["openid"] == "O"

    @pytest.mark.anyio
    async def test_post_sends_raw_body(self, httpx_mock: HTTPXMock) -> None:
        """Test POST forwards the body and content type untouched."""
        httpx_mock.add_response(content=b'{"errcode": 0}')
        payload = b'{"touser": "@all"}'

        async with WeixinClient(
            token_source=StaticTokenSource("CT"), token_param="component_access_token"
        ) as client:
            body = await client.post("/cgi-bin/message/send", payload)

        assert body == b'{"errcode": 0}'
        request = httpx_mock.get_request()
        assert request.method == "POST"
        assert request.content == payload
        assert request.headers["Content-Type"] == "application/json;charset=utf-8"
        assert request.url.params["component_access_token"] == "CT"

    @pytest.mark.anyio
    async def test_connection_error_raises_transport_error(self, httpx_mock: HTTPXMock) -> None:
        """Test network failures surface as TransportError."""
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))

        async with WeixinClient() as client:
            with pytest.raises(TransportError) as exc_info:
                await client.get("/sns/auth")

        assert exc_info.value.path == "/sns/auth"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.anyio
    async def test_connection_error_hides_credentials(
        self, httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test failure logs and messages never echo the request URL."""
        httpx_mock.add_exception(
            httpx.ConnectError(
                "failed to connect to https://api.weixin.qq.com/sns/oauth2/access_token"
                "?appid=wx1&secret=APP_SECRET&access_token=SECRET_TOKEN"
            )
        )

        with caplog.at_level(logging.ERROR, logger="weixin.transport"):
            async with WeixinClient(token_source=StaticTokenSource("SECRET_TOKEN")) as client:
                with pytest.raises(TransportError) as exc_info:
                    await client.get("/sns/oauth2/access_token", {"secret": "APP_SECRET"})

        assert "ConnectError" in str(exc_info.value)
        for text in (str(exc_info.value), caplog.text):
            assert "SECRET_TOKEN" not in text
            assert "APP_SECRET" not in text
        assert "/sns/oauth2/access_token failed: ConnectError" in caplog.text

    @pytest.mark.anyio
    async def test_timeout_raises_transport_error(self, httpx_mock: HTTPXMock) -> None:
        """Test timeouts surface as TransportError."""
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))

        async with WeixinClient() as client:
            with pytest.raises(TransportError):
                await client.post("/cgi-bin/message/send", b"{}")

    @pytest.mark.anyio
    async def test_http_status_error_raises_transport_error(self, httpx_mock: HTTPXMock) -> None:
        """Test non-2xx responses surface as TransportError."""
        httpx_mock.add_response(status_code=502, content=b"Bad Gateway")

        async with WeixinClient() as client:
            with pytest.raises(TransportError, match="502"):
                await client.get("/sns/userinfo")


class TestJsonHelpers:
    """Tests for JSON encoding and decoding helpers."""

    def test_encode_json_keeps_unicode(self) -> None:
        """Test payloads are UTF-8 encoded without ASCII escaping."""
        assert encode_json({"name": "群聊"}) == '{"name": "群聊"}'.encode()

    def test_decode_json_object(self) -> None:
        """Test decoding a JSON object."""
        assert decode_json(b'{"errcode": 0}') == {"errcode": 0}

    def test_json_field_treats_null_as_missing(self) -> None:
        """Test null and absent keys both fall back to the default."""
        data = {"errcode": None, "errmsg": "ok", "count": 0}

        assert json_field(data, "errcode", 0) == 0
        assert json_field(data, "missing", "") == ""
        assert json_field(data, "errmsg", "") == "ok"
        assert json_field(data, "count", 5) == 0

    def test_decode_json_invalid_body(self) -> None:
        """Test the raw body becomes the error message."""
        with pytest.raises(DecodeError) as exc_info:
            decode_json(b"invalid_grant")

        assert str(exc_info.value) == "invalid_grant"
        assert exc_info.value.body == b"invalid_grant"

    def test_decode_json_rejects_non_object(self) -> None:
        """Test JSON that is not an object is a decode failure."""
        with pytest.raises(DecodeError, match=r"\[1, 2\]"):
            decode_json(b"[1, 2]")

    def test_decode_model_shape_mismatch(self) -> None:
        """Test record construction errors become DecodeError."""

        def factory(data: dict) -> int:
            return int(data["value"])

        with pytest.raises(DecodeError) as exc_info:
            decode_model(b'{"value": "abc"}', factory)

        assert '"abc"' in str(exc_info.value)
