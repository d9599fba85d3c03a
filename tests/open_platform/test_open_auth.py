"""Tests for open platform third-party authorization."""

from __future__ import annotations

import json
from urllib.parse import parse_qs, urlsplit

import pytest
from pytest_httpx import HTTPXMock

from weixin_api.exceptions import DecodeError, WeixinAPIError
from weixin_api.open_platform import (
    AUTH_TYPE_ALL,
    AUTH_TYPE_OFFICIAL_ACCOUNT,
    OpenPlatformAuth,
    PreauthCode,
)


@pytest.fixture
def auth(weixin_config, component_client) -> OpenPlatformAuth:
    return OpenPlatformAuth(weixin_config.open_platform, component_client)


class TestCreatePreauthCode:
    """Tests for creating pre-authorization codes."""

    @pytest.mark.anyio
    async def test_create_preauth_code(self, auth, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(json={"pre_auth_code": "PAC", "expires_in": 600})

        async with auth.client:
            code = await auth.create_preauth_code()

        assert code == PreauthCode(pre_auth_code="PAC", expires_in=600)
        request = httpx_mock.get_request()
        assert request.method == "POST"
        assert request.url.path == "/cgi-bin/component/api_create_preauthcode"
        assert request.url.params["component_access_token"] == "COMPONENT_TOKEN"
        assert json.loads(request.content) == {"component_appid": "wxcomponent01"}

    @pytest.mark.anyio
    async def test_errcode_raises_api_error(self, auth, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={"errcode": 61004, "errmsg": "access clientip is not registered"}
        )

        async with auth.client:
            with pytest.raises(WeixinAPIError) as exc_info:
                await auth.create_preauth_code()

        assert exc_info.value.errcode == 61004
        assert exc_info.value.errmsg == "access clientip is not registered"

    @pytest.mark.anyio
    async def test_null_errcode_counts_as_success(self, auth, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            json={"errcode": None, "errmsg": None, "pre_auth_code": "PAC", "expires_in": None}
        )

        async with auth.client:
            code = await auth.create_preauth_code()

        assert code == PreauthCode(pre_auth_code="PAC", expires_in=0)

    @pytest.mark.anyio
    async def test_wrong_shape_surfaces_raw_body(self, auth, httpx_mock: HTTPXMock) -> None:
        body = b'{"pre_auth_code": "PAC", "expires_in": "soon"}'
        httpx_mock.add_response(content=body)

        async with auth.client:
            with pytest.raises(DecodeError) as exc_info:
                await auth.create_preauth_code()

        assert exc_info.value.body == body
        assert len(httpx_mock.get_requests()) == 1

    @pytest.mark.anyio
    async def test_non_json_surfaces_raw_body(self, auth, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(content=b"upstream unavailable")

        async with auth.client:
            with pytest.raises(DecodeError) as exc_info:
                await auth.create_preauth_code()

        assert str(exc_info.value) == "upstream unavailable"


class TestAuthorizationRedirectUri:
    """Tests for building authorization page URLs."""

    def test_login_page(self, auth) -> None:
        url = auth.get_authorization_redirect_uri("PAC", "https://example.com/cb")

        parts = urlsplit(url)
        assert parts.netloc == "mp.weixin.qq.com"
        assert parts.path == "/cgi-bin/componentloginpage"
        assert parts.fragment == ""
        query = parse_qs(parts.query)
        assert query["component_appid"] == ["wxcomponent01"]
        assert query["pre_auth_code"] == ["PAC"]
        assert query["redirect_uri"] == ["https://example.com/cb"]
        assert "biz_appid" not in query
        assert "agentid" not in query

    def test_mobile_variant_appends_fragment(self, auth) -> None:
        url = auth.get_mobile_authorization_redirect_uri(
            "PAC", "https://example.com/cb", "wxbiz", AUTH_TYPE_ALL
        )

        parts = urlsplit(url)
        assert parts.path == "/safe/bindcomponent"
        assert url.endswith("#wechat_redirect")
        assert parse_qs(parts.query)["biz_appid"] == ["wxbiz"]
        assert "agentid" not in parse_qs(parts.query)

    def test_variants_share_query(self, auth) -> None:
        args = ("PAC", "https://example.com/cb", "wxbiz", 0)

        login = urlsplit(auth.get_authorization_redirect_uri(*args))
        mobile = urlsplit(auth.get_mobile_authorization_redirect_uri(*args))

        assert login.query == mobile.query

    @pytest.mark.parametrize(
        ("auth_type", "expected"),
        [
            (0, ["0"]),
            (-1, ["-1"]),
            (AUTH_TYPE_OFFICIAL_ACCOUNT, None),
            (AUTH_TYPE_ALL, None),
        ],
    )
    def test_auth_type_only_sent_below_one(self, auth, auth_type, expected) -> None:
        url = auth.get_authorization_redirect_uri("PAC", "https://example.com/cb", "", auth_type)

        query = parse_qs(urlsplit(url).query)
        assert query.get("auth_type") == expected


class TestPassthroughs:
    """Tests for raw authorizer API passthroughs."""

    @pytest.mark.anyio
    @pytest.mark.parametrize(
        ("method", "path"),
        [
            ("query_auth", "/cgi-bin/component/api_query_auth"),
            ("authorizer_token", "/cgi-bin/component/api_authorizer_token"),
            ("get_authorizer_info", "/cgi-bin/component/api_get_authorizer_info"),
            ("get_authorizer_option", "/cgi-bin/component/api_get_authorizer_option"),
            ("set_authorizer_option", "/cgi-bin/component/api_set_authorizer_option"),
            ("get_authorizer_list", "/cgi-bin/component/api_get_authorizer_list"),
        ],
    )
    async def test_passthrough(self, auth, httpx_mock: HTTPXMock, method, path) -> None:
        response_body = b'{"errcode":0,"raw":"\xe4\xb8\xad"}'
        httpx_mock.add_response(content=response_body)
        payload = b'{"component_appid":"wxcomponent01","authorizer_appid":"wxauth"}'

        async with auth.client:
            body = await getattr(auth, method)(payload)

        assert body == response_body
        request = httpx_mock.get_request()
        assert request.method == "POST"
        assert request.url.path == path
        assert request.content == payload
        assert request.headers["Content-Type"] == "application/json;charset=utf-8"

    @pytest.mark.anyio
    async def test_passthrough_does_not_decode(self, auth, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(content=b"not json at all")

        async with auth.client:
            body = await auth.query_auth(b"{}")

        assert body == b"not json at all"
