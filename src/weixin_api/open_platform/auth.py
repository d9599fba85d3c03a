"""Third-party platform authorization (开放平台 授权) APIs.

This module handles:
- Pre-authorization code creation
- Authorization page URLs (QR code page and mobile link)
- Authorizer token, info and option passthroughs

Passthrough calls take caller-serialized JSON bytes and return the raw response
bytes; the caller decodes them.

See: https://developers.weixin.qq.com/doc/oplatform/Third-party_Platforms/2.0/api/Before_Develop/Authorization_Process_Technical_Description.html
"""

from __future__ import annotations

from urllib.parse import urlencode

from ..core.config import OpenPlatformConfig
from ..core.logger import get_logger
from ..core.transport import JSON_CONTENT_TYPE, Transport, decode_json, encode_json, json_field
from ..exceptions import DecodeError, WeixinAPIError
from .models import PreauthCode

logger = get_logger("open_platform.auth")


class OpenPlatformAuth:
    """Authorization helper for a third-party platform component.

    The transport must target ``https://api.weixin.qq.com`` with
    ``token_param="component_access_token"`` and a token source yielding the
    component access token.
    """

    AUTHORIZATION_SERVER_URL = "https://mp.weixin.qq.com"

    # Authorization pages
    LOGIN_PAGE_URL = "/cgi-bin/componentloginpage"
    BIND_COMPONENT_URL = "/safe/bindcomponent"

    # API endpoints
    CREATE_PREAUTH_CODE_URL = "/cgi-bin/component/api_create_preauthcode"
    QUERY_AUTH_URL = "/cgi-bin/component/api_query_auth"
    AUTHORIZER_TOKEN_URL = "/cgi-bin/component/api_authorizer_token"
    GET_AUTHORIZER_INFO_URL = "/cgi-bin/component/api_get_authorizer_info"
    GET_AUTHORIZER_OPTION_URL = "/cgi-bin/component/api_get_authorizer_option"
    SET_AUTHORIZER_OPTION_URL = "/cgi-bin/component/api_set_authorizer_option"
    GET_AUTHORIZER_LIST_URL = "/cgi-bin/component/api_get_authorizer_list"

    def __init__(self, config: OpenPlatformConfig, client: Transport):
        self.config = config
        self.client = client

    async def create_preauth_code_raw(self, payload: bytes) -> bytes:
        """POST a pre-authorization code request as is."""
        return await self.client.post(self.CREATE_PREAUTH_CODE_URL, payload, JSON_CONTENT_TYPE)

    async def create_preauth_code(self) -> PreauthCode:
        """Create a pre-authorization code for this component.

        Returns:
            PreauthCode with the code and its lifetime.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is not JSON; the message is the raw body.
            WeixinAPIError: If WeChat answers with a non-zero ``errcode``.
        """
        body = await self.create_preauth_code_raw(
            encode_json({"component_appid": self.config.component_appid})
        )

        data = decode_json(body)
        try:
            errcode = int(json_field(data, "errcode", 0))
        except (TypeError, ValueError) as exc:
            raise DecodeError(body) from exc

        if errcode != 0:
            errmsg = str(json_field(data, "errmsg", ""))
            logger.error("Failed to create pre_auth_code: errcode=%d, errmsg=%s", errcode, errmsg)
            raise WeixinAPIError(errcode, errmsg)

        try:
            return PreauthCode.from_dict(data)
        except (TypeError, ValueError) as exc:
            raise DecodeError(body) from exc

    def _build_auth_params(
        self, pre_auth_code: str, redirect_uri: str, biz_appid: str, auth_type: int
    ) -> dict[str, str]:
        params = {
            "component_appid": self.config.component_appid,
            "pre_auth_code": pre_auth_code,
            "redirect_uri": redirect_uri,
        }
        if biz_appid:
            params["biz_appid"] = biz_appid
        # auth_type is only sent for values below 1
        if auth_type < 1:
            params["auth_type"] = str(auth_type)
        return params

    def get_authorization_redirect_uri(
        self,
        pre_auth_code: str,
        redirect_uri: str,
        biz_appid: str = "",
        auth_type: int = 0,
    ) -> str:
        """Build the QR code authorization page URL (方式一).

        Args:
            pre_auth_code: Code from ``create_preauth_code``.
            redirect_uri: Callback receiving ``auth_code``.
            biz_appid: Restrict authorization to this account; omitted when empty.
            auth_type: Which account kinds to show, see ``AUTH_TYPE_*``.
        """
        params = self._build_auth_params(pre_auth_code, redirect_uri, biz_appid, auth_type)
        return f"{self.AUTHORIZATION_SERVER_URL}{self.LOGIN_PAGE_URL}?{urlencode(params)}"

    def get_mobile_authorization_redirect_uri(
        self,
        pre_auth_code: str,
        redirect_uri: str,
        biz_appid: str = "",
        auth_type: int = 0,
    ) -> str:
        """Build the mobile quick authorization link (方式二).

        Same parameters as ``get_authorization_redirect_uri``; the link must be
        opened inside WeChat, hence the ``#wechat_redirect`` fragment.
        """
        params = self._build_auth_params(pre_auth_code, redirect_uri, biz_appid, auth_type)
        return (
            f"{self.AUTHORIZATION_SERVER_URL}{self.BIND_COMPONENT_URL}?"
            f"{urlencode(params)}#wechat_redirect"
        )

    async def query_auth(self, payload: bytes) -> bytes:
        """Exchange an authorization code for authorizer information.

        Keep the ``authorizer_refresh_token`` from the response.
        """
        return await self.client.post(self.QUERY_AUTH_URL, payload, JSON_CONTENT_TYPE)

    async def authorizer_token(self, payload: bytes) -> bytes:
        """Get or refresh an authorizer access token from its refresh token."""
        return await self.client.post(self.AUTHORIZER_TOKEN_URL, payload, JSON_CONTENT_TYPE)

    async def get_authorizer_info(self, payload: bytes) -> bytes:
        """Fetch an authorizer's basic account information."""
        return await self.client.post(self.GET_AUTHORIZER_INFO_URL, payload, JSON_CONTENT_TYPE)

    async def get_authorizer_option(self, payload: bytes) -> bytes:
        """Fetch an authorizer option (location report, voice recognition, ...)."""
        return await self.client.post(self.GET_AUTHORIZER_OPTION_URL, payload, JSON_CONTENT_TYPE)

    async def set_authorizer_option(self, payload: bytes) -> bytes:
        """Change an authorizer option."""
        return await self.client.post(self.SET_AUTHORIZER_OPTION_URL, payload, JSON_CONTENT_TYPE)

    async def get_authorizer_list(self, payload: bytes) -> bytes:
        """List every account currently authorized to this component."""
        return await self.client.post(self.GET_AUTHORIZER_LIST_URL, payload, JSON_CONTENT_TYPE)
