"""Web authorization and SSO login for WeCom applications.

See: https://work.weixin.qq.com/api/doc/90000/90135/91022
"""

from __future__ import annotations

from urllib.parse import urlencode

from ..core.config import WorkAgentConfig
from ..core.logger import get_logger
from ..core.transport import Transport, decode_model
from .models import WorkUserInfo

logger = get_logger("work.agent")


class WorkAgent:
    """A WeCom self-built application.

    The transport must target ``https://qyapi.weixin.qq.com`` with a token
    source yielding the application's access token. ``WorkMessageApi`` can
    share it through ``WorkMessageApi.from_agent``.
    """

    AUTHORIZE_URL = "https://open.weixin.qq.com/connect/oauth2/authorize"
    SSO_AUTHORIZE_URL = "https://open.work.weixin.qq.com/wwopen/sso/qrConnect"

    # API endpoints
    USER_INFO_URL = "/cgi-bin/user/getuserinfo"

    def __init__(self, config: WorkAgentConfig, client: Transport):
        self.config = config
        self.client = client

    def get_authorize_url(self, redirect_uri: str, state: str) -> str:
        """Build the in-app web authorization URL.

        The scope is always ``snsapi_base``. On consent the page is redirected
        to ``redirect_uri?code=CODE&state=STATE``.
        """
        params = {
            "appid": self.config.corpid,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": "snsapi_base",
            "state": state,
        }
        return f"{self.AUTHORIZE_URL}?{urlencode(params)}#wechat_redirect"

    def get_sso_authorize_url(self, redirect_uri: str, state: str) -> str:
        """Build the QR code single sign-on URL for browsers outside WeCom.

        See: https://work.weixin.qq.com/api/doc/90000/90135/91019
        """
        params = {
            "appid": self.config.corpid,
            "agentid": self.config.agent_id,
            "redirect_uri": redirect_uri,
            "state": state,
        }
        return f"{self.SSO_AUTHORIZE_URL}?{urlencode(params)}"

    async def get_user_info(self, code: str) -> WorkUserInfo:
        """Resolve an authorization code to the visiting member.

        Args:
            code: Code received on the authorization callback.

        Returns:
            WorkUserInfo; check ``errcode`` for WeCom-side failures.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is not JSON; the message is the raw body.
        """
        body = await self.client.get(self.USER_INFO_URL, {"code": code})
        user_info = decode_model(body, WorkUserInfo.from_dict)
        if not user_info.success:
            logger.warning(
                "getuserinfo failed: errcode=%d, errmsg=%s", user_info.errcode, user_info.errmsg
            )
        return user_info
