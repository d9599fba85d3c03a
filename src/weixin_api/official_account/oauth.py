"""Web authorization (网页授权) for official accounts.

The authorization flow has four steps:
1. Send the user to the authorize URL, WeChat redirects back with a ``code``
2. Exchange the code for a web authorization access token
3. Optionally refresh that token before it expires
4. Fetch the user's profile with the token and openid

This module also fetches the JS-SDK and card API tickets.

See: https://developers.weixin.qq.com/doc/offiaccount/OA_Web_Apps/Wechat_webpage_authorization.html
"""

from __future__ import annotations

from urllib.parse import urlencode

from ..core.config import OfficialAccountConfig
from ..core.logger import get_logger
from ..core.transport import Transport, decode_json, decode_model, json_field
from ..exceptions import DecodeError
from .models import (
    LANG_ZH_CN,
    TICKET_JSAPI,
    TICKET_WX_CARD,
    ApiTicket,
    OAuthAccessToken,
    OAuthUserInfo,
    TicketType,
)

logger = get_logger("official_account.oauth")


class OfficialAccountOAuth:
    """Web authorization helper for an official account.

    The transport must target ``https://api.weixin.qq.com``. Ticket requests are
    sent authorized, so the transport's token source has to yield the
    account's basic access_token; the ``/sns`` calls never use it.

    Example:
        ```python
        oauth = OfficialAccountOAuth(config.official_account, client)
        url = oauth.get_authorize_url("https://example.com/cb", SCOPE_SNSAPI_BASE, "xyz")
        token = await oauth.exchange_code(code)
        ```
    """

    AUTHORIZE_SERVER_URL = "https://open.weixin.qq.com"

    # API endpoints
    AUTHORIZE_URL = "/connect/oauth2/authorize"
    ACCESS_TOKEN_URL = "/sns/oauth2/access_token"
    REFRESH_TOKEN_URL = "/sns/oauth2/refresh_token"
    USER_INFO_URL = "/sns/userinfo"
    AUTH_URL = "/sns/auth"
    GET_TICKET_URL = "/cgi-bin/ticket/getticket"

    def __init__(self, config: OfficialAccountConfig, client: Transport):
        self.config = config
        self.client = client

    def get_authorize_url(self, redirect_uri: str, scope: str, state: str) -> str:
        """Build the URL that starts web authorization.

        ``snsapi_base`` authorizes silently and only yields the openid;
        ``snsapi_userinfo`` asks the user to consent and allows fetching the
        profile. The scope is not validated here.

        Args:
            redirect_uri: Callback URL, receives ``code`` and ``state``.
            scope: ``snsapi_base`` or ``snsapi_userinfo``.
            state: Opaque value echoed back to the callback.

        Returns:
            Authorization URL to redirect the user to.
        """
        params = {
            "appid": self.config.appid,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "state": state,
        }
        return f"{self.AUTHORIZE_SERVER_URL}{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthAccessToken:
        """Exchange an authorization code for a web access token.

        The account secret is sent with this request; only call it server side.

        Args:
            code: Code received on the authorization callback.

        Returns:
            OAuthAccessToken decoded from the response.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is not the expected JSON; the message
                is the raw body.
        """
        body = await self.client.get(
            self.ACCESS_TOKEN_URL,
            {
                "appid": self.config.appid,
                "secret": self.config.secret,
                "code": code,
                "grant_type": "authorization_code",
            },
            authorized=False,
        )
        return decode_model(body, OAuthAccessToken.from_dict)

    async def refresh_token(self, refresh_token: str) -> OAuthAccessToken:
        """Renew a web access token with its refresh token.

        Args:
            refresh_token: Refresh token from a previous exchange.

        Returns:
            New OAuthAccessToken.
        """
        body = await self.client.get(
            self.REFRESH_TOKEN_URL,
            {
                "appid": self.config.appid,
                "refresh_token": refresh_token,
                "grant_type": "refresh_token",
            },
            authorized=False,
        )
        return decode_model(body, OAuthAccessToken.from_dict)

    async def get_user_info(
        self, access_token: str, openid: str, lang: str = LANG_ZH_CN
    ) -> OAuthUserInfo:
        """Fetch the profile of the user behind a web access token.

        Requires a token obtained with ``snsapi_userinfo`` scope.

        Args:
            access_token: Web access token.
            openid: User's openid.
            lang: ``zh_CN``, ``zh_TW`` or ``en``, passed through as is.
        """
        body = await self.client.get(
            self.USER_INFO_URL,
            {"access_token": access_token, "openid": openid, "lang": lang},
            authorized=False,
        )
        return decode_model(body, OAuthUserInfo.from_dict)

    async def validate_token(self, access_token: str, openid: str) -> bool:
        """Check whether a web access token is still valid.

        Returns:
            True when WeChat answers with ``errcode`` 0, False for any other
            code. A non-zero code is a regular answer, not an error.

        Raises:
            TransportError: If the request fails.
            DecodeError: If the response is not JSON.
        """
        body = await self.client.get(
            self.AUTH_URL,
            {"access_token": access_token, "openid": openid},
            authorized=False,
        )
        data = decode_json(body)
        try:
            errcode = int(json_field(data, "errcode", 0))
        except (TypeError, ValueError) as exc:
            raise DecodeError(body) from exc

        if errcode != 0:
            logger.debug("Token for %s rejected: errcode=%d", openid, errcode)
        return errcode == 0

    async def get_api_ticket(self, ticket_type: TicketType) -> ApiTicket:
        """Fetch an API ticket of the given kind.

        Ticket issuance is heavily rate limited; cache the result for its
        ``expires_in`` window.

        Args:
            ticket_type: ``jsapi`` or ``wx_card``.
        """
        body = await self.client.get(self.GET_TICKET_URL, {"type": ticket_type})
        ticket = decode_model(body, ApiTicket.from_dict)
        logger.info("Obtained %s ticket (expires in %d seconds)", ticket_type, ticket.expires_in)
        return ticket

    async def get_jsapi_ticket(self) -> ApiTicket:
        """Fetch the ``jsapi_ticket`` used to sign JS-SDK configs."""
        return await self.get_api_ticket(TICKET_JSAPI)

    async def get_wx_card_ticket(self) -> ApiTicket:
        """Fetch the ``wx_card`` ticket used by card and invoice pages."""
        return await self.get_api_ticket(TICKET_WX_CARD)
