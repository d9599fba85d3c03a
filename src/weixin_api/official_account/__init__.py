"""Official account (公众号) web authorization APIs."""

from .models import (
    LANG_EN,
    LANG_ZH_CN,
    LANG_ZH_TW,
    SCOPE_SNSAPI_BASE,
    SCOPE_SNSAPI_USERINFO,
    TICKET_JSAPI,
    TICKET_WX_CARD,
    ApiTicket,
    OAuthAccessToken,
    OAuthUserInfo,
    TicketType,
)
from .oauth import OfficialAccountOAuth

__all__ = [
    "OfficialAccountOAuth",
    "OAuthAccessToken",
    "OAuthUserInfo",
    "ApiTicket",
    "TicketType",
    "SCOPE_SNSAPI_BASE",
    "SCOPE_SNSAPI_USERINFO",
    "LANG_ZH_CN",
    "LANG_ZH_TW",
    "LANG_EN",
    "TICKET_JSAPI",
    "TICKET_WX_CARD",
]
