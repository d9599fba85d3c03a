"""Data models for the official account web authorization APIs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from ..core.transport import json_field

# Authorization scopes
SCOPE_SNSAPI_BASE = "snsapi_base"
SCOPE_SNSAPI_USERINFO = "snsapi_userinfo"

# Languages accepted by /sns/userinfo
LANG_ZH_CN = "zh_CN"
LANG_ZH_TW = "zh_TW"
LANG_EN = "en"

# Ticket kinds served by /cgi-bin/ticket/getticket
TicketType = Literal["jsapi", "wx_card"]
TICKET_JSAPI: TicketType = "jsapi"
TICKET_WX_CARD: TicketType = "wx_card"


@dataclass
class OAuthAccessToken:
    """Web authorization access token.

    Not the same credential as the account's basic access_token.

    Attributes:
        access_token: User-scoped access token.
        expires_in: Token lifetime in seconds.
        refresh_token: Token used to renew ``access_token`` (valid 30 days).
        openid: User's openid under this account.
        scope: Granted scope.
    """

    access_token: str = ""
    expires_in: int = 0
    refresh_token: str = ""
    openid: str = ""
    scope: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OAuthAccessToken:
        return cls(
            access_token=str(json_field(data, "access_token", "")),
            expires_in=int(json_field(data, "expires_in", 0)),
            refresh_token=str(json_field(data, "refresh_token", "")),
            openid=str(json_field(data, "openid", "")),
            scope=str(json_field(data, "scope", "")),
        )


@dataclass
class OAuthUserInfo:
    """Profile returned for a ``snsapi_userinfo`` authorization."""

    openid: str = ""
    nickname: str = ""
    sex: int = 0
    province: str = ""
    city: str = ""
    country: str = ""
    headimgurl: str = ""
    privilege: list[str] = field(default_factory=list)
    unionid: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OAuthUserInfo:
        privilege = json_field(data, "privilege", [])
        if not isinstance(privilege, list):
            raise TypeError("privilege must be a list")

        return cls(
            openid=str(json_field(data, "openid", "")),
            nickname=str(json_field(data, "nickname", "")),
            sex=int(json_field(data, "sex", 0)),
            province=str(json_field(data, "province", "")),
            city=str(json_field(data, "city", "")),
            country=str(json_field(data, "country", "")),
            headimgurl=str(json_field(data, "headimgurl", "")),
            privilege=["" if item is None else str(item) for item in privilege],
            unionid=str(json_field(data, "unionid", "")),
        )


@dataclass
class ApiTicket:
    """Short-lived ticket for JS-SDK or card APIs.

    Issuance is rate limited upstream, callers must cache the ticket for
    ``expires_in`` seconds (nominally 7200).
    """

    ticket: str = ""
    expires_in: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ApiTicket:
        return cls(
            ticket=str(json_field(data, "ticket", "")),
            expires_in=int(json_field(data, "expires_in", 0)),
        )
