"""Data models for the open platform authorization APIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.transport import json_field

# Accounts shown on the authorization page
AUTH_TYPE_OFFICIAL_ACCOUNT = 1
AUTH_TYPE_MINI_PROGRAM = 2
AUTH_TYPE_ALL = 3


@dataclass
class PreauthCode:
    """Pre-authorization code, valid for 10 minutes.

    Attributes:
        pre_auth_code: Code to embed in the authorization page URL.
        expires_in: Lifetime in seconds.
    """

    pre_auth_code: str = ""
    expires_in: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PreauthCode:
        return cls(
            pre_auth_code=str(json_field(data, "pre_auth_code", "")),
            expires_in=int(json_field(data, "expires_in", 0)),
        )
