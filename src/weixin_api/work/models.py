"""Data models for WeCom (企业微信) APIs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..core.transport import json_field


@dataclass
class WorkUserInfo:
    """Identity of the member behind an authorization code.

    WeCom reports failures inside the body, so ``errcode``/``errmsg`` are part
    of the record rather than raised.

    Attributes:
        errcode: 0 on success.
        errmsg: Error message, ``"ok"`` on success.
        user_id: Member UserId (empty for non-members).
        device_id: Device identifier of the member's client.
    """

    errcode: int = 0
    errmsg: str = ""
    user_id: str = ""
    device_id: str = ""

    @property
    def success(self) -> bool:
        return self.errcode == 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> WorkUserInfo:
        return cls(
            errcode=int(json_field(data, "errcode", 0)),
            errmsg=str(json_field(data, "errmsg", "")),
            user_id=str(json_field(data, "UserId", "")),
            device_id=str(json_field(data, "DeviceId", "")),
        )
