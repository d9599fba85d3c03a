"""Open platform (开放平台) third-party authorization APIs."""

from .auth import OpenPlatformAuth
from .models import (
    AUTH_TYPE_ALL,
    AUTH_TYPE_MINI_PROGRAM,
    AUTH_TYPE_OFFICIAL_ACCOUNT,
    PreauthCode,
)

__all__ = [
    "OpenPlatformAuth",
    "PreauthCode",
    "AUTH_TYPE_OFFICIAL_ACCOUNT",
    "AUTH_TYPE_MINI_PROGRAM",
    "AUTH_TYPE_ALL",
]
