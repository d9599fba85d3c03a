"""WeCom (企业微信) application APIs."""

from .agent import WorkAgent
from .message import WorkMessageApi
from .models import WorkUserInfo

__all__ = [
    "WorkAgent",
    "WorkMessageApi",
    "WorkUserInfo",
]
