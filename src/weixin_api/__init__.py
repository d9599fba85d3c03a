"""WeChat API client.

Typed async bindings for WeChat HTTP APIs:
- Official account web authorization and API tickets
- Open platform third-party authorization
- WeCom authorization, SSO login and message push

Example:
    ```python
    from weixin_api import OfficialAccountOAuth, WeixinClient, WeixinConfig

    config = WeixinConfig.from_yaml("weixin.yaml")
    async with WeixinClient.from_config(config.http) as client:
        oauth = OfficialAccountOAuth(config.official_account, client)
        token = await oauth.exchange_code(code)
    ```
"""

from importlib.metadata import PackageNotFoundError, version

from .core import (
    StaticTokenSource,
    TokenSource,
    Transport,
    WeixinClient,
    WeixinConfig,
    get_logger,
    setup_logging,
)
from .exceptions import DecodeError, TransportError, WeixinAPIError, WeixinError
from .official_account import OfficialAccountOAuth
from .open_platform import OpenPlatformAuth
from .work import WorkAgent, WorkMessageApi

__all__ = [
    "__version__",
    "WeixinConfig",
    "WeixinClient",
    "Transport",
    "TokenSource",
    "StaticTokenSource",
    "OfficialAccountOAuth",
    "OpenPlatformAuth",
    "WorkAgent",
    "WorkMessageApi",
    "WeixinError",
    "TransportError",
    "DecodeError",
    "WeixinAPIError",
    "get_logger",
    "setup_logging",
]

try:  # pragma: no cover - best-effort during development
    __version__ = version("weixin-api")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
