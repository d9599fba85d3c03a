"""Core components shared by all WeChat API helpers."""

from .config import (
    HTTPClientConfig,
    LoggingConfig,
    OfficialAccountConfig,
    OpenPlatformConfig,
    WeixinConfig,
    WorkAgentConfig,
)
from .logger import get_logger, setup_logging
from .transport import (
    JSON_CONTENT_TYPE,
    StaticTokenSource,
    TokenSource,
    Transport,
    WeixinClient,
    decode_json,
    decode_model,
    encode_json,
    json_field,
)

__all__ = [
    "WeixinConfig",
    "OfficialAccountConfig",
    "OpenPlatformConfig",
    "WorkAgentConfig",
    "HTTPClientConfig",
    "LoggingConfig",
    "get_logger",
    "setup_logging",
    "JSON_CONTENT_TYPE",
    "Transport",
    "TokenSource",
    "StaticTokenSource",
    "WeixinClient",
    "encode_json",
    "decode_json",
    "decode_model",
    "json_field",
]
