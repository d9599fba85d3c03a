"""Configuration management for the WeChat API client.

This module provides configuration models and loading functionality using Pydantic
for validation and type safety.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DOTENV_LOADED = False

DEFAULT_API_BASE_URL = "https://api.weixin.qq.com"
DEFAULT_WORK_API_BASE_URL = "https://qyapi.weixin.qq.com"


def _load_env_once() -> None:
    """Load environment variables from a .env file exactly once."""

    global _DOTENV_LOADED
    if not _DOTENV_LOADED:
        load_dotenv()
        _DOTENV_LOADED = True


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand environment variables in configuration data."""

    if isinstance(data, str):
        return os.path.expandvars(data)
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    if isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    return data


class OfficialAccountConfig(BaseModel):
    """Credentials of an official account (公众号)."""

    appid: str = Field(default="", description="Official account AppID")
    secret: str = Field(default="", description="Official account AppSecret")


class OpenPlatformConfig(BaseModel):
    """Credentials of a third-party platform component (开放平台)."""

    component_appid: str = Field(default="", description="Component AppID")
    component_appsecret: str = Field(default="", description="Component AppSecret")


class WorkAgentConfig(BaseModel):
    """Identity of a WeCom (企业微信) self-built application."""

    corpid: str = Field(default="", description="Corporation ID")
    agent_id: str = Field(default="", description="Application agent ID")

    @field_validator("agent_id", mode="before")
    @classmethod
    def coerce_agent_id(cls, value: Any) -> str:
        # WeCom shows agent IDs as numbers; YAML users tend to write them unquoted
        if value is None:
            return ""
        return str(value)


class HTTPClientConfig(BaseModel):
    """Default HTTP client configuration."""

    timeout: float = Field(default=10.0, ge=0.0, description="Default HTTP timeout")
    api_base_url: str = Field(
        default=DEFAULT_API_BASE_URL,
        description="Base URL for official account and open platform APIs",
    )
    work_api_base_url: str = Field(
        default=DEFAULT_WORK_API_BASE_URL,
        description="Base URL for WeCom APIs",
    )

    @field_validator("api_base_url", "work_api_base_url")
    @classmethod
    def validate_base_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return value.rstrip("/")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )
    log_file: str | None = Field(default=None, description="Log file path")
    max_bytes: int = Field(default=10485760, description="Max log file size (10MB)")
    backup_count: int = Field(default=5, description="Number of backup files")

    @field_validator("level")
    @classmethod
    def normalise_level(cls, value: str) -> str:
        level = (value or "INFO").strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {level}")
        return level


class WeixinConfig(BaseSettings):
    """Main configuration for the WeChat API client."""

    model_config = SettingsConfigDict(
        env_prefix="WEIXIN_",
        env_nested_delimiter="__",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    official_account: OfficialAccountConfig = Field(
        default_factory=OfficialAccountConfig, description="Official account credentials"
    )
    open_platform: OpenPlatformConfig = Field(
        default_factory=OpenPlatformConfig, description="Open platform component credentials"
    )
    work: WorkAgentConfig = Field(
        default_factory=WorkAgentConfig, description="WeCom application identity"
    )
    http: HTTPClientConfig = Field(
        default_factory=HTTPClientConfig, description="Default HTTP client settings"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> WeixinConfig:
        """Load configuration from a YAML file."""

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = yaml.safe_load(handle)
            except yaml.YAMLError as exc:
                raise ValueError(f"Invalid YAML in config file: {exc}") from exc

        if not config_data:
            config_data = {}

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)

    @classmethod
    def from_json(cls, path: str | Path) -> WeixinConfig:
        """Load configuration from a JSON file."""

        import json

        _load_env_once()
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, encoding="utf-8") as handle:
            try:
                config_data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid JSON in config file: {exc}") from exc

        config_data = _expand_env_vars(config_data)
        return cls(**config_data)

    @classmethod
    def from_file(cls, path: str | Path) -> WeixinConfig:
        """Load configuration, picking the parser from the file extension."""

        if Path(path).suffix.lower() == ".json":
            return cls.from_json(path)
        return cls.from_yaml(path)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""

        return self.model_dump()
