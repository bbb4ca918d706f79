"""Configuration loader with YAML parsing, env-var interpolation, and Pydantic validation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_POLL_TIMEOUT = 60


class BotConfig(BaseModel):
    token: str
    api_endpoint: Optional[str] = None  # e.g. a local Bot API server, "http://localhost:8081/bot"
    poll_timeout: int = DEFAULT_POLL_TIMEOUT
    drop_pending_updates: bool = False

    @field_validator("token")
    @classmethod
    def _token_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("bot token must not be empty")
        return value.strip()


class StorageConfig(BaseModel):
    db_path: str = "./data/tgbot_kit.db"


class AppConfig(BaseModel):
    log_level: str = "INFO"
    log_json: bool = False
    bot: BotConfig
    storage: StorageConfig = Field(default_factory=StorageConfig)


_ENV_VAR_PATTERN = re.compile(r"\$\{(\w+)\}")


def _interpolate_env_vars(text: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""

    def _replace(match: re.Match) -> str:
        value = os.environ.get(match.group(1))
        if value is None:
            return match.group(0)
        return value

    return _ENV_VAR_PATTERN.sub(_replace, text)


def load_config(config_path: str | Path = "config.yaml", env_path: str | Path = ".env") -> AppConfig:
    """Load and validate configuration from YAML file with env-var interpolation."""
    env_file = Path(env_path)
    if env_file.exists():
        load_dotenv(env_file)

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_file}")

    interpolated = _interpolate_env_vars(config_file.read_text(encoding="utf-8"))
    data = yaml.safe_load(interpolated) or {}

    return AppConfig(**data)
