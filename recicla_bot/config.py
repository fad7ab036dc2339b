"""Process configuration, read once from the environment at startup."""

from __future__ import annotations

import os
from collections.abc import Mapping
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

DEFAULT_MAX_FILE_SIZE = 20 * 1024 * 1024  # 20MB Telegram download limit


class ConfigError(Exception):
    """Raised when required configuration is missing or invalid."""


class ClassifierStatusPolicy(str, Enum):
    """What to do when the classifier answers with a non-200 status."""

    ABORT = "abort"
    TRUST_BODY = "trust_body"


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    bot_token: str = Field(min_length=1)
    classifier_url: str = Field(min_length=1)
    port: int = Field(default=3000, ge=1, le=65535)
    telegram_api_base: str = "https://api.telegram.org"
    telegram_timeout: float = Field(default=30.0, gt=0)
    classifier_timeout: float = Field(default=10.0, gt=0)
    classifier_status_policy: ClassifierStatusPolicy = ClassifierStatusPolicy.ABORT
    max_file_size: int = Field(default=DEFAULT_MAX_FILE_SIZE, gt=0)
    audit_log_path: str | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Required: TELEGRAM_BOT_TOKEN, RECICLA_IA_ENDPOINT.
        """
        env = os.environ if environ is None else environ

        missing = [
            name for name in ("TELEGRAM_BOT_TOKEN", "RECICLA_IA_ENDPOINT")
            if not env.get(name)
        ]
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

        values: dict[str, object] = {
            "bot_token": env["TELEGRAM_BOT_TOKEN"],
            "classifier_url": env["RECICLA_IA_ENDPOINT"],
        }
        optional = {
            "PORT": "port",
            "TELEGRAM_API_BASE": "telegram_api_base",
            "TELEGRAM_TIMEOUT_SECONDS": "telegram_timeout",
            "CLASSIFIER_TIMEOUT_SECONDS": "classifier_timeout",
            "CLASSIFIER_STATUS_POLICY": "classifier_status_policy",
            "MAX_FILE_SIZE_BYTES": "max_file_size",
            "AUDIT_LOG_PATH": "audit_log_path",
            "LOG_LEVEL": "log_level",
        }
        for var, field_name in optional.items():
            value = env.get(var)
            if value:
                values[field_name] = value

        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc
