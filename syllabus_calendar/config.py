# Config
"""
Configuration for the syllabus calendar pipeline.

Values come from the environment (and a local ``.env`` file) through
``Settings.from_env``; tests and embedding applications can build
``Settings`` directly instead.
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from syllabus_calendar.utils.errors import ConfigurationError

# Environment variable -> Settings field
ENV_FIELDS = {
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "DEV_MODE": "dev_mode",
    "OPENAI_API_KEY": "openai_api_key",
    "OPENAI_BASE_URL": "openai_base_url",
    "SYLLABUS_PRIMARY_MODEL": "primary_model",
    "SYLLABUS_FALLBACK_MODEL": "fallback_model",
    "SYLLABUS_TEMPERATURE": "temperature",
    "SYLLABUS_PRIMARY_MAX_TOKENS": "primary_max_tokens",
    "SYLLABUS_FALLBACK_MAX_TOKENS": "fallback_max_tokens",
    "SYLLABUS_REQUEST_TIMEOUT": "request_timeout",
    "SYLLABUS_MAX_PDF_SIZE_MB": "max_pdf_size_mb",
}


class ModelConfig(BaseModel):
    """Settings for one model backend."""

    model: str = Field(..., min_length=1, description="Model name")
    max_tokens: int = Field(..., gt=0, description="Maximum output tokens")
    temperature: float = Field(0.1, ge=0.0, le=2.0, description="Sampling temperature")


class Settings(BaseModel):
    # Logging
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    dev_mode: bool = False

    # Model provider
    openai_api_key: Optional[str] = None
    openai_base_url: Optional[str] = None

    # Primary (accurate) and fallback (cheaper) models
    primary_model: str = "gpt-4"
    fallback_model: str = "gpt-3.5-turbo"
    temperature: float = Field(0.1, ge=0.0, le=2.0)
    primary_max_tokens: int = Field(3000, gt=0)
    fallback_max_tokens: int = Field(2000, gt=0)
    request_timeout: float = Field(60.0, gt=0)

    # PDF processing
    max_pdf_size_mb: int = Field(10, gt=0)
    min_chars_per_page: int = 100
    min_text_length: int = 50

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept level names the logging module knows."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("openai_api_key", "openai_base_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Treat empty strings from the environment as unset."""
        if v is not None and not v.strip():
            return None
        return v

    @classmethod
    def from_env(cls, **overrides: Any) -> "Settings":
        """Build settings from environment variables and a local .env file."""
        load_dotenv()
        values: dict[str, Any] = {}
        for env_name, field_name in ENV_FIELDS.items():
            raw = os.getenv(env_name)
            if raw is not None and raw != "":
                values[field_name] = raw
        values.update(overrides)
        try:
            return cls(**values)
        except ValidationError as e:
            env_names = {field: env for env, field in ENV_FIELDS.items()}
            invalid = sorted(
                {env_names.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors() if err["loc"]}
            )
            raise ConfigurationError(
                f"Invalid configuration: {', '.join(invalid)}",
                {"errors": [err["msg"] for err in e.errors()]},
            ) from e

    @property
    def max_pdf_size_bytes(self) -> int:
        return self.max_pdf_size_mb * 1024 * 1024

    def primary_model_config(self) -> ModelConfig:
        return ModelConfig(
            model=self.primary_model,
            max_tokens=self.primary_max_tokens,
            temperature=self.temperature,
        )

    def fallback_model_config(self) -> ModelConfig:
        return ModelConfig(
            model=self.fallback_model,
            max_tokens=self.fallback_max_tokens,
            temperature=self.temperature,
        )

    def get_log_file_path(self) -> Optional[Path]:
        return self.log_file


# Singleton instance
_settings = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
