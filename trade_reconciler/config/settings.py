"""Typed runtime settings with dotenv support and startup validation."""

import logging
from decimal import Decimal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class ReconcilerSettings(BaseSettings):
    """Runtime settings for the reconciliation service.

    Environment variable names map directly to field names in uppercase.
    Example: `suspicious_amount_threshold` reads from `SUSPICIOUS_AMOUNT_THRESHOLD`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Standard logging level name.
        suspicious_amount_threshold: Absolute leg amount above which a row is flagged as suspicious.
        default_source_profile: Source profile used when a request names none and none is detected.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    suspicious_amount_threshold: Decimal = Field(default=Decimal("10000"), gt=0)
    default_source_profile: str = Field(default="generic", min_length=1)

    @field_validator("environment_name", "default_source_profile")
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in logging.getLevelNamesMapping():
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value


def config_load_settings() -> ReconcilerSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        ReconcilerSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return ReconcilerSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
