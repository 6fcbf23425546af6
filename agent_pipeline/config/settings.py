"""Typed runtime settings with dotenv support and startup validation."""

import math

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and pipeline simulation.

    Environment variable names map directly to field names in uppercase.
    Example: `pipeline_failure_probability` reads from `PIPELINE_FAILURE_PROBABILITY`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        pipeline_failure_probability: Default per-step failure probability for new jobs.
        pipeline_step_delay_min_seconds: Lower bound of simulated step duration.
        pipeline_step_delay_max_seconds: Upper bound of simulated step duration.
        pipeline_default_request_text: Request text used when a stream starts without one.
        api_default_limit: Default list endpoint limit.
        api_max_limit: Maximum allowed list endpoint limit.
        api_cors_allow_origins: Browser origins allowed by CORS, JSON list in the environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=3000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    pipeline_failure_probability: float = Field(default=0.0, ge=0.0, le=1.0)
    pipeline_step_delay_min_seconds: float = Field(default=0.5, ge=0)
    pipeline_step_delay_max_seconds: float = Field(default=1.1, ge=0)
    pipeline_default_request_text: str = Field(default="General business analysis request", min_length=1)
    api_default_limit: int = Field(default=50, ge=1)
    api_max_limit: int = Field(default=200, ge=1)
    api_cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("pipeline_default_request_text")
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
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value

    @field_validator("pipeline_failure_probability")
    @classmethod
    def _validate_probability_is_finite(cls, value: float) -> float:
        if math.isnan(value):
            raise ValueError("pipeline_failure_probability must be a number")
        return value

    @field_validator("pipeline_step_delay_max_seconds")
    @classmethod
    def _validate_step_delay_bounds(cls, value: float, info) -> float:
        step_delay_min_seconds = float(info.data.get("pipeline_step_delay_min_seconds", 0.5))
        if value < step_delay_min_seconds:
            raise ValueError(
                "pipeline_step_delay_max_seconds must be greater than or equal to pipeline_step_delay_min_seconds"
            )
        return value

    @field_validator("api_max_limit")
    @classmethod
    def _validate_limit_bounds(cls, value: int, info) -> int:
        default_limit = info.data.get("api_default_limit", 50)
        if value < default_limit:
            raise ValueError("api_max_limit must be greater than or equal to api_default_limit")
        return value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error
