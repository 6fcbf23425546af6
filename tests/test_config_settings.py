"""Regression tests for runtime settings validation and logging setup."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from agent_pipeline.config import AppSettings, SettingsLoadError, config_configure_logging, config_load_settings


def test_config_settings_defaults_match_pipeline_contract() -> None:
    """Expose the documented defaults when nothing is configured.

    Returns:
        None: Assertions validate default values.

    Raises:
        AssertionError: Raised when defaults differ.
    """

    settings = AppSettings(_env_file=None)

    assert settings.application_port == 3000
    assert settings.pipeline_failure_probability == 0.0
    assert settings.pipeline_step_delay_min_seconds == 0.5
    assert settings.pipeline_step_delay_max_seconds == 1.1
    assert settings.pipeline_default_request_text == "General business analysis request"


def test_config_settings_normalize_log_level_and_reject_unknown_levels() -> None:
    """Upper-case known levels and reject unknown ones.

    Returns:
        None: Assertions validate log level normalization.

    Raises:
        AssertionError: Raised when log levels are not validated.
    """

    assert AppSettings(_env_file=None, log_level=" debug ").log_level == "DEBUG"
    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, log_level="chatty")


@pytest.mark.parametrize(
    "overrides",
    [
        {"pipeline_step_delay_min_seconds": 2.0, "pipeline_step_delay_max_seconds": 1.0},
        {"pipeline_failure_probability": 1.5},
        {"pipeline_default_request_text": "   "},
        {"api_default_limit": 10, "api_max_limit": 5},
    ],
)
def test_config_settings_reject_invalid_values(overrides: dict[str, object]) -> None:
    """Reject inconsistent delay bounds, probabilities, texts and limits.

    Args:
        overrides: Invalid field overrides.

    Returns:
        None: Assertions validate validation errors.

    Raises:
        AssertionError: Raised when invalid settings load.
    """

    with pytest.raises(ValidationError):
        AppSettings(_env_file=None, **overrides)


def test_config_load_settings_wraps_validation_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    """Raise a startup error carrying validation details for bad environment values.

    Args:
        monkeypatch: Pytest environment patch fixture.

    Returns:
        None: Assertions validate error wrapping.

    Raises:
        AssertionError: Raised when the error type differs.
    """

    monkeypatch.setenv("PIPELINE_FAILURE_PROBABILITY", "2")

    with pytest.raises(SettingsLoadError, match="Startup configuration validation failed"):
        config_load_settings()


def test_config_load_settings_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Read field values from upper-case environment variables.

    Args:
        monkeypatch: Pytest environment patch fixture.

    Returns:
        None: Assertions validate environment mapping.

    Raises:
        AssertionError: Raised when environment values are ignored.
    """

    monkeypatch.setenv("APPLICATION_PORT", "8080")
    monkeypatch.setenv("PIPELINE_FAILURE_PROBABILITY", "0.25")

    settings = config_load_settings()

    assert settings.application_port == 8080
    assert settings.pipeline_failure_probability == 0.25


def test_config_configure_logging_sets_root_level() -> None:
    """Apply the requested level and return the package logger.

    Returns:
        None: Assertions validate logging configuration.

    Raises:
        AssertionError: Raised when the level is not applied.
    """

    logger = config_configure_logging("warning")

    assert logger.name == "agent_pipeline"
    assert logging.getLogger().level == logging.WARNING
    with pytest.raises(ValueError):
        config_configure_logging("chatty")
    config_configure_logging("INFO")
