"""Application bootstrap wiring for startup validation and dependency assembly."""

from fastapi import FastAPI

from agent_pipeline.api import create_api_application
from agent_pipeline.config import AppSettings, config_load_settings
from agent_pipeline.jobs import JobExecutionEngine, JobSubmissionService
from agent_pipeline.registry import InMemoryJobRegistry, JobRegistryPort


def bootstrap_create_engine(settings: AppSettings, registry: JobRegistryPort) -> JobExecutionEngine:
    """Build the execution engine from runtime settings.

    Args:
        settings: Validated runtime settings.
        registry: Job registry the engine mutates.

    Returns:
        JobExecutionEngine: Engine using process randomness and asyncio sleep.

    Raises:
        ValueError: Raised when settings carry invalid delay bounds.
    """

    return JobExecutionEngine(
        registry=registry,
        step_delay_min_seconds=settings.pipeline_step_delay_min_seconds,
        step_delay_max_seconds=settings.pipeline_step_delay_max_seconds,
        default_failure_probability=settings.pipeline_failure_probability,
    )


def bootstrap_create_submission_service(
    settings: AppSettings,
    registry: JobRegistryPort | None = None,
) -> JobSubmissionService:
    """Build the submission front door with its own or a shared registry.

    Args:
        settings: Validated runtime settings.
        registry: Optional registry shared with other components.

    Returns:
        JobSubmissionService: Fully wired front door.

    Raises:
        ValueError: Raised when settings carry invalid values.
    """

    resolved_registry = registry or InMemoryJobRegistry()
    return JobSubmissionService(
        registry=resolved_registry,
        engine=bootstrap_create_engine(settings=settings, registry=resolved_registry),
        default_request_text=settings.pipeline_default_request_text,
    )


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional pre-validated settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    registry = InMemoryJobRegistry()
    submission_service = bootstrap_create_submission_service(settings=resolved_settings, registry=registry)
    return create_api_application(
        settings=resolved_settings,
        registry=registry,
        submission_service=submission_service,
    )
