"""FastAPI application factory for the agent pipeline service."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agent_pipeline.config import AppSettings
from agent_pipeline.jobs import JobSubmissionService
from agent_pipeline.registry import JobRegistryPort

from .routers import api_create_health_router, api_create_jobs_router


def create_api_application(
    settings: AppSettings,
    registry: JobRegistryPort,
    submission_service: JobSubmissionService,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        registry: Job registry reported by health endpoints.
        submission_service: Front door for job submission and streaming.

    Returns:
        FastAPI: Framework application instance.

    Raises:
        ValueError: Raised when router dependencies are invalid.
    """

    application = FastAPI(title="Agent Pipeline")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.api_cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service banner.

        Returns:
            dict[str, str]: Service name, status and environment label.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": "agent-pipeline",
            "status": "ready",
            "environment": settings.environment_name,
        }

    application.include_router(api_create_health_router(registry=registry))
    application.include_router(
        api_create_jobs_router(
            settings=settings,
            submission_service=submission_service,
        )
    )

    return application
