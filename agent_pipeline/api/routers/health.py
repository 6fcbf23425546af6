"""Health endpoint router composition for app and registry checks."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from agent_pipeline.registry import JobRegistryPort


def api_create_health_router(registry: JobRegistryPort) -> APIRouter:
    """Create health-check router with app status and registry size.

    Args:
        registry: Job registry reported by the health payload.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when registry is invalid.
    """

    if registry is None:
        raise ValueError("registry must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application health state.

        Returns:
            JSONResponse: Deterministic health payload for operational checks.

        Raises:
            RuntimeError: Raised when the registry cannot be read.
        """

        payload = {
            "status": "ok",
            "app": "up",
            "jobs": registry.registry_job_count(),
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router
