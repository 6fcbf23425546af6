"""Job API router composition for submission, streaming and status endpoints."""

from __future__ import annotations

import math
from typing import AsyncIterator

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from agent_pipeline.channel import StreamEvent, channel_format_sse_frame, channel_serialize_result
from agent_pipeline.config import AppSettings
from agent_pipeline.domain import JobRecord
from agent_pipeline.jobs import JobStreamConflictError, JobSubmissionService, JobSubmissionValidationError

_API_STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def api_create_jobs_router(settings: AppSettings, submission_service: JobSubmissionService) -> APIRouter:
    """Create job router with submit, stream, list and detail endpoints.

    Args:
        settings: Runtime settings used for pagination defaults.
        submission_service: Front door coordinating registry and engine.

    Returns:
        APIRouter: Router exposing job APIs under `/api`.

    Raises:
        ValueError: Raised when dependencies are invalid.
    """

    if settings is None:
        raise ValueError("settings must not be None")
    if submission_service is None:
        raise ValueError("submission_service must not be None")

    router = APIRouter(prefix="/api", tags=["jobs"])

    @router.post("/submit")
    async def api_job_submit(request: Request) -> JSONResponse:
        """Validate a submission and allocate a job identity.

        Args:
            request: Incoming request carrying a JSON body `{request: string}`.

        Returns:
            JSONResponse: `{jobId}` or a 400 validation error payload.

        Raises:
            RuntimeError: Raised when the registry rejects the new job.
        """

        try:
            body = await request.json()
        except ValueError:
            body = None

        try:
            submission = submission_service.job_submit(body)
        except JobSubmissionValidationError as error:
            payload = {
                "status": "error",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        return JSONResponse(content={"jobId": submission.job_id}, status_code=status.HTTP_200_OK)

    @router.get("/stream/{job_id}", response_model=None)
    async def api_job_stream(
        job_id: str,
        q: str | None = Query(default=None),
        fail_rate: str | None = Query(default=None, alias="failRate"),
    ) -> StreamingResponse | JSONResponse:
        """Stream job events, replaying completed jobs or starting new ones.

        Args:
            job_id: Job identity.
            q: Request text used when the job starts now.
            fail_rate: Optional per-step failure probability, clamped to [0, 1].

        Returns:
            StreamingResponse | JSONResponse: Event stream or error payload.

        Raises:
            RuntimeError: Raised when the engine cannot start the job.
        """

        failure_probability: float | None = None
        if fail_rate is not None and fail_rate.strip():
            try:
                failure_probability = float(fail_rate)
            except ValueError:
                failure_probability = math.nan
            if math.isnan(failure_probability):
                payload = {
                    "status": "error",
                    "message": f"failRate must be a number, got {fail_rate}",
                }
                return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        try:
            events = submission_service.job_open_stream(
                job_id=job_id,
                request_text=q,
                failure_probability=failure_probability,
            )
        except JobStreamConflictError as error:
            payload = {
                "status": "error",
                "message": str(error),
                "job_status": error.status,
            }
            return JSONResponse(content=payload, status_code=status.HTTP_409_CONFLICT)
        except ValueError as error:
            payload = {
                "status": "error",
                "message": str(error),
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)

        return StreamingResponse(
            api_stream_sse_frames(events),
            media_type="text/event-stream",
            headers=_API_STREAM_HEADERS,
        )

    @router.get("/jobs")
    def api_job_list(
        limit: int = Query(default=settings.api_default_limit, ge=1),
        offset: int = Query(default=0, ge=0),
    ) -> JSONResponse:
        """Return job summaries ordered by newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            JSONResponse: Jobs list payload.

        Raises:
            RuntimeError: Raised when registry read fails.
        """

        applied_limit = min(limit, settings.api_max_limit)
        job_records = submission_service.job_list(limit=applied_limit, offset=offset)
        payload = {
            "items": [api_serialize_job_summary(job) for job in job_records],
            "page": {
                "limit": limit,
                "applied_limit": applied_limit,
                "offset": offset,
                "returned": len(job_records),
            },
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/jobs/{job_id}")
    def api_job_detail(job_id: str) -> JSONResponse:
        """Return one job snapshot for status polling.

        Args:
            job_id: Job identity.

        Returns:
            JSONResponse: Job detail payload or 404 when absent.

        Raises:
            RuntimeError: Raised when registry read fails.
        """

        job = submission_service.job_get(job_id)
        if job is None:
            payload = {
                "status": "error",
                "message": "job not found",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_404_NOT_FOUND)

        return JSONResponse(content=api_serialize_job_record(job), status_code=status.HTTP_200_OK)

    return router


async def api_stream_sse_frames(events: AsyncIterator[StreamEvent]) -> AsyncIterator[bytes]:
    async for event in events:
        yield channel_format_sse_frame(event).encode("utf-8")


def api_serialize_job_summary(job: JobRecord) -> dict[str, object]:
    """Serialize a job record to its list-row payload.

    Args:
        job: Job record.

    Returns:
        dict[str, object]: JSON-serializable job summary.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "jobId": job.job_id,
        "status": job.status,
        "createdAt": job.created_at_ms,
        "request": job.request_text,
        "agentCount": len(job.plan),
        "finishedAtUtc": job.finished_at_utc.isoformat() if job.finished_at_utc else None,
    }


def api_serialize_job_record(job: JobRecord) -> dict[str, object]:
    """Serialize a job record including agent progress and terminal outcome.

    Args:
        job: Job record.

    Returns:
        dict[str, object]: JSON-serializable job detail payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    agent_runs_by_id = {agent_run.agent_id: agent_run for agent_run in job.agent_runs}
    agents: list[dict[str, object]] = []
    for agent_spec in job.plan:
        agent_run = agent_runs_by_id.get(agent_spec.agent_id)
        agents.append(
            {
                "id": agent_spec.agent_id,
                "name": agent_spec.name,
                "role": agent_spec.role,
                "steps": agent_spec.steps,
                "status": agent_run.status if agent_run else "pending",
                "progress": agent_run.progress if agent_run else 0,
                "logs": list(agent_run.logs) if agent_run else [],
                "output": {"summary": agent_run.output.summary} if agent_run and agent_run.output else None,
            }
        )

    error_payload = None
    if job.error_message is not None:
        error_payload = {"message": job.error_message, "agentId": job.failed_agent_id}

    return {
        **api_serialize_job_summary(job),
        "createdAtUtc": job.created_at_utc.isoformat(),
        "agents": agents,
        "result": channel_serialize_result(job.result) if job.result else None,
        "error": error_payload,
    }
