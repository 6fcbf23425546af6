"""Job submission front door: validation, identity allocation and stream opening."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping

from agent_pipeline.channel import QueueEventSink, StreamEvent, channel_build_replay_events
from agent_pipeline.domain import JOB_STATUS_COMPLETED, JOB_STATUS_ERROR, JOB_STATUS_RUNNING, JobRecord
from agent_pipeline.registry import JobRegistryPort

from .engine import JobExecutionEngine, job_clamp_failure_probability
from .interfaces import JobExecutionResult

logger = logging.getLogger(__name__)


class JobSubmissionValidationError(ValueError):
    """Raised when a submission payload is malformed."""


class JobStreamConflictError(RuntimeError):
    """Raised when a stream cannot be opened for a job in its current state.

    Attributes:
        job_id: Job identity.
        status: Job status that blocked the stream.
    """

    def __init__(self, message: str, job_id: str, status: str):
        super().__init__(message)
        self.job_id = job_id
        self.status = status


@dataclass(frozen=True)
class JobSubmissionResult:
    """Result contract for an accepted submission.

    Attributes:
        job_id: Newly allocated job identity.
    """

    job_id: str


class JobSubmissionService:
    """Facade coordinating the registry and the engine for the HTTP surface.

    Submitting only registers intent. Execution starts when a stream is opened
    and then runs as a background task that outlives the subscriber.
    """

    def __init__(
        self,
        registry: JobRegistryPort,
        engine: JobExecutionEngine,
        default_request_text: str = "General business analysis request",
    ):
        """Initialize front door dependencies.

        Args:
            registry: Job registry shared with the engine.
            engine: Execution engine started on stream open.
            default_request_text: Request text used when none is known.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are invalid.
        """

        if registry is None:
            raise ValueError("registry must not be None")
        if engine is None:
            raise ValueError("engine must not be None")
        if not default_request_text.strip():
            raise ValueError("default_request_text must not be blank")

        self._registry = registry
        self._engine = engine
        self._default_request_text = default_request_text.strip()
        self._active_tasks: set[asyncio.Task[JobExecutionResult]] = set()

    def job_submit(self, payload: Any) -> JobSubmissionResult:
        """Validate a submission and register a new pending job.

        Args:
            payload: Decoded request body expected to carry a `request` string.

        Returns:
            JobSubmissionResult: Allocated job identity.

        Raises:
            JobSubmissionValidationError: Raised when `request` is missing, not text or blank.
        """

        if not isinstance(payload, Mapping):
            raise JobSubmissionValidationError("Missing request string")
        request_text = payload.get("request")
        if not isinstance(request_text, str) or not request_text.strip():
            raise JobSubmissionValidationError("Missing request string")

        job_id = uuid.uuid4().hex
        self._registry.registry_job_create(job_id, request_text=request_text)
        logger.info("Job %s submitted", job_id)
        return JobSubmissionResult(job_id=job_id)

    def job_get(self, job_id: str) -> JobRecord | None:
        return self._registry.registry_job_get(job_id)

    def job_list(self, limit: int, offset: int) -> list[JobRecord]:
        return self._registry.registry_job_list(limit=limit, offset=offset)

    def job_open_stream(
        self,
        job_id: str,
        request_text: str | None = None,
        failure_probability: float | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """Open the event stream of one job, replaying or starting it.

        Must be called from a running event loop. State checks and the
        pending-to-running transition happen before this returns, so two
        subscribers can never start the same job.

        Args:
            job_id: Job identity.
            request_text: Request text override for a job that has not started.
            failure_probability: Per-step failure probability override.

        Returns:
            AsyncIterator[StreamEvent]: Ordered events ending with a terminal event.

        Raises:
            ValueError: Raised when job_id is blank or the probability is NaN.
            JobStreamConflictError: Raised when the job is running or ended with an error.
        """

        normalized_job_id = job_id.strip()
        if not normalized_job_id:
            raise ValueError("job_id must not be blank")
        resolved_probability = (
            None if failure_probability is None else job_clamp_failure_probability(failure_probability)
        )

        existing_job = self._registry.registry_job_get(normalized_job_id)
        if existing_job is not None:
            if existing_job.status == JOB_STATUS_COMPLETED:
                logger.info("Job %s replayed from registry", normalized_job_id)
                return _job_iterate_events(channel_build_replay_events(existing_job))
            if existing_job.status == JOB_STATUS_RUNNING:
                raise JobStreamConflictError(
                    "job already running",
                    job_id=normalized_job_id,
                    status=existing_job.status,
                )
            if existing_job.status == JOB_STATUS_ERROR:
                raise JobStreamConflictError(
                    "job ended with an error and cannot be replayed",
                    job_id=normalized_job_id,
                    status=existing_job.status,
                )

        resolved_request_text = self._job_resolve_request_text(existing_job, request_text)
        job = self._engine.job_begin(job_id=normalized_job_id, request_text=resolved_request_text)
        sink = QueueEventSink()
        task = asyncio.create_task(
            self._engine.job_run(job=job, sink=sink, failure_probability=resolved_probability),
            name=f"job-{normalized_job_id}",
        )
        self._active_tasks.add(task)
        task.add_done_callback(self._active_tasks.discard)
        return sink.sink_iterate()

    async def job_wait_active(self) -> None:
        """Wait for every background job task started by this service.

        Returns:
            None: Returns once no task is pending.

        Raises:
            asyncio.CancelledError: Raised when the waiting task is cancelled.
        """

        if self._active_tasks:
            await asyncio.gather(*list(self._active_tasks))

    def _job_resolve_request_text(self, job: JobRecord | None, request_text: str | None) -> str:
        if isinstance(request_text, str) and request_text.strip():
            return request_text
        if job is not None and job.request_text and job.request_text.strip():
            return job.request_text
        return self._default_request_text


async def _job_iterate_events(events: list[StreamEvent]) -> AsyncIterator[StreamEvent]:
    for event in events:
        yield event
