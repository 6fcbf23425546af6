"""Typed interfaces for job-layer execution responsibilities."""

from dataclasses import dataclass
from typing import Protocol

from agent_pipeline.channel import EventSinkPort
from agent_pipeline.domain import JobRecord


@dataclass(frozen=True)
class JobExecutionResult:
    """Result contract for one job execution.

    Attributes:
        job_id: Job identity.
        status: Final job status (`completed` or `error`).
        error_message: Terminal error message when the job failed.
    """

    job_id: str
    status: str
    error_message: str | None = None


class JobEnginePort(Protocol):
    """Port definition for driving one job through its planned agents."""

    def job_begin(self, job_id: str, request_text: str) -> JobRecord:
        """Plan a job and move it from pending to running.

        Args:
            job_id: Job identity, registered on demand when unknown.
            request_text: Request text used for planning.

        Returns:
            JobRecord: Running job record with its plan attached.

        Raises:
            JobStateTransitionError: Raised when the job is not pending.
        """

    async def job_run(
        self,
        job: JobRecord,
        sink: EventSinkPort,
        failure_probability: float | None = None,
    ) -> JobExecutionResult:
        """Execute every planned agent of a running job, emitting events to the sink.

        Args:
            job: Running job returned by `job_begin`.
            sink: Ordered event sink; closed when the job ends.
            failure_probability: Per-step failure probability override.

        Returns:
            JobExecutionResult: Final execution status payload.

        Raises:
            ValueError: Raised when the job is not running.
        """
