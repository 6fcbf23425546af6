"""Typed interfaces for job registry services.

All job record storage must remain behind the registry port so a durable store
can replace the in-memory implementation without touching callers.
"""

from typing import Protocol

from agent_pipeline.domain import JobRecord


class JobNotFoundError(LookupError):
    """Raised when a registry mutation targets an unknown job identity."""


class JobAlreadyExistsError(RuntimeError):
    """Raised when a job identity is registered twice."""


class JobRegistryPort(Protocol):
    """Port definition for the process-scoped job record store."""

    def registry_job_create(self, job_id: str, request_text: str | None = None) -> JobRecord:
        """Register one pending job record.

        Args:
            job_id: Unique job identity.
            request_text: Optional request text captured at submission time.

        Returns:
            JobRecord: Newly created pending job with no agent runs.

        Raises:
            JobAlreadyExistsError: Raised when the identity is already registered.
        """

    def registry_job_get(self, job_id: str) -> JobRecord | None:
        """Return one job record by identity.

        Args:
            job_id: Job identity.

        Returns:
            JobRecord | None: Matching job or None when absent.

        Raises:
            RuntimeError: Raised when registry read fails.
        """

    def registry_job_update_status(self, job_id: str, status: str) -> JobRecord:
        """Move one job to a new lifecycle status.

        Args:
            job_id: Job identity.
            status: Target job status.

        Returns:
            JobRecord: Updated job record.

        Raises:
            JobNotFoundError: Raised when the job is unknown.
            JobStateTransitionError: Raised when the transition is invalid.
        """

    def registry_job_list(self, limit: int, offset: int) -> list[JobRecord]:
        """Return job records ordered by newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            list[JobRecord]: Page of job records.

        Raises:
            ValueError: Raised when pagination values are invalid.
        """

    def registry_job_count(self) -> int:
        """Return the number of registered jobs.

        Returns:
            int: Registered job count.

        Raises:
            RuntimeError: Raised when registry read fails.
        """
