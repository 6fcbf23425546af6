"""In-memory job registry scoped to the lifetime of one process."""

from __future__ import annotations

import threading

from agent_pipeline.domain import JobRecord, domain_job_transition

from .interfaces import JobAlreadyExistsError, JobNotFoundError, JobRegistryPort


class InMemoryJobRegistry(JobRegistryPort):
    """Dictionary-backed job registry.

    Records are mutated in place by the single engine invocation that drives a
    job. The lock guards the key space and status transitions so status
    polling and replay readers see consistent membership.
    """

    def __init__(self) -> None:
        """Initialize an empty registry.

        Returns:
            None: Initializer does not return a value.

        Raises:
            RuntimeError: This initializer does not raise runtime errors.
        """

        self._records: dict[str, JobRecord] = {}
        self._lock = threading.Lock()

    def registry_job_create(self, job_id: str, request_text: str | None = None) -> JobRecord:
        """Register one pending job record.

        Args:
            job_id: Unique job identity.
            request_text: Optional request text captured at submission time.

        Returns:
            JobRecord: Newly created pending job.

        Raises:
            ValueError: Raised when job_id is blank.
            JobAlreadyExistsError: Raised when the identity is already registered.
        """

        normalized_job_id = job_id.strip()
        if not normalized_job_id:
            raise ValueError("job_id must not be blank")

        with self._lock:
            if normalized_job_id in self._records:
                raise JobAlreadyExistsError(f"job {normalized_job_id} already exists")
            record = JobRecord(job_id=normalized_job_id, request_text=request_text)
            self._records[normalized_job_id] = record
        return record

    def registry_job_get(self, job_id: str) -> JobRecord | None:
        """Return one job record by identity.

        Args:
            job_id: Job identity.

        Returns:
            JobRecord | None: Matching job or None.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        with self._lock:
            return self._records.get(job_id.strip())

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

        with self._lock:
            record = self._records.get(job_id.strip())
            if record is None:
                raise JobNotFoundError(f"job {job_id} not found")
            return domain_job_transition(record, status)

    def registry_job_list(self, limit: int, offset: int) -> list[JobRecord]:
        """Return job records ordered by newest first.

        Args:
            limit: Max rows to return.
            offset: Rows to skip.

        Returns:
            list[JobRecord]: Page of job records.

        Raises:
            ValueError: Raised when limit < 1 or offset < 0.
        """

        if limit < 1:
            raise ValueError("limit must be >= 1")
        if offset < 0:
            raise ValueError("offset must be >= 0")

        with self._lock:
            ordered_records = sorted(
                self._records.values(),
                key=lambda record: record.created_at_utc,
                reverse=True,
            )
        return ordered_records[offset : offset + limit]

    def registry_job_count(self) -> int:
        """Return the number of registered jobs.

        Returns:
            int: Registered job count.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        with self._lock:
            return len(self._records)
