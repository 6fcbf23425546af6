"""Regression tests for job submission validation and stream opening."""

from __future__ import annotations

import asyncio

import pytest

from agent_pipeline.channel import EVENT_JOB_COMPLETE, EVENT_JOB_ERROR, EVENT_PLAN
from agent_pipeline.domain import JOB_STATUS_COMPLETED, JOB_STATUS_ERROR, JOB_STATUS_PENDING
from agent_pipeline.jobs import (
    JobExecutionEngine,
    JobStreamConflictError,
    JobSubmissionService,
    JobSubmissionValidationError,
)
from agent_pipeline.registry import InMemoryJobRegistry


async def _no_sleep(_delay_seconds: float) -> None:
    return None


def _build_service() -> tuple[JobSubmissionService, InMemoryJobRegistry]:
    registry = InMemoryJobRegistry()
    engine = JobExecutionEngine(
        registry=registry,
        sleep_function=_no_sleep,
        step_delay_min_seconds=0,
        step_delay_max_seconds=0,
    )
    return JobSubmissionService(registry=registry, engine=engine), registry


async def _collect_names(service: JobSubmissionService, job_id: str, **kwargs) -> list[str]:
    events = service.job_open_stream(job_id, **kwargs)
    return [event.name async for event in events]


@pytest.mark.parametrize(
    "payload",
    [None, [], {}, {"request": None}, {"request": 42}, {"request": "   "}, {"text": "hello"}],
)
def test_jobs_submit_rejects_malformed_payloads(payload: object) -> None:
    """Reject payloads without a non-blank `request` string before allocating ids.

    Args:
        payload: Malformed payload under test.

    Returns:
        None: Assertions validate validation errors.

    Raises:
        AssertionError: Raised when malformed payloads are accepted.
    """

    service, registry = _build_service()

    with pytest.raises(JobSubmissionValidationError, match="Missing request string"):
        service.job_submit(payload)
    assert registry.registry_job_count() == 0


def test_jobs_submit_allocates_unique_pending_jobs_without_running_them() -> None:
    """Allocate a fresh identity per submission and leave the job pending.

    Returns:
        None: Assertions validate submission side effects.

    Raises:
        AssertionError: Raised when ids repeat or execution starts.
    """

    service, registry = _build_service()

    first_submission = service.job_submit({"request": "Draft API integration plan"})
    second_submission = service.job_submit({"request": "Draft API integration plan"})

    assert first_submission.job_id != second_submission.job_id
    stored_job = registry.registry_job_get(first_submission.job_id)
    assert stored_job is not None
    assert stored_job.status == JOB_STATUS_PENDING
    assert stored_job.request_text == "Draft API integration plan"
    assert stored_job.agent_runs == []


def test_jobs_open_stream_runs_submitted_job_then_replays_it() -> None:
    """Run a submitted job on first open and replay it on the next open.

    Returns:
        None: Assertions validate live and replay streams.

    Raises:
        AssertionError: Raised when streams differ or the job does not complete.
    """

    service, registry = _build_service()
    job_id = service.job_submit({"request": "Summarize last three quarters financial trends"}).job_id

    async def _exercise() -> tuple[list[str], list[str]]:
        live_names = await _collect_names(service, job_id)
        await service.job_wait_active()
        replay_names = await _collect_names(service, job_id, request_text="ignored", failure_probability=1)
        return live_names, replay_names

    live_names, replay_names = asyncio.run(_exercise())
    job = registry.registry_job_get(job_id)

    assert live_names[-1] == EVENT_JOB_COMPLETE
    assert replay_names == live_names
    assert job.status == JOB_STATUS_COMPLETED
    assert job.plan[0].agent_id == "finance"
    assert job.request_text == "Summarize last three quarters financial trends"


def test_jobs_open_stream_rejects_second_subscriber_while_running() -> None:
    """Reject attaching to a job that is already running.

    Returns:
        None: Assertions validate running-job conflicts.

    Raises:
        AssertionError: Raised when a second stream starts the job again.
    """

    service, _ = _build_service()
    job_id = service.job_submit({"request": "hello"}).job_id

    async def _exercise() -> list[str]:
        events = service.job_open_stream(job_id)
        with pytest.raises(JobStreamConflictError) as error_info:
            service.job_open_stream(job_id)
        assert error_info.value.status == "running"
        return [event.name async for event in events]

    assert asyncio.run(_exercise())[-1] == EVENT_JOB_COMPLETE


def test_jobs_open_stream_rejects_replay_of_failed_job() -> None:
    """Refuse to replay a job that ended with an error.

    Returns:
        None: Assertions validate error-job conflicts.

    Raises:
        AssertionError: Raised when failed jobs replay.
    """

    service, registry = _build_service()

    async def _exercise() -> list[str]:
        names = await _collect_names(service, "failing-job", failure_probability=5)
        with pytest.raises(JobStreamConflictError) as error_info:
            service.job_open_stream("failing-job")
        assert error_info.value.status == JOB_STATUS_ERROR
        return names

    names = asyncio.run(_exercise())

    assert names.count(EVENT_JOB_ERROR) == 1
    assert EVENT_JOB_COMPLETE not in names
    assert registry.registry_job_get("failing-job").status == JOB_STATUS_ERROR


def test_jobs_open_stream_starts_unknown_job_with_default_text() -> None:
    """Start a never-submitted identity using the default request text.

    Returns:
        None: Assertions validate on-demand job creation.

    Raises:
        AssertionError: Raised when the job is not created or text differs.
    """

    service, registry = _build_service()

    names = asyncio.run(_collect_names(service, "adhoc-job"))
    job = registry.registry_job_get("adhoc-job")

    assert names[1] == EVENT_PLAN
    assert job.request_text == "General business analysis request"
    assert job.status == JOB_STATUS_COMPLETED
