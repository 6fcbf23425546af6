"""Reconstruction of a finished job's event sequence from its registry record."""

from __future__ import annotations

from agent_pipeline.domain import JOB_STATUS_COMPLETED, JobRecord, domain_calculate_progress

from .events import (
    StreamEvent,
    channel_build_agent_complete_event,
    channel_build_agent_progress_event,
    channel_build_agent_start_event,
    channel_build_job_complete_event,
    channel_build_job_start_event,
    channel_build_plan_event,
)


class ReplayUnavailableError(RuntimeError):
    """Raised when a job's stored state cannot be replayed as a stream."""


def channel_build_replay_events(job: JobRecord) -> list[StreamEvent]:
    """Rebuild the live event sequence of a completed job without re-running it.

    Progress events are regenerated from the retained log lines, one per
    completed step, so the replayed sequence has the same event-name order as
    the live run and every agent ends at 100.

    Args:
        job: Completed job record.

    Returns:
        list[StreamEvent]: Ordered events ending with `job-complete`.

    Raises:
        ReplayUnavailableError: Raised when the job is not completed.
    """

    if job.status != JOB_STATUS_COMPLETED or job.result is None:
        raise ReplayUnavailableError(f"job {job.job_id} is {job.status}; only completed jobs can be replayed")

    plan = job.plan or tuple(agent_run.spec for agent_run in job.agent_runs)
    events: list[StreamEvent] = [
        channel_build_job_start_event(job),
        channel_build_plan_event(plan),
    ]

    for agent_run in job.agent_runs:
        events.append(channel_build_agent_start_event(agent_run.spec))
        if agent_run.logs:
            total_steps = len(agent_run.logs)
            for step, log_line in enumerate(agent_run.logs, start=1):
                progress = domain_calculate_progress(step=step, total_steps=total_steps)
                events.append(channel_build_agent_progress_event(agent_run.agent_id, progress, log_line))
        else:
            events.append(
                channel_build_agent_progress_event(agent_run.agent_id, 100, f"{agent_run.spec.name} completed")
            )
        events.append(channel_build_agent_complete_event(agent_run))

    events.append(channel_build_job_complete_event(job))
    return events
