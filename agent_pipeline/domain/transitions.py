"""Lifecycle state machine helpers for jobs and agent runs."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Final

from .models import (
    AGENT_STATUS_COMPLETED,
    AGENT_STATUS_FAILED,
    AGENT_STATUS_PENDING,
    AGENT_STATUS_RUNNING,
    JOB_STATUS_COMPLETED,
    JOB_STATUS_ERROR,
    JOB_STATUS_PENDING,
    JOB_STATUS_RUNNING,
    JOB_TERMINAL_STATUSES,
    AgentRun,
    JobRecord,
)

_DOMAIN_JOB_TRANSITIONS: Final[dict[str, frozenset[str]]] = {
    JOB_STATUS_PENDING: frozenset({JOB_STATUS_RUNNING}),
    JOB_STATUS_RUNNING: frozenset({JOB_STATUS_COMPLETED, JOB_STATUS_ERROR}),
    JOB_STATUS_COMPLETED: frozenset(),
    JOB_STATUS_ERROR: frozenset(),
}

_DOMAIN_AGENT_TRANSITIONS: Final[dict[str, frozenset[str]]] = {
    AGENT_STATUS_PENDING: frozenset({AGENT_STATUS_RUNNING}),
    AGENT_STATUS_RUNNING: frozenset({AGENT_STATUS_COMPLETED, AGENT_STATUS_FAILED}),
    AGENT_STATUS_COMPLETED: frozenset(),
    AGENT_STATUS_FAILED: frozenset(),
}


class JobStateTransitionError(RuntimeError):
    """Raised when a job or agent run is moved along an invalid lifecycle edge.

    Attributes:
        current_status: Status before the attempted transition.
        target_status: Requested status.
    """

    def __init__(self, message: str, current_status: str, target_status: str):
        super().__init__(message)
        self.current_status = current_status
        self.target_status = target_status


def domain_job_transition(job: JobRecord, target_status: str) -> JobRecord:
    """Move one job to the target lifecycle status.

    Args:
        job: Job record mutated in place.
        target_status: Requested job status.

    Returns:
        JobRecord: The same job record after transition.

    Raises:
        JobStateTransitionError: Raised when the edge is not allowed.
    """

    allowed_targets = _DOMAIN_JOB_TRANSITIONS.get(job.status, frozenset())
    if target_status not in allowed_targets:
        raise JobStateTransitionError(
            f"job {job.job_id} cannot move from {job.status} to {target_status}",
            current_status=job.status,
            target_status=target_status,
        )

    job.status = target_status
    if target_status in JOB_TERMINAL_STATUSES:
        job.finished_at_utc = datetime.now(timezone.utc)
    return job


def domain_agent_run_transition(agent_run: AgentRun, target_status: str) -> AgentRun:
    """Move one agent run to the target lifecycle status.

    Args:
        agent_run: Agent run mutated in place.
        target_status: Requested agent run status.

    Returns:
        AgentRun: The same agent run after transition.

    Raises:
        JobStateTransitionError: Raised when the edge is not allowed.
    """

    allowed_targets = _DOMAIN_AGENT_TRANSITIONS.get(agent_run.status, frozenset())
    if target_status not in allowed_targets:
        raise JobStateTransitionError(
            f"agent {agent_run.agent_id} cannot move from {agent_run.status} to {target_status}",
            current_status=agent_run.status,
            target_status=target_status,
        )

    agent_run.status = target_status
    if target_status == AGENT_STATUS_COMPLETED:
        agent_run.progress = 100
    return agent_run


def domain_agent_run_record_step(agent_run: AgentRun, step: int) -> tuple[int, str]:
    """Record one successful step on a running agent run.

    Args:
        agent_run: Running agent run mutated in place.
        step: One-based step index that just completed.

    Returns:
        tuple[int, str]: New progress percentage and appended log line.

    Raises:
        JobStateTransitionError: Raised when the agent run is not running.
        ValueError: Raised when step is outside `1..steps`.
    """

    if agent_run.status != AGENT_STATUS_RUNNING:
        raise JobStateTransitionError(
            f"agent {agent_run.agent_id} is not running",
            current_status=agent_run.status,
            target_status=AGENT_STATUS_RUNNING,
        )
    total_steps = agent_run.spec.steps
    if step < 1 or step > total_steps:
        raise ValueError(f"step must be within 1..{total_steps}")

    progress = domain_calculate_progress(step=step, total_steps=total_steps)
    log_line = f"{agent_run.spec.name}: completed step {step}/{total_steps}"
    agent_run.progress = max(agent_run.progress, progress)
    agent_run.logs.append(log_line)
    return progress, log_line


def domain_calculate_progress(step: int, total_steps: int) -> int:
    """Return integer progress for a completed step.

    Args:
        step: One-based completed step index.
        total_steps: Total step count.

    Returns:
        int: Rounded percentage in [0, 100].

    Raises:
        ValueError: Raised when total_steps is below one.
    """

    if total_steps < 1:
        raise ValueError("total_steps must be >= 1")
    # Half-up rounding in integer arithmetic; round() rounds halves to even.
    return (step * 200 + total_steps) // (2 * total_steps)
