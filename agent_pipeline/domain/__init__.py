"""Domain models used across application layer boundaries."""

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
    AgentOutput,
    AgentRun,
    AgentSpec,
    Artifact,
    ChartArtifact,
    JobRecord,
    JobResult,
    TableArtifact,
)
from .transitions import (
    JobStateTransitionError,
    domain_agent_run_record_step,
    domain_agent_run_transition,
    domain_calculate_progress,
    domain_job_transition,
)

__all__ = [
    "AGENT_STATUS_COMPLETED",
    "AGENT_STATUS_FAILED",
    "AGENT_STATUS_PENDING",
    "AGENT_STATUS_RUNNING",
    "JOB_STATUS_COMPLETED",
    "JOB_STATUS_ERROR",
    "JOB_STATUS_PENDING",
    "JOB_STATUS_RUNNING",
    "JOB_TERMINAL_STATUSES",
    "AgentOutput",
    "AgentRun",
    "AgentSpec",
    "Artifact",
    "ChartArtifact",
    "JobRecord",
    "JobResult",
    "TableArtifact",
    "JobStateTransitionError",
    "domain_agent_run_record_step",
    "domain_agent_run_transition",
    "domain_calculate_progress",
    "domain_job_transition",
]
