"""Job layer package for execution and submission boundaries."""

from .engine import JobExecutionEngine, job_clamp_failure_probability
from .interfaces import JobEnginePort, JobExecutionResult
from .result_builder import JOB_RESULT_TITLE, job_build_agent_output, job_build_result
from .submission import (
    JobStreamConflictError,
    JobSubmissionResult,
    JobSubmissionService,
    JobSubmissionValidationError,
)

__all__ = [
    "JobEnginePort",
    "JobExecutionEngine",
    "JobExecutionResult",
    "JOB_RESULT_TITLE",
    "JobStreamConflictError",
    "JobSubmissionResult",
    "JobSubmissionService",
    "JobSubmissionValidationError",
    "job_build_agent_output",
    "job_build_result",
    "job_clamp_failure_probability",
]
