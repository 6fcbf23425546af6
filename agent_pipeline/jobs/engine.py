"""Job execution engine driving one job through its planned agents."""

from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Awaitable, Callable

from agent_pipeline.channel import (
    EventSinkClosedError,
    EventSinkPort,
    channel_build_agent_complete_event,
    channel_build_agent_progress_event,
    channel_build_agent_start_event,
    channel_build_job_complete_event,
    channel_build_job_error_event,
    channel_build_job_start_event,
    channel_build_plan_event,
)
from agent_pipeline.domain import (
    AGENT_STATUS_COMPLETED,
    AGENT_STATUS_FAILED,
    AGENT_STATUS_RUNNING,
    JOB_STATUS_COMPLETED,
    JOB_STATUS_ERROR,
    JOB_STATUS_PENDING,
    JOB_STATUS_RUNNING,
    AgentRun,
    JobRecord,
    JobStateTransitionError,
    domain_agent_run_record_step,
    domain_agent_run_transition,
)
from agent_pipeline.planner import PlannerPort, planner_plan_agents
from agent_pipeline.registry import JobRegistryPort

from .interfaces import JobEnginePort, JobExecutionResult
from .result_builder import job_build_agent_output, job_build_result

logger = logging.getLogger(__name__)

_JOB_UNKNOWN_ERROR_MESSAGE = "Unknown error"


def job_clamp_failure_probability(value: float) -> float:
    """Clamp a failure probability into [0.0, 1.0].

    Args:
        value: Candidate probability.

    Returns:
        float: Clamped probability.

    Raises:
        ValueError: Raised when the value is NaN.
    """

    probability = float(value)
    if math.isnan(probability):
        raise ValueError("failure_probability must be a number")
    return max(0.0, min(1.0, probability))


class JobExecutionEngine(JobEnginePort):
    """Sequential simulated-agent runner.

    Agents run strictly in plan order; each step awaits a random bounded delay
    and then draws against the failure probability. The first failed step ends
    the whole job. Exactly one terminal event is emitted per job and the sink
    is always closed on exit.
    """

    def __init__(
        self,
        registry: JobRegistryPort,
        planner: PlannerPort | None = None,
        random_unit_interval_provider: Callable[[], float] | None = None,
        sleep_function: Callable[[float], Awaitable[None]] | None = None,
        step_delay_min_seconds: float = 0.5,
        step_delay_max_seconds: float = 1.1,
        default_failure_probability: float = 0.0,
    ):
        """Initialize engine dependencies.

        Args:
            registry: Job registry holding the records this engine mutates.
            planner: Planner mapping request text to agents.
            random_unit_interval_provider: Provider returning values in [0.0, 1.0].
            sleep_function: Awaitable sleep used for simulated work.
            step_delay_min_seconds: Lower bound of one simulated step.
            step_delay_max_seconds: Upper bound of one simulated step.
            default_failure_probability: Failure probability used without override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies or bounds are invalid.
        """

        if registry is None:
            raise ValueError("registry must not be None")
        if step_delay_min_seconds < 0:
            raise ValueError("step_delay_min_seconds must be >= 0")
        if step_delay_max_seconds < step_delay_min_seconds:
            raise ValueError("step_delay_max_seconds must be >= step_delay_min_seconds")

        self._registry = registry
        self._planner = planner or planner_plan_agents
        self._random_unit_interval_provider = random_unit_interval_provider or random.random
        self._sleep_function = sleep_function or asyncio.sleep
        self._step_delay_min_seconds = float(step_delay_min_seconds)
        self._step_delay_max_seconds = float(step_delay_max_seconds)
        self._default_failure_probability = job_clamp_failure_probability(default_failure_probability)

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

        job = self._registry.registry_job_get(job_id)
        if job is None:
            job = self._registry.registry_job_create(job_id, request_text=request_text)
        if job.status != JOB_STATUS_PENDING:
            raise JobStateTransitionError(
                f"job {job.job_id} cannot start from {job.status}",
                current_status=job.status,
                target_status=JOB_STATUS_RUNNING,
            )

        job.request_text = request_text
        job.plan = tuple(self._planner(request_text))
        self._registry.registry_job_update_status(job.job_id, JOB_STATUS_RUNNING)
        logger.info("Job %s started with %d planned agents", job.job_id, len(job.plan))
        return job

    async def job_execute(
        self,
        job_id: str,
        request_text: str,
        sink: EventSinkPort,
        failure_probability: float | None = None,
    ) -> JobExecutionResult:
        """Begin and run one job to completion.

        Args:
            job_id: Job identity.
            request_text: Request text used for planning.
            sink: Ordered event sink.
            failure_probability: Per-step failure probability override.

        Returns:
            JobExecutionResult: Final execution status payload.

        Raises:
            JobStateTransitionError: Raised when the job is not pending.
        """

        job = self.job_begin(job_id=job_id, request_text=request_text)
        return await self.job_run(job=job, sink=sink, failure_probability=failure_probability)

    async def job_run(
        self,
        job: JobRecord,
        sink: EventSinkPort,
        failure_probability: float | None = None,
    ) -> JobExecutionResult:
        """Execute every planned agent of a running job.

        Args:
            job: Running job returned by `job_begin`.
            sink: Ordered event sink; closed when the job ends.
            failure_probability: Per-step failure probability override.

        Returns:
            JobExecutionResult: Final execution status payload.

        Raises:
            ValueError: Raised when the job is not running or the probability is NaN.
        """

        if job.status != JOB_STATUS_RUNNING:
            raise ValueError(f"job {job.job_id} must be running, got {job.status}")
        probability = (
            self._default_failure_probability
            if failure_probability is None
            else job_clamp_failure_probability(failure_probability)
        )

        terminal_emitted = False
        try:
            sink.sink_emit(channel_build_job_start_event(job))
            sink.sink_emit(channel_build_plan_event(job.plan))

            for agent_spec in job.plan:
                agent_run = AgentRun(spec=agent_spec)
                job.agent_runs.append(agent_run)
                domain_agent_run_transition(agent_run, AGENT_STATUS_RUNNING)
                sink.sink_emit(channel_build_agent_start_event(agent_spec))

                for step in range(1, agent_spec.steps + 1):
                    await self._job_simulate_step_delay()
                    if self._job_step_fails(probability):
                        message = f"{agent_spec.name} encountered an error at step {step}"
                        domain_agent_run_transition(agent_run, AGENT_STATUS_FAILED)
                        job.error_message = message
                        job.failed_agent_id = agent_spec.agent_id
                        self._registry.registry_job_update_status(job.job_id, JOB_STATUS_ERROR)
                        terminal_emitted = True
                        sink.sink_emit(channel_build_job_error_event(message, agent_id=agent_spec.agent_id))
                        logger.info("Job %s failed: %s", job.job_id, message)
                        return JobExecutionResult(job_id=job.job_id, status=JOB_STATUS_ERROR, error_message=message)

                    progress, log_line = domain_agent_run_record_step(agent_run, step)
                    sink.sink_emit(channel_build_agent_progress_event(agent_spec.agent_id, progress, log_line))

                agent_run.output = job_build_agent_output(agent_spec)
                domain_agent_run_transition(agent_run, AGENT_STATUS_COMPLETED)
                sink.sink_emit(channel_build_agent_complete_event(agent_run))

            job.result = job_build_result(job)
            self._registry.registry_job_update_status(job.job_id, JOB_STATUS_COMPLETED)
            terminal_emitted = True
            sink.sink_emit(channel_build_job_complete_event(job))
            logger.info("Job %s completed with %d agents", job.job_id, len(job.agent_runs))
            return JobExecutionResult(job_id=job.job_id, status=JOB_STATUS_COMPLETED)
        except Exception as error:
            logger.exception("Job %s aborted by unexpected error", job.job_id)
            message = str(error) or _JOB_UNKNOWN_ERROR_MESSAGE
            self._job_mark_internal_failure(job=job, message=message)
            if not terminal_emitted:
                try:
                    sink.sink_emit(channel_build_job_error_event(message))
                except EventSinkClosedError:
                    logger.warning("Job %s error event dropped: sink already closed", job.job_id)
            return JobExecutionResult(job_id=job.job_id, status=JOB_STATUS_ERROR, error_message=job.error_message)
        finally:
            sink.sink_close()

    def _job_mark_internal_failure(self, job: JobRecord, message: str) -> None:
        """Move a job hit by an unexpected fault to the error state.

        Args:
            job: Job being executed.
            message: Failure message recorded on the job.

        Returns:
            None: Mutates the job in place.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        if job.agent_runs and job.agent_runs[-1].status == AGENT_STATUS_RUNNING:
            domain_agent_run_transition(job.agent_runs[-1], AGENT_STATUS_FAILED)
        if job.status == JOB_STATUS_RUNNING:
            job.error_message = message
            self._registry.registry_job_update_status(job.job_id, JOB_STATUS_ERROR)

    async def _job_simulate_step_delay(self) -> None:
        delay_span = self._step_delay_max_seconds - self._step_delay_min_seconds
        delay_seconds = self._step_delay_min_seconds + (self._job_draw_unit_interval() * delay_span)
        await self._sleep_function(delay_seconds)

    def _job_step_fails(self, probability: float) -> bool:
        # A probability of 1.0 fails even on a draw of exactly 1.0.
        random_ratio = self._job_draw_unit_interval()
        return probability >= 1.0 or random_ratio < probability

    def _job_draw_unit_interval(self) -> float:
        """Return one random draw from the configured provider.

        Returns:
            float: Value in [0.0, 1.0].

        Raises:
            RuntimeError: Raised when the provider returns a value outside [0.0, 1.0].
        """

        random_ratio = float(self._random_unit_interval_provider())
        if random_ratio < 0.0 or random_ratio > 1.0:
            raise RuntimeError("random_unit_interval_provider must return a value in [0.0, 1.0]")
        return random_ratio
