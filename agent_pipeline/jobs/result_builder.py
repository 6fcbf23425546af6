"""Aggregation of completed agent runs into the final job result."""

from __future__ import annotations

from types import MappingProxyType
from typing import Final

from agent_pipeline.domain import AgentOutput, AgentSpec, ChartArtifact, JobRecord, JobResult, TableArtifact

JOB_RESULT_TITLE: Final[str] = "Task Result"

_JOB_RESULT_ARTIFACTS: Final[tuple[ChartArtifact | TableArtifact, ...]] = (
    ChartArtifact(format="svg", url="/placeholder-chart.svg", description="Example chart artifact"),
    TableArtifact(
        format="json",
        data=(
            MappingProxyType({"quarter": "Q1", "revenue": 120}),
            MappingProxyType({"quarter": "Q2", "revenue": 140}),
            MappingProxyType({"quarter": "Q3", "revenue": 160}),
        ),
    ),
)


def job_build_agent_output(agent_spec: AgentSpec) -> AgentOutput:
    """Build the deterministic output summary of one completed agent.

    Args:
        agent_spec: Completed agent stage.

    Returns:
        AgentOutput: Output payload naming the agent and its role.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return AgentOutput(summary=f"{agent_spec.name} completed: {agent_spec.role}")


def job_build_result(job: JobRecord) -> JobResult:
    """Synthesize the final result from a job's completed agent runs.

    Args:
        job: Job whose agent runs all completed.

    Returns:
        JobResult: Result with newline-joined summaries in execution order.

    Raises:
        ValueError: Raised when an agent run has no output.
    """

    summaries: list[str] = []
    for agent_run in job.agent_runs:
        if agent_run.output is None:
            raise ValueError(f"agent {agent_run.agent_id} has no output")
        summaries.append(agent_run.output.summary)

    return JobResult(
        title=JOB_RESULT_TITLE,
        request=job.request_text or "",
        synthesized_summary="\n".join(summaries),
        artifacts=_JOB_RESULT_ARTIFACTS,
    )
