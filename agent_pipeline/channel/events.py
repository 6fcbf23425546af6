"""Event primitives and wire payloads for the job progress stream.

Each event carries a channel name and a JSON-serializable payload using the
camelCase keys expected by stream subscribers.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Final

from agent_pipeline.domain import AgentRun, AgentSpec, Artifact, ChartArtifact, JobRecord, JobResult

EVENT_JOB_START: Final[str] = "job-start"
EVENT_PLAN: Final[str] = "plan"
EVENT_AGENT_START: Final[str] = "agent-start"
EVENT_AGENT_PROGRESS: Final[str] = "agent-progress"
EVENT_AGENT_COMPLETE: Final[str] = "agent-complete"
EVENT_JOB_COMPLETE: Final[str] = "job-complete"
EVENT_JOB_ERROR: Final[str] = "job-error"

EVENT_NAMES: Final[frozenset[str]] = frozenset(
    {
        EVENT_JOB_START,
        EVENT_PLAN,
        EVENT_AGENT_START,
        EVENT_AGENT_PROGRESS,
        EVENT_AGENT_COMPLETE,
        EVENT_JOB_COMPLETE,
        EVENT_JOB_ERROR,
    }
)
TERMINAL_EVENT_NAMES: Final[frozenset[str]] = frozenset({EVENT_JOB_COMPLETE, EVENT_JOB_ERROR})


@dataclass(frozen=True)
class StreamEvent:
    """One named event pushed to a stream subscriber.

    Attributes:
        name: Event channel name.
        data: JSON-serializable event payload.
    """

    name: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.name not in EVENT_NAMES:
            raise ValueError(f"unsupported event name={self.name}")

    def event_is_terminal(self) -> bool:
        return self.name in TERMINAL_EVENT_NAMES


def channel_format_sse_frame(event: StreamEvent) -> str:
    """Frame one event as a Server-Sent Events block.

    Args:
        event: Event to frame.

    Returns:
        str: `event:` line, `data:` line with compact JSON, blank terminator.

    Raises:
        TypeError: Raised when the payload is not JSON-serializable.
    """

    payload = json.dumps(event.data, separators=(",", ":"))
    return f"event: {event.name}\ndata: {payload}\n\n"


def channel_build_job_start_event(job: JobRecord) -> StreamEvent:
    return StreamEvent(name=EVENT_JOB_START, data={"jobId": job.job_id, "createdAt": job.created_at_ms})


def channel_build_plan_event(plan: tuple[AgentSpec, ...] | list[AgentSpec]) -> StreamEvent:
    return StreamEvent(
        name=EVENT_PLAN,
        data={"agents": [channel_serialize_agent_spec(agent_spec) for agent_spec in plan]},
    )


def channel_build_agent_start_event(agent_spec: AgentSpec) -> StreamEvent:
    return StreamEvent(
        name=EVENT_AGENT_START,
        data={"agent": {"id": agent_spec.agent_id, "name": agent_spec.name, "role": agent_spec.role}},
    )


def channel_build_agent_progress_event(agent_id: str, progress: int, log_line: str) -> StreamEvent:
    return StreamEvent(name=EVENT_AGENT_PROGRESS, data={"id": agent_id, "progress": progress, "log": log_line})


def channel_build_agent_complete_event(agent_run: AgentRun) -> StreamEvent:
    output = {"summary": agent_run.output.summary} if agent_run.output is not None else None
    return StreamEvent(name=EVENT_AGENT_COMPLETE, data={"id": agent_run.agent_id, "output": output})


def channel_build_job_complete_event(job: JobRecord) -> StreamEvent:
    """Build the terminal success event for a completed job.

    Args:
        job: Completed job record carrying a result.

    Returns:
        StreamEvent: `job-complete` event with the serialized result.

    Raises:
        ValueError: Raised when the job has no result.
    """

    if job.result is None:
        raise ValueError(f"job {job.job_id} has no result")
    return StreamEvent(
        name=EVENT_JOB_COMPLETE,
        data={"jobId": job.job_id, "result": channel_serialize_result(job.result)},
    )


def channel_build_job_error_event(message: str, agent_id: str | None = None) -> StreamEvent:
    """Build the terminal failure event.

    Args:
        message: Human-readable failure message.
        agent_id: Failing agent identifier, omitted for internal faults.

    Returns:
        StreamEvent: `job-error` event.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    data: dict[str, Any] = {"message": message}
    if agent_id is not None:
        data["agentId"] = agent_id
    return StreamEvent(name=EVENT_JOB_ERROR, data=data)


def channel_serialize_agent_spec(agent_spec: AgentSpec) -> dict[str, object]:
    return {
        "id": agent_spec.agent_id,
        "name": agent_spec.name,
        "role": agent_spec.role,
        "steps": agent_spec.steps,
    }


def channel_serialize_result(result: JobResult) -> dict[str, object]:
    """Serialize a job result to its wire representation.

    Args:
        result: Aggregated job result.

    Returns:
        dict[str, object]: JSON-serializable result payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "title": result.title,
        "request": result.request,
        "synthesizedSummary": result.synthesized_summary,
        "artifacts": [channel_serialize_artifact(artifact) for artifact in result.artifacts],
    }


def channel_serialize_artifact(artifact: Artifact) -> dict[str, object]:
    if isinstance(artifact, ChartArtifact):
        return {
            "type": artifact.type,
            "format": artifact.format,
            "url": artifact.url,
            "description": artifact.description,
        }
    return {
        "type": artifact.type,
        "format": artifact.format,
        "data": [dict(row) for row in artifact.data],
    }
