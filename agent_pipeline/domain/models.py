"""Typed domain models shared across runtime layers.

Jobs and agent runs are mutable records owned by the job registry and mutated
only by the execution engine driving them. Plans, results and artifacts are
immutable once built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Final, Mapping

JOB_STATUS_PENDING: Final[str] = "pending"
JOB_STATUS_RUNNING: Final[str] = "running"
JOB_STATUS_COMPLETED: Final[str] = "completed"
JOB_STATUS_ERROR: Final[str] = "error"
JOB_TERMINAL_STATUSES: Final[frozenset[str]] = frozenset({JOB_STATUS_COMPLETED, JOB_STATUS_ERROR})

AGENT_STATUS_PENDING: Final[str] = "pending"
AGENT_STATUS_RUNNING: Final[str] = "running"
AGENT_STATUS_COMPLETED: Final[str] = "completed"
AGENT_STATUS_FAILED: Final[str] = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AgentSpec:
    """Planned pipeline stage definition.

    Attributes:
        agent_id: Stable stage identifier.
        name: Human-readable agent name.
        role: Short role description.
        steps: Number of simulated steps, at least one.
    """

    agent_id: str
    name: str
    role: str
    steps: int

    def __post_init__(self) -> None:
        if not self.agent_id.strip():
            raise ValueError("agent_id must not be blank")
        if self.steps < 1:
            raise ValueError("steps must be >= 1")


@dataclass(frozen=True)
class AgentOutput:
    """Output payload attached to a completed agent run.

    Attributes:
        summary: One-line summary of the agent contribution.
    """

    summary: str


@dataclass
class AgentRun:
    """Execution record of one planned agent inside one job.

    Attributes:
        spec: Planned stage this run is bound to.
        status: Agent run lifecycle status.
        progress: Integer completion percentage in [0, 100].
        logs: Append-only progress log lines.
        output: Output payload once completed.
    """

    spec: AgentSpec
    status: str = AGENT_STATUS_PENDING
    progress: int = 0
    logs: list[str] = field(default_factory=list)
    output: AgentOutput | None = None

    @property
    def agent_id(self) -> str:
        return self.spec.agent_id


@dataclass(frozen=True)
class ChartArtifact:
    """Chart-like artifact with a renderable reference.

    Attributes:
        format: Rendering format of the referenced chart.
        url: Location of the chart resource.
        description: Human-readable caption.
    """

    format: str
    url: str
    description: str
    type: str = "chart"


@dataclass(frozen=True)
class TableArtifact:
    """Tabular artifact carrying inline structured rows.

    Attributes:
        format: Encoding of the inline rows.
        data: Ordered read-only table rows.
    """

    format: str
    data: tuple[Mapping[str, Any], ...]
    type: str = "table"


Artifact = ChartArtifact | TableArtifact


@dataclass(frozen=True)
class JobResult:
    """Aggregated result of a fully successful job.

    Attributes:
        title: Result title.
        request: Echoed request text.
        synthesized_summary: Newline-joined agent summaries in execution order.
        artifacts: Ordered illustrative artifacts.
    """

    title: str
    request: str
    synthesized_summary: str
    artifacts: tuple[Artifact, ...]


@dataclass
class JobRecord:
    """Full execution record of one submitted job.

    Attributes:
        job_id: Opaque unique job identity.
        status: Job lifecycle status.
        created_at_utc: Creation timestamp.
        request_text: Request text the job was submitted or started with.
        plan: Ordered agent plan, fixed when execution starts.
        agent_runs: Agent runs in execution order.
        result: Terminal result on success.
        error_message: Terminal error message on failure.
        failed_agent_id: Identifier of the failing agent when a step failed.
        finished_at_utc: Timestamp of the terminal transition.
    """

    job_id: str
    status: str = JOB_STATUS_PENDING
    created_at_utc: datetime = field(default_factory=_utcnow)
    request_text: str | None = None
    plan: tuple[AgentSpec, ...] = ()
    agent_runs: list[AgentRun] = field(default_factory=list)
    result: JobResult | None = None
    error_message: str | None = None
    failed_agent_id: str | None = None
    finished_at_utc: datetime | None = None

    @property
    def created_at_ms(self) -> int:
        return int(self.created_at_utc.timestamp() * 1000)

    def job_is_terminal(self) -> bool:
        """Return whether the job reached a terminal status.

        Returns:
            bool: True for `completed` and `error` jobs.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return self.status in JOB_TERMINAL_STATUSES
