"""Keyword heuristic planner choosing which simulated agents run for a request."""

from __future__ import annotations

from typing import Final

from agent_pipeline.domain import AgentSpec

PLANNER_BASELINE_AGENTS: Final[tuple[AgentSpec, ...]] = (
    AgentSpec(agent_id="planner", name="Planner", role="Break down the request", steps=1),
    AgentSpec(agent_id="researcher", name="Researcher", role="Gather data and sources", steps=3),
    AgentSpec(agent_id="analyst", name="Analyst", role="Analyze trends and insights", steps=3),
    AgentSpec(agent_id="visualizer", name="Visualizer", role="Create charts/tables", steps=2),
    AgentSpec(agent_id="editor", name="Editor", role="Compose final structured report", steps=2),
)
PLANNER_ENGINEER_AGENT: Final[AgentSpec] = AgentSpec(
    agent_id="engineer",
    name="Engineer",
    role="Prototype or integrate APIs",
    steps=2,
)
PLANNER_FINANCE_AGENT: Final[AgentSpec] = AgentSpec(
    agent_id="finance",
    name="Finance SME",
    role="Validate financial logic",
    steps=2,
)

_PLANNER_IMPLEMENTATION_KEYWORDS: Final[tuple[str, ...]] = ("code", "api")
_PLANNER_FINANCE_KEYWORDS: Final[tuple[str, ...]] = ("financial", "quarter")
# Engineer lands after the second baseline stage, counted on the baseline alone.
_PLANNER_IMPLEMENTATION_BASELINE_INDEX: Final[int] = 2


def planner_plan_agents(request_text: str) -> list[AgentSpec]:
    """Map request text to the ordered list of agents that will run.

    Args:
        request_text: Free-text user request.

    Returns:
        list[AgentSpec]: Baseline pipeline, optionally with a finance stage at
        the front and an engineer stage after the research stage.

    Raises:
        RuntimeError: This function does not raise runtime errors.
    """

    lowered_text = request_text.casefold() if isinstance(request_text, str) else ""
    planned_agents = list(PLANNER_BASELINE_AGENTS)

    if _planner_text_mentions(lowered_text, _PLANNER_IMPLEMENTATION_KEYWORDS):
        planned_agents.insert(_PLANNER_IMPLEMENTATION_BASELINE_INDEX, PLANNER_ENGINEER_AGENT)
    if _planner_text_mentions(lowered_text, _PLANNER_FINANCE_KEYWORDS):
        planned_agents.insert(0, PLANNER_FINANCE_AGENT)

    return planned_agents


def _planner_text_mentions(lowered_text: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in lowered_text for keyword in keywords)
