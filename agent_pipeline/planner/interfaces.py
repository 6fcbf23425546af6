"""Typed interfaces for planner-layer responsibilities."""

from typing import Protocol

from agent_pipeline.domain import AgentSpec


class PlannerPort(Protocol):
    """Port definition for mapping request text to an ordered agent plan."""

    def __call__(self, request_text: str) -> list[AgentSpec]:
        """Return the ordered agent plan for one request.

        Args:
            request_text: Free-text user request.

        Returns:
            list[AgentSpec]: Ordered plan with at least one agent.

        Raises:
            RuntimeError: Implementations must not raise for any text input.
        """
