"""Planner package mapping request text to simulated agent plans."""

from .interfaces import PlannerPort
from .keyword_planner import (
    PLANNER_BASELINE_AGENTS,
    PLANNER_ENGINEER_AGENT,
    PLANNER_FINANCE_AGENT,
    planner_plan_agents,
)

__all__ = [
    "PlannerPort",
    "PLANNER_BASELINE_AGENTS",
    "PLANNER_ENGINEER_AGENT",
    "PLANNER_FINANCE_AGENT",
    "planner_plan_agents",
]
