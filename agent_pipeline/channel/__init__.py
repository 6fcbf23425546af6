"""Event channel package: event framing, sinks and replay."""

from .events import (
    EVENT_AGENT_COMPLETE,
    EVENT_AGENT_PROGRESS,
    EVENT_AGENT_START,
    EVENT_JOB_COMPLETE,
    EVENT_JOB_ERROR,
    EVENT_JOB_START,
    EVENT_NAMES,
    EVENT_PLAN,
    TERMINAL_EVENT_NAMES,
    StreamEvent,
    channel_build_agent_complete_event,
    channel_build_agent_progress_event,
    channel_build_agent_start_event,
    channel_build_job_complete_event,
    channel_build_job_error_event,
    channel_build_job_start_event,
    channel_build_plan_event,
    channel_format_sse_frame,
    channel_serialize_agent_spec,
    channel_serialize_result,
)
from .replay import ReplayUnavailableError, channel_build_replay_events
from .sinks import EventSinkClosedError, EventSinkPort, ListEventSink, QueueEventSink

__all__ = [
    "EVENT_AGENT_COMPLETE",
    "EVENT_AGENT_PROGRESS",
    "EVENT_AGENT_START",
    "EVENT_JOB_COMPLETE",
    "EVENT_JOB_ERROR",
    "EVENT_JOB_START",
    "EVENT_NAMES",
    "EVENT_PLAN",
    "TERMINAL_EVENT_NAMES",
    "StreamEvent",
    "channel_build_agent_complete_event",
    "channel_build_agent_progress_event",
    "channel_build_agent_start_event",
    "channel_build_job_complete_event",
    "channel_build_job_error_event",
    "channel_build_job_start_event",
    "channel_build_plan_event",
    "channel_format_sse_frame",
    "channel_serialize_agent_spec",
    "channel_serialize_result",
    "ReplayUnavailableError",
    "channel_build_replay_events",
    "EventSinkClosedError",
    "EventSinkPort",
    "ListEventSink",
    "QueueEventSink",
]
