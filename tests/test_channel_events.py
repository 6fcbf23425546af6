"""Regression tests for event framing, sinks and completed-job replay."""

from __future__ import annotations

import asyncio
import json

import pytest

from agent_pipeline.channel import (
    EVENT_AGENT_COMPLETE,
    EVENT_AGENT_PROGRESS,
    EVENT_AGENT_START,
    EVENT_JOB_COMPLETE,
    EVENT_JOB_START,
    EVENT_PLAN,
    EventSinkClosedError,
    ListEventSink,
    QueueEventSink,
    ReplayUnavailableError,
    StreamEvent,
    channel_build_job_error_event,
    channel_build_replay_events,
    channel_format_sse_frame,
)
from agent_pipeline.domain import JobRecord
from agent_pipeline.jobs import JobExecutionEngine
from agent_pipeline.registry import InMemoryJobRegistry


async def _no_sleep(_delay_seconds: float) -> None:
    return None


def _run_completed_job(request_text: str) -> tuple[JobRecord, ListEventSink]:
    registry = InMemoryJobRegistry()
    engine = JobExecutionEngine(
        registry=registry,
        sleep_function=_no_sleep,
        step_delay_min_seconds=0,
        step_delay_max_seconds=0,
    )
    sink = ListEventSink()
    asyncio.run(engine.job_execute(job_id="job-replay", request_text=request_text, sink=sink))
    job = registry.registry_job_get("job-replay")
    assert job is not None
    return job, sink


def test_channel_format_sse_frame_writes_event_and_compact_json_lines() -> None:
    """Frame events as an event line, a compact data line and a blank terminator.

    Returns:
        None: Assertions validate SSE framing.

    Raises:
        AssertionError: Raised when framing differs.
    """

    frame = channel_format_sse_frame(StreamEvent(name="agent-progress", data={"id": "planner", "progress": 100}))

    assert frame == 'event: agent-progress\ndata: {"id":"planner","progress":100}\n\n'


def test_channel_stream_event_rejects_unknown_names() -> None:
    """Reject events outside the stream vocabulary.

    Returns:
        None: Assertions validate event name validation.

    Raises:
        AssertionError: Raised when unknown names are accepted.
    """

    with pytest.raises(ValueError, match="unsupported event name"):
        StreamEvent(name="job-paused", data={})


def test_channel_job_error_event_omits_agent_for_internal_faults() -> None:
    """Only carry `agentId` when a specific agent failed.

    Returns:
        None: Assertions validate error payload shape.

    Raises:
        AssertionError: Raised when payload keys are unexpected.
    """

    assert channel_build_job_error_event("boom").data == {"message": "boom"}
    assert channel_build_job_error_event("boom", agent_id="analyst").data == {
        "message": "boom",
        "agentId": "analyst",
    }


def test_channel_list_sink_rejects_emit_after_close() -> None:
    """Reject events emitted after the sink was closed.

    Returns:
        None: Assertions validate closed sink behavior.

    Raises:
        AssertionError: Raised when late events are accepted.
    """

    sink = ListEventSink()
    sink.sink_emit(channel_build_job_error_event("boom"))
    sink.sink_close()

    with pytest.raises(EventSinkClosedError):
        sink.sink_emit(channel_build_job_error_event("late"))
    assert sink.sink_event_names() == ["job-error"]


def test_channel_queue_sink_yields_events_in_emission_order_until_closed() -> None:
    """Deliver queued events in order and stop at close.

    Returns:
        None: Assertions validate queue sink ordering.

    Raises:
        AssertionError: Raised when ordering or termination differ.
    """

    async def _exercise() -> list[str]:
        sink = QueueEventSink()
        sink.sink_emit(StreamEvent(name=EVENT_JOB_START, data={"jobId": "a"}))
        sink.sink_emit(StreamEvent(name=EVENT_PLAN, data={"agents": []}))
        sink.sink_close()
        sink.sink_close()
        return [event.name async for event in sink.sink_iterate()]

    assert asyncio.run(_exercise()) == [EVENT_JOB_START, EVENT_PLAN]


def test_channel_replay_matches_live_event_name_order() -> None:
    """Replay a completed job with the same event-name sequence as its live run.

    Returns:
        None: Assertions validate replay ordering and payloads.

    Raises:
        AssertionError: Raised when replay diverges from the live stream.
    """

    job, live_sink = _run_completed_job("Draft API integration plan")

    replay_events = channel_build_replay_events(job)

    assert [event.name for event in replay_events] == live_sink.sink_event_names()
    assert replay_events[0].data == live_sink.events[0].data
    assert replay_events[1].data == live_sink.events[1].data
    assert replay_events[-1].name == EVENT_JOB_COMPLETE
    assert replay_events[-1].data == live_sink.events[-1].data


def test_channel_replay_ends_each_agent_at_full_progress() -> None:
    """End every replayed agent with a 100 progress event before completion.

    Returns:
        None: Assertions validate replayed progress.

    Raises:
        AssertionError: Raised when an agent does not reach 100.
    """

    job, _ = _run_completed_job("Summarize last three quarters financial trends")

    replay_events = channel_build_replay_events(job)

    for index, event in enumerate(replay_events):
        if event.name == EVENT_AGENT_COMPLETE:
            previous_event = replay_events[index - 1]
            assert previous_event.name == EVENT_AGENT_PROGRESS
            assert previous_event.data["progress"] == 100
            assert previous_event.data["id"] == event.data["id"]
    assert [event.data["agent"]["id"] for event in replay_events if event.name == EVENT_AGENT_START][0] == "finance"


def test_channel_replay_rejects_unfinished_jobs() -> None:
    """Refuse to replay jobs that have not completed.

    Returns:
        None: Assertions validate replay preconditions.

    Raises:
        AssertionError: Raised when unfinished jobs replay.
    """

    with pytest.raises(ReplayUnavailableError):
        channel_build_replay_events(JobRecord(job_id="pending-job"))


def test_channel_job_complete_payload_is_json_serializable() -> None:
    """Serialize the completed result including both artifact kinds.

    Returns:
        None: Assertions validate result wire payload.

    Raises:
        AssertionError: Raised when payload shape differs.
    """

    _, live_sink = _run_completed_job("Plan a team offsite")

    result_payload = json.loads(channel_format_sse_frame(live_sink.events[-1]).split("data: ", 1)[1])["result"]

    assert result_payload["title"] == "Task Result"
    assert result_payload["request"] == "Plan a team offsite"
    assert [artifact["type"] for artifact in result_payload["artifacts"]] == ["chart", "table"]
    assert result_payload["artifacts"][1]["data"][0] == {"quarter": "Q1", "revenue": 120}


def test_channel_result_table_rows_are_read_only() -> None:
    """Keep the shared table rows immutable across completed jobs.

    Returns:
        None: Assertions validate artifact immutability.

    Raises:
        AssertionError: Raised when a row can be mutated.
    """

    first_job, _ = _run_completed_job("Plan a team offsite")
    second_job, _ = _run_completed_job("Draft API integration plan")

    with pytest.raises(TypeError):
        first_job.result.artifacts[1].data[0]["revenue"] = 0

    assert second_job.result.artifacts[1].data[0]["revenue"] == 120
