"""Regression tests for the in-process `job-run` command."""

from __future__ import annotations

import asyncio
import sys

import pytest

from agent_pipeline import main as main_module
from agent_pipeline.channel import EventSinkClosedError, channel_build_job_error_event
from agent_pipeline.config import AppSettings


def _build_settings(failure_probability: float = 0.0) -> AppSettings:
    return AppSettings(
        _env_file=None,
        pipeline_failure_probability=failure_probability,
        pipeline_step_delay_min_seconds=0,
        pipeline_step_delay_max_seconds=0,
    )


def test_main_run_single_job_prints_sse_frames(capsys: pytest.CaptureFixture[str]) -> None:
    """Print every event as an SSE frame and finish with job completion.

    Args:
        capsys: Pytest output capture fixture.

    Returns:
        None: Assertions validate printed frames.

    Raises:
        AssertionError: Raised when output or status differ.
    """

    execution_result = asyncio.run(
        main_module.main_run_single_job(
            settings=_build_settings(),
            request_text="Draft API integration plan",
            failure_probability=None,
        )
    )

    printed_output = capsys.readouterr().out
    assert execution_result.status == "completed"
    assert printed_output.startswith("event: job-start\ndata: ")
    assert "event: job-complete\n" in printed_output
    assert '"id":"engineer"' in printed_output


def test_main_job_run_command_exits_non_zero_on_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    """Exit with status 1 when the job ends with an error.

    Args:
        monkeypatch: Pytest patch fixture.

    Returns:
        None: Assertions validate exit behavior.

    Raises:
        AssertionError: Raised when failure does not exit non-zero.
    """

    monkeypatch.setattr(main_module, "config_load_settings", lambda: _build_settings(failure_probability=1.0))
    monkeypatch.setattr(sys, "argv", ["agent-pipeline", "job-run", "--request", "hello"])

    with pytest.raises(SystemExit) as exit_info:
        main_module.main()

    assert exit_info.value.code == 1


def test_main_stdout_sink_rejects_emit_after_close(capsys: pytest.CaptureFixture[str]) -> None:
    """Reject events emitted to the stdout sink after it was closed.

    Args:
        capsys: Pytest output capture fixture.

    Returns:
        None: Assertions validate closed sink behavior.

    Raises:
        AssertionError: Raised when late events are printed.
    """

    sink = main_module._StdoutEventSink()
    sink.sink_emit(channel_build_job_error_event("boom"))
    sink.sink_close()

    with pytest.raises(EventSinkClosedError):
        sink.sink_emit(channel_build_job_error_event("late"))

    assert capsys.readouterr().out == 'event: job-error\ndata: {"message":"boom"}\n\n'
