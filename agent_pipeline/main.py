"""Main module entrypoint for local runtime execution.

This module validates startup configuration and either launches the FastAPI
service or runs one job in-process, printing its event stream.
"""

import argparse
import asyncio
import sys
import uuid

import uvicorn

from agent_pipeline.bootstrap import bootstrap_create_application, bootstrap_create_engine
from agent_pipeline.channel import EventSinkClosedError, EventSinkPort, StreamEvent, channel_format_sse_frame
from agent_pipeline.config import AppSettings, config_configure_logging, config_load_settings
from agent_pipeline.domain import JOB_STATUS_COMPLETED
from agent_pipeline.jobs import JobExecutionResult
from agent_pipeline.registry import InMemoryJobRegistry


class _StdoutEventSink(EventSinkPort):
    """Sink printing each event as an SSE frame as soon as it is emitted."""

    def __init__(self) -> None:
        self.closed = False

    def sink_emit(self, event: StreamEvent) -> None:
        if self.closed:
            raise EventSinkClosedError(f"cannot emit {event.name} after close")
        sys.stdout.write(channel_format_sse_frame(event))
        sys.stdout.flush()

    def sink_close(self) -> None:
        self.closed = True


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
        SystemExit: Raised with code 1 when a `job-run` job ends with an error.
    """

    argument_parser = argparse.ArgumentParser(description="Agent pipeline runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "job-run"),
        help="Runtime command: `api` starts server, `job-run` executes one job and prints its events",
        type=str,
    )
    argument_parser.add_argument(
        "--request",
        dest="request_text",
        type=str,
        help="Request text for `job-run`",
    )
    argument_parser.add_argument(
        "--failure-probability",
        dest="failure_probability",
        type=float,
        help="Per-step failure probability override for `job-run`",
    )
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    config_configure_logging(settings.log_level)

    if parsed_arguments.command == "job-run":
        execution_result = asyncio.run(
            main_run_single_job(
                settings=settings,
                request_text=parsed_arguments.request_text,
                failure_probability=parsed_arguments.failure_probability,
            )
        )
        if execution_result.status != JOB_STATUS_COMPLETED:
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings=settings)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
    )


async def main_run_single_job(
    settings: AppSettings,
    request_text: str | None,
    failure_probability: float | None,
) -> JobExecutionResult:
    """Execute one job in-process and print its events to stdout.

    Args:
        settings: Validated runtime settings.
        request_text: Request text, or None for the configured default.
        failure_probability: Optional per-step failure probability override.

    Returns:
        JobExecutionResult: Final execution status payload.

    Raises:
        ValueError: Raised when the failure probability is NaN.
    """

    engine = bootstrap_create_engine(settings=settings, registry=InMemoryJobRegistry())
    resolved_request_text = (request_text or "").strip() or settings.pipeline_default_request_text
    return await engine.job_execute(
        job_id=uuid.uuid4().hex,
        request_text=resolved_request_text,
        sink=_StdoutEventSink(),
        failure_probability=failure_probability,
    )


if __name__ == "__main__":
    main()
