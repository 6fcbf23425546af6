"""Ordered append-only event sinks the execution engine writes to."""

from __future__ import annotations

import asyncio
from typing import AsyncIterator, Protocol

from .events import StreamEvent


class EventSinkClosedError(RuntimeError):
    """Raised when an event is emitted to a sink that was already closed."""


class EventSinkPort(Protocol):
    """Port definition for one-way ordered event delivery to one subscriber."""

    def sink_emit(self, event: StreamEvent) -> None:
        """Append one event after every previously emitted event.

        Args:
            event: Event to deliver.

        Returns:
            None: Emission does not return a value.

        Raises:
            EventSinkClosedError: Raised when the sink is closed.
        """

    def sink_close(self) -> None:
        """Mark the end of the stream. Closing twice is a no-op.

        Returns:
            None: Close does not return a value.

        Raises:
            RuntimeError: Implementations should not raise on close.
        """


class ListEventSink(EventSinkPort):
    """Sink that keeps every emitted event in memory."""

    def __init__(self) -> None:
        self.events: list[StreamEvent] = []
        self.closed = False

    def sink_emit(self, event: StreamEvent) -> None:
        if self.closed:
            raise EventSinkClosedError(f"cannot emit {event.name} after close")
        self.events.append(event)

    def sink_close(self) -> None:
        self.closed = True

    def sink_event_names(self) -> list[str]:
        return [event.name for event in self.events]


class QueueEventSink(EventSinkPort):
    """Sink backed by an unbounded asyncio queue and consumed as an async iterator.

    Emission never blocks; backpressure is not modeled. A `None` sentinel marks
    the end of the stream.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[StreamEvent | None] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def sink_emit(self, event: StreamEvent) -> None:
        if self._closed:
            raise EventSinkClosedError(f"cannot emit {event.name} after close")
        self._queue.put_nowait(event)

    def sink_close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

    async def sink_iterate(self) -> AsyncIterator[StreamEvent]:
        """Yield emitted events in order until the sink is closed.

        Returns:
            AsyncIterator[StreamEvent]: Events in emission order.

        Raises:
            asyncio.CancelledError: Raised when the consuming task is cancelled.
        """

        while True:
            event = await self._queue.get()
            if event is None:
                break
            yield event
