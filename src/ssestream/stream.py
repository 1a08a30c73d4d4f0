"""Asyncio event stream: a producer task parses a byte source into a bounded queue.

The producer owns the parser state and is the only code that touches it.
Consumers pull events with ``receive()`` or ``async for``. A full queue
suspends the producer, so no event is dropped or reordered. The byte source
is closed on every exit path: completion, error and cancellation.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

import structlog

from ssestream.config import StreamConfig
from ssestream.errors import ReadError, StreamClosedError, StreamError
from ssestream.parser.core import EventStreamParser
from ssestream.parser.event import Event

log = structlog.get_logger()


class ByteSource(Protocol):
    """Readable, closable byte stream. ``httpx.Response`` satisfies this."""

    def aiter_bytes(self, chunk_size: int | None = None) -> AsyncIterator[bytes]: ...

    async def aclose(self) -> None: ...


@dataclass(frozen=True, slots=True)
class _EndOfStream:
    error: StreamError | None = None


def _as_read_error(exc: Exception) -> ReadError:
    error = ReadError(f"error reading event stream: {exc!r}")
    error.__cause__ = exc
    return error


class EventStream:
    """Parses one session of a byte source in a background task."""

    def __init__(
        self,
        source: ByteSource,
        *,
        last_event_id: str = "",
        max_queue_size: int | None = None,
        config: StreamConfig | None = None,
    ) -> None:
        self.config = config or StreamConfig()
        self._source = source
        self._parser = EventStreamParser(
            last_event_id=last_event_id,
            reconnection_time_ms=self.config.default_reconnection_time_ms,
            max_line_bytes=self.config.max_line_bytes,
        )
        if max_queue_size is None:
            max_queue_size = self.config.max_queue_size
        elif max_queue_size < 1:
            raise ValueError(f"max_queue_size must be at least 1, got {max_queue_size}")
        self._queue: asyncio.Queue[Event | _EndOfStream] = asyncio.Queue(maxsize=max_queue_size)
        self._task: asyncio.Task[None] | None = None
        self._end: _EndOfStream | None = None
        self._error: StreamError | None = None
        self._source_released = False
        self._closed = False
        self.events_dispatched = 0

    @property
    def last_event_id(self) -> str:
        """Most recent ``id`` field value, for a ``Last-Event-ID`` header on reconnect."""
        return self._parser.last_event_id

    @property
    def reconnection_time_ms(self) -> int:
        return self._parser.reconnection_time_ms

    @property
    def error(self) -> StreamError | None:
        """The error that ended the session, if it ended with one."""
        return self._error

    @property
    def done(self) -> bool:
        """Whether the producer has stopped, for any reason."""
        return self._task is not None and self._task.done()

    def start(self) -> None:
        """Launch the producer task. Calling it again is a no-op."""
        if self._closed:
            raise StreamClosedError("event stream is closed")
        if self._task is None:
            self._task = asyncio.create_task(self._run(), name="ssestream-producer")

    async def receive(self) -> Event:
        """Return the next event.

        Raises the session error once every earlier event has been returned,
        or StreamClosedError after clean completion or ``aclose()``.
        """
        if self._closed:
            raise StreamClosedError("event stream is closed")
        if self._end is None:
            self.start()
            item = await self._queue.get()
            if isinstance(item, Event):
                return item
            self._end = item
        if self._end.error is not None:
            raise self._end.error
        raise StreamClosedError("event stream is complete")

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> Event:
        try:
            return await self.receive()
        except StreamClosedError:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> EventStream:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Stop the producer and release the byte source. Safe to call twice."""
        if self._closed:
            return
        self._closed = True

        if self._task is not None and not self._task.done():
            self._task.cancel()
            await asyncio.wait({self._task})
            log.debug("event_stream_cancelled", events=self.events_dispatched)
        # Covers a producer cancelled before it ever ran
        await self._release_source()

        # Wake a receiver blocked on an empty queue
        if not self._queue.full():
            self._queue.put_nowait(_EndOfStream())

    async def _run(self) -> None:
        log.debug("event_stream_started", last_event_id=self.last_event_id or None)
        error: StreamError | None = None
        try:
            await self._pump()
        except StreamError as exc:
            error = exc
        except Exception as exc:
            error = _as_read_error(exc)
        finally:
            await self._release_source()

        self._error = error
        if error is not None:
            log.warning(
                "event_stream_failed",
                error=str(error),
                error_type=type(error).__name__,
                events=self.events_dispatched,
            )
        else:
            log.debug(
                "event_stream_complete",
                events=self.events_dispatched,
                dropped_bytes=self._parser.dropped_bytes,
                last_event_id=self.last_event_id or None,
            )
        await self._queue.put(_EndOfStream(error))

    async def _pump(self) -> None:
        async for chunk in self._source.aiter_bytes(self.config.read_chunk_size):
            for event in self._parser.feed(chunk):
                await self._emit(event)
            # Fail now rather than on a next chunk that may never come
            if self._parser.pending_error is not None:
                raise self._parser.pending_error
        for event in self._parser.finish():
            await self._emit(event)

    async def _emit(self, event: Event) -> None:
        await self._queue.put(event)
        self.events_dispatched += 1

    async def _release_source(self) -> None:
        if self._source_released:
            return
        self._source_released = True
        try:
            await self._source.aclose()
        except Exception as exc:
            log.warning("event_stream_source_close_failed", error=str(exc))
