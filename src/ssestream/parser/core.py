"""Incremental event-stream parser: raw byte chunks in, dispatched events out.

Wires the preprocessor, framer, line interpreter, field processor and
dispatcher together around a single StreamState. Has no I/O of its own; the
asyncio orchestrator in ``ssestream.stream`` and ``iter_events`` drive it.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ssestream.errors import EncodingError
from ssestream.parser.dispatch import dispatch
from ssestream.parser.event import Event
from ssestream.parser.fields import process_field
from ssestream.parser.framer import LineFramer
from ssestream.parser.interpreter import LineKind, interpret_line
from ssestream.parser.preprocess import BytePreprocessor
from ssestream.parser.state import DEFAULT_RECONNECTION_TIME_MS, StreamState


class EventStreamParser:
    """Parses one session's byte stream into events."""

    def __init__(
        self,
        last_event_id: str = "",
        reconnection_time_ms: int = DEFAULT_RECONNECTION_TIME_MS,
        max_line_bytes: int | None = None,
    ) -> None:
        self._preprocessor = BytePreprocessor()
        self._framer = LineFramer(max_line_bytes)
        self._state = StreamState(
            last_event_id=last_event_id,
            reconnection_time_ms=reconnection_time_ms,
        )
        self.dropped_bytes = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def last_event_id(self) -> str:
        return self._state.last_event_id

    @property
    def reconnection_time_ms(self) -> int:
        return self._state.reconnection_time_ms

    @property
    def pending_error(self) -> EncodingError | None:
        """Encoding error found in the last chunk, raised by the next feed/finish.

        Events completed before the bad byte are returned by ``feed`` first;
        callers that may not call again soon should raise this themselves.
        """
        return self._preprocessor.error

    def feed(self, chunk: bytes) -> list[Event]:
        """Feed a chunk of raw bytes, return any events it completes."""
        data = self._preprocessor.feed(chunk)
        return self._process(self._framer.feed(data))

    def finish(self) -> list[Event]:
        """Signal end of stream.

        An unterminated trailing line and an undispatched event are dropped.
        Raises EncodingError if the stream ended inside an invalid sequence.
        """
        data = self._preprocessor.finish()
        events = self._process(self._framer.feed(data))
        self.dropped_bytes = len(self._framer.finish())
        return events

    def _process(self, lines: list[bytes]) -> list[Event]:
        events: list[Event] = []
        for line in lines:
            parsed = interpret_line(line)
            if parsed.kind is LineKind.BLANK:
                self._state, event = dispatch(self._state)
                if event is not None:
                    events.append(event)
            elif parsed.kind is LineKind.FIELD:
                self._state = process_field(self._state, parsed.field, parsed.value)
        return events


def iter_events(
    chunks: Iterable[bytes],
    last_event_id: str = "",
    max_line_bytes: int | None = None,
) -> Iterator[Event]:
    """Parse a synchronous iterable of byte chunks, yielding events in order."""
    parser = EventStreamParser(last_event_id=last_event_id, max_line_bytes=max_line_bytes)
    for chunk in chunks:
        yield from parser.feed(chunk)
        if parser.pending_error is not None:
            raise parser.pending_error
    yield from parser.finish()
