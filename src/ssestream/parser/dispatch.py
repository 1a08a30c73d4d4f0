"""Turns the accumulated buffers into an Event when a blank line arrives."""

from __future__ import annotations

from ssestream.parser.event import DEFAULT_EVENT_TYPE, Event
from ssestream.parser.state import StreamState


def dispatch(state: StreamState) -> tuple[StreamState, Event | None]:
    """Dispatch the pending event.

    Returns the cleared state and the event, or ``None`` when the data buffer
    is empty. ``last_event_id`` and ``reconnection_time_ms`` carry over
    untouched.
    """
    if not state.data:
        return state.cleared(), None

    data = state.data
    if data.endswith("\n"):
        data = data[:-1]

    event = Event(type=state.event_type or DEFAULT_EVENT_TYPE, data=data)
    return state.cleared(), event
