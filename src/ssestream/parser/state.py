"""Buffers carried by a parsing session between lines and between dispatches."""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_RECONNECTION_TIME_MS = 3000


@dataclass(frozen=True, slots=True)
class StreamState:
    """Snapshot of a session's buffers.

    ``data`` and ``event_type`` belong to the event being assembled and are
    cleared on every dispatch. ``last_event_id`` and ``reconnection_time_ms``
    outlive dispatches and only change when the server sends ``id`` or
    ``retry`` fields.
    """

    data: str = ""
    event_type: str = ""
    last_event_id: str = ""
    reconnection_time_ms: int = DEFAULT_RECONNECTION_TIME_MS

    def cleared(self) -> StreamState:
        """Return this state with the per-event buffers reset together."""
        return replace(self, data="", event_type="")
