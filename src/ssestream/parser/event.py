"""The event value handed to consumers once a blank line dispatches it."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_EVENT_TYPE = "message"


@dataclass(frozen=True, slots=True)
class Event:
    """A single dispatched Server-Sent Event."""

    type: str = DEFAULT_EVENT_TYPE
    data: str = ""

    def to_bytes(self) -> bytes:
        """Serialize back to event-stream wire format."""
        lines: list[str] = []
        if self.type != DEFAULT_EVENT_TYPE:
            lines.append(f"event: {self.type}")
        for data_line in self.data.split("\n"):
            lines.append(f"data: {data_line}")
        lines.append("")  # blank line dispatches the event
        return ("\n".join(lines) + "\n").encode()
