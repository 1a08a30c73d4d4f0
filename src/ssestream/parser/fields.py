"""Applies a field line to the stream buffers."""

from __future__ import annotations

import re
from dataclasses import replace

import structlog

from ssestream.parser.state import StreamState

log = structlog.get_logger()

_ASCII_DIGITS = re.compile(r"[0-9]+")


def process_field(state: StreamState, field: str, value: str) -> StreamState:
    """Return the state after processing one ``field: value`` line.

    Unknown fields and malformed ``retry`` values leave the state unchanged.
    """
    if field == "event":
        return replace(state, event_type=value)
    if field == "data":
        return replace(state, data=state.data + value + "\n")
    if field == "id":
        return replace(state, last_event_id=value)
    if field == "retry":
        if _ASCII_DIGITS.fullmatch(value):
            return replace(state, reconnection_time_ms=int(value))
        log.debug("retry_field_ignored", value=value[:32])
    return state
