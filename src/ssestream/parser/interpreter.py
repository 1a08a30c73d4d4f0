"""Classifies framed lines and splits field lines at the first colon."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class LineKind(enum.Enum):
    BLANK = "BLANK"
    COMMENT = "COMMENT"
    FIELD = "FIELD"


@dataclass(frozen=True, slots=True)
class ParsedLine:
    kind: LineKind
    field: str = ""
    value: str = ""


_BLANK = ParsedLine(LineKind.BLANK)
_COMMENT = ParsedLine(LineKind.COMMENT)


def interpret_line(line: bytes) -> ParsedLine:
    """Classify one line. Every byte sequence maps to some ParsedLine.

    A line without a colon is a field named by the whole line with an empty
    value. Exactly one space after the colon is dropped from the value.
    """
    if not line:
        return _BLANK
    if line.startswith(b":"):
        return _COMMENT

    field, _, value = line.partition(b":")
    if value.startswith(b" "):
        value = value[1:]
    # Lines reaching here were validated upstream; replace keeps this total
    return ParsedLine(
        LineKind.FIELD,
        field.decode("utf-8", errors="replace"),
        value.decode("utf-8", errors="replace"),
    )
