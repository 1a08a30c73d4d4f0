"""Splits the validated byte stream into lines on CRLF, LF or CR."""

from __future__ import annotations

import re

from ssestream.errors import LineTooLongError

_TERMINATOR = re.compile(rb"\r\n|\r|\n")


class LineFramer:
    """Incremental line splitter.

    A CR at the very end of the buffered bytes is held back until more input
    arrives, so a CRLF split across two chunks is still read as one
    terminator. Bytes after the last terminator are never returned as a line.
    """

    def __init__(self, max_line_bytes: int | None = None) -> None:
        self._buffer = bytearray()
        self._max_line_bytes = max_line_bytes

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet returned as part of a line."""
        return len(self._buffer)

    def feed(self, data: bytes) -> list[bytes]:
        """Buffer ``data`` and return every line it completes, terminators excluded."""
        # Bytes already buffered hold no terminator except possibly a trailing CR
        pos = max(len(self._buffer) - 1, 0)
        self._buffer += data

        lines: list[bytes] = []
        line_start = 0
        while True:
            match = _TERMINATOR.search(self._buffer, pos)
            if match is None:
                break
            if match.group() == b"\r" and match.end() == len(self._buffer):
                break
            lines.append(bytes(self._buffer[line_start:match.start()]))
            line_start = pos = match.end()

        if line_start:
            del self._buffer[:line_start]
        self._check_length()
        return lines

    def finish(self) -> bytes:
        """End of stream: discard and return the unterminated remainder."""
        remainder = bytes(self._buffer)
        self._buffer.clear()
        return remainder

    def _check_length(self) -> None:
        if self._max_line_bytes is None:
            return
        size = len(self._buffer)
        if self._buffer.endswith(b"\r"):
            size -= 1
        if size > self._max_line_bytes:
            raise LineTooLongError(self._max_line_bytes, size)
