"""Session-fatal errors raised by the event stream parser and its transport."""

from __future__ import annotations


class StreamError(Exception):
    """Base class for every error that ends a parsing session."""


class EncodingError(StreamError):
    """Raised when the stream contains bytes that are not valid UTF-8."""

    def __init__(self, offset: int, reason: str = "invalid utf-8") -> None:
        self.offset = offset
        self.reason = reason
        super().__init__(f"Invalid encoding at byte {offset}: {reason}")


class ReadError(StreamError):
    """Raised when the underlying byte source fails while being read."""

    def __init__(self, message: str = "error reading event stream") -> None:
        super().__init__(message)


class LineTooLongError(StreamError):
    """Raised when an unterminated line grows past the configured limit."""

    def __init__(self, limit: int, size: int) -> None:
        self.limit = limit
        self.size = size
        super().__init__(f"Line exceeds {limit} bytes ({size} buffered)")


class UnexpectedStatusError(StreamError):
    """Raised when the server answers the stream request with a non-200 status."""

    def __init__(self, status_code: int, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"Unexpected status code {status_code} from {url or 'server'}")


class StreamClosedError(StreamError):
    """Raised by ``EventStream.receive`` once the stream has completed cleanly."""
