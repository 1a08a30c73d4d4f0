"""Byte-order-mark stripping and UTF-8 validation of the raw byte stream.

The preprocessor sits in front of the line framer. It removes at most one
leading byte-order mark and passes through only bytes that belong to valid
UTF-8 sequences. When a chunk contains an invalid sequence the bytes before
it are still returned and the error is raised on the following call, so any
line completed before the bad byte is still seen downstream.
"""

from __future__ import annotations

import codecs

from ssestream.errors import EncodingError

UTF8_BOM = codecs.BOM_UTF8
TWO_BYTE_BOM = b"\xfe\xff"

_BOMS = (UTF8_BOM, TWO_BYTE_BOM)


class BytePreprocessor:
    """Incremental BOM stripper and strict UTF-8 validator."""

    def __init__(self) -> None:
        self._head = bytearray()
        self._head_done = False
        self._bom = b""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._consumed = 0
        self._error: EncodingError | None = None

    @property
    def bom(self) -> bytes:
        """The byte-order mark removed from the head of the stream, if any."""
        return self._bom

    @property
    def error(self) -> EncodingError | None:
        """The encoding error found so far, before it has been raised."""
        return self._error

    def feed(self, chunk: bytes) -> bytes:
        """Return the validated bytes of ``chunk`` with any leading BOM removed."""
        self._raise_pending()
        if not self._head_done:
            self._head += chunk
            stripped = self._strip_bom(final=False)
            if stripped is None:
                return b""
            chunk = stripped
        return self._validate(chunk, final=False)

    def finish(self) -> bytes:
        """Signal end of stream and return any bytes still held back.

        Raises EncodingError if the stream was invalid or ends inside a
        multi-byte sequence.
        """
        self._raise_pending()
        tail = b""
        if not self._head_done:
            tail = self._strip_bom(final=True) or b""
        valid = self._validate(tail, final=True)
        self._raise_pending()
        return valid

    def _strip_bom(self, final: bool) -> bytes | None:
        head = bytes(self._head)
        for bom in _BOMS:
            if head.startswith(bom):
                self._bom = bom
                head = head[len(bom):]
                break
        else:
            if not final and any(bom.startswith(head) for bom in _BOMS):
                # Too short to tell yet
                return None
        self._head_done = True
        self._head.clear()
        return head

    def _validate(self, chunk: bytes, final: bool) -> bytes:
        pending = len(self._decoder.getstate()[0])
        start = self._consumed - pending
        self._consumed += len(chunk)
        try:
            self._decoder.decode(chunk, final)
        except UnicodeDecodeError as exc:
            self._error = EncodingError(len(self._bom) + start + exc.start, exc.reason)
            return chunk[: max(exc.start - pending, 0)]
        return chunk

    def _raise_pending(self) -> None:
        if self._error is not None:
            raise self._error
