"""Tests for the line framer."""

import pytest

from ssestream.errors import LineTooLongError
from ssestream.parser.framer import LineFramer


class TestLineTerminators:
    def test_lf(self):
        assert LineFramer().feed(b"a\nb\n") == [b"a", b"b"]

    def test_crlf(self):
        assert LineFramer().feed(b"a\r\nb\r\n") == [b"a", b"b"]

    def test_lone_cr(self):
        assert LineFramer().feed(b"a\rb\rc\n") == [b"a", b"b", b"c"]

    def test_mixed_terminators(self):
        assert LineFramer().feed(b"a\r\nb\nc\rd\n") == [b"a", b"b", b"c", b"d"]

    def test_lf_cr_is_two_terminators(self):
        assert LineFramer().feed(b"a\n\rb\n") == [b"a", b"", b"b"]

    def test_blank_lines_kept(self):
        assert LineFramer().feed(b"\n\r\n\r\n") == [b"", b"", b""]


class TestIncremental:
    def test_line_split_across_chunks(self):
        framer = LineFramer()
        assert framer.feed(b"da") == []
        assert framer.feed(b"ta: x") == []
        assert framer.feed(b"\n") == [b"data: x"]

    def test_crlf_split_across_chunks(self):
        framer = LineFramer()
        assert framer.feed(b"a\r") == []
        assert framer.feed(b"\nb\n") == [b"a", b"b"]

    def test_trailing_cr_resolved_by_next_chunk(self):
        framer = LineFramer()
        assert framer.feed(b"a\r") == []
        assert framer.feed(b"b\n") == [b"a", b"b"]

    def test_pending_counts_unterminated_bytes(self):
        framer = LineFramer()
        framer.feed(b"a\nbcd")
        assert framer.pending == 3


class TestEndOfStream:
    def test_unterminated_remainder_discarded(self):
        framer = LineFramer()
        assert framer.feed(b"data: a\ndata:") == [b"data: a"]
        assert framer.finish() == b"data:"
        assert framer.pending == 0

    def test_trailing_cr_not_flushed(self):
        framer = LineFramer()
        assert framer.feed(b"a\nb\r") == [b"a"]
        assert framer.finish() == b"b\r"

    def test_finish_on_empty(self):
        assert LineFramer().finish() == b""


class TestLineLimit:
    def test_long_line_rejected(self):
        framer = LineFramer(max_line_bytes=4)
        framer.feed(b"abcd")
        with pytest.raises(LineTooLongError) as exc_info:
            framer.feed(b"e")
        assert exc_info.value.limit == 4
        assert exc_info.value.size == 5

    def test_complete_lines_not_limited_by_total_chunk(self):
        framer = LineFramer(max_line_bytes=4)
        assert framer.feed(b"abcd\nefgh\nij") == [b"abcd", b"efgh"]

    def test_held_back_cr_not_counted(self):
        framer = LineFramer(max_line_bytes=4)
        assert framer.feed(b"abcd\r") == []
        assert framer.feed(b"\n") == [b"abcd"]
