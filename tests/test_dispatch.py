"""Tests for event dispatch and the Event value type."""

from ssestream.parser.dispatch import dispatch
from ssestream.parser.event import Event
from ssestream.parser.state import StreamState


class TestEvent:
    def test_defaults(self):
        assert Event() == Event(type="message", data="")

    def test_to_bytes_basic(self):
        result = Event(type="score", data='{"a":1}').to_bytes()
        assert result == b'event: score\ndata: {"a":1}\n\n'

    def test_to_bytes_default_type_omitted(self):
        assert Event(data="hi").to_bytes() == b"data: hi\n\n"

    def test_to_bytes_multiline_data(self):
        result = Event(data="line1\nline2").to_bytes()
        assert b"data: line1\n" in result
        assert b"data: line2\n" in result


class TestDispatch:
    def test_empty_data_emits_nothing(self):
        state, event = dispatch(StreamState(event_type="score"))
        assert event is None
        assert state.event_type == ""

    def test_empty_data_keeps_id_and_retry(self):
        state, event = dispatch(StreamState(last_event_id="7", reconnection_time_ms=10))
        assert event is None
        assert state.last_event_id == "7"
        assert state.reconnection_time_ms == 10

    def test_strips_one_trailing_lf(self):
        _, event = dispatch(StreamState(data="a\nb\n"))
        assert event == Event(type="message", data="a\nb")

    def test_only_one_lf_removed(self):
        _, event = dispatch(StreamState(data="\n\n"))
        assert event == Event(data="\n")

    def test_single_lf_yields_empty_data(self):
        _, event = dispatch(StreamState(data="\n"))
        assert event == Event(data="")

    def test_event_type_used(self):
        _, event = dispatch(StreamState(data="x\n", event_type="score"))
        assert event is not None
        assert event.type == "score"

    def test_buffers_reset_together(self):
        state, _ = dispatch(StreamState(data="x\n", event_type="score", last_event_id="3"))
        assert state == StreamState(last_event_id="3")
