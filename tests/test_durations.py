"""Tests for hh:mm:ss parsing/formatting and the cancellation token."""

from datetime import timedelta

import pytest

from pushnotifier.errors import ValidationError
from pushnotifier.timer.cancellation import CancellationToken, OperationCancelled
from pushnotifier.timer.durations import (
    format_duration, is_valid_duration, parse_duration,
)


class TestParseDuration:

    @pytest.mark.parametrize("text, expected", [
        ("00:01:00", timedelta(minutes=1)),
        ("00:00:02", timedelta(seconds=2)),
        ("01:30:15", timedelta(hours=1, minutes=30, seconds=15)),
        ("23:59:59", timedelta(hours=23, minutes=59, seconds=59)),
        ("  00:15:00 ", timedelta(minutes=15)),
    ])
    def test_valid(self, text, expected):
        assert parse_duration(text) == expected

    def test_zero_parses_as_zero(self):
        """Zero is well-formed; rejecting it is the controller's job."""
        assert parse_duration("00:00:00") == timedelta(0)

    @pytest.mark.parametrize("text", [
        "", "1:00:00", "00:60:00", "00:00:60", "24:00:00",
        "00:01", "abc", "00-01-00", "-0:01:00", "00:01:00:00", None,
    ])
    def test_malformed_rejected(self, text):
        with pytest.raises(ValidationError):
            parse_duration(text)

    def test_is_valid_duration(self):
        assert is_valid_duration("00:30:00")
        assert not is_valid_duration("30 minutes")


class TestFormatDuration:

    def test_timedelta(self):
        assert format_duration(timedelta(hours=1, seconds=5)) == "01:00:05"

    def test_seconds(self):
        assert format_duration(125) == "00:02:05"

    def test_fraction_rounds_up(self):
        assert format_duration(timedelta(seconds=1.2)) == "00:00:02"
        assert format_duration(0.001) == "00:00:01"

    def test_negative_clamps_to_zero(self):
        assert format_duration(timedelta(seconds=-3)) == "00:00:00"


class TestCancellationToken:

    def test_starts_uncancelled(self):
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()

    def test_cancel_runs_callbacks_once(self):
        token = CancellationToken()
        calls = []
        token.register(lambda: calls.append("a"))
        token.cancel()
        token.cancel()
        assert calls == ["a"]
        assert token.cancelled

    def test_raise_after_cancel(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(OperationCancelled):
            token.raise_if_cancelled()

    def test_register_after_cancel_runs_immediately(self):
        token = CancellationToken()
        token.cancel()
        calls = []
        token.register(lambda: calls.append(1))
        assert calls == [1]

    def test_release_drops_callbacks(self):
        token = CancellationToken()
        calls = []
        token.register(lambda: calls.append(1))
        token.release()
        token.cancel()
        assert calls == []
