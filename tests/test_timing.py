"""Tests for timestamp estimation and formatting.

WHY: Timestamps are the only timing information the transcript carries.
The estimate must start at zero, never go backwards, and render the hour
boundary correctly.
"""

from __future__ import annotations

import pytest

from sublyze.core.timing import (
    TimestampFormat,
    assign_timestamps,
    format_srt_time,
    format_timestamp,
)


# ---------------------------------------------------------------------------
# assign_timestamps
# ---------------------------------------------------------------------------


class TestAssignTimestamps:

    def test_uniform_spread(self):
        assert assign_timestamps(["a", "b", "c"], 90) == [0.0, 30.0, 60.0]

    def test_first_timestamp_is_zero(self):
        assert assign_timestamps(["only"], 42.0) == [0.0]

    def test_monotonic_non_decreasing(self):
        stamps = assign_timestamps(list(range(17)), 123.4)
        assert stamps == sorted(stamps)
        assert all(0 <= s < 123.4 for s in stamps)

    @pytest.mark.parametrize("duration", [None, 0, -5, float("nan"), float("inf")])
    def test_unknown_duration_gives_no_timestamps(self, duration):
        assert assign_timestamps(["a", "b"], duration) == []

    def test_no_segments(self):
        assert assign_timestamps([], 60) == []


# ---------------------------------------------------------------------------
# format_timestamp
# ---------------------------------------------------------------------------


class TestFormatTimestamp:

    def test_below_one_hour_is_mm_ss(self):
        assert format_timestamp(3599) == "59:59"

    def test_one_hour_switches_to_h_mm_ss(self):
        assert format_timestamp(3600) == "1:00:00"

    def test_fractions_are_floored(self):
        assert format_timestamp(61.99) == "01:01"

    def test_zero(self):
        assert format_timestamp(0) == "00:00"

    def test_forced_h_mm_ss(self):
        assert format_timestamp(65, TimestampFormat.H_MM_SS) == "0:01:05"

    def test_forced_mm_ss_keeps_counting_minutes(self):
        assert format_timestamp(3725, TimestampFormat.MM_SS) == "62:05"

    def test_seconds_format(self):
        assert format_timestamp(75.6, TimestampFormat.SECONDS) == "75s"

    def test_accepts_format_value_string(self):
        assert format_timestamp(3600, "mm:ss") == "60:00"


class TestFormatSrtTime:

    def test_millisecond_precision(self):
        assert format_srt_time(62.5) == "00:01:02,500"

    def test_hours(self):
        assert format_srt_time(3723.004) == "01:02:03,004"
