"""Timestamp synchronizer: estimate segment start times from media duration.

WHY: The ASR response is plain text with no timing, but editors still want
to see roughly where each sentence falls in the video. Dividing the known
media duration evenly across the segments gives a usable estimate.

HOW: assign_timestamps() computes ``duration / count`` and multiplies by
each segment's index. format_timestamp() renders seconds for display in
one of several TimestampFormat styles; format_srt_time() renders the
``HH:MM:SS,mmm`` form SRT files require.

RULES:
- Timestamps are a uniform proportional estimate, NOT speech-aligned timing
- timestamp(0) == 0 and timestamps never decrease
- Unknown duration (None, 0, negative) → no timestamps at all
- AUTO format is MM:SS below one hour and H:MM:SS from 3600 s on
- All display formats floor fractional seconds
"""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Sequence


class TimestampFormat(str, Enum):
    """Display styles for segment timestamps."""

    AUTO = "auto"
    MM_SS = "mm:ss"
    H_MM_SS = "h:mm:ss"
    SECONDS = "seconds"


def assign_timestamps(segments: Sequence[object], duration_s: Optional[float]) -> List[float]:
    """Estimate a start time for each segment.

    The estimate spreads the media duration evenly over the segments; it
    knows nothing about when words were actually spoken. Callers must treat
    the values as approximate display hints.

    Args:
        segments: The ordered segments (only the count is used).
        duration_s: Media duration in seconds, or None if unknown.
            Zero, negative and non-finite values count as unknown.

    Returns:
        One float per segment, or [] when the duration is unknown or there
        are no segments.
    """
    count = len(segments)
    if not duration_s or not math.isfinite(duration_s) or duration_s <= 0 or count == 0:
        return []

    per_segment = duration_s / count
    return [index * per_segment for index in range(count)]


def format_timestamp(seconds: float, fmt: TimestampFormat = TimestampFormat.AUTO) -> str:
    """Render ``seconds`` for display.

    >>> format_timestamp(3599)
    '59:59'
    >>> format_timestamp(3600)
    '1:00:00'
    """
    fmt = TimestampFormat(fmt)
    total = max(0, int(math.floor(seconds)))
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if fmt is TimestampFormat.SECONDS:
        return "{}s".format(total)
    if fmt is TimestampFormat.H_MM_SS or (fmt is TimestampFormat.AUTO and hours > 0):
        return "{}:{:02d}:{:02d}".format(hours, minutes, secs)
    # MM_SS keeps counting minutes past the hour
    return "{:02d}:{:02d}".format(total // 60, secs)


def format_srt_time(seconds: float) -> str:
    """Render seconds as an SRT timecode, e.g. ``00:01:02,500``."""
    millis = max(0, int(round(seconds * 1000)))
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return "{:02d}:{:02d}:{:02d},{:03d}".format(hours, minutes, secs, millis)
