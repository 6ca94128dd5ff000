"""SRT subtitle export built from estimated segment timestamps.

WHY: Video editors import SRT files to lay captions over the timeline.
The session already knows an estimated start for every segment; an SRT
cue only needs an end as well.

HOW: Each cue runs from its segment's start to the next segment's start.
The last cue ends at the media duration. Segments without timestamps
(unknown duration) fall back to a reading-time estimate of
SECONDS_PER_WORD per word, laid end to end.

RULES:
- Cues are numbered from 1, separated by a blank line
- Timecodes use HH:MM:SS,mmm
- A cue is never shorter than MIN_CUE_S
- Media type: "application/x-subrip"
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from sublyze.config import SECONDS_PER_WORD
from sublyze.core.ir import Segment
from sublyze.core.timing import format_srt_time
from sublyze.formatters.base import BaseFormatter, FormatterOutput

MIN_CUE_S = 0.5


def cue_times(segments: Sequence[Segment], duration_s: Optional[float] = None) -> List[Tuple[float, float]]:
    """Return ``(start, end)`` seconds for each segment."""
    if segments and all(segment.timestamp_s is not None for segment in segments):
        starts = [float(segment.timestamp_s) for segment in segments]
        last_end = duration_s if duration_s and duration_s > starts[-1] else None
    else:
        starts = []
        cursor = 0.0
        for segment in segments:
            starts.append(cursor)
            cursor += max(len(segment.text.split()) * SECONDS_PER_WORD, MIN_CUE_S)
        last_end = cursor

    times = []
    for index, start in enumerate(starts):
        if index + 1 < len(starts):
            end = starts[index + 1]
        else:
            end = last_end if last_end is not None else start + MIN_CUE_S
        times.append((start, max(end, start + MIN_CUE_S)))
    return times


class SRTCaptionFormatter(BaseFormatter):
    """One SRT cue per transcript segment."""

    @property
    def name(self) -> str:
        return "SRT Subtitles"

    def format(self, segments: Sequence[Segment], duration_s: Optional[float] = None) -> FormatterOutput:
        blocks = []
        for number, (segment, (start, end)) in enumerate(
            zip(segments, cue_times(segments, duration_s)), start=1
        ):
            blocks.append("{}\n{} --> {}\n{}\n".format(
                number, format_srt_time(start), format_srt_time(end), segment.text,
            ))

        return FormatterOutput(
            suffix="-captions.srt",
            content="\n".join(blocks),
            media_type="application/x-subrip",
        )
