"""Plain text export: one segment per line.

RULES:
- Segment texts joined with a single "\n", no trailing newline
- No timestamps, no headers
- Output suffix: "-transcript.txt", media type "text/plain"
"""

from __future__ import annotations

from typing import Optional, Sequence

from sublyze.core.ir import Segment
from sublyze.formatters.base import BaseFormatter, FormatterOutput


def join_segment_texts(segments: Sequence[Segment]) -> str:
    return "\n".join(segment.text for segment in segments)


class PlainTextFormatter(BaseFormatter):
    """Clean transcript text, byte-stable for a given segment sequence."""

    @property
    def name(self) -> str:
        return "Plain Text"

    def format(self, segments: Sequence[Segment], duration_s: Optional[float] = None) -> FormatterOutput:
        return FormatterOutput(
            suffix="-transcript.txt",
            content=join_segment_texts(segments),
            media_type="text/plain",
        )
