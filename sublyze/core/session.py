"""Transcript session: the editable, searchable, exportable transcript.

WHY: After transcription the user reads the transcript one segment at a
time, searches it, fixes recognition mistakes line by line, and exports
it. All of that works on one ordered segment sequence whose indices and
estimated timestamps must stay stable while the text changes.

HOW: TranscriptSession owns the segments and a two-state mode machine
(view ↔ edit). Entering edit mode copies the segment texts into a buffer;
set_segment_text() changes the buffer; commit() writes it back and bumps
``version``. Search stores a term that render() uses to split each
segment into highlighted and plain spans. Export delegates to the
formatter registry; statistics are recomputed on every call.

SessionState bundles a session with its presentation parameters
(timestamp visibility/format, text size, line height, translation) as an
explicit, serializable value instead of ambient UI globals.
TranscriptWorkspace holds the current SessionState and replaces it
wholesale when a new transcription completes.

RULES:
- Segment indices are contiguous 0..N-1 and never change
- Timestamps come only from (duration, count, index); editing never touches them
- commit() does not recompute timestamps
- Edits are only accepted in EDIT mode
- Search matching is case-insensitive and treats the term literally
- Statistics use 0.3 s per word; all zero for an empty transcript
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional

from sublyze.config import SECONDS_PER_WORD
from sublyze.core.ir import Segment, TranslationView
from sublyze.core.segmenter import DEFAULT_BOUNDARY, BoundaryRule, segment_text
from sublyze.core.timing import TimestampFormat, assign_timestamps, format_timestamp
from sublyze.errors import (
    IndexOutOfRangeError,
    InvalidSessionStateError,
    UnsupportedExportFormatError,
)
from sublyze.formatters import FORMATTERS
from sublyze.formatters.base import FormatterOutput


class SessionMode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


@dataclass(frozen=True)
class HighlightSpan:
    """A run of segment text, flagged when it matches the search term."""

    text: str
    highlighted: bool = False


@dataclass(frozen=True)
class SegmentView:
    """Render-ready view of one segment."""

    index: int
    text: str
    timestamp: Optional[str]
    spans: List[HighlightSpan]
    edited: bool = False


@dataclass(frozen=True)
class TranscriptStats:
    word_count: int
    character_count: int
    estimated_duration_s: float
    speaking_rate_wpm: int

    def format_estimated_duration(self) -> str:
        """``MM:SS`` of the estimated speaking time, floored to whole seconds."""
        total = int(math.floor(self.estimated_duration_s))
        return "{:02d}:{:02d}".format(total // 60, total % 60)


def highlight(text: str, term: Optional[str]) -> List[HighlightSpan]:
    """Split ``text`` into spans, marking case-insensitive matches of ``term``."""
    if not term:
        return [HighlightSpan(text)] if text else []

    pattern = re.compile("({})".format(re.escape(term)), re.IGNORECASE)
    spans = []
    for position, part in enumerate(pattern.split(text)):
        if part:
            # re.split puts captured matches at odd positions
            spans.append(HighlightSpan(part, highlighted=position % 2 == 1))
    return spans


class TranscriptSession:
    """An ordered, timestamped, editable transcript.

    Build one with from_text() from ASR output and the media duration.
    """

    def __init__(self, segments: List[Segment], duration_s: Optional[float] = None) -> None:
        for position, segment in enumerate(segments):
            if segment.index != position:
                raise IndexOutOfRangeError(
                    "Segment indices must be contiguous from 0",
                    details="position {} holds index {}".format(position, segment.index),
                )
        self._segments = [replace(segment) for segment in segments]
        self.duration_s = duration_s
        self.search_term: Optional[str] = None
        self.mode = SessionMode.VIEW
        self.version = 0
        self._buffer: Optional[List[str]] = None

    @classmethod
    def from_text(
        cls,
        text: str,
        duration_s: Optional[float] = None,
        boundary: BoundaryRule = DEFAULT_BOUNDARY,
    ) -> TranscriptSession:
        """Segment ``text`` and assign estimated timestamps from ``duration_s``."""
        pieces = segment_text(text, boundary)
        timestamps = assign_timestamps(pieces, duration_s)
        segments = [
            Segment(
                index=index,
                text=piece,
                timestamp_s=timestamps[index] if timestamps else None,
            )
            for index, piece in enumerate(pieces)
        ]
        return cls(segments, duration_s=duration_s)

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._segments)

    @property
    def segments(self) -> List[Segment]:
        """Copies of the committed segments, in order."""
        return [replace(segment) for segment in self._segments]

    @property
    def timestamps(self) -> List[Optional[float]]:
        return [segment.timestamp_s for segment in self._segments]

    @property
    def text(self) -> str:
        """Committed segment texts joined by line breaks."""
        return "\n".join(segment.text for segment in self._segments)

    @property
    def is_editing(self) -> bool:
        return self.mode is SessionMode.EDIT

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def enter_edit(self) -> None:
        if self.mode is SessionMode.EDIT:
            return
        self._buffer = [segment.text for segment in self._segments]
        self.mode = SessionMode.EDIT

    def set_segment_text(self, index: int, text: str) -> None:
        """Replace the buffered text of segment ``index``.

        Raises:
            InvalidSessionStateError: The session is not in edit mode.
            IndexOutOfRangeError: ``index`` is not a valid segment index.
        """
        if self.mode is not SessionMode.EDIT or self._buffer is None:
            raise InvalidSessionStateError("Segments can only be edited in edit mode")
        if not 0 <= index < len(self._buffer):
            raise IndexOutOfRangeError(
                "Segment index out of range",
                details="index {} not in 0..{}".format(index, len(self._buffer) - 1),
            )
        self._buffer[index] = text

    def commit(self) -> None:
        """Leave edit mode, making the buffered texts authoritative.

        Timestamps are kept as they are: editing lines never changes the
        segment count the estimate was based on.
        """
        if self.mode is not SessionMode.EDIT or self._buffer is None:
            return

        changed = False
        for segment, new_text in zip(self._segments, self._buffer):
            if segment.text != new_text:
                segment.text = new_text
                segment.edited = True
                changed = True

        if changed:
            self.version += 1
        self._buffer = None
        self.mode = SessionMode.VIEW

    def cancel_edit(self) -> None:
        """Leave edit mode, discarding buffered changes."""
        self._buffer = None
        self.mode = SessionMode.VIEW

    # ------------------------------------------------------------------
    # Search and rendering
    # ------------------------------------------------------------------

    def search(self, term: Optional[str]) -> None:
        self.search_term = term or None

    def render(
        self,
        timestamp_format: TimestampFormat = TimestampFormat.AUTO,
        show_timestamps: bool = True,
    ) -> List[SegmentView]:
        """Build display views, highlighting the current search term.

        In edit mode the views show the buffered (uncommitted) texts.
        """
        texts = self._buffer if self._buffer is not None else [s.text for s in self._segments]
        views = []
        for segment, text in zip(self._segments, texts):
            timestamp = None
            if show_timestamps and segment.timestamp_s is not None:
                timestamp = format_timestamp(segment.timestamp_s, timestamp_format)
            views.append(SegmentView(
                index=segment.index,
                text=text,
                timestamp=timestamp,
                spans=highlight(text, self.search_term),
                edited=segment.edited or text != segment.text,
            ))
        return views

    def match_count(self) -> int:
        """Number of highlighted spans across all segments."""
        return sum(
            1 for view in self.render(show_timestamps=False) for span in view.spans if span.highlighted
        )

    # ------------------------------------------------------------------
    # Export and statistics
    # ------------------------------------------------------------------

    def export(self, fmt: str) -> FormatterOutput:
        """Encode the committed segments as ``fmt`` ("txt", "srt" or "docx")."""
        formatter_cls = FORMATTERS.get(fmt)
        if formatter_cls is None:
            raise UnsupportedExportFormatError(
                "Unsupported export format",
                details="'{}' is not one of: {}".format(fmt, ", ".join(sorted(FORMATTERS))),
            )
        return formatter_cls().format(self.segments, self.duration_s)

    def statistics(self) -> TranscriptStats:
        text = self.text
        words = len(text.split())
        if words == 0:
            return TranscriptStats(0, len(text), 0.0, 0)

        estimated = words * SECONDS_PER_WORD
        rate = int(math.floor(words / estimated * 60 + 0.5))
        return TranscriptStats(
            word_count=words,
            character_count=len(text),
            estimated_duration_s=estimated,
            speaking_rate_wpm=rate,
        )


@dataclass
class SessionState:
    """A session together with its presentation parameters.

    Passed explicitly to whatever renders the transcript; to_dict() gives
    a JSON-serializable snapshot.
    """

    session: TranscriptSession
    show_timestamps: bool = False
    timestamp_format: TimestampFormat = TimestampFormat.AUTO
    text_size: str = "16px"
    line_height: str = "1.6"
    translation: Optional[TranslationView] = None

    def attach_translation(self, view: TranslationView) -> None:
        self.translation = view

    @property
    def translation_is_stale(self) -> bool:
        return self.translation is not None and self.translation.is_stale(self.session)

    def render(self) -> List[SegmentView]:
        return self.session.render(self.timestamp_format, self.show_timestamps)

    def to_dict(self) -> Dict[str, Any]:
        translation = None
        if self.translation is not None:
            translation = {
                "language": self.translation.locale.code,
                "text": self.translation.text,
                "stale": self.translation_is_stale,
            }
        return {
            "mode": self.session.mode.value,
            "version": self.session.version,
            "duration_s": self.session.duration_s,
            "search_term": self.session.search_term,
            "segments": [
                {
                    "index": view.index,
                    "text": view.text,
                    "timestamp": view.timestamp,
                    "edited": view.edited,
                }
                for view in self.render()
            ],
            "display": {
                "show_timestamps": self.show_timestamps,
                "timestamp_format": self.timestamp_format.value,
                "text_size": self.text_size,
                "line_height": self.line_height,
            },
            "translation": translation,
        }


@dataclass
class TranscriptWorkspace:
    """Owner of the one active SessionState."""

    state: Optional[SessionState] = None

    def replace(self, session: TranscriptSession) -> SessionState:
        """Install a new session, discarding the previous one entirely.

        Display preferences carry over; timestamps start hidden and any
        translation belongs to the old session, so it is dropped.
        """
        previous = self.state
        state = SessionState(session=session)
        if previous is not None:
            state.timestamp_format = previous.timestamp_format
            state.text_size = previous.text_size
            state.line_height = previous.line_height
        self.state = state
        return state
