"""Segmentation engine: split transcript text into sentence-like segments.

WHY: The ASR provider returns one block of plain text. Editors navigate,
edit, and timestamp the transcript one sentence at a time, so the text has
to be cut into an ordered list of segments. The timestamp synchronizer
divides the media duration by the segment count, so the split must be
deterministic: the same text always yields the same segments.

HOW: A small tokenizer walks the character stream and asks a BoundaryRule
whether a segment ends after each position. The default SentenceBoundary
ends a segment after a run of terminal punctuation (. ! ?) that is
followed by whitespace or the end of the text. Segments are stripped and
blank pieces are dropped.

RULES:
- A run of terminal punctuation ("...", "?!") is one boundary, not several
- Punctuation glued to the next character ("3.5", "e.g.x") is not a boundary
- Empty or whitespace-only input → []
- Non-empty input with no boundary → [whole text, stripped]
- Text after the last boundary is kept as a final segment
- Pure: no state, no I/O
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

TERMINAL_PUNCTUATION = frozenset(".!?")


class BoundaryRule(ABC):
    """Decides where one segment ends and the next begins."""

    @abstractmethod
    def ends_segment(self, text: str, index: int) -> bool:
        """Return True if a segment ends right after ``text[index]``."""


class SentenceBoundary(BoundaryRule):
    """Split after terminal punctuation followed by whitespace or end of text."""

    def __init__(self, terminators: frozenset = TERMINAL_PUNCTUATION) -> None:
        self.terminators = terminators

    def ends_segment(self, text: str, index: int) -> bool:
        if text[index] not in self.terminators:
            return False
        following = index + 1
        if following == len(text):
            return True
        # Runs of terminators end at their last character
        return text[following].isspace()


class LineBoundary(BoundaryRule):
    """Split on newlines, one segment per non-blank line."""

    def ends_segment(self, text: str, index: int) -> bool:
        return text[index] == "\n"


DEFAULT_BOUNDARY: BoundaryRule = SentenceBoundary()


def segment_text(text: str, boundary: BoundaryRule = DEFAULT_BOUNDARY) -> List[str]:
    """Split ``text`` into ordered segment strings.

    Args:
        text: Raw transcript text.
        boundary: Rule deciding where segments end. Defaults to sentences.

    Returns:
        Stripped, non-empty segment strings in text order.
    """
    if not text or not text.strip():
        return []

    segments: List[str] = []
    start = 0
    for index in range(len(text)):
        if boundary.ends_segment(text, index):
            _append_piece(segments, text[start:index + 1])
            start = index + 1
    _append_piece(segments, text[start:])

    return segments


def _append_piece(segments: List[str], piece: str) -> None:
    piece = piece.strip()
    if piece:
        segments.append(piece)
