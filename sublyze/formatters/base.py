"""Abstract base formatter and output container.

WHY: Every export format consumes the same ordered segment sequence but
produces different file content. A shared interface lets the session, the
CLI, and the API export through any formatter generically.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method taking the segments plus the media duration. FormatterOutput
bundles a file suffix with its content (str or bytes) and MIME type.

RULES:
- Formatters never modify the segments they receive
- ``suffix`` starts with a hyphen, e.g. ``"-transcript.txt"``
- The caller prepends the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from sublyze.core.ir import Segment


@dataclass
class FormatterOutput:
    """One exported file.

    Attributes:
        suffix: Appended to the source stem, e.g. ``"-transcript.txt"``.
        content: Text (txt, srt) or bytes (docx).
        media_type: MIME type of the content.
    """

    suffix: str
    content: str | bytes
    media_type: str

    def to_bytes(self) -> bytes:
        if isinstance(self.content, bytes):
            return self.content
        return self.content.encode("utf-8")


class BaseFormatter(ABC):
    """Abstract base for all export formatters.

    To add a new export format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Plain Text'."""

    @abstractmethod
    def format(self, segments: Sequence[Segment], duration_s: Optional[float] = None) -> FormatterOutput:
        """Encode the segments as one output file.

        Args:
            segments: Ordered transcript segments with optional timestamps.
            duration_s: Media duration in seconds, if known.
        """
