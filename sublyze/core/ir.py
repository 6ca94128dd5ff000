"""Data model for uploads, locales, segments, and translations.

WHY: The intake, the provider clients, the synchronizer, and the session
pass the same few objects around. Typed dataclasses make the contracts
between those stages explicit.

HOW: Plain dataclasses. Values that must not change after creation
(Locale, MediaAsset, TranscriptionRequest) are frozen; Segment is mutable
because the session edits its text in place.

RULES:
- MediaAsset.duration_s is float seconds, never negative
- MediaAsset.id is the SHA-256 of the uploaded bytes (same video → same id)
- Segment.index is 0-based and never changes once assigned
- Segment.timestamp_s is None when the media duration was unknown
- TranslationView.source_version records the session version it was built from
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sublyze.core.session import TranscriptSession


@dataclass(frozen=True)
class Locale:
    """A supported language: short lowercase code plus display name."""

    code: str
    display_name: str


@dataclass(frozen=True)
class MediaAsset:
    """An accepted upload staged on local disk.

    RULES:
    - mime_type always has primary type "video"
    - path is transient; the intake deletes it after the ASR attempt
    - original_filename is display-only and may be empty
    """

    id: str
    path: Path
    mime_type: str
    size_bytes: int
    duration_s: float = 0.0
    original_filename: str = ""


@dataclass(frozen=True)
class TranscriptionRequest:
    """One submission of an asset for transcription into a locale."""

    asset: MediaAsset
    locale: Locale


@dataclass
class Segment:
    """One sentence-like unit of a transcript.

    RULES:
    - index: position in the session, contiguous 0..N-1
    - text: current (possibly edited) text
    - timestamp_s: estimated start in seconds, or None
    - edited: True once the text was changed through the session
    """

    index: int
    text: str
    timestamp_s: float | None = None
    edited: bool = False


@dataclass(frozen=True)
class TranscriptionResult:
    """Text returned by a completed transcription, with its locale."""

    text: str
    locale: Locale


@dataclass(frozen=True)
class TranslationView:
    """A translated copy of a transcript snapshot.

    The view is not invalidated when the session is edited afterwards;
    compare versions with is_stale() to detect divergence.
    """

    locale: Locale
    text: str
    source_version: int = 0

    def is_stale(self, session: TranscriptSession) -> bool:
        return session.version != self.source_version

    def for_version(self, version: int) -> TranslationView:
        """Return a copy bound to a specific session version."""
        return TranslationView(locale=self.locale, text=self.text, source_version=version)
