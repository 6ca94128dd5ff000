"""Export formatter registry.

WHY: The session, the CLI, and the API look up export formats by key. A
central dict makes adding a format a one-line change.

HOW: FORMATTERS maps format keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["srt"]()``.

RULES:
- Keys are the public export format names: "txt", "srt", "docx"
- Values are BaseFormatter subclasses
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sublyze.formatters.plain_text import PlainTextFormatter
from sublyze.formatters.srt_captions import SRTCaptionFormatter
from sublyze.formatters.word_document import WordDocumentFormatter

if TYPE_CHECKING:
    from sublyze.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "srt": SRTCaptionFormatter,
    "txt": PlainTextFormatter,
    "docx": WordDocumentFormatter,
}
