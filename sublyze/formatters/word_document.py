"""Word document export via python-docx.

WHY: Some editors prefer to review and annotate transcripts in Word.

HOW: Builds a Document with a title, then one paragraph per segment. When
the segment has a timestamp, a bold "[MM:SS]" run precedes the text. The
document is saved into memory and returned as bytes.

RULES:
- Output suffix: "-transcript.docx"
- Paragraph order follows segment order
"""

from __future__ import annotations

import io
from typing import Optional, Sequence

from docx import Document

from sublyze.core.ir import Segment
from sublyze.core.timing import format_timestamp
from sublyze.formatters.base import BaseFormatter, FormatterOutput

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


class WordDocumentFormatter(BaseFormatter):

    def __init__(self, title: str = "Transcript") -> None:
        self.title = title

    @property
    def name(self) -> str:
        return "Word Document"

    def format(self, segments: Sequence[Segment], duration_s: Optional[float] = None) -> FormatterOutput:
        document = Document()
        document.add_heading(self.title, level=1)

        for segment in segments:
            paragraph = document.add_paragraph()
            if segment.timestamp_s is not None:
                stamp = paragraph.add_run("[{}] ".format(format_timestamp(segment.timestamp_s)))
                stamp.bold = True
            paragraph.add_run(segment.text)

        buffer = io.BytesIO()
        document.save(buffer)

        return FormatterOutput(
            suffix="-transcript.docx",
            content=buffer.getvalue(),
            media_type=DOCX_MEDIA_TYPE,
        )
