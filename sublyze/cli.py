"""Command-line interface for transcribing a local video file.

WHY: Operators and scripts need the same transcription flow as the web
front-end without a browser: send a video to ASR, see the synchronized
transcript, optionally translate it, and save exports.

HOW: argparse collects the input file, media duration, language, export
formats, and display options. The async pipeline runs via asyncio.run()
with a ProgressReporter printing status changes to stderr. The rendered
transcript goes to stdout; export files are saved next to the source (or
to --output-dir) as {stem}{suffix}.

RULES:
- Status output goes to stderr (not stdout)
- The MIME type is guessed from the file extension and must be video/*
- --formats: comma-separated export keys (default: txt)
- Output naming: {stem}{suffix}, numeric suffix for conflicts (-transcript-2.txt)
- Any SublyzeError exits with status 1 and its message on stderr
"""

from __future__ import annotations

import argparse
import asyncio
import mimetypes
import sys
from pathlib import Path
from typing import List, Optional

from sublyze.config import DEFAULT_LANGUAGE, LOG_LEVEL
from sublyze.core.progress import ProgressReporter, ProgressUpdate
from sublyze.core.session import SessionState, TranscriptWorkspace
from sublyze.core.timing import TimestampFormat
from sublyze.errors import SublyzeError
from sublyze.formatters import FORMATTERS
from sublyze.formatters.base import FormatterOutput
from sublyze.logging_setup import setup_logging
from sublyze.pipeline import TranscriptionPipeline


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


class _StatusPrinter:
    """Progress callback that prints only when the status phrase changes."""

    def __init__(self) -> None:
        self._last: Optional[str] = None

    def __call__(self, update: ProgressUpdate) -> None:
        if update.status == self._last or update.progress == 0 and not update.complete:
            return
        self._last = update.status
        _status("  {} ({:.0f}%)".format(update.status, update.progress))


def _resolve_output_path(stem: str, suffix: str, output_dir: Path) -> Path:
    """Return ``{stem}{suffix}`` in output_dir, adding -2, -3 … on conflict."""
    base_path = output_dir / "{}{}".format(stem, suffix)
    if not base_path.exists():
        return base_path

    dot_idx = suffix.rfind(".")
    if dot_idx > 0:
        suffix_name, suffix_ext = suffix[:dot_idx], suffix[dot_idx:]
    else:
        suffix_name, suffix_ext = suffix, ""

    counter = 2
    while True:
        candidate = output_dir / "{}{}-{}{}".format(stem, suffix_name, counter, suffix_ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: FormatterOutput, stem: str, output_dir: Path) -> Path:
    path = _resolve_output_path(stem, output.suffix, output_dir)
    if isinstance(output.content, bytes):
        path.write_bytes(output.content)
    else:
        path.write_text(output.content, encoding="utf-8")
    return path


def render_lines(state: SessionState) -> List[str]:
    """Plain-text rendering of a session: ``[MM:SS] text`` with matches in brackets."""
    lines = []
    for view in state.render():
        text = "".join(
            "[[{}]]".format(span.text) if span.highlighted else span.text for span in view.spans
        )
        lines.append("[{}] {}".format(view.timestamp, text) if view.timestamp else text)
    return lines


def _parse_formats(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    keys = [f.strip() for f in raw.split(",") if f.strip()]
    for key in keys:
        if key not in FORMATTERS:
            available = ", ".join(sorted(FORMATTERS.keys()))
            raise SystemExit(
                "Error: Unknown format '{}'. Available formats: {}".format(key, available)
            )
    return keys


async def _run(
    args: argparse.Namespace, pipeline: TranscriptionPipeline, format_keys: List[str]
) -> int:
    input_path = Path(args.input_file).resolve()
    if not input_path.is_file():
        _status("Error: File not found: {}".format(input_path))
        return 1

    output_dir = Path(args.output_dir).resolve() if args.output_dir else input_path.parent
    if not output_dir.is_dir():
        _status("Error: Output directory does not exist: {}".format(output_dir))
        return 1

    mime_type = mimetypes.guess_type(input_path.name)[0]

    _status("Transcribing {} ({})...".format(input_path.name, args.language))
    reporter = ProgressReporter(on_update=_StatusPrinter())
    with open(input_path, "rb") as stream:
        outcome = await pipeline.transcribe_upload(
            stream,
            mime_type,
            language=args.language,
            size_bytes=input_path.stat().st_size,
            filename=input_path.name,
            duration_s=args.duration,
            reporter=reporter,
        )

    workspace = TranscriptWorkspace()
    state = workspace.replace(outcome.session)
    state.show_timestamps = not args.no_timestamps
    state.timestamp_format = TimestampFormat(args.timestamp_format)
    if args.search:
        outcome.session.search(args.search)
        _status("  {} match(es) for '{}'".format(outcome.session.match_count(), args.search))

    for line in render_lines(state):
        print(line)

    if args.stats:
        stats = outcome.session.statistics()
        _status("")
        _status("Words: {}  Characters: {}  Est. duration: {}  Speaking rate: {} WPM".format(
            stats.word_count,
            stats.character_count,
            stats.format_estimated_duration(),
            stats.speaking_rate_wpm,
        ))

    if args.translate_to:
        _status("Translating to {}...".format(args.translate_to))
        view = await pipeline.translate_session(outcome.session, args.translate_to)
        state.attach_translation(view)
        print("")
        print(view.text)

    stem = input_path.stem
    for key in format_keys:
        saved = _save_output(outcome.session.export(key), stem, output_dir)
        _status("  Saved: {}".format(saved.name))

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sublyze",
        description="Transcribe a video, show the synchronized transcript, and export it.",
    )
    parser.add_argument("input_file", help="Path to the video file to transcribe.")
    parser.add_argument(
        "--duration",
        type=float,
        default=0.0,
        help="Media duration in seconds, used to estimate segment timestamps.",
    )
    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help="Language code of the speech (default: %(default)s).",
    )
    parser.add_argument(
        "--translate-to",
        default=None,
        help="Also translate the transcript into this language code.",
    )
    parser.add_argument(
        "--formats",
        default="txt",
        help="Comma-separated export formats: {} (default: %(default)s).".format(
            ", ".join(sorted(FORMATTERS.keys()))
        ),
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory for export files (default: next to the input file).",
    )
    parser.add_argument(
        "--timestamp-format",
        choices=[fmt.value for fmt in TimestampFormat],
        default=TimestampFormat.AUTO.value,
        help="How to display segment timestamps (default: %(default)s).",
    )
    parser.add_argument(
        "--no-timestamps",
        action="store_true",
        help="Print segment text without timestamps.",
    )
    parser.add_argument("--search", default=None, help="Highlight a term in the printed transcript.")
    parser.add_argument("--stats", action="store_true", help="Print word count and speaking rate.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``sublyze`` console script."""
    args = build_parser().parse_args(argv)
    format_keys = _parse_formats(args.formats)
    setup_logging(LOG_LEVEL)

    try:
        code = asyncio.run(_run(args, TranscriptionPipeline(), format_keys))
    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        sys.exit(130)
    except SublyzeError as e:
        _status("Error: {}".format(e))
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
