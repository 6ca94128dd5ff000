"""Media intake: validate, stage, and release uploaded videos.

WHY: The ASR provider needs the upload as a file, and the upload must not
outlive its transcription attempt. Validation (type, size) has to happen
before anything touches disk or the network so a bad request costs
nothing.

HOW: MediaIntake.accept() checks the declared MIME type and size, then
streams the bytes into a lazily created staging directory under a
time-based name, hashing as it goes. The SHA-256 becomes the asset id.
release() deletes the staged file, logging (never raising) on failure.
staged() pairs the two as an async context manager so every exit path
releases the file; the blocking write and hash run in a worker thread so
the event loop keeps serving other requests.

RULES:
- Only MIME types with primary type "video" are accepted
- Size is checked against max_bytes both as declared and as actually written
- Duration must be a finite number of seconds, not negative
- Staging directory creation is idempotent (mkdir exist_ok)
- release() is best-effort and idempotent; it never propagates OSError
- The intake keeps no per-asset state between uploads
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import math
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import BinaryIO, Optional

from sublyze.config import MAX_UPLOAD_BYTES, UPLOAD_DIR
from sublyze.core.ir import MediaAsset
from sublyze.errors import UnsupportedMediaTypeError, UploadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 64 * 1024


def is_video_mime_type(mime_type: Optional[str]) -> bool:
    """True when the MIME type's primary type is ``video`` (``video/mp4`` etc.)."""
    if not mime_type:
        return False
    primary = mime_type.split("/", 1)[0].strip().lower()
    return primary == "video" and "/" in mime_type


class MediaIntake:
    """Stages uploaded videos on local disk for the ASR client."""

    def __init__(
        self,
        upload_dir: Optional[Path] = None,
        max_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.upload_dir = Path(upload_dir or UPLOAD_DIR)
        self.max_bytes = max_bytes

    def accept(
        self,
        stream: BinaryIO,
        declared_mime_type: Optional[str],
        declared_size_bytes: Optional[int] = None,
        original_filename: str = "",
        duration_s: float = 0.0,
    ) -> MediaAsset:
        """Validate the upload and write it to the staging directory.

        Args:
            stream: Readable binary stream with the video bytes.
            declared_mime_type: MIME type sent by the client.
            declared_size_bytes: Size sent by the client, if known.
            original_filename: Client filename; only its extension is used.
            duration_s: Media duration measured by the client (0 = unknown).

        Returns:
            The staged MediaAsset.

        Raises:
            UnsupportedMediaTypeError: MIME type is not video/*.
            UploadTooLargeError: Declared or written size exceeds max_bytes.
            ValidationError: duration_s is negative or not finite.
        """
        self.validate(declared_mime_type, declared_size_bytes, duration_s)
        duration_s = duration_s or 0.0

        self.upload_dir.mkdir(parents=True, exist_ok=True)
        path = self.upload_dir / _staged_name(original_filename)

        digest = hashlib.sha256()
        written = 0
        try:
            with open(path, "wb") as out:
                for chunk in iter(lambda: stream.read(_CHUNK_BYTES), b""):
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(
                            "Video file is too large",
                            details="Upload exceeds the limit of {:,} bytes".format(self.max_bytes),
                        )
                    digest.update(chunk)
                    out.write(chunk)
        except BaseException:
            path.unlink(missing_ok=True)
            raise

        asset = MediaAsset(
            id=digest.hexdigest(),
            path=path,
            mime_type=declared_mime_type,
            size_bytes=written,
            duration_s=float(duration_s),
            original_filename=original_filename,
        )
        logger.info(
            "Accepted upload %s (%s, %d bytes, %.1fs) as %s",
            original_filename or "<unnamed>", asset.mime_type, written, asset.duration_s, path.name,
        )
        return asset

    def validate(
        self,
        declared_mime_type: Optional[str],
        declared_size_bytes: Optional[int] = None,
        duration_s: Optional[float] = 0.0,
    ) -> None:
        """Check an upload's declared metadata without touching disk."""
        if not is_video_mime_type(declared_mime_type):
            raise UnsupportedMediaTypeError(
                "Not a video file!",
                details="Received content type '{}'".format(declared_mime_type or ""),
            )
        if declared_size_bytes is not None and declared_size_bytes > self.max_bytes:
            raise UploadTooLargeError(
                "Video file is too large",
                details="{:,} bytes exceeds the limit of {:,} bytes".format(
                    declared_size_bytes, self.max_bytes
                ),
            )
        if duration_s is None:
            return
        if not math.isfinite(duration_s):
            raise ValidationError(
                "Media duration must be a finite number of seconds",
                details="Received duration {!r}".format(duration_s),
            )
        if duration_s < 0:
            raise ValidationError("Media duration must not be negative")

    def release(self, asset: MediaAsset) -> None:
        """Delete the staged file. Failures are logged, never raised."""
        try:
            asset.path.unlink()
            logger.debug("Released staged file %s", asset.path.name)
        except FileNotFoundError:
            logger.warning("Staged file already gone: %s", asset.path)
        except OSError:
            logger.warning("Error deleting staged file: %s", asset.path, exc_info=True)

    @asynccontextmanager
    async def staged(
        self,
        stream: BinaryIO,
        declared_mime_type: Optional[str],
        declared_size_bytes: Optional[int] = None,
        original_filename: str = "",
        duration_s: float = 0.0,
    ) -> AsyncIterator[MediaAsset]:
        """Accept an upload for the duration of an ``async with`` block.

        The staged file is released when the block exits, whether it
        returned normally or raised.
        """
        asset = await asyncio.to_thread(
            self.accept,
            stream,
            declared_mime_type,
            declared_size_bytes,
            original_filename=original_filename,
            duration_s=duration_s,
        )
        try:
            yield asset
        finally:
            self.release(asset)


def _staged_name(original_filename: str) -> str:
    """Time-based, collision-resistant filename keeping the original extension."""
    ext = Path(original_filename).suffix.lower() if original_filename else ""
    return "{}-{}{}".format(time.time_ns(), uuid.uuid4().hex[:8], ext)
