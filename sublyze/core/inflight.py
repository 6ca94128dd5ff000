"""Guard allowing at most one in-flight transcription per media asset.

WHY: Transcription calls are billed per request and are not safe to
repeat blindly. If the same video is submitted again while its first
submission is still with the provider, the second one must be turned
away, not queued behind it and not run in parallel.

HOW: A set of asset ids protected by a threading.Lock. claim() is a
context manager that adds the id on entry (raising if it is already
present) and removes it on exit, whatever the outcome.

RULES:
- A second claim for a held id raises TranscriptionInProgressError immediately
- The id is always released when the claiming block exits
- Different assets never block each other
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Set

from sublyze.errors import TranscriptionInProgressError

logger = logging.getLogger(__name__)


class InFlightRegistry:
    """Thread-safe record of assets currently being transcribed."""

    def __init__(self) -> None:
        self._active: Set[str] = set()
        self._lock = threading.Lock()

    def is_active(self, asset_id: str) -> bool:
        with self._lock:
            return asset_id in self._active

    def __len__(self) -> int:
        with self._lock:
            return len(self._active)

    @contextmanager
    def claim(self, asset_id: str) -> Iterator[str]:
        with self._lock:
            if asset_id in self._active:
                logger.warning("Rejected duplicate submission for asset %s", asset_id[:12])
                raise TranscriptionInProgressError(
                    "Transcription already in progress for this video",
                )
            self._active.add(asset_id)

        try:
            yield asset_id
        finally:
            with self._lock:
                self._active.discard(asset_id)
