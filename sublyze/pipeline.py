"""Orchestration: upload → ASR → synchronized transcript session.

WHY: The HTTP API and the CLI both run the same sequence: validate the
request, stage the upload, send it to the ASR provider exactly once, clean
up, and build the timestamped session. Translation runs beside it on a
text snapshot. Keeping the sequence in one place keeps the ordering of
checks and the cleanup guarantees identical for every front-end.

HOW: TranscriptionPipeline holds the intake, the language registry, the
in-flight guard, and factories for the provider clients. transcribe_upload()
runs:
  1. language and upload checks (ValidationError, no side effects)
  2. credential check           (ConfigurationError, no side effects)
  3. intake.staged(...)         (file written off-loop; released on every exit)
  4. inflight.claim(asset.id)   (TranscriptionInProgressError on duplicates)
  5. AsrClient.transcribe()     (ProviderError on failure)
  6. TranscriptSession.from_text(text, duration)

RULES:
- Validation and configuration errors happen before anything touches disk
- The staged file is released after the ASR attempt, success or failure
- An optional ProgressReporter is stopped as soon as the call settles
- Translation never mutates the session; its view records the session version
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import BinaryIO, Optional

from sublyze.api.asr import AsrClient
from sublyze.api.translation import TranslationClient
from sublyze.config import DEFAULT_LANGUAGE
from sublyze.core.inflight import InFlightRegistry
from sublyze.core.intake import MediaIntake
from sublyze.core.ir import (
    Locale,
    MediaAsset,
    TranscriptionRequest,
    TranscriptionResult,
    TranslationView,
)
from sublyze.core.languages import DEFAULT_REGISTRY, LanguageRegistry
from sublyze.core.progress import ProgressReporter
from sublyze.core.session import TranscriptSession
from sublyze.errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)


@dataclass
class TranscriptionOutcome:
    """Result of one completed transcription."""

    result: TranscriptionResult
    session: TranscriptSession
    asset_id: str


class TranscriptionPipeline:
    """Runs uploads through ASR and builds transcript sessions."""

    def __init__(
        self,
        intake: Optional[MediaIntake] = None,
        registry: LanguageRegistry = DEFAULT_REGISTRY,
        inflight: Optional[InFlightRegistry] = None,
        asr_client_factory: Callable[[], AsrClient] = AsrClient,
        translation_client_factory: Callable[[], TranslationClient] = TranslationClient,
    ) -> None:
        self.intake = intake or MediaIntake()
        self.registry = registry
        self.inflight = inflight or InFlightRegistry()
        self.asr_client_factory = asr_client_factory
        self.translation_client_factory = translation_client_factory

    def resolve_locale(self, code: Optional[str]) -> Locale:
        """Look up ``code`` (default language when empty)."""
        code = code or DEFAULT_LANGUAGE
        if not self.registry.is_supported(code):
            raise UnsupportedLanguageError(
                "Unsupported language",
                details="'{}' is not a registered language code".format(code),
            )
        return self.registry.get(code)

    async def transcribe_upload(
        self,
        stream: BinaryIO,
        mime_type: Optional[str],
        language: Optional[str] = None,
        size_bytes: Optional[int] = None,
        filename: str = "",
        duration_s: float = 0.0,
        reporter: Optional[ProgressReporter] = None,
    ) -> TranscriptionOutcome:
        """Transcribe an uploaded video and build its transcript session."""
        locale = self.resolve_locale(language)
        self.intake.validate(mime_type, size_bytes, duration_s)

        async with self.asr_client_factory() as client:
            client.ensure_credentials()

            async with AsyncExitStack() as stack:
                if reporter is not None:
                    await stack.enter_async_context(reporter.track())

                asset = await stack.enter_async_context(
                    self.intake.staged(
                        stream,
                        mime_type,
                        size_bytes,
                        original_filename=filename,
                        duration_s=duration_s,
                    )
                )
                text = await self._transcribe_asset(client, TranscriptionRequest(asset, locale))

        session = TranscriptSession.from_text(text, duration_s)
        logger.info(
            "Built transcript session: %d segments over %.1fs", len(session), duration_s or 0.0
        )
        return TranscriptionOutcome(
            result=TranscriptionResult(text=text, locale=locale),
            session=session,
            asset_id=asset.id,
        )

    async def _transcribe_asset(self, client: AsrClient, request: TranscriptionRequest) -> str:
        asset: MediaAsset = request.asset
        with self.inflight.claim(asset.id):
            return await client.transcribe(asset, request.locale)

    async def translate(self, text: Optional[str], target_language: Optional[str]) -> TranslationView:
        """Translate free text; see TranslationClient.translate."""
        async with self.translation_client_factory() as client:
            return await client.translate(text, target_language)

    async def translate_session(
        self, session: TranscriptSession, target_language: Optional[str]
    ) -> TranslationView:
        """Translate the session's committed text, bound to its current version."""
        version = session.version
        view = await self.translate(session.text, target_language)
        return view.for_version(version)
