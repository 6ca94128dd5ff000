"""Tests for TranscriptionPipeline orchestration.

WHY: The pipeline fixes the order of checks and the cleanup guarantees
for every front-end: no disk or network work for bad input, exactly one
provider call per submission, and no staged file left behind.

HOW: The ASR client factory is replaced with in-memory fakes. Staging
goes to tmp_path through the ``intake`` fixture.
"""

from __future__ import annotations

import asyncio
import io

import pytest

from sublyze.core.ir import Locale
from sublyze.core.progress import ProgressReporter
from sublyze.errors import (
    MissingCredentialError,
    ProviderUnavailableError,
    TranscriptionInProgressError,
    UnsupportedLanguageError,
    UnsupportedMediaTypeError,
    ValidationError,
)
from sublyze.pipeline import TranscriptionPipeline

from conftest import (
    SAMPLE_TRANSCRIPT,
    SAMPLE_VIDEO_BYTES,
    FakeAsrClient,
    FakeTranslationClient,
)


def _pipeline(intake, fake=None, translator=None):
    fake = fake or FakeAsrClient()
    translator = translator or FakeTranslationClient()
    return TranscriptionPipeline(
        intake=intake,
        asr_client_factory=lambda: fake,
        translation_client_factory=lambda: translator,
    )


def _transcribe(pipeline, **kwargs):
    kwargs.setdefault("duration_s", 90.0)
    return asyncio.run(pipeline.transcribe_upload(
        io.BytesIO(SAMPLE_VIDEO_BYTES), kwargs.pop("mime_type", "video/mp4"), **kwargs
    ))


class TestTranscribeUpload:

    def test_end_to_end(self, intake, upload_dir):
        fake = FakeAsrClient()
        outcome = _transcribe(_pipeline(intake, fake), language="es", filename="talk.mp4")

        assert outcome.result.text == SAMPLE_TRANSCRIPT
        assert outcome.result.locale == Locale("es", "Spanish")
        assert [s.text for s in outcome.session.segments] == ["Hi there.", "How are you?", "Great."]
        assert outcome.session.timestamps == [0.0, 30.0, 60.0]
        assert len(fake.calls) == 1
        assert fake.closed
        assert list(upload_dir.iterdir()) == []

    def test_default_language(self, intake):
        outcome = _transcribe(_pipeline(intake))
        assert outcome.result.locale.code == "en"

    def test_staged_file_released_on_provider_failure(self, intake, upload_dir):
        fake = FakeAsrClient(error=ProviderUnavailableError("Error processing video"))
        with pytest.raises(ProviderUnavailableError):
            _transcribe(_pipeline(intake, fake))
        assert len(fake.calls) == 1
        assert list(upload_dir.iterdir()) == []

    def test_unsupported_language_has_no_side_effects(self, intake, upload_dir):
        fake = FakeAsrClient()
        with pytest.raises(UnsupportedLanguageError):
            _transcribe(_pipeline(intake, fake), language="xx")
        assert fake.calls == []
        assert not upload_dir.exists()

    def test_non_video_rejected_before_staging(self, intake, upload_dir):
        fake = FakeAsrClient()
        with pytest.raises(UnsupportedMediaTypeError):
            _transcribe(_pipeline(intake, fake), mime_type="audio/mpeg")
        assert fake.calls == []
        assert not upload_dir.exists()

    def test_missing_credential_before_staging(self, intake, upload_dir):
        fake = FakeAsrClient(has_key=False)
        with pytest.raises(MissingCredentialError):
            _transcribe(_pipeline(intake, fake))
        assert fake.calls == []
        assert not upload_dir.exists()

    @pytest.mark.parametrize("duration", [float("nan"), float("inf")])
    def test_non_finite_duration_rejected_before_provider(self, intake, upload_dir, duration):
        fake = FakeAsrClient()
        with pytest.raises(ValidationError):
            _transcribe(_pipeline(intake, fake), duration_s=duration)
        assert fake.calls == []
        assert not upload_dir.exists()

    def test_unknown_duration_gives_untimed_session(self, intake):
        outcome = _transcribe(_pipeline(intake), duration_s=0.0)
        assert outcome.session.timestamps == [None, None, None]

    def test_reporter_stopped_when_call_settles(self, intake):
        updates = []

        async def _run():
            reporter = ProgressReporter(on_update=updates.append, tick_interval=0.001, complete_display=0.0)
            pipeline = _pipeline(intake, FakeAsrClient(error=ProviderUnavailableError("boom")))
            with pytest.raises(ProviderUnavailableError):
                await pipeline.transcribe_upload(io.BytesIO(b"x"), "video/mp4", reporter=reporter)
            assert not reporter.running
            await reporter.settled()

        asyncio.run(_run())
        assert any(u.complete and u.progress == 100.0 for u in updates)


class TestDuplicateSubmission:

    def test_same_video_in_flight_is_rejected(self, intake):

        class BlockingAsr(FakeAsrClient):
            def __init__(self):
                super().__init__()
                self.started = asyncio.Event()
                self.release = asyncio.Event()

            async def transcribe(self, asset, locale):
                self.calls.append((asset, locale))
                self.started.set()
                await self.release.wait()
                return self.text

        async def _run():
            fake = BlockingAsr()
            pipeline = _pipeline(intake, fake)
            first = asyncio.create_task(pipeline.transcribe_upload(
                io.BytesIO(SAMPLE_VIDEO_BYTES), "video/mp4", duration_s=90.0
            ))
            await fake.started.wait()
            with pytest.raises(TranscriptionInProgressError) as exc_info:
                await pipeline.transcribe_upload(io.BytesIO(SAMPLE_VIDEO_BYTES), "video/mp4")
            assert exc_info.value.status_code == 409
            fake.release.set()
            return fake, pipeline, await first

        fake, pipeline, outcome = asyncio.run(_run())
        assert len(fake.calls) == 1
        assert len(outcome.session) == 3
        assert len(pipeline.inflight) == 0

    def test_different_videos_run_side_by_side(self, intake):
        fake = FakeAsrClient()
        pipeline = _pipeline(intake, fake)

        async def _run():
            return await asyncio.gather(
                pipeline.transcribe_upload(io.BytesIO(b"video one"), "video/mp4"),
                pipeline.transcribe_upload(io.BytesIO(b"video two"), "video/mp4"),
            )

        first, second = asyncio.run(_run())
        assert first.asset_id != second.asset_id
        assert len(fake.calls) == 2


class TestTranslateSession:

    def test_view_bound_to_session_version(self, intake):
        translator = FakeTranslationClient()
        pipeline = _pipeline(intake, translator=translator)
        session = _transcribe(pipeline).session

        session.enter_edit()
        session.set_segment_text(0, "Hello there.")
        session.commit()

        view = asyncio.run(pipeline.translate_session(session, "es"))
        assert translator.calls == [("Hello there.\nHow are you?\nGreat.", "es")]
        assert view.source_version == 1
        assert not view.is_stale(session)

        session.enter_edit()
        session.set_segment_text(2, "Fine.")
        session.commit()
        assert view.is_stale(session)
