"""Tests for the provider clients and response decoding.

WHY: Provider responses come in more than one shape and fail in more than
one way. Each shape must decode to text or to a typed error, and a
missing credential must stop a call before any request is sent.

HOW: Clients are given an httpx.MockTransport (RecordingTransport) so
every request is captured in memory. Async calls run through
asyncio.run().

RULES:
- The real provider is never contacted
"""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from sublyze.api.asr import AsrClient
from sublyze.api.models import (
    ObjectPayload,
    TextPayload,
    decode_transcription_payload,
    extract_chat_content,
    normalize_transcription,
)
from sublyze.api.translation import SYSTEM_PROMPT_TEMPLATE, TranslationClient
from sublyze.core.ir import Locale
from sublyze.errors import (
    EmptyInputError,
    MalformedProviderResponseError,
    MissingCredentialError,
    ProviderTimeoutError,
    ProviderUnavailableError,
    UnsupportedLanguageError,
)

from conftest import (
    SAMPLE_TRANSCRIPT,
    RecordingTransport,
    chat_completion,
    json_response,
    text_response,
)

ENGLISH = Locale("en", "English")


def _transcribe(client: AsrClient, asset) -> str:
    async def _run():
        async with client:
            return await client.transcribe(asset, ENGLISH)

    return asyncio.run(_run())


def _translate(client: TranslationClient, text, target):
    async def _run():
        async with client:
            return await client.translate(text, target)

    return asyncio.run(_run())


@pytest.fixture
def asset(intake, video_stream):
    return intake.accept(video_stream, "video/mp4", original_filename="talk.mp4")


# ---------------------------------------------------------------------------
# Response decoding
# ---------------------------------------------------------------------------


class TestNormalizeTranscription:

    def test_object_with_text(self):
        assert normalize_transcription({"text": "  hello  "}) == "hello"

    def test_bare_string(self):
        assert normalize_transcription("hello\n") == "hello"

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": 5}, "   ", ""])
    def test_no_text_is_malformed(self, payload):
        with pytest.raises(MalformedProviderResponseError):
            normalize_transcription(payload)

    def test_unknown_shape_is_malformed(self):
        with pytest.raises(MalformedProviderResponseError):
            normalize_transcription(["hello"])

    def test_payload_tags(self):
        assert decode_transcription_payload("x") == TextPayload("x")
        assert decode_transcription_payload({"text": "x"}) == ObjectPayload({"text": "x"})


class TestExtractChatContent:

    def test_content(self):
        assert extract_chat_content(chat_completion(" Hola. ")) == "Hola."

    @pytest.mark.parametrize("data", [{}, {"choices": []}, {"choices": [{"message": {}}]}, None])
    def test_missing_content(self, data):
        with pytest.raises(MalformedProviderResponseError):
            extract_chat_content(data)


# ---------------------------------------------------------------------------
# AsrClient
# ---------------------------------------------------------------------------


class TestAsrClient:

    def test_text_response(self, asset):
        transport = RecordingTransport(text_response(SAMPLE_TRANSCRIPT + "\n"))
        client = AsrClient(api_key="sk-test", transport=transport)

        assert _transcribe(client, asset) == SAMPLE_TRANSCRIPT

        (request,) = transport.requests
        assert request.url.path.endswith("/audio/transcriptions")
        assert request.headers["authorization"] == "Bearer sk-test"
        body = request.content
        assert b'name="model"' in body and b"whisper-1" in body
        assert b'name="language"' in body
        assert b'name="response_format"' in body
        assert b'filename="talk.mp4"' in body

    def test_json_response(self, asset):
        transport = RecordingTransport(json_response({"text": SAMPLE_TRANSCRIPT}))
        client = AsrClient(api_key="sk-test", transport=transport)
        assert _transcribe(client, asset) == SAMPLE_TRANSCRIPT

    def test_empty_json_object_is_malformed(self, asset):
        transport = RecordingTransport(json_response({}))
        client = AsrClient(api_key="sk-test", transport=transport)
        with pytest.raises(MalformedProviderResponseError):
            _transcribe(client, asset)

    def test_missing_credential_sends_nothing(self, asset, no_api_key):
        transport = RecordingTransport(text_response("never"))
        client = AsrClient(transport=transport)
        with pytest.raises(MissingCredentialError) as exc_info:
            _transcribe(client, asset)
        assert exc_info.value.status_code == 500
        assert transport.requests == []

    def test_credential_from_environment(self, asset, api_key):
        transport = RecordingTransport(text_response("ok"))
        _transcribe(AsrClient(transport=transport), asset)
        assert transport.requests[0].headers["authorization"] == "Bearer {}".format(api_key)

    def test_timeout(self, asset):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = AsrClient(api_key="sk-test", transport=httpx.MockTransport(handler))
        with pytest.raises(ProviderTimeoutError) as exc_info:
            _transcribe(client, asset)
        assert exc_info.value.message == "Error processing video"

    def test_connection_error(self, asset):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        client = AsrClient(api_key="sk-test", transport=httpx.MockTransport(handler))
        with pytest.raises(ProviderUnavailableError):
            _transcribe(client, asset)

    def test_error_status_carries_provider_message(self, asset):
        transport = RecordingTransport(
            json_response({"error": {"message": "Invalid file format."}}, status_code=400)
        )
        client = AsrClient(api_key="sk-test", transport=transport)
        with pytest.raises(ProviderUnavailableError) as exc_info:
            _transcribe(client, asset)
        assert exc_info.value.to_dict() == {
            "error": "Error processing video",
            "details": "Invalid file format.",
        }


# ---------------------------------------------------------------------------
# TranslationClient
# ---------------------------------------------------------------------------


class TestTranslationClient:

    def test_translates_with_fixed_prompt(self):
        transport = RecordingTransport(json_response(chat_completion("Hola. ¿Cómo estás?")))
        client = TranslationClient(api_key="sk-test", transport=transport)

        view = _translate(client, "Hi. How are you?", "es")

        assert view.text == "Hola. ¿Cómo estás?"
        assert view.locale == Locale("es", "Spanish")
        assert view.source_version == 0

        (request,) = transport.requests
        assert request.url.path.endswith("/chat/completions")
        payload = json.loads(request.content)
        assert payload["model"] == "gpt-3.5-turbo"
        assert payload["temperature"] == 0.3
        assert payload["messages"] == [
            {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(language="Spanish")},
            {"role": "user", "content": "Hi. How are you?"},
        ]

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_text(self, text):
        transport = RecordingTransport(json_response(chat_completion("x")))
        with pytest.raises(EmptyInputError) as exc_info:
            _translate(TranslationClient(api_key="sk-test", transport=transport), text, "es")
        assert exc_info.value.message == "No text provided for translation"
        assert transport.requests == []

    @pytest.mark.parametrize("target", [None, "xx", "EN"])
    def test_unsupported_target(self, target):
        transport = RecordingTransport(json_response(chat_completion("x")))
        with pytest.raises(UnsupportedLanguageError) as exc_info:
            _translate(TranslationClient(api_key="sk-test", transport=transport), "Hello", target)
        assert exc_info.value.status_code == 400
        assert transport.requests == []

    def test_validation_precedes_credential_check(self, no_api_key):
        with pytest.raises(EmptyInputError):
            _translate(TranslationClient(), "", "es")
        with pytest.raises(MissingCredentialError):
            _translate(TranslationClient(), "Hello", "es")

    def test_invalid_json_is_malformed(self):
        transport = RecordingTransport(text_response("<html>oops</html>"))
        client = TranslationClient(api_key="sk-test", transport=transport)
        with pytest.raises(MalformedProviderResponseError):
            _translate(client, "Hello", "fr")
