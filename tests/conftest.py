"""Shared test fixtures for the sublyze test suite.

WHY: Several test modules need the same sample transcript, a staging
directory that never touches the working tree, and provider clients that
answer from memory instead of the network.

HOW: Fixtures provide a tmp_path-backed MediaIntake, a fake API key set
through monkeypatch, and helpers that build httpx.MockTransport handlers
recording every request they see.

RULES:
- No test ever reaches the real provider
- The API key is always set or removed explicitly per test
- Staged files land under pytest's tmp_path
"""

from __future__ import annotations

import io
from typing import Any, Callable, List

import httpx
import pytest

from sublyze.core.intake import MediaIntake
from sublyze.core.ir import Locale, TranslationView
from sublyze.errors import MissingCredentialError

SAMPLE_TRANSCRIPT = "Hi there. How are you? Great."
SAMPLE_VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42fake video payload"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it handled."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def text_response(body: str, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(
        status_code, text=body, headers={"content-type": "text/plain; charset=utf-8"}
    )


def json_response(body: Any, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    return lambda request: httpx.Response(status_code, json=body)


def chat_completion(content: str) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


# ---------------------------------------------------------------------------
# Provider fakes
# ---------------------------------------------------------------------------


class FakeAsrClient:
    """Stands in for AsrClient; records the assets it was asked to transcribe."""

    def __init__(self, text=SAMPLE_TRANSCRIPT, error=None, has_key=True):
        self.text = text
        self.error = error
        self.has_key = has_key
        self.calls = []
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.closed = True

    def ensure_credentials(self):
        if not self.has_key:
            raise MissingCredentialError("OpenAI API key is not configured")
        return "sk-test"

    async def transcribe(self, asset, locale):
        self.calls.append((asset, locale))
        assert asset.path.exists()
        if self.error is not None:
            raise self.error
        return self.text


class FakeTranslationClient:
    def __init__(self):
        self.calls = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    async def translate(self, text, target_language):
        self.calls.append((text, target_language))
        return TranslationView(Locale(target_language, "Spanish"), "Hola.")


@pytest.fixture
def api_key(monkeypatch):
    """A fake provider key in the environment."""
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test-key")
    return "sk-test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    """No provider key in the environment."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def intake(upload_dir):
    """MediaIntake staging into a temporary directory."""
    return MediaIntake(upload_dir=upload_dir)


@pytest.fixture
def video_stream():
    return io.BytesIO(SAMPLE_VIDEO_BYTES)
