"""Decoding of provider responses into plain values.

WHY: The transcription endpoint answers ``response_format="text"`` with a
bare string, but depending on the provider (or a proxy in front of it) the
same call may come back as a JSON object carrying a ``text`` field. The
translation endpoint returns a chat-completion object whose content sits
several levels deep. Both shapes must be decoded explicitly; an answer
without usable text is a provider fault, not an empty transcript.

HOW: decode_transcription_payload() tags a raw response value as
TextPayload or ObjectPayload. normalize_transcription() is the single
conversion from either tag to a text string, with an exhaustive failure
branch. extract_chat_content() walks ``choices[0].message.content``.
extract_error_message() pulls the human-readable message out of an error
body so raw payloads never reach callers.

RULES:
- str → TextPayload; Mapping → ObjectPayload; anything else is malformed
- Empty or whitespace-only text is malformed
- Returned transcript text is stripped of surrounding whitespace
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

import httpx

from sublyze.errors import MalformedProviderResponseError


@dataclass(frozen=True)
class TextPayload:
    """A bare-string transcription response."""

    text: str


@dataclass(frozen=True)
class ObjectPayload:
    """A structured transcription response, expected to carry ``text``."""

    data: Mapping


AsrPayload = Union[TextPayload, ObjectPayload]


def decode_transcription_payload(raw: Any) -> AsrPayload:
    """Tag a raw response value as one of the known payload shapes."""
    if isinstance(raw, (TextPayload, ObjectPayload)):
        return raw
    if isinstance(raw, str):
        return TextPayload(raw)
    if isinstance(raw, Mapping):
        return ObjectPayload(raw)
    raise MalformedProviderResponseError(
        "Failed to process transcription response",
        details="Unexpected response type: {}".format(type(raw).__name__),
    )


def decode_transcription_response(response: httpx.Response) -> AsrPayload:
    """Decode an HTTP response body: JSON when declared as such, else text."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return decode_transcription_payload(response.json())
        except json.JSONDecodeError:
            raise MalformedProviderResponseError(
                "Failed to process transcription response",
                details="Response declared JSON but could not be parsed",
            ) from None
    return TextPayload(response.text)


def normalize_transcription(payload: Any) -> str:
    """Convert any transcription payload into non-empty text.

    >>> normalize_transcription({"text": "hello"})
    'hello'
    >>> normalize_transcription("hello")
    'hello'

    Raises:
        MalformedProviderResponseError: The payload carries no usable text.
    """
    payload = decode_transcription_payload(payload)

    if isinstance(payload, TextPayload):
        text = payload.text
    elif isinstance(payload, ObjectPayload):
        value = payload.data.get("text")
        text = value if isinstance(value, str) else ""
    else:  # pragma: no cover - decode_transcription_payload is exhaustive
        raise MalformedProviderResponseError("Failed to process transcription response")

    text = text.strip()
    if not text:
        raise MalformedProviderResponseError(
            "Failed to generate transcription",
            details="Provider response contained no transcription text",
        )
    return text


def extract_chat_content(data: Any) -> str:
    """Return ``choices[0].message.content`` from a chat-completion body."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        content = None

    if not isinstance(content, str) or not content.strip():
        raise MalformedProviderResponseError(
            "Error translating text",
            details="Provider response contained no translation",
        )
    return content.strip()


def extract_error_message(response: httpx.Response) -> str:
    """Best human-readable message from a provider error response."""
    message: Optional[str] = None
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, Mapping):
        error = body.get("error")
        if isinstance(error, Mapping):
            message = error.get("message")
        elif isinstance(error, str):
            message = error
        message = message or body.get("message")

    if isinstance(message, str) and message.strip():
        return message.strip()
    return "Provider returned HTTP {}".format(response.status_code)
