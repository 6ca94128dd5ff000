"""Pydantic request/response models for the HTTP API.

WHY: The endpoints need typed schemas for request validation, response
serialization, and the generated OpenAPI documentation.

HOW: One model per request/response body. Field names follow the public
JSON contract (``targetLanguage`` is camelCase on the wire).

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Error bodies are always {"error": ..., "details"?: ...}
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class TranslateRequest(BaseModel):
    """Body of POST /api/translate.

    Both fields are optional at the schema level so that a missing value
    produces the API's own 400 error rather than a schema rejection.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: Optional[str] = Field(default=None, description="Text to translate.")
    target_language: Optional[str] = Field(
        default=None,
        alias="targetLanguage",
        description="Target language code (see GET /api/languages).",
    )


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class SegmentResponse(BaseModel):
    """One timestamped transcript segment."""

    index: int = Field(description="0-based segment position.")
    text: str = Field(description="Segment text.")
    start: float = Field(description="Estimated start in seconds (uniform estimate, not speech-aligned).")
    timestamp: str = Field(description="Start rendered as MM:SS or H:MM:SS.")


class TranscribeResponse(BaseModel):
    """Successful transcription."""

    transcription: str = Field(description="Full transcript text.")
    language: str = Field(description="Language code used for transcription.")
    segments: Optional[List[SegmentResponse]] = Field(
        default=None,
        description="Timestamped segments; present only when a media duration was sent.",
    )

    model_config = {"json_schema_extra": {
        "examples": [
            {
                "transcription": "Hi there. How are you? Great.",
                "language": "en",
            }
        ]
    }}


class TranslateResponse(BaseModel):
    translation: str = Field(description="Translated text.")
    language: str = Field(description="Target language code.")


class LanguagesResponse(BaseModel):
    languages: Dict[str, str] = Field(description="Supported language codes mapped to display names.")


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str = Field(description="Human-readable error description.")
    details: Optional[str] = Field(default=None, description="Additional context, when available.")


class HealthResponse(BaseModel):
    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
