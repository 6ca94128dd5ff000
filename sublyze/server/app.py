"""FastAPI application exposing transcription, translation, and languages.

WHY: The browser front-end uploads videos and asks for translations over
HTTP. FastAPI gives request parsing for multipart uploads, response
validation, and OpenAPI docs.

HOW: One module-level TranscriptionPipeline serves all requests. Endpoints
translate form/JSON input into pipeline calls and pipeline results into
response models. Every SublyzeError is rendered by one exception handler
as {"error", "details"?} with the error's status code; unexpected
exceptions are logged and wrapped so no stack trace reaches the client.

RULES:
- POST /api/transcribe: multipart ``video`` (required), ``language`` (default "en")
- POST /api/translate: JSON {"text", "targetLanguage"}
- GET /api/languages: {"languages": {code: name}}
- 400 validation, 409 duplicate in-flight submission, 500 configuration/provider
- Schema-level request errors are reported as 400 in the same error shape
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import io
import logging
from typing import Annotated, Optional

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sublyze import __version__
from sublyze.config import API_HOST, API_PORT, DEFAULT_LANGUAGE, LOG_LEVEL
from sublyze.core.timing import format_timestamp
from sublyze.errors import NoFileError, ProviderError, SublyzeError
from sublyze.logging_setup import setup_logging
from sublyze.pipeline import TranscriptionPipeline
from sublyze.server.models import (
    ErrorResponse,
    HealthResponse,
    LanguagesResponse,
    SegmentResponse,
    TranscribeResponse,
    TranslateRequest,
    TranslateResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and pipeline setup
# ---------------------------------------------------------------------------

pipeline = TranscriptionPipeline()

app = FastAPI(
    title="Sublyze API",
    description=(
        "Upload a video to receive its transcript, translate transcript text, "
        "and list the supported languages."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Accept"],
)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid input or unsupported language"},
    500: {"model": ErrorResponse, "description": "Missing credential or provider failure"},
}


@app.exception_handler(SublyzeError)
async def _sublyze_error_handler(request: Request, exc: SublyzeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = "; ".join(
        "{}: {}".format(".".join(str(part) for part in err.get("loc", ())), err.get("msg", ""))
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": problems})


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post(
    "/api/transcribe",
    response_model=TranscribeResponse,
    response_model_exclude_none=True,
    tags=["transcription"],
    summary="Transcribe an uploaded video",
    description=(
        "Upload a video file and receive its transcript. When the media "
        "duration is sent, the response also lists timestamped segments."
    ),
    responses={
        **_ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "The same video is already being transcribed"},
    },
)
async def transcribe(
    video: Annotated[
        Optional[UploadFile],
        File(description="Video file to transcribe."),
    ] = None,
    language: Annotated[
        Optional[str],
        Form(description="Language code of the speech (default 'en')."),
    ] = DEFAULT_LANGUAGE,
    duration: Annotated[
        Optional[float],
        Form(description="Media duration in seconds, measured by the client."),
    ] = None,
) -> TranscribeResponse:
    if video is None:
        logger.info("No file uploaded")
        raise NoFileError("No video file uploaded")

    content = await video.read()
    logger.info(
        "File received: %s (%s, %d bytes, language=%s)",
        video.filename, video.content_type, len(content), language,
    )

    try:
        outcome = await pipeline.transcribe_upload(
            io.BytesIO(content),
            video.content_type,
            language=language or DEFAULT_LANGUAGE,
            size_bytes=len(content),
            filename=video.filename or "",
            duration_s=duration or 0.0,
        )
    except SublyzeError:
        raise
    except Exception as exc:
        logger.exception("Unexpected error while transcribing %s", video.filename)
        raise ProviderError("Error processing video", details=str(exc)) from exc

    segments = None
    if duration:
        segments = [
            SegmentResponse(
                index=segment.index,
                text=segment.text,
                start=segment.timestamp_s,
                timestamp=format_timestamp(segment.timestamp_s),
            )
            for segment in outcome.session.segments
            if segment.timestamp_s is not None
        ]

    return TranscribeResponse(
        transcription=outcome.result.text,
        language=outcome.result.locale.code,
        segments=segments,
    )


@app.post(
    "/api/translate",
    response_model=TranslateResponse,
    tags=["translation"],
    summary="Translate transcript text",
    responses=_ERROR_RESPONSES,
)
async def translate(body: TranslateRequest) -> TranslateResponse:
    try:
        view = await pipeline.translate(body.text, body.target_language)
    except SublyzeError:
        raise
    except Exception as exc:
        logger.exception("Unexpected translation error")
        raise ProviderError("Error translating text", details=str(exc)) from exc

    return TranslateResponse(translation=view.text, language=view.locale.code)


@app.get(
    "/api/languages",
    response_model=LanguagesResponse,
    tags=["languages"],
    summary="List supported languages",
)
async def list_languages() -> LanguagesResponse:
    return LanguagesResponse(languages=pipeline.registry.all())


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the sublyze-api console script."""
    import uvicorn
    setup_logging(LOG_LEVEL)
    uvicorn.run(app, host=API_HOST, port=API_PORT)
