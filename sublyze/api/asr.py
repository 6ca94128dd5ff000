"""ASR client: send a staged video to the transcription endpoint.

WHY: Speech recognition is an external capability. This client is the one
place that knows how to package a MediaAsset into a transcription request
and how to turn whatever comes back into plain transcript text.

HOW: A multipart POST to ``/audio/transcriptions`` carrying the file, the
model identifier, the locale code, and ``response_format=text``. The body
is decoded into a tagged payload and normalized by
normalize_transcription().

RULES:
- The credential is checked before the file is opened
- No retries: a failed call is surfaced to the caller as-is
- Empty or shapeless responses raise MalformedProviderResponseError
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from sublyze.api.client import ProviderClient
from sublyze.api.models import decode_transcription_response, normalize_transcription
from sublyze.config import ASR_MODEL
from sublyze.core.ir import Locale, MediaAsset
from sublyze.errors import MalformedProviderResponseError

logger = logging.getLogger(__name__)


class AsrClient(ProviderClient):
    """Async client for the speech-to-text endpoint."""

    error_message = "Error processing video"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, transport=transport)
        self.model = model or ASR_MODEL

    async def transcribe(self, asset: MediaAsset, locale: Locale) -> str:
        """Transcribe ``asset`` in ``locale`` and return the transcript text.

        Raises:
            MissingCredentialError: No API key is configured.
            ProviderUnavailableError: Transport failure or non-2xx response.
            ProviderTimeoutError: The call exceeded the configured timeout.
            MalformedProviderResponseError: No transcript text in the response.
        """
        self.ensure_credentials()

        filename = asset.original_filename or asset.path.name
        logger.info(
            "Sending %s (%d bytes) for transcription [model=%s, language=%s]",
            filename, asset.size_bytes, self.model, locale.code,
        )
        with open(asset.path, "rb") as f:
            resp = await self._post(
                "/audio/transcriptions",
                files={"file": (filename, f, asset.mime_type)},
                data={
                    "model": self.model,
                    "language": locale.code,
                    "response_format": "text",
                },
            )

        try:
            text = normalize_transcription(decode_transcription_response(resp))
        except MalformedProviderResponseError:
            logger.exception("Unexpected transcription response format: %r", resp.text[:500])
            raise

        logger.info("Transcription successful (%d characters)", len(text))
        return text
