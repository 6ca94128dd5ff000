"""Shared async HTTP plumbing for the ASR and translation providers.

WHY: Both provider clients authenticate the same way, need the same
bounded timeout, and must turn every transport problem into one of a few
typed errors. Centralizing that keeps the two clients down to request
building and response decoding.

HOW: ProviderClient wraps httpx.AsyncClient with Bearer token auth. The
httpx client is created on first use, so the credential is only required
once a request is actually about to be sent; validation in subclasses
runs first. Use as an async context manager to close the connection pool.

RULES:
- Use as: async with AsrClient() as client: ...
- api_key defaults to load_api_key() from .env, resolved lazily
- MissingCredentialError is raised before any network attempt
- httpx.TimeoutException → ProviderTimeoutError
- Other httpx.HTTPError → ProviderUnavailableError
- Non-2xx → ProviderUnavailableError with the extracted message as details
- Nothing is retried here
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from sublyze.api.models import extract_error_message
from sublyze.config import (
    OPENAI_BASE_URL,
    PROVIDER_CONNECT_TIMEOUT_S,
    PROVIDER_TIMEOUT_S,
    load_api_key,
)
from sublyze.errors import ProviderTimeoutError, ProviderUnavailableError

logger = logging.getLogger(__name__)


class ProviderClient:
    """Authenticated async HTTP client for an OpenAI-compatible API.

    Args:
        api_key: Bearer token. Defaults to OPENAI_API_KEY from the environment.
        base_url: API root. Defaults to OPENAI_BASE_URL.
        timeout: Overall request timeout in seconds.
        transport: Optional httpx transport (tests pass httpx.MockTransport).
    """

    error_message = "Provider request failed"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = (base_url or OPENAI_BASE_URL).rstrip("/")
        self._timeout = httpx.Timeout(
            timeout or PROVIDER_TIMEOUT_S,
            connect=min(timeout or PROVIDER_CONNECT_TIMEOUT_S, PROVIDER_CONNECT_TIMEOUT_S),
        )
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> ProviderClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def ensure_credentials(self) -> str:
        """Return the API key, raising MissingCredentialError if there is none."""
        if not self._api_key:
            self._api_key = load_api_key()
        return self._api_key

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            api_key = self.ensure_credentials()
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers={"Authorization": "Bearer {}".format(api_key)},
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        """POST to the provider, mapping every failure to a ProviderError."""
        client = self._ensure_client()
        try:
            resp = await client.post(path, **kwargs)
        except httpx.TimeoutException as exc:
            logger.exception("Provider request to %s timed out", path)
            raise ProviderTimeoutError(self.error_message, details="Request timed out") from exc
        except httpx.HTTPError as exc:
            logger.exception("Provider request to %s failed", path)
            raise ProviderUnavailableError(self.error_message, details=str(exc)) from exc

        if resp.status_code < 200 or resp.status_code >= 300:
            logger.error(
                "Provider returned HTTP %s for %s: %s", resp.status_code, path, resp.text
            )
            raise ProviderUnavailableError(
                self.error_message, details=extract_error_message(resp)
            )
        return resp
