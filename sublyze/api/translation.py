"""Translation client: translate transcript text with a chat model.

WHY: Users want the transcript in another language. The translation is a
parallel view of the transcript text; it never changes segmentation.

HOW: Validates the input, builds a fixed professional-translator system
prompt naming the target language, and POSTs a chat completion with low
temperature so the output stays literal. The reply content is the
translation.

RULES:
- Empty text → EmptyInputError, before anything else
- Unknown target language → UnsupportedLanguageError
- Credential checked after validation, before any network call
- Temperature defaults to TRANSLATION_TEMPERATURE (0.3)
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from sublyze.api.client import ProviderClient
from sublyze.api.models import extract_chat_content
from sublyze.config import TRANSLATION_MODEL, TRANSLATION_TEMPERATURE
from sublyze.core.ir import TranslationView
from sublyze.core.languages import DEFAULT_REGISTRY, LanguageRegistry
from sublyze.errors import (
    EmptyInputError,
    MalformedProviderResponseError,
    UnsupportedLanguageError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = (
    "You are a professional translator. Translate the following text to "
    "{language}. Maintain the original meaning and tone."
)


def build_messages(text: str, language_name: str) -> list[dict]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT_TEMPLATE.format(language=language_name)},
        {"role": "user", "content": text},
    ]


class TranslationClient(ProviderClient):
    """Async client for the chat-completion translation call."""

    error_message = "Error translating text"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        registry: LanguageRegistry = DEFAULT_REGISTRY,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key=api_key, base_url=base_url, timeout=timeout, transport=transport)
        self.model = model or TRANSLATION_MODEL
        self.temperature = TRANSLATION_TEMPERATURE if temperature is None else temperature
        self.registry = registry

    async def translate(self, text: Optional[str], target_language: Optional[str]) -> TranslationView:
        """Translate ``text`` into ``target_language``.

        Returns:
            A TranslationView with source_version 0; callers translating a
            session bind it to the session version they read the text from.
        """
        if not text or not text.strip():
            raise EmptyInputError("No text provided for translation")
        if not self.registry.is_supported(target_language):
            raise UnsupportedLanguageError(
                "Unsupported target language",
                details="'{}' is not a registered language code".format(target_language),
            )
        locale = self.registry.get(target_language)
        self.ensure_credentials()

        logger.info(
            "Translating %d characters to %s [model=%s]", len(text), locale.display_name, self.model
        )
        resp = await self._post(
            "/chat/completions",
            json={
                "model": self.model,
                "messages": build_messages(text, locale.display_name),
                "temperature": self.temperature,
            },
        )

        try:
            data = resp.json()
        except ValueError:
            logger.exception("Translation response was not valid JSON: %r", resp.text[:500])
            raise MalformedProviderResponseError(
                self.error_message, details="Provider response was not valid JSON"
            ) from None

        translation = extract_chat_content(data)
        logger.info("Translation completed: %d -> %d characters", len(text), len(translation))
        return TranslationView(locale=locale, text=translation)
