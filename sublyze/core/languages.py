"""Registry of supported transcription/translation languages.

WHY: Both provider calls accept a language code from the request. Codes
must be validated against a fixed table before any external call, and the
UI needs the same table (in registration order) to build its pickers.

HOW: LanguageRegistry wraps a read-only mapping proxy over a copy of the
code → display name table. DEFAULT_REGISTRY is built once from
config.SUPPORTED_LANGUAGES.

RULES:
- Read-only after construction; there is no mutation path
- Unknown codes raise LanguageNotFoundError on lookup
- all() returns a fresh dict in registration order
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from sublyze.config import SUPPORTED_LANGUAGES
from sublyze.core.ir import Locale
from sublyze.errors import LanguageNotFoundError


class LanguageRegistry:
    """Process-wide lookup of supported locale codes."""

    def __init__(self, languages: Mapping[str, str]) -> None:
        self._languages = MappingProxyType(dict(languages))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code in self._languages

    def __len__(self) -> int:
        return len(self._languages)

    def is_supported(self, code: str | None) -> bool:
        return code in self

    def display_name(self, code: str) -> str:
        try:
            return self._languages[code]
        except KeyError:
            raise LanguageNotFoundError(
                "Unsupported language", details="'{}' is not a registered language code".format(code)
            ) from None

    def get(self, code: str) -> Locale:
        """Return the Locale for ``code`` or raise LanguageNotFoundError."""
        return Locale(code=code, display_name=self.display_name(code))

    def all(self) -> dict[str, str]:
        return dict(self._languages)


DEFAULT_REGISTRY = LanguageRegistry(SUPPORTED_LANGUAGES)
