"""Error taxonomy shared by the intake, provider clients, session and API.

WHY: The HTTP layer, the CLI, and library callers all need to tell a
user-correctable mistake (bad file, unknown language) from an operator
problem (missing credential), a transient provider failure, and internal
misuse of the session API. One small hierarchy makes those categories
explicit and gives each error a fixed HTTP status.

HOW: Every error inherits SublyzeError, which carries a short public
``message`` and an optional ``details`` string. Five category classes sit
under it; concrete errors subclass a category and pin ``status_code``.

RULES:
- ``message`` is safe to show to end users; raw provider payloads never go in it
- ``details`` holds an extracted provider message, never a full response body
- ValidationError and ConfigurationError are raised before any external call
- IntegrityError signals misuse of the session API and has no HTTP mapping
"""

from __future__ import annotations

from typing import Optional


class SublyzeError(Exception):
    """Base class for every error raised by the package.

    Attributes:
        message: Short, user-facing description.
        details: Optional extra context (e.g. the provider's error message).
        status_code: HTTP status used when the error reaches the API layer.
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message if not details else "{}: {}".format(message, details))

    def to_dict(self) -> dict:
        """Render as the API error body ``{"error": ..., "details"?: ...}``."""
        body = {"error": self.message}
        if self.details:
            body["details"] = self.details
        return body


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class ValidationError(SublyzeError):
    """Bad or missing input. Correctable by the user."""

    status_code = 400


class ConfigurationError(SublyzeError):
    """Server-side misconfiguration. Correctable by the operator."""

    status_code = 500


class ProviderError(SublyzeError):
    """The external ASR/translation capability failed. Not retried here."""

    status_code = 500


class IntegrityError(SublyzeError):
    """Internal misuse, e.g. editing a segment that does not exist."""

    status_code = 500


class ConflictError(SublyzeError):
    """The request clashes with work already in progress."""

    status_code = 409


# ---------------------------------------------------------------------------
# Validation errors
# ---------------------------------------------------------------------------


class NoFileError(ValidationError):
    pass


class UnsupportedMediaTypeError(ValidationError):
    pass


class UploadTooLargeError(ValidationError):
    pass


class UnsupportedLanguageError(ValidationError):
    pass


class LanguageNotFoundError(UnsupportedLanguageError):
    """Raised by registry lookups for codes that were never registered."""


class EmptyInputError(ValidationError):
    pass


class UnsupportedExportFormatError(ValidationError):
    pass


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class MissingCredentialError(ConfigurationError):
    pass


# ---------------------------------------------------------------------------
# Provider errors
# ---------------------------------------------------------------------------


class ProviderUnavailableError(ProviderError):
    pass


class ProviderTimeoutError(ProviderError):
    pass


class MalformedProviderResponseError(ProviderError):
    pass


# ---------------------------------------------------------------------------
# Integrity errors
# ---------------------------------------------------------------------------


class IndexOutOfRangeError(IntegrityError):
    pass


class InvalidSessionStateError(IntegrityError):
    """An edit operation was attempted outside edit mode."""


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------


class TranscriptionInProgressError(ConflictError):
    """A second transcription was submitted for an asset still being processed."""
