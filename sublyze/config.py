"""Configuration constants, the language table, and .env loading.

WHY: Provider endpoints, model names, limits, and the supported language
list are plain data that operators tune without touching logic. Keeping
them in one module makes them easy to find and override.

HOW: python-dotenv loads the .env file on import. Constants are module-level
values read from the environment with sensible defaults. load_api_key()
fails fast with MissingCredentialError when no provider key is configured.

RULES:
- SUPPORTED_LANGUAGES order is registration order (used for UI listing only)
- The provider credential is read from OPENAI_API_KEY, never hardcoded
- Every default can be overridden via an environment variable
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

from sublyze.errors import MissingCredentialError

# Load .env from the working directory
load_dotenv()

# ---------------------------------------------------------------------------
# Supported languages: ISO 639-1 code → display name
# ---------------------------------------------------------------------------

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "hi": "Hindi",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
}

DEFAULT_LANGUAGE = os.getenv("DEFAULT_LANGUAGE", "en")

# ---------------------------------------------------------------------------
# Provider configuration
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
ASR_MODEL = os.getenv("ASR_MODEL", "whisper-1")
TRANSLATION_MODEL = os.getenv("TRANSLATION_MODEL", "gpt-3.5-turbo")
TRANSLATION_TEMPERATURE = float(os.getenv("TRANSLATION_TEMPERATURE", "0.3"))

PROVIDER_TIMEOUT_S = float(os.getenv("PROVIDER_TIMEOUT_S", "300"))
PROVIDER_CONNECT_TIMEOUT_S = float(os.getenv("PROVIDER_CONNECT_TIMEOUT_S", "30"))

# ---------------------------------------------------------------------------
# Upload staging
# ---------------------------------------------------------------------------

UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(Path.cwd() / "uploads")))
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(500 * 1024 * 1024)))

# ---------------------------------------------------------------------------
# Transcript estimates
# ---------------------------------------------------------------------------

# Reading time per word, used for duration estimates and untimed caption cues
SECONDS_PER_WORD = 0.3

# ---------------------------------------------------------------------------
# Server and logging
# ---------------------------------------------------------------------------

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "5001"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def load_api_key() -> str:
    """Load the provider API key from the environment.

    WHY: Both provider endpoints need a credential. Checking for it before
    building a request means a misconfigured server fails immediately
    instead of after uploading a large video.

    RULES:
    - Raises MissingCredentialError if the key is missing or blank
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise MissingCredentialError("OpenAI API key is not configured")
    return key
