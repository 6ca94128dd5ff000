"""Provider client package: async HTTP access to ASR and translation.

WHY: Transcription and translation are external capabilities. This
package keeps every provider HTTP call behind two small client classes.

HOW: ProviderClient (client.py) holds auth, timeout, and error mapping.
AsrClient and TranslationClient build their requests on top of it;
models.py decodes the responses.

RULES:
- All provider HTTP goes through these clients (no direct httpx elsewhere)
- Authentication is via Bearer token from config
"""

from sublyze.api.asr import AsrClient
from sublyze.api.client import ProviderClient
from sublyze.api.translation import TranslationClient

__all__ = ["AsrClient", "ProviderClient", "TranslationClient"]
