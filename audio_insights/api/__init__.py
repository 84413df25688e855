"""AssemblyAI API client package: async HTTP interface to the transcription service.

WHY: The tool needs to upload audio, create a transcript job with audio
intelligence features, and poll it to completion. This package keeps all
AssemblyAI communication behind one client class.

HOW: AssemblyAIClient wraps httpx.AsyncClient; responses are parsed into
the dataclasses in models.py.

RULES:
- All HTTP calls go through AssemblyAIClient (no direct httpx usage elsewhere)
- Authentication is the raw API key in the ``authorization`` header
"""

from audio_insights.api.client import (
    AssemblyAIAPIError,
    AssemblyAIClient,
    MalformedResponseError,
    TranscriptionError,
    TranscriptionTimeoutError,
)
from audio_insights.api.models import (
    TranscriptionRequest,
    TranscriptResult,
    TranscriptStatus,
)

__all__ = [
    "AssemblyAIAPIError",
    "AssemblyAIClient",
    "MalformedResponseError",
    "TranscriptionError",
    "TranscriptionRequest",
    "TranscriptionTimeoutError",
    "TranscriptResult",
    "TranscriptStatus",
]
