"""Async HTTP client for the AssemblyAI v2 transcription API.

WHY: Getting an analysed transcript takes three calls against one service:
upload the audio, create a transcript job, then poll the job until it
finishes. This module keeps the HTTP details behind a single client class
so the CLI and tests never build requests themselves.

HOW: Uses httpx.AsyncClient. AssemblyAIClient is an async context manager;
enter it to get an authenticated client, exit to close the connection pool.
Each API step is a separate method:
upload_file → create_transcription → poll_until_complete.

RULES:
- Always use the async context manager (async with AssemblyAIClient(config) as client:)
- The API key goes in the bare ``authorization`` header (no Bearer prefix)
- Polling uses a fixed interval; the optional deadline comes from ClientConfig
- Transport errors (httpx.HTTPError) are never retried and never caught here
- A job in the "error" state is a terminal failure, not something to wait on
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, Dict

import httpx

from audio_insights.api.models import (
    TranscriptionRequest,
    TranscriptResult,
    TranscriptStatus,
)
from audio_insights.config import ClientConfig

logger = logging.getLogger(__name__)


class AssemblyAIAPIError(Exception):
    """Raised when the AssemblyAI API returns a non-2xx response.

    RULES:
    - Always include status_code and message
    - message is the response body text
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"AssemblyAI API error {status_code}: {message}")


class MalformedResponseError(ValueError):
    """Raised when a response is not a JSON object or lacks a required field."""


class TranscriptionError(Exception):
    """Raised when a transcript job enters the "error" status.

    RULES:
    - message contains the API's ``error`` field
    """

    def __init__(self, transcript_id: str, reason: str | None) -> None:
        self.transcript_id = transcript_id
        self.reason = reason
        super().__init__(
            f"Transcription {transcript_id} failed: {reason or 'no reason given'}"
        )


class TranscriptionTimeoutError(TimeoutError):
    """Raised when polling exceeds the configured deadline."""


class AssemblyAIClient:
    """Async client for the AssemblyAI transcription API.

    WHY: Provides a typed interface for the full workflow: upload → create
    → poll. Handles auth, response validation and error wrapping.

    HOW: Wraps httpx.AsyncClient with the configured base URL and API key.
    Use as an async context manager so the connection pool is closed.

    RULES:
    - Use as: async with AssemblyAIClient(config) as client: ...
    - transport is for tests (httpx.MockTransport); None means real network
    - sleep is the coroutine awaited between polls; tests replace it
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep or asyncio.sleep
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> AssemblyAIClient:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            headers={"authorization": self._config.api_key},
            timeout=httpx.Timeout(300.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "AssemblyAIClient must be used as an async context manager: "
                "async with AssemblyAIClient(config) as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Step 1: Upload file
    # ------------------------------------------------------------------

    async def upload_file(
        self,
        file_path: Path,
        on_status: Callable[[str], None] | None = None,
    ) -> str:
        """Upload a local audio file and return the provider-hosted URL.

        WHY: The transcript endpoint only accepts a URL. POST /upload stores
        the raw bytes on AssemblyAI's side and answers with ``upload_url``.

        HOW: Reads the whole file into memory first, so an unreadable path
        fails before any request is sent, then POSTs the bytes unmodified.

        RULES:
        - Raises OSError if the file cannot be read (no request is made)
        - Body is the exact file content, no multipart wrapping
        - Raises AssemblyAIAPIError on non-2xx responses
        - Raises MalformedResponseError if ``upload_url`` is missing

        Args:
            file_path: Path to the audio file to upload.
            on_status: Optional callback for status updates.

        Returns:
            The ``upload_url`` assigned by AssemblyAI.
        """
        client = self._ensure_client()
        data = Path(file_path).read_bytes()

        if on_status:
            on_status("Uploading file...")
        logger.debug("Uploading %s (%d bytes)", file_path, len(data))

        resp = await client.post("/upload", content=data)
        return _required_field(_json_object(resp), "upload_url")

    # ------------------------------------------------------------------
    # Step 2: Create transcription
    # ------------------------------------------------------------------

    async def create_transcription(
        self,
        audio_url: str,
        request: TranscriptionRequest | None = None,
        on_status: Callable[[str], None] | None = None,
    ) -> str:
        """Create a transcript job for an uploaded file and return its ID.

        WHY: The job configuration (entity detection, sentiment analysis,
        IAB categories, auto chapters) is fixed at submission time.

        HOW: Serializes a TranscriptionRequest (by default all four
        features enabled) and POSTs it as JSON to /transcript.

        RULES:
        - request defaults to TranscriptionRequest(audio_url)
        - Raises AssemblyAIAPIError on non-2xx responses
        - Raises MalformedResponseError if ``id`` is missing
        - No retry: a failed submission ends the run

        Args:
            audio_url: The URL returned by upload_file().
            request: Optional explicit request body.
            on_status: Optional callback for status updates.

        Returns:
            The transcript ID string.
        """
        client = self._ensure_client()
        if on_status:
            on_status("Starting transcription process...")

        body = (request or TranscriptionRequest(audio_url)).to_dict()
        resp = await client.post(
            "/transcript",
            json=body,
            headers={"content-type": "application/json"},
        )
        transcript_id = _required_field(_json_object(resp), "id")
        logger.debug("Created transcript %s", transcript_id)
        return transcript_id

    # ------------------------------------------------------------------
    # Step 3: Poll until complete
    # ------------------------------------------------------------------

    async def fetch_transcript(self, transcript_id: str) -> TranscriptResult:
        """GET /transcript/{id} once and parse the document."""
        client = self._ensure_client()
        resp = await client.get(
            f"/transcript/{transcript_id}",
            headers={"content-type": "application/json"},
        )
        data = _json_object(resp)
        _required_field(data, "status")
        return TranscriptResult.from_dict(data, default_id=transcript_id)

    async def poll_until_complete(
        self,
        transcript_id: str,
        on_status: Callable[[str], None] | None = None,
    ) -> TranscriptResult:
        """Poll a transcript job until it completes or fails.

        WHY: Transcription with audio intelligence takes from seconds to
        many minutes. The job must be polled until it leaves the
        "queued"/"processing" states.

        HOW: Explicit loop with a fixed sleep of ``poll_interval`` seconds
        between polls. Each response is checked for a terminal state.
        When ``poll_timeout`` is non-zero the loop gives up once that many
        seconds have elapsed.

        RULES:
        - Returns the TranscriptResult as soon as status is "completed"
        - Raises TranscriptionError when status is "error"
        - Any other status (including unknown ones) means keep waiting
        - Raises TranscriptionTimeoutError when the deadline passes
        - Transport and API errors propagate on the first failure

        Args:
            transcript_id: The ID from create_transcription().
            on_status: Optional callback for status updates.

        Returns:
            TranscriptResult with status "completed".
        """
        interval = self._config.poll_interval
        timeout = self._config.poll_timeout
        start_time = time.monotonic()

        while True:
            elapsed = time.monotonic() - start_time
            if timeout and elapsed > timeout:
                raise TranscriptionTimeoutError(
                    f"Transcription {transcript_id} timed out after "
                    f"{elapsed:.0f}s (limit: {timeout:.0f}s)"
                )

            if on_status:
                on_status("Checking status...")
            result = await self.fetch_transcript(transcript_id)
            logger.debug("Transcript %s status: %s", transcript_id, result.status)

            status = result.transcript_status
            if status is not None and status.is_terminal:
                if status is TranscriptStatus.ERROR:
                    raise TranscriptionError(transcript_id, result.error)
                if on_status:
                    on_status("Transcription complete.")
                return result

            if on_status:
                on_status(f"Current status: {result.status}")
            await self._sleep(interval)


# ---------------------------------------------------------------------------
# Response helpers (module-private)
# ---------------------------------------------------------------------------


def _json_object(resp: httpx.Response) -> Dict[str, Any]:
    """Check the status code and decode the body as a JSON object.

    RULES:
    - Non-2xx raises AssemblyAIAPIError with the body text
    - Undecodable bodies and non-object JSON raise MalformedResponseError
    """
    if not resp.is_success:
        raise AssemblyAIAPIError(resp.status_code, resp.text)

    try:
        data = resp.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"Response from {resp.request.url} is not valid JSON: {e}"
        ) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Response from {resp.request.url} is not a JSON object"
        )
    return data


def _required_field(data: Dict[str, Any], name: str) -> str:
    """Return a non-empty string field, raising MalformedResponseError otherwise."""
    value = data.get(name)
    if not value:
        raise MalformedResponseError(f"Response is missing the '{name}' field")
    if not isinstance(value, str):
        raise MalformedResponseError(
            f"Response field '{name}' must be a string, got {type(value).__name__}"
        )
    return value
