"""Shared test fixtures for the audio_insights test suite.

WHY: Client, report and CLI tests all need the same fake AssemblyAI
service and the same completed transcript document. Centralizing them here
keeps every test module working against one authoritative sample.

HOW: FakeAssemblyAI is an httpx.MockTransport handler that answers the
three endpoints, records every request, and replays a scripted list of
poll responses. RecordingSleep stands in for asyncio.sleep so polling
tests never wait.

RULES:
- No test touches the real network (all traffic goes through MockTransport)
- Environment variables the config reads are cleared before each test
- The completed document mirrors the shape of a real AssemblyAI response
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import httpx
import pytest

from audio_insights.config import ClientConfig

BASE_URL = "https://api.example.test/v2"
API_KEY = "test-key-123"
UPLOAD_URL = "https://cdn.example/u1"
TRANSCRIPT_ID = "job_123"

_CONFIG_ENV_VARS = (
    "ASSEMBLY_AI_KEY",
    "ASSEMBLYAI_BASE_URL",
    "ASSEMBLYAI_POLL_INTERVAL",
    "ASSEMBLYAI_POLL_TIMEOUT",
    "AUDIO_INSIGHTS_OUTPUT",
)

COMPLETED_DOCUMENT: Dict[str, Any] = {
    "id": TRANSCRIPT_ID,
    "status": "completed",
    "acoustic_model": "assemblyai_default",
    "language_model": "assemblyai_default",
    "audio_url": UPLOAD_URL,
    "audio_duration": 10.0,
    "confidence": 0.955,
    "punctuate": True,
    "format_text": True,
    "dual_channel": None,
    "webhook_url": None,
    "webhook_status_code": None,
    "utterances": None,
    "text": "hello world",
    "words": [
        {"text": "hello", "start": 250, "end": 650, "confidence": 0.97, "speaker": None},
        {"text": "world", "start": 730, "end": 1100, "confidence": 0.94, "speaker": None},
    ],
    "sentiment_analysis_results": [
        {
            "text": "hello world",
            "start": 250,
            "end": 1100,
            "sentiment": "POSITIVE",
            "confidence": 0.81,
            "speaker": None,
        }
    ],
    "entities": [
        {"entity_type": "location", "text": "world", "start": 730, "end": 1100},
    ],
    "iab_categories_result": {
        "status": "success",
        "results": [
            {
                "text": "hello world",
                "labels": [
                    {"relevance": 0.91, "label": "Travel>TravelLocations"},
                    {"relevance": 0.12, "label": "Hobbies&Interests"},
                ],
                "timestamp": {"start": 250, "end": 1100},
            }
        ],
        "summary": {"Travel>TravelLocations": 0.91, "Hobbies&Interests": 0.12},
    },
    "chapters": [
        {
            "gist": "Greeting",
            "headline": "The speaker greets the world.",
            "summary": "A short greeting.",
            "start": 250,
            "end": 1100,
        }
    ],
    "error": None,
}

PollStep = Union[Dict[str, Any], Exception]


class FakeAssemblyAI:
    """In-process stand-in for the AssemblyAI v2 API.

    ``polls`` is consumed one entry per GET; an Exception entry is raised
    from the transport, simulating a network failure on that poll.
    """

    def __init__(
        self,
        polls: Optional[List[PollStep]] = None,
        upload_url: str = UPLOAD_URL,
        transcript_id: str = TRANSCRIPT_ID,
    ) -> None:
        self.polls = list(polls or [])
        self.upload_url = upload_url
        self.transcript_id = transcript_id
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/v2/upload":
            return httpx.Response(200, json={"upload_url": self.upload_url})

        if request.method == "POST" and path == "/v2/transcript":
            return httpx.Response(200, json={"id": self.transcript_id, "status": "queued"})

        if request.method == "GET" and path == "/v2/transcript/{}".format(self.transcript_id):
            if not self.polls:
                raise AssertionError("Polled more times than scripted")
            step = self.polls.pop(0)
            if isinstance(step, Exception):
                raise step
            return httpx.Response(200, json=step)

        return httpx.Response(404, json={"error": "Not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]


class RecordingSleep:
    """Async replacement for asyncio.sleep that records requested delays."""

    def __init__(self, on_call: Optional[Callable[[], None]] = None) -> None:
        self.calls: List[float] = []
        self._on_call = on_call

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._on_call:
            self._on_call()


def pending(status: str = "processing") -> Dict[str, Any]:
    """A poll response for a job that has not finished yet.

    Carries only ``status``, as the API may send for pending jobs.
    """
    return {"status": status}


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep a developer's .env or shell settings out of the tests."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def completed_document() -> Dict[str, Any]:
    return copy.deepcopy(COMPLETED_DOCUMENT)


@pytest.fixture
def config(tmp_path: Path) -> ClientConfig:
    return ClientConfig(
        api_key=API_KEY,
        base_url=BASE_URL,
        poll_interval=5.0,
        poll_timeout=0,
        output_path=tmp_path / "out.json",
    )


@pytest.fixture
def audio_file(tmp_path: Path) -> Path:
    """A small binary file standing in for sample.wav."""
    path = tmp_path / "sample.wav"
    path.write_bytes(b"RIFF\x24\x00\x00\x00WAVEfmt \x00\xff\x10binary-audio")
    return path
