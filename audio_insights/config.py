"""Configuration defaults, .env loading, and the client configuration object.

WHY: The API key, endpoint, polling cadence and output location must be
read in exactly one place. Each pipeline stage receives a ClientConfig
instead of looking at the environment itself.

HOW: python-dotenv loads the .env file on import. Defaults are module-level
constants read with os.getenv. ClientConfig.from_env() builds a frozen
dataclass once at startup; the CLI passes it to the client and writer.

RULES:
- API key is loaded from .env / environment, never hardcoded or logged
- Missing or blank key raises ValueError before any network call
- Numeric settings that fail to parse raise ValueError
- poll_timeout of 0 disables the polling deadline
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the directory the command is run from
load_dotenv()

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

API_KEY_ENV = "ASSEMBLY_AI_KEY"

DEFAULT_BASE_URL = "https://api.assemblyai.com/v2"
DEFAULT_POLL_INTERVAL_S = 5.0
DEFAULT_POLL_TIMEOUT_S = 60 * 60  # 60 minutes
DEFAULT_OUTPUT_FILE = "out.json"

LOG_LEVEL = os.getenv("AUDIO_INSIGHTS_LOG_LEVEL", "WARNING").upper()


def load_api_key() -> str:
    """Load the AssemblyAI API key from the environment.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv(API_KEY_ENV, "").strip()
    if not key:
        raise ValueError(
            "AssemblyAI API key not configured. "
            "Add {} to the .env file or the environment.".format(API_KEY_ENV)
        )
    return key


def _float_setting(name: str, default: float) -> float:
    """Read a non-negative float from the environment."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError("{} must be a number, got {!r}".format(name, raw)) from None
    if value < 0:
        raise ValueError("{} must not be negative, got {!r}".format(name, raw))
    return value


@dataclass(frozen=True)
class ClientConfig:
    """Everything the pipeline needs from the environment, read once.

    Attributes:
        api_key: Value sent verbatim in the ``authorization`` header.
        base_url: API root, e.g. ``https://api.assemblyai.com/v2``.
        poll_interval: Seconds to wait between status polls.
        poll_timeout: Overall polling deadline in seconds; 0 means no limit.
        output_path: Where the completed result document is written.
    """

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL_S
    poll_timeout: float = DEFAULT_POLL_TIMEOUT_S
    output_path: Path = Path(DEFAULT_OUTPUT_FILE)

    def __repr__(self) -> str:
        return (
            "ClientConfig(api_key='***', base_url={!r}, poll_interval={!r}, "
            "poll_timeout={!r}, output_path={!r})".format(
                self.base_url, self.poll_interval, self.poll_timeout, self.output_path
            )
        )

    @classmethod
    def from_env(cls) -> ClientConfig:
        """Build the configuration from the (dotenv-populated) environment.

        RULES:
        - ASSEMBLY_AI_KEY is required (see load_api_key)
        - ASSEMBLYAI_BASE_URL, ASSEMBLYAI_POLL_INTERVAL,
          ASSEMBLYAI_POLL_TIMEOUT and AUDIO_INSIGHTS_OUTPUT are optional
        - Trailing slashes are stripped from the base URL
        """
        return cls(
            api_key=load_api_key(),
            base_url=os.getenv("ASSEMBLYAI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
            poll_interval=_float_setting("ASSEMBLYAI_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_S),
            poll_timeout=_float_setting("ASSEMBLYAI_POLL_TIMEOUT", DEFAULT_POLL_TIMEOUT_S),
            output_path=Path(os.getenv("AUDIO_INSIGHTS_OUTPUT", "").strip() or DEFAULT_OUTPUT_FILE),
        )
