"""Command-line interface for Audio Insights.

WHY: Users need one command that takes a local audio file and leaves the
AssemblyAI transcript, with entities, sentiment, topics and chapters, in a
JSON file. The CLI wires configuration, the API client and the report
writer together.

HOW: argparse accepts a single positional audio path. Configuration is
read once into a ClientConfig. The async pipeline (upload → submit → poll)
runs under asyncio.run(). Progress goes to stderr, the summary to stdout,
and the raw result document to the configured output file.

RULES:
- Positional argument: input audio file path; no other options
- Missing API key exits 1 before any network call
- An unreadable input file exits 1 before any network call
- Every error exits 1 with "Error: ..." on stderr; nothing is retried
- The output file is written only when the job completes
- Ctrl-C exits 130
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx

from audio_insights.api.client import AssemblyAIClient
from audio_insights.api.models import TranscriptResult
from audio_insights.config import LOG_LEVEL, ClientConfig
from audio_insights.report import format_summary, write_result

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not mix with the summary on stdout so the
    summary can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


async def _transcribe(config: ClientConfig, input_path: Path) -> TranscriptResult:
    """Upload, submit and poll; return the completed transcript."""
    async with AssemblyAIClient(config) as client:
        upload_url = await client.upload_file(input_path, on_status=_status)
        _status("Upload URL: {}".format(upload_url))

        transcript_id = await client.create_transcription(upload_url, on_status=_status)
        _status("Transcript ID: {}".format(transcript_id))

        return await client.poll_until_complete(transcript_id, on_status=_status)


def _run_pipeline(args: argparse.Namespace) -> int:
    """Execute the full pipeline and return the process exit code.

    RULES:
    - Configuration is loaded before anything else
    - All failures are reported the same way: one line on stderr, exit 1
    - The traceback is only logged at DEBUG level
    """
    try:
        config = ClientConfig.from_env()
        result = asyncio.run(_transcribe(config, Path(args.input_file)))

        print(format_summary(result), flush=True)
        saved = write_result(result, config.output_path)
        _status("Saved result to {}".format(saved))
        return 0

    except KeyboardInterrupt:
        _status("\nCancelled by user.")
        return 130
    except httpx.HTTPError as e:
        logger.debug("Transport failure", exc_info=True)
        print("Error: request failed: {}".format(e), file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Pipeline failed", exc_info=True)
        print("Error: {}".format(e), file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="audio-insights",
        description="Transcribe an audio file with AssemblyAI (entity detection, "
                    "sentiment analysis, IAB categories, auto chapters) and save "
                    "the result as JSON.",
    )

    parser.add_argument(
        "input_file",
        help="Path to the audio file to transcribe.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Always leaves via sys.exit with the pipeline's exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(_run_pipeline(args))


if __name__ == "__main__":
    main()
