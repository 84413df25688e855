"""Console summary and JSON persistence for a completed transcript.

WHY: A finished job produces two things for the user: a readable summary in
the terminal and the complete result document on disk for later tooling.

HOW: format_summary() renders the parsed TranscriptResult section by
section (text, words, sentiment, IAB categories, entities, chapters).
serialize_result() dumps the raw API document deterministically, and
write_result() saves it, replacing any previous file.

RULES:
- The persisted document is ``result.raw``, never the dataclass view
- Serialization keeps the API's key order, so the same remote document
  always produces byte-identical output
- Only completed results are written, and atomically (temp file + rename)
- Absent sections print "(none)" rather than being skipped
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import List

from audio_insights.api.models import TranscriptResult

_NONE = "  (none)"


def _ms(value: int) -> str:
    """Format milliseconds as ``m:ss.mmm``."""
    minutes, rest = divmod(max(value, 0), 60_000)
    seconds, millis = divmod(rest, 1000)
    return "{}:{:02d}.{:03d}".format(minutes, seconds, millis)


def _span(start: int, end: int) -> str:
    return "[{} - {}]".format(_ms(start), _ms(end))


def _words_section(result: TranscriptResult) -> List[str]:
    if not result.words:
        return [_NONE]
    return [
        "  {} {} ({:.2f})".format(_span(w.start, w.end), w.text, w.confidence)
        for w in result.words
    ]


def _sentiment_section(result: TranscriptResult) -> List[str]:
    if not result.sentiment_analysis_results:
        return [_NONE]
    lines = []
    for s in result.sentiment_analysis_results:
        speaker = "Speaker {}: ".format(s.speaker) if s.speaker else ""
        lines.append(
            "  {} {} ({:.2f}) {}{}".format(
                _span(s.start, s.end), s.sentiment, s.confidence, speaker, s.text
            )
        )
    return lines


def _categories_section(result: TranscriptResult) -> List[str]:
    iab = result.iab_categories_result
    if iab is None or not iab.summary:
        return [_NONE]
    ranked = sorted(iab.summary.items(), key=lambda item: item[1], reverse=True)
    return ["  {:.3f}  {}".format(relevance, label) for label, relevance in ranked]


def _entities_section(result: TranscriptResult) -> List[str]:
    if not result.entities:
        return [_NONE]
    return [
        "  {} {}: {}".format(_span(e.start, e.end), e.entity_type, e.text)
        for e in result.entities
    ]


def _chapters_section(result: TranscriptResult) -> List[str]:
    if not result.chapters:
        return [_NONE]
    lines = []
    for c in result.chapters:
        lines.append("  {} {}".format(_span(c.start, c.end), c.headline))
        if c.summary:
            lines.append("    {}".format(c.summary))
    return lines


def format_summary(result: TranscriptResult) -> str:
    """Render a completed transcript as a human-readable text block.

    Sections, in order: Text, Words, Sentiment analysis, IAB categories
    (whole-file relevance, highest first), Entities, Chapters.
    """
    lines: List[str] = ["Text:", "  {}".format(result.text or "")]
    sections = (
        ("Words", _words_section),
        ("Sentiment analysis", _sentiment_section),
        ("IAB categories", _categories_section),
        ("Entities", _entities_section),
        ("Chapters", _chapters_section),
    )
    for title, render in sections:
        lines.append("")
        lines.append("{}:".format(title))
        lines.extend(render(result))
    return "\n".join(lines)


def serialize_result(result: TranscriptResult) -> str:
    """Dump the raw result document as pretty-printed UTF-8 JSON."""
    return json.dumps(result.raw, indent=2, ensure_ascii=False) + "\n"


def write_result(result: TranscriptResult, path: Path) -> Path:
    """Write the full result document to ``path``, overwriting it.

    HOW: Writes a temp file next to ``path`` and renames it into place, so
    a failed write leaves any previous file untouched.

    RULES:
    - Raises ValueError for results that are not completed
    - Raises OSError if the file cannot be written; the temp file is removed

    Returns:
        The path written.
    """
    if not result.is_completed:
        raise ValueError(
            "Refusing to write transcript {} with status '{}'".format(
                result.id or "(unknown)", result.status
            )
        )
    path = Path(path)
    content = serialize_result(result)
    fd, tmp_name = tempfile.mkstemp(
        dir=str(path.parent), prefix=".{}.".format(path.name), suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
