"""AssemblyAI request and response dataclasses.

WHY: The transcript endpoint returns one large JSON document whose audio
intelligence sections (entities, sentiment, IAB categories, chapters) are
only present once the job completes. Typed dataclasses make that shape
explicit and keep field-name typos out of the report code.

HOW: Each dataclass maps 1:1 to an AssemblyAI JSON object. Factory methods
(from_dict) parse raw API dicts. Sections that may be absent parse to an
empty list or None instead of raising. TranscriptResult keeps the decoded
dict in ``raw`` so nothing the API sends is lost on the way to disk.

RULES:
- Times (start/end) are integer milliseconds, as sent by the API
- speaker is None unless speaker labels were requested
- Only ``status`` is required on a transcript document
- TranscriptionRequest.to_dict() is the exact POST /transcript body
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class TranscriptStatus(str, enum.Enum):
    """Lifecycle states of an AssemblyAI transcript job.

    RULES:
    - queued, processing: pending, keep polling
    - completed: terminal success, analysis fields populated
    - error: terminal failure, ``error`` field holds the reason
    """

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (TranscriptStatus.COMPLETED, TranscriptStatus.ERROR)


@dataclass(frozen=True)
class TranscriptionRequest:
    """Body of POST /transcript.

    The four audio intelligence flags are set once here and never changed
    after submission.
    """

    audio_url: str
    iab_categories: bool = True
    entity_detection: bool = True
    sentiment_analysis: bool = True
    auto_chapters: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "audio_url": self.audio_url,
            "iab_categories": self.iab_categories,
            "entity_detection": self.entity_detection,
            "sentiment_analysis": self.sentiment_analysis,
            "auto_chapters": self.auto_chapters,
        }


@dataclass
class Word:
    """One recognized word with millisecond timing and confidence."""

    text: str
    start: int
    end: int
    confidence: float
    speaker: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Word:
        return cls(
            text=data.get("text", ""),
            start=data.get("start", 0),
            end=data.get("end", 0),
            confidence=data.get("confidence", 0.0),
            speaker=data.get("speaker"),
        )


@dataclass
class Utterance:
    """A speaker turn. Only present when speaker labels are enabled."""

    text: str
    start: int
    end: int
    confidence: float
    speaker: Optional[str] = None
    words: List[Word] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Utterance:
        return cls(
            text=data.get("text", ""),
            start=data.get("start", 0),
            end=data.get("end", 0),
            confidence=data.get("confidence", 0.0),
            speaker=data.get("speaker"),
            words=[Word.from_dict(w) for w in data.get("words") or []],
        )


@dataclass
class SentimentResult:
    """Sentiment of one sentence.

    RULES:
    - sentiment is "POSITIVE", "NEUTRAL" or "NEGATIVE"
    - speaker is None unless speaker labels were requested
    """

    text: str
    start: int
    end: int
    sentiment: str
    confidence: float
    speaker: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> SentimentResult:
        return cls(
            text=data.get("text", ""),
            start=data.get("start", 0),
            end=data.get("end", 0),
            sentiment=data.get("sentiment", ""),
            confidence=data.get("confidence", 0.0),
            speaker=data.get("speaker"),
        )


@dataclass
class Entity:
    """A named entity and the span of audio it was spoken in."""

    entity_type: str
    text: str
    start: int
    end: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Entity:
        return cls(
            entity_type=data.get("entity_type", ""),
            text=data.get("text", ""),
            start=data.get("start", 0),
            end=data.get("end", 0),
        )


@dataclass
class Timestamp:
    start: int
    end: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Timestamp:
        return cls(start=data.get("start", 0), end=data.get("end", 0))


@dataclass
class IabLabel:
    """One IAB taxonomy label, e.g. ``Technology&Computing>Robotics``."""

    relevance: float
    label: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IabLabel:
        return cls(relevance=data.get("relevance", 0.0), label=data.get("label", ""))


@dataclass
class IabResult:
    """Topic labels detected for one stretch of the transcript."""

    text: str
    labels: List[IabLabel]
    timestamp: Timestamp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IabResult:
        return cls(
            text=data.get("text", ""),
            labels=[IabLabel.from_dict(label) for label in data.get("labels") or []],
            timestamp=Timestamp.from_dict(data.get("timestamp") or {}),
        )


@dataclass
class IabCategoriesResult:
    """Topic detection output.

    WHY: The per-segment results are detailed but noisy; ``summary`` maps
    each label to its relevance for the whole file and is what the report
    shows.

    RULES:
    - status is "success" or "unavailable"
    - summary values are relevance scores in 0.0–1.0
    """

    status: str
    results: List[IabResult] = field(default_factory=list)
    summary: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> IabCategoriesResult:
        return cls(
            status=data.get("status", ""),
            results=[IabResult.from_dict(r) for r in data.get("results") or []],
            summary=dict(data.get("summary") or {}),
        )


@dataclass
class Chapter:
    """One auto-generated chapter (requested with ``auto_chapters``)."""

    gist: str
    headline: str
    summary: str
    start: int
    end: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Chapter:
        return cls(
            gist=data.get("gist", ""),
            headline=data.get("headline", ""),
            summary=data.get("summary", ""),
            start=data.get("start", 0),
            end=data.get("end", 0),
        )


@dataclass
class TranscriptResult:
    """A transcript document from GET /transcript/{id}.

    WHY: The same endpoint answers every poll. While the job is pending
    only ``id`` and ``status`` are meaningful; once completed the document
    carries the text, word timings and every requested analysis section.

    HOW: from_dict() parses known fields and keeps the full decoded dict in
    ``raw``. The result writer persists ``raw``, so the file on disk is
    always a superset of what is modelled here.

    RULES:
    - status is required (KeyError if missing); id falls back to the
      transcript ID being polled, since pending polls may omit it
    - status is the raw string; use ``transcript_status`` for the enum,
      which is None for values the API may add in the future
    - analysis fields are empty/None until status is "completed"
    - error is only set when status is "error"
    """

    id: Optional[str]
    status: str
    text: Optional[str] = None
    audio_url: Optional[str] = None
    acoustic_model: Optional[str] = None
    language_model: Optional[str] = None
    audio_duration: Optional[float] = None
    confidence: Optional[float] = None
    punctuate: Optional[bool] = None
    format_text: Optional[bool] = None
    dual_channel: Optional[bool] = None
    webhook_url: Optional[str] = None
    webhook_status_code: Optional[int] = None
    error: Optional[str] = None
    words: List[Word] = field(default_factory=list)
    utterances: Optional[List[Utterance]] = None
    sentiment_analysis_results: List[SentimentResult] = field(default_factory=list)
    entities: List[Entity] = field(default_factory=list)
    iab_categories_result: Optional[IabCategoriesResult] = None
    chapters: List[Chapter] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def transcript_status(self) -> Optional[TranscriptStatus]:
        try:
            return TranscriptStatus(self.status)
        except ValueError:
            return None

    @property
    def is_completed(self) -> bool:
        return self.status == TranscriptStatus.COMPLETED.value

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], default_id: Optional[str] = None
    ) -> TranscriptResult:
        """Parse a transcript document from a raw API response dict.

        RULES:
        - status must be present
        - a missing id becomes default_id
        - null and absent list sections both become []
        - utterances stays None when absent (speaker labels off)
        """
        utterances = data.get("utterances")
        iab = data.get("iab_categories_result")
        return cls(
            id=data.get("id") or default_id,
            status=data["status"],
            text=data.get("text"),
            audio_url=data.get("audio_url"),
            acoustic_model=data.get("acoustic_model"),
            language_model=data.get("language_model"),
            audio_duration=data.get("audio_duration"),
            confidence=data.get("confidence"),
            punctuate=data.get("punctuate"),
            format_text=data.get("format_text"),
            dual_channel=data.get("dual_channel"),
            webhook_url=data.get("webhook_url"),
            webhook_status_code=data.get("webhook_status_code"),
            error=data.get("error"),
            words=[Word.from_dict(w) for w in data.get("words") or []],
            utterances=(
                [Utterance.from_dict(u) for u in utterances]
                if utterances is not None
                else None
            ),
            sentiment_analysis_results=[
                SentimentResult.from_dict(s)
                for s in data.get("sentiment_analysis_results") or []
            ],
            entities=[Entity.from_dict(e) for e in data.get("entities") or []],
            iab_categories_result=(
                IabCategoriesResult.from_dict(iab) if iab else None
            ),
            chapters=[Chapter.from_dict(c) for c in data.get("chapters") or []],
            raw=data,
        )
