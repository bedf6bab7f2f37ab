"""
Core data structures for transcript evaluation.

This module defines the rows read from gold and machine transcript CSV files,
the consolidated gold turns, the result of the speaker-label search, and the
per-turn comparison records written to the evaluation report.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from diarize_eval.lib.environment import env_bool, env_choice, env_int
from diarize_eval.lib.logging_config import LOG_LEVELS

# Gold speaker label -> machine speaker label. May be partial.
LabelMapping = Dict[str, str]

# Machine speaker label -> that speaker's utterance texts, in transcript order.
SpeakerGroups = Dict[str, List[str]]


@dataclass(frozen=True)
class GoldRow:
    """One annotated line of a gold standard transcript."""
    speaker: str
    utterance: str
    code: str = ""  # annotation code, carried but unused by scoring


@dataclass(frozen=True)
class TranscriptRow:
    """One diarized segment of a machine transcript."""
    timestamp: str  # e.g. "[0.16 - 0.62]", display only
    speaker: str
    utterance: str


@dataclass(frozen=True)
class ConsolidatedTurn:
    """A gold speaker's run of adjacent rows merged into one utterance."""
    speaker: str
    utterance: str


@dataclass(frozen=True)
class Utterance:
    """A diarized utterance as returned by a transcription service (times in ms)."""
    start_ms: float
    end_ms: float
    speaker: str
    text: str


@dataclass
class AlignmentResult:
    """Result of the speaker-label search."""
    mapping: LabelMapping
    score: float
    candidates_evaluated: int
    gold_speakers: List[str]
    transcript_speakers: List[str]

    @property
    def speaker_count_mismatch(self) -> bool:
        return len(self.gold_speakers) != len(self.transcript_speakers)

    def mapped_speaker(self, gold_speaker: str) -> str:
        """Machine label mapped to ``gold_speaker``, or ``""`` when unmapped."""
        return self.mapping.get(gold_speaker, "")


@dataclass(frozen=True)
class ComparisonRecord:
    """Per-turn comparison between a gold turn and its best machine utterance."""
    gold_speaker: str
    transcript_speaker: str
    speaker_correct: bool  # a mapping exists and the mapped speaker has utterances
    gold_line: str
    matched_line: str
    words_captured: int
    total_gold_words: int
    overlap_percent: int


@dataclass
class EvaluationResult:
    """Complete result of one evaluation run."""
    records: List[ComparisonRecord]
    alignment: AlignmentResult
    transcript_line_count: int = 0

    @property
    def turn_count(self) -> int:
        return len(self.records)

    @property
    def total_words_captured(self) -> int:
        return sum(record.words_captured for record in self.records)

    @property
    def total_gold_words(self) -> int:
        return sum(record.total_gold_words for record in self.records)

    @property
    def mean_overlap_percent(self) -> float:
        if not self.records:
            return 0.0
        return sum(record.overlap_percent for record in self.records) / len(self.records)


@dataclass
class EvaluationConfig:
    """Configuration for an evaluation run."""
    # Upper bound on distinct machine speakers before the exhaustive search is refused
    max_transcript_speakers: Optional[int] = 9

    # Console output
    show_progress: bool = True
    show_summary: bool = True
    log_level: str = "WARNING"

    # Output options
    csv_line_terminator: str = "\n"

    @classmethod
    def from_env(cls) -> "EvaluationConfig":
        """Build a configuration from ``DIARIZE_EVAL_*`` environment variables (``.env`` aware)."""
        max_speakers = env_int("MAX_SPEAKERS", 9)
        return cls(
            max_transcript_speakers=max_speakers if max_speakers > 0 else None,
            show_progress=env_bool("PROGRESS", True),
            show_summary=env_bool("SUMMARY", True),
            log_level=env_choice("LOG_LEVEL", "WARNING", LOG_LEVELS),
        )
