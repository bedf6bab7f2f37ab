"""
Transcript Comparison Module

This module scores a diarized machine transcript against a gold standard
transcript: it finds the speaker-label mapping that best explains the gold
turns and reports, per turn, how much of the gold text the mapped speaker
actually said.
"""

from .data_structures import (
    GoldRow,
    TranscriptRow,
    ConsolidatedTurn,
    Utterance,
    ComparisonRecord,
    AlignmentResult,
    EvaluationResult,
    EvaluationConfig
)
from .engine import TranscriptEvaluationEngine
from .csv_parser import CSVTranscriptParser, load_gold_csv, load_transcript_csv
from .preprocessing import normalize, consolidate_gold, group_by_speaker
from .similarity import jaccard_similarity
from .alignment import SpeakerLabelAligner, find_best_speaker_mapping
from .output_formatting import ComparisonResultFormatter, build_comparison_records

__all__ = [
    "GoldRow",
    "TranscriptRow",
    "ConsolidatedTurn",
    "Utterance",
    "ComparisonRecord",
    "AlignmentResult",
    "EvaluationResult",
    "EvaluationConfig",
    "TranscriptEvaluationEngine",
    "CSVTranscriptParser",
    "load_gold_csv",
    "load_transcript_csv",
    "normalize",
    "consolidate_gold",
    "group_by_speaker",
    "jaccard_similarity",
    "SpeakerLabelAligner",
    "find_best_speaker_mapping",
    "ComparisonResultFormatter",
    "build_comparison_records"
]
