"""
Speaker-label alignment module.

Gold and machine transcripts label speakers independently ("1", "2" versus
"A", "B"). This module finds the gold -> machine label mapping that maximizes
the summed best-utterance similarity over all gold turns by scoring every
permutation of the machine labels.

The search is exhaustive, O(|M|! * turns), and is only meant for the handful
of speakers found in a recorded conversation. A bipartite assignment solver is
the scalable formulation of the same problem.
"""

import logging
import math
from itertools import permutations
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from .data_structures import (
    AlignmentResult, ConsolidatedTurn, EvaluationConfig, LabelMapping, SpeakerGroups
)
from .preprocessing import distinct_speakers
from .similarity import best_similarity

logger = logging.getLogger(__name__)

# Per-turn best similarity against each machine speaker, indexed [turn][speaker].
SimilarityTable = List[Dict[str, float]]


def candidate_mappings(gold_speakers: Sequence[str],
                       transcript_speakers: Sequence[str]) -> Iterator[LabelMapping]:
    """
    Yield one candidate mapping per permutation of ``transcript_speakers``.

    Each permutation is zipped positionally against ``gold_speakers``; when the
    counts differ the shorter side decides how many labels get mapped. An empty
    speaker list still yields a single (empty) mapping.
    """
    for perm in permutations(transcript_speakers):
        yield dict(zip(gold_speakers, perm))


def build_similarity_table(turns: Sequence[ConsolidatedTurn],
                           speaker_groups: SpeakerGroups) -> SimilarityTable:
    """Best similarity of every turn against every machine speaker's utterances."""
    return [
        {speaker: best_similarity(turn.utterance, utterances)
         for speaker, utterances in speaker_groups.items()}
        for turn in turns
    ]


def global_similarity(turns: Sequence[ConsolidatedTurn],
                      mapping: LabelMapping,
                      table: SimilarityTable) -> float:
    """Sum over turns of the best similarity under ``mapping``; unmapped turns add 0."""
    return sum(
        table[index].get(mapping.get(turn.speaker, ""), 0.0)
        for index, turn in enumerate(turns)
    )


def score_mapping(turns: Sequence[ConsolidatedTurn],
                  mapping: LabelMapping,
                  speaker_groups: SpeakerGroups) -> float:
    """Global similarity of a single mapping, computed from scratch."""
    return global_similarity(turns, mapping, build_similarity_table(turns, speaker_groups))


class SpeakerLabelAligner:
    """Finds the best gold -> machine speaker label mapping."""

    def __init__(self, config: Optional[EvaluationConfig] = None):
        """Initialize the aligner with configuration."""
        self.config = config or EvaluationConfig()

    def search_space_size(self, speaker_groups: SpeakerGroups) -> int:
        """Number of candidate mappings that will be scored."""
        return math.factorial(len(speaker_groups))

    def align(self,
              turns: Sequence[ConsolidatedTurn],
              speaker_groups: SpeakerGroups,
              on_candidate: Optional[Callable[[], None]] = None) -> AlignmentResult:
        """
        Search all label permutations and return the highest-scoring mapping.

        Args:
            turns: Consolidated gold turns
            speaker_groups: Machine utterances grouped by speaker label
            on_candidate: Called once per scored candidate (progress reporting)

        Returns:
            AlignmentResult with the winning mapping; on equal scores the
            first candidate in permutation order is kept.
        """
        gold_speakers = distinct_speakers(list(turns))
        transcript_speakers = list(speaker_groups.keys())

        if len(gold_speakers) != len(transcript_speakers):
            logger.warning(
                "Speaker count mismatch: %d gold speaker(s) vs %d transcript speaker(s); "
                "using partial positional mapping",
                len(gold_speakers), len(transcript_speakers),
                extra={
                    "gold_speaker_count": len(gold_speakers),
                    "transcript_speaker_count": len(transcript_speakers),
                },
            )

        table = build_similarity_table(turns, speaker_groups)

        def scored() -> Iterator[Tuple[float, LabelMapping]]:
            for mapping in candidate_mappings(gold_speakers, transcript_speakers):
                if on_candidate is not None:
                    on_candidate()
                yield global_similarity(turns, mapping, table), mapping

        # max() keeps the first of several equal maxima
        best_score, best_mapping = max(scored(), key=lambda candidate: candidate[0])

        result = AlignmentResult(
            mapping=best_mapping,
            score=best_score,
            candidates_evaluated=self.search_space_size(speaker_groups),
            gold_speakers=gold_speakers,
            transcript_speakers=transcript_speakers,
        )
        logger.info(
            "Best speaker mapping: %s (score %.4f over %d candidate(s))",
            format_mapping(best_mapping), best_score, result.candidates_evaluated,
        )
        return result


def find_best_speaker_mapping(turns: Sequence[ConsolidatedTurn],
                              speaker_groups: SpeakerGroups) -> LabelMapping:
    """Convenience wrapper returning only the winning mapping."""
    return SpeakerLabelAligner().align(turns, speaker_groups).mapping


def format_mapping(mapping: LabelMapping) -> str:
    """Render a mapping as ``1->A, 2->B``."""
    if not mapping:
        return "(none)"
    return ", ".join(f"{gold}->{machine}" for gold, machine in mapping.items())
