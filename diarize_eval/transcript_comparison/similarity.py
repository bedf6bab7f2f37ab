"""
Similarity calculation module.

Utterances are compared as sets of normalized tokens using the Jaccard index.
Repeated words carry no extra weight, and two utterances with no tokens at all
are treated as identical (similarity 1.0).
"""

from dataclasses import dataclass
from typing import AbstractSet, FrozenSet, Optional, Sequence

from .preprocessing import normalize


@dataclass(frozen=True)
class MatchCandidate:
    """The machine utterance chosen for a gold turn."""
    text: str
    similarity: float


def token_set(text: str) -> FrozenSet[str]:
    """Distinct normalized tokens of ``text``."""
    return frozenset(normalize(text))


def set_similarity(tokens_a: AbstractSet[str], tokens_b: AbstractSet[str]) -> float:
    """Jaccard index of two token sets; 1.0 when both are empty."""
    if not tokens_a and not tokens_b:
        return 1.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def jaccard_similarity(text_a: str, text_b: str) -> float:
    """Jaccard overlap of two utterances, in [0, 1]."""
    return set_similarity(token_set(text_a), token_set(text_b))


def best_match(text: str, candidates: Sequence[str]) -> Optional[MatchCandidate]:
    """
    Pick the candidate most similar to ``text``.

    The first candidate with the strictly highest similarity wins, so ties go
    to the earlier utterance and a similarity of 0 is still a match. Returns
    ``None`` only when there are no candidates.
    """
    reference = token_set(text)
    best: Optional[MatchCandidate] = None
    for candidate in candidates:
        score = set_similarity(reference, token_set(candidate))
        if best is None or score > best.similarity:
            best = MatchCandidate(text=candidate, similarity=score)
    return best


def best_similarity(text: str, candidates: Sequence[str]) -> float:
    """Highest similarity between ``text`` and any candidate; 0.0 with no candidates."""
    match = best_match(text, candidates)
    return match.similarity if match else 0.0


def count_captured_words(gold_tokens: Sequence[str], matched_text: str) -> int:
    """Number of distinct gold tokens that also occur in ``matched_text``."""
    matched = token_set(matched_text)
    return sum(1 for token in set(gold_tokens) if token in matched)
