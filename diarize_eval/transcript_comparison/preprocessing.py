"""
Transcript preprocessing module.

This module turns loaded rows into the units that get compared: utterance text
becomes a list of normalized tokens, adjacent gold rows from one speaker become
a single turn, and machine transcript rows are grouped by speaker label.
"""

import re
from typing import Iterable, List

from .data_structures import ConsolidatedTurn, GoldRow, SpeakerGroups, TranscriptRow

# Changing this set changes every downstream overlap score.
PUNCTUATION_PATTERN = re.compile(r"[.,!?;:'\"]")


def normalize(text: str) -> List[str]:
    """
    Tokenize ``text`` into lowercase words.

    Strips ``. , ! ? ; : ' "`` (without inserting spaces, so ``don't`` becomes
    ``dont``), lowercases, and splits on runs of whitespace.
    """
    stripped = PUNCTUATION_PATTERN.sub("", text or "")
    return stripped.lower().split()


def normalize_to_text(tokens: Iterable[str]) -> str:
    """Join normalized tokens back into a single space-separated string."""
    return " ".join(tokens)


def consolidate_gold(gold_rows: List[GoldRow]) -> List[ConsolidatedTurn]:
    """
    Merge adjacent gold rows that share a speaker into one turn.

    Only consecutive rows are merged; a speaker who talks again after someone
    else starts a new turn.
    """
    if not gold_rows:
        return []

    turns: List[ConsolidatedTurn] = []
    current_speaker = gold_rows[0].speaker
    current_parts = [gold_rows[0].utterance]

    for row in gold_rows[1:]:
        if row.speaker == current_speaker:
            current_parts.append(row.utterance)
        else:
            turns.append(ConsolidatedTurn(speaker=current_speaker, utterance=" ".join(current_parts)))
            current_speaker = row.speaker
            current_parts = [row.utterance]

    turns.append(ConsolidatedTurn(speaker=current_speaker, utterance=" ".join(current_parts)))
    return turns


def group_by_speaker(transcript_rows: List[TranscriptRow]) -> SpeakerGroups:
    """Group machine utterances by exact speaker label, in first-seen order."""
    groups: SpeakerGroups = {}
    for row in transcript_rows:
        groups.setdefault(row.speaker, []).append(row.utterance)
    return groups


def distinct_speakers(turns: List[ConsolidatedTurn]) -> List[str]:
    """Distinct turn speakers in order of first appearance."""
    return list(dict.fromkeys(turn.speaker for turn in turns))
