#!/usr/bin/env python3
"""
Speaker relabeling utilities.

This module provides functions for parsing, validating, and applying
speaker label mappings to machine transcript rows.
"""

from typing import List, Dict, Optional

from diarize_eval.lib.logging_config import MappingError
from diarize_eval.transcript_comparison.data_structures import LabelMapping, TranscriptRow


def detect_speakers_in_rows(rows: List[TranscriptRow]) -> List[str]:
    """
    Extract unique speaker labels from transcript rows.

    Args:
        rows: List of TranscriptRow objects

    Returns:
        Speaker labels in order of first appearance
    """
    return list(dict.fromkeys(row.speaker for row in rows if row.speaker))


def parse_speaker_map(speaker_map_arg: Optional[str]) -> Dict[str, str]:
    """
    Parse a speaker mapping argument.

    Args:
        speaker_map_arg: Comma-separated mapping string (e.g., "A=Interviewer,B=Participant")

    Returns:
        Dictionary mapping original speaker labels to new names

    Raises:
        MappingError: If an entry is not of the form ``label=name``
    """
    if not speaker_map_arg:
        return {}

    mapping = {}
    for pair in speaker_map_arg.split(','):
        if not pair.strip():
            continue
        if '=' not in pair:
            raise MappingError(f"Invalid speaker mapping '{pair}', expected format 'ID=Name'", entry=pair)

        speaker_id, name = (part.strip() for part in pair.split('=', 1))
        if not speaker_id or not name:
            raise MappingError(f"Invalid speaker mapping '{pair}', both sides must be non-empty", entry=pair)
        mapping[speaker_id] = name

    return mapping


def invert_mapping(mapping: LabelMapping) -> Dict[str, str]:
    """Turn a gold -> machine mapping into machine -> gold for relabeling."""
    return {machine: gold for gold, machine in mapping.items() if machine}


def apply_speaker_mapping(
    rows: List[TranscriptRow],
    mapping: Dict[str, str]
) -> List[TranscriptRow]:
    """
    Apply a speaker name mapping to transcript rows.

    Speakers missing from the mapping keep their original label.
    """
    if not mapping:
        return list(rows)

    return [
        TranscriptRow(
            timestamp=row.timestamp,
            speaker=mapping.get(row.speaker, row.speaker),
            utterance=row.utterance,
        )
        for row in rows
    ]


def validate_speaker_mapping(
    rows: List[TranscriptRow],
    mapping: Dict[str, str]
) -> List[str]:
    """
    Validate a speaker mapping against transcript rows.

    Returns:
        List of warning messages (empty if no issues)
    """
    warnings = []

    actual_speakers = set(detect_speakers_in_rows(rows))
    mapped_speakers = set(mapping.keys())

    unmapped = actual_speakers - mapped_speakers
    if unmapped:
        warnings.append(f"Speakers not in mapping will keep original names: {', '.join(sorted(unmapped))}")

    extra = mapped_speakers - actual_speakers
    if extra:
        warnings.append(f"Mapping contains speakers not in transcript: {', '.join(sorted(extra))}")

    target_names = list(mapping.values())
    duplicates = sorted(name for name in set(target_names) if target_names.count(name) > 1)
    if duplicates:
        warnings.append(f"Multiple speakers mapped to same name: {', '.join(duplicates)}")

    return warnings
