#!/usr/bin/env python3
from __future__ import annotations
import json
import re
from typing import List, Sequence
from pathlib import Path

from diarize_eval.lib.logging_config import FormatError, OutputError
from diarize_eval.transcript_comparison.csv_parser import render_csv_rows
from diarize_eval.transcript_comparison.data_structures import TranscriptRow, Utterance

TRANSCRIPT_HEADER = ["Timestamp", "Speaker", "Utterance"]

_NEWLINES = re.compile(r"\r?\n|\r")


def sanitize_utterance(text: str | None) -> str:
    """Make utterance text safe to write bare: newlines become spaces, quotes and commas are removed."""
    text = _NEWLINES.sub(" ", text or "")
    return text.replace('"', "").replace(",", "")


def format_timestamp(start_ms: float, end_ms: float) -> str:
    """Format a millisecond span as ``[start - end]`` in seconds with 2 decimals."""
    return f"[{start_ms / 1000:.2f} - {end_ms / 1000:.2f}]"


def load_utterances(path: str | Path) -> List[Utterance]:
    """
    Load diarized utterances from a saved transcription JSON payload.

    The payload must be an object with an ``utterances`` list whose entries
    carry ``start``/``end`` (milliseconds), ``speaker`` and ``text``.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except FileNotFoundError as e:
        raise FormatError(f"Transcript JSON not found: {path}", path=str(path), cause=e)
    except (OSError, ValueError) as e:
        raise FormatError(f"Error reading transcript JSON '{path}': {e}", path=str(path), cause=e)
    return utterances_from_payload(payload, source=str(path))


def utterances_from_payload(payload, source: str = "<payload>") -> List[Utterance]:
    entries = payload.get("utterances") if isinstance(payload, dict) else None
    if not isinstance(entries, list):
        raise FormatError(f"{source}: transcript does not contain utterances", path=source)

    utterances: List[Utterance] = []
    for index, entry in enumerate(entries):
        try:
            utterances.append(Utterance(
                start_ms=float(entry.get("start", 0)),
                end_ms=float(entry.get("end", 0)),
                speaker=str(entry.get("speaker") or ""),
                text=str(entry.get("text") or ""),
            ))
        except (AttributeError, TypeError, ValueError) as e:
            raise FormatError(f"{source}: utterance {index} is malformed: {e}", path=source, cause=e)
    return utterances


def render_transcript_csv(rows: Sequence[TranscriptRow]) -> str:
    """
    Render transcript rows in the machine transcript CSV format.

    Timestamp and speaker are quoted as needed; the utterance is sanitized so
    it is always written bare. There is no newline after the last row.
    """
    lines = [TRANSCRIPT_HEADER]
    lines.extend([row.timestamp, row.speaker, sanitize_utterance(row.utterance)] for row in rows)
    return render_csv_rows(lines, lineterminator="\n")[:-1]


def utterances_to_rows(utterances: Sequence[Utterance]) -> List[TranscriptRow]:
    return [
        TranscriptRow(
            timestamp=format_timestamp(u.start_ms, u.end_ms),
            speaker=u.speaker,
            utterance=u.text,
        )
        for u in utterances
    ]


def write_transcript_csv(rows: Sequence[TranscriptRow], path: str | Path) -> None:
    """Write transcript rows to ``path`` (no trailing newline)."""
    _write_text(render_transcript_csv(rows), path)


def write_utterances_csv(utterances: Sequence[Utterance], path: str | Path) -> None:
    """Write diarized utterances as a machine transcript CSV."""
    write_transcript_csv(utterances_to_rows(utterances), path)


def _write_text(content: str, path: str | Path) -> None:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except OSError as e:
        raise OutputError(f"Could not write {path}: {e}", output_path=str(path), cause=e)
