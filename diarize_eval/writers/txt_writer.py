#!/usr/bin/env python3
from __future__ import annotations
from typing import Sequence
from pathlib import Path

from diarize_eval.lib.logging_config import OutputError
from diarize_eval.transcript_comparison.data_structures import Utterance


def render_speaker_lines(utterances: Sequence[Utterance]) -> str:
    """Render one ``speaker: text`` line per utterance."""
    return "\n".join(f"{u.speaker}: {u.text}" for u in utterances)


def write_speaker_txt(utterances: Sequence[Utterance], path: str | Path) -> None:
    """Write a plain ``speaker: text`` transcript."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_speaker_lines(utterances) + "\n", encoding="utf-8")
    except OSError as e:
        raise OutputError(f"Could not write {path}: {e}", output_path=str(path), cause=e)
