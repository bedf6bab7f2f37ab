"""Writers for machine transcript files."""

from .csv_writer import (
    sanitize_utterance,
    format_timestamp,
    load_utterances,
    render_transcript_csv,
    write_transcript_csv,
    write_utterances_csv,
)
from .txt_writer import render_speaker_lines, write_speaker_txt

__all__ = [
    "sanitize_utterance",
    "format_timestamp",
    "load_utterances",
    "render_transcript_csv",
    "write_transcript_csv",
    "write_utterances_csv",
    "render_speaker_lines",
    "write_speaker_txt",
]
