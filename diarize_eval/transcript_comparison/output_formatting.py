"""
Output formatting module.

This module builds the per-turn comparison records from a winning speaker
mapping and renders evaluation results as CSV (the report format), JSON, or a
rich console summary.
"""

import json
import logging
import math
from dataclasses import asdict
from typing import List, Optional, Sequence

from rich.console import Console
from rich.table import Table

from .alignment import format_mapping
from .csv_parser import render_csv_rows
from .data_structures import (
    AlignmentResult, ComparisonRecord, ConsolidatedTurn, EvaluationConfig,
    EvaluationResult, SpeakerGroups
)
from .preprocessing import normalize
from .similarity import best_match, count_captured_words

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    ("gold_speaker", "Gold Speaker"),
    ("transcript_speaker", "Transcript Speaker"),
    ("speaker_correct", "Speaker Correct?"),
    ("gold_line", "Gold Line"),
    ("matched_line", "Matched Transcript Line"),
    ("words_captured", "Words Captured"),
    ("total_gold_words", "Total Gold Words"),
    ("overlap_percent", "Overlap %"),
]


def overlap_percent(words_captured: int, total_gold_words: int) -> int:
    """
    Percentage of gold words captured, rounded half up into [0, 100].

    Unlike a plain round(), any captured word reports at least 1% (1 of 201
    words gives 1, not 0), so 0% always means nothing was captured.
    """
    if total_gold_words <= 0 or words_captured <= 0:
        return 0
    percent = math.floor(100 * words_captured / total_gold_words + 0.5)
    return max(1, min(100, percent))


def build_comparison_record(turn: ConsolidatedTurn,
                            mapped_speaker: str,
                            candidates: Sequence[str]) -> ComparisonRecord:
    """Compare one gold turn against the utterances of its mapped machine speaker."""
    gold_tokens = normalize(turn.utterance)
    match = best_match(turn.utterance, candidates)

    if match is None:
        return ComparisonRecord(
            gold_speaker=turn.speaker,
            transcript_speaker=mapped_speaker,
            speaker_correct=False,
            gold_line=turn.utterance,
            matched_line="",
            words_captured=0,
            total_gold_words=len(gold_tokens),
            overlap_percent=0,
        )

    captured = count_captured_words(gold_tokens, match.text)
    return ComparisonRecord(
        gold_speaker=turn.speaker,
        transcript_speaker=mapped_speaker,
        speaker_correct=bool(mapped_speaker.strip()),
        gold_line=turn.utterance,
        matched_line=match.text,
        words_captured=captured,
        total_gold_words=len(gold_tokens),
        overlap_percent=overlap_percent(captured, len(gold_tokens)),
    )


def build_comparison_records(turns: Sequence[ConsolidatedTurn],
                             speaker_groups: SpeakerGroups,
                             alignment: AlignmentResult) -> List[ComparisonRecord]:
    """One record per gold turn, in turn order, under the winning mapping."""
    records = []
    for turn in turns:
        mapped_speaker = alignment.mapped_speaker(turn.speaker)
        if not mapped_speaker:
            logger.debug("Gold speaker %s has no mapped transcript speaker", turn.speaker)
        candidates = speaker_groups.get(mapped_speaker, []) if mapped_speaker else []
        records.append(build_comparison_record(turn, mapped_speaker, candidates))
    return records


def _cell(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ComparisonResultFormatter:
    """Formats evaluation results for output in various formats."""

    def __init__(self, config: Optional[EvaluationConfig] = None):
        """Initialize the formatter with configuration."""
        self.config = config or EvaluationConfig()

    def format_results(self, result: EvaluationResult, output_format: str = "csv") -> str:
        """
        Format evaluation results in the specified format.

        Args:
            result: Result of an evaluation run
            output_format: Output format ("csv", "json")

        Returns:
            Formatted output as a string
        """
        if output_format.lower() == "csv":
            return self.records_to_csv(result.records)
        elif output_format.lower() == "json":
            return self._format_json(result)
        else:
            raise ValueError(f"Unsupported output format: {output_format}")

    def records_to_csv(self, records: Sequence[ComparisonRecord]) -> str:
        """Serialize records to CSV with the fixed report header."""
        rows = [[header for _, header in REPORT_COLUMNS]]
        rows.extend([_cell(getattr(record, key)) for key, _ in REPORT_COLUMNS] for record in records)
        return render_csv_rows(rows, lineterminator=self.config.csv_line_terminator)

    def _format_json(self, result: EvaluationResult) -> str:
        """Format evaluation results as JSON."""
        json_data = {
            "alignment": {
                "mapping": result.alignment.mapping,
                "score": result.alignment.score,
                "candidates_evaluated": result.alignment.candidates_evaluated,
                "gold_speakers": result.alignment.gold_speakers,
                "transcript_speakers": result.alignment.transcript_speakers,
                "speaker_count_mismatch": result.alignment.speaker_count_mismatch,
            },
            "summary": {
                "turn_count": result.turn_count,
                "transcript_line_count": result.transcript_line_count,
                "total_words_captured": result.total_words_captured,
                "total_gold_words": result.total_gold_words,
                "mean_overlap_percent": result.mean_overlap_percent,
            },
            "records": [asdict(record) for record in result.records],
        }
        return json.dumps(json_data, indent=2)

    def build_summary_table(self, result: EvaluationResult, max_line_width: int = 60) -> Table:
        """Per-turn overview of an evaluation run as a rich table."""
        table = Table(
            title=f"Speaker mapping: {format_mapping(result.alignment.mapping)}",
            caption=(
                f"{result.turn_count} turn(s), "
                f"{result.total_words_captured}/{result.total_gold_words} gold words captured, "
                f"mean overlap {result.mean_overlap_percent:.1f}%"
            ),
        )
        table.add_column("Gold", style="cyan", no_wrap=True)
        table.add_column("Machine", style="magenta", no_wrap=True)
        table.add_column("Gold Line")
        table.add_column("Matched Line")
        table.add_column("Overlap %", justify="right")

        for record in result.records:
            if record.overlap_percent >= 75:
                style = "green"
            elif record.overlap_percent >= 40:
                style = "yellow"
            else:
                style = "red"
            table.add_row(
                record.gold_speaker,
                record.transcript_speaker or "-",
                _truncate(record.gold_line, max_line_width),
                _truncate(record.matched_line, max_line_width),
                f"[{style}]{record.overlap_percent}[/{style}]",
            )
        return table

    def print_summary(self, result: EvaluationResult, console: Optional[Console] = None) -> None:
        """Print the summary table to ``console``."""
        console = console or Console(stderr=True)
        if result.alignment.speaker_count_mismatch:
            console.print(
                f"[yellow]Warning:[/yellow] {len(result.alignment.gold_speakers)} gold speaker(s) vs "
                f"{len(result.alignment.transcript_speakers)} transcript speaker(s); mapping is partial."
            )
        console.print(self.build_summary_table(result))


def _truncate(text: str, width: int) -> str:
    if len(text) <= width:
        return text
    return text[: max(0, width - 3)] + "..."
