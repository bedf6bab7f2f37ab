"""
Transcript evaluation engine.

This module provides the TranscriptEvaluationEngine class that runs one
evaluation end to end: load the gold and machine transcripts, consolidate and
group them, search for the best speaker-label mapping, build the per-turn
comparison records and write the report.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from diarize_eval.lib.logging_config import OutputError, SpeakerLimitError
from diarize_eval.lib.progress import ProgressTracker
from .alignment import SpeakerLabelAligner
from .csv_parser import CSVTranscriptParser
from .data_structures import EvaluationConfig, EvaluationResult, GoldRow, SpeakerGroups, TranscriptRow
from .output_formatting import ComparisonResultFormatter, build_comparison_records
from .preprocessing import consolidate_gold, group_by_speaker

logger = logging.getLogger(__name__)


class TranscriptEvaluationEngine:
    """
    Main engine for transcript evaluation that orchestrates all components.

    Each call is an independent run; the engine holds configuration and
    collaborators only, never data from a previous evaluation.
    """

    def __init__(self, config: Optional[EvaluationConfig] = None,
                 progress: Optional[ProgressTracker] = None):
        """
        Initialize the transcript evaluation engine.

        Args:
            config: Configuration for evaluation parameters
            progress: Optional progress display for the stages of a run
        """
        self.config = config or EvaluationConfig()
        self.progress = progress

        self.csv_parser = CSVTranscriptParser(self.config)
        self.aligner = SpeakerLabelAligner(self.config)
        self.result_formatter = ComparisonResultFormatter(self.config)

    def evaluate(self, gold_rows: List[GoldRow], transcript_rows: List[TranscriptRow]) -> EvaluationResult:
        """
        Evaluate already-loaded rows.

        Args:
            gold_rows: Gold standard rows in file order
            transcript_rows: Machine transcript rows in file order

        Returns:
            EvaluationResult with one record per consolidated gold turn
        """
        turns = consolidate_gold(gold_rows)
        speaker_groups = group_by_speaker(transcript_rows)
        logger.info(
            "Consolidated %d gold row(s) into %d turn(s); %d transcript line(s) from %d speaker(s)",
            len(gold_rows), len(turns), len(transcript_rows), len(speaker_groups),
        )

        self._check_speaker_limit(speaker_groups)

        if self.progress is not None:
            total = self.aligner.search_space_size(speaker_groups)
            with self.progress.task_context("Searching speaker mappings", total=total, stage="alignment") as task_id:
                alignment = self.aligner.align(turns, speaker_groups, self.progress.advance_callback(task_id))
        else:
            alignment = self.aligner.align(turns, speaker_groups)

        records = build_comparison_records(turns, speaker_groups, alignment)
        return EvaluationResult(
            records=records,
            alignment=alignment,
            transcript_line_count=len(transcript_rows),
        )

    def evaluate_texts(self, gold_text: str, transcript_text: str) -> EvaluationResult:
        """Evaluate CSV contents given as strings."""
        gold_rows = self.csv_parser.parse_gold_text(gold_text)
        transcript_rows = self.csv_parser.parse_transcript_text(transcript_text)
        return self.evaluate(gold_rows, transcript_rows)

    def evaluate_files(self, gold_path: Union[str, Path],
                       transcript_path: Union[str, Path]) -> EvaluationResult:
        """
        Evaluate a gold CSV file against a machine transcript CSV file.

        Both files are read completely before any scoring starts; a load
        failure raises FormatError and nothing is written.
        """
        if self.progress is not None:
            with self.progress.task_context("Loading transcripts", total=2, stage="loading") as task_id:
                gold_rows = self.csv_parser.load_gold_csv(gold_path)
                self.progress.update(task_id)
                transcript_rows = self.csv_parser.load_transcript_csv(transcript_path)
                self.progress.update(task_id)
        else:
            gold_rows = self.csv_parser.load_gold_csv(gold_path)
            transcript_rows = self.csv_parser.load_transcript_csv(transcript_path)
        return self.evaluate(gold_rows, transcript_rows)

    def write_report(self, result: EvaluationResult, output_path: Union[str, Path],
                     output_format: str = "csv") -> Path:
        """Render ``result`` and write it to ``output_path`` in one step."""
        content = self.result_formatter.format_results(result, output_format)
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise OutputError(f"Could not write report to {path}: {e}", output_path=str(path), cause=e)
        logger.info("Wrote comparison %s to %s", output_format.upper(), path)
        return path

    def compare_files(self, gold_path: Union[str, Path], transcript_path: Union[str, Path],
                      output_path: Union[str, Path], output_format: str = "csv") -> EvaluationResult:
        """Full run: evaluate two CSV files and write the report."""
        result = self.evaluate_files(gold_path, transcript_path)
        self.write_report(result, output_path, output_format)
        return result

    def _check_speaker_limit(self, speaker_groups: SpeakerGroups) -> None:
        limit = self.config.max_transcript_speakers
        if limit is not None and len(speaker_groups) > limit:
            raise SpeakerLimitError(
                f"Transcript has {len(speaker_groups)} distinct speakers; exhaustive mapping "
                f"search is limited to {limit}",
                speaker_count=len(speaker_groups),
                limit=limit,
            )
