#!/usr/bin/env python3
# framework/runner.py - Command execution for the diarize-eval CLI

import logging
from dataclasses import replace
from typing import Optional

from rich.console import Console

from diarize_eval.lib.environment import ensure_file
from diarize_eval.lib.logging_config import EvaluationError, log_exception, setup_logging
from diarize_eval.lib.progress import ProgressTracker
from diarize_eval.lib.speaker_mapper import (
    apply_speaker_mapping,
    invert_mapping,
    parse_speaker_map,
    validate_speaker_mapping,
)
from diarize_eval.transcript_comparison.alignment import format_mapping
from diarize_eval.transcript_comparison.data_structures import EvaluationConfig
from diarize_eval.transcript_comparison.engine import TranscriptEvaluationEngine
from diarize_eval.writers import load_utterances, write_speaker_txt, write_transcript_csv, write_utterances_csv
from diarize_eval.framework.cli import parse_args, show_defaults

logger = logging.getLogger("diarize_eval.runner")


def build_config(args) -> EvaluationConfig:
    """Overlay command line options on the environment configuration."""
    config = EvaluationConfig.from_env()
    overrides = {
        "log_level": args.log_level,
        "show_progress": args.show_progress,
    }
    if hasattr(args, "max_speakers"):
        limit = args.max_speakers
        overrides["max_transcript_speakers"] = limit if limit is not None and limit > 0 else None
    if hasattr(args, "show_summary"):
        overrides["show_summary"] = args.show_summary
    return replace(config, **overrides)


def run_compare(args, config: EvaluationConfig, console: Console) -> int:
    ensure_file(args.gold, "Gold standard CSV")
    ensure_file(args.transcript, "Transcript CSV")

    progress = ProgressTracker(console=console, enabled=config.show_progress)
    engine = TranscriptEvaluationEngine(config, progress=progress)

    progress.start()
    try:
        result = engine.evaluate_files(args.gold, args.transcript)
    finally:
        progress.stop()

    path = engine.write_report(result, args.output, args.format)

    if config.show_summary:
        engine.result_formatter.print_summary(result, console)
        progress.print_summary()
    console.print(f"[green]✓[/green] Wrote {len(result.records)} comparison row(s) to {path}")
    return 0


def run_relabel(args, config: EvaluationConfig, console: Console) -> int:
    ensure_file(args.transcript, "Transcript CSV")
    engine = TranscriptEvaluationEngine(config)
    rows = engine.csv_parser.load_transcript_csv(args.transcript)

    if args.from_gold:
        ensure_file(args.from_gold, "Gold standard CSV")
        gold_rows = engine.csv_parser.load_gold_csv(args.from_gold)
        result = engine.evaluate(gold_rows, rows)
        logger.info("Best mapping: %s", format_mapping(result.alignment.mapping))
        mapping = invert_mapping(result.alignment.mapping)
    else:
        mapping = parse_speaker_map(args.speaker_map)

    for warning in validate_speaker_mapping(rows, mapping):
        logger.warning(warning)

    write_transcript_csv(apply_speaker_mapping(rows, mapping), args.output)
    console.print(f"[green]✓[/green] Relabeled {len(rows)} line(s) -> {args.output}")
    return 0


def run_export(args, config: EvaluationConfig, console: Console) -> int:
    ensure_file(args.transcript_json, "Transcript JSON")
    utterances = load_utterances(args.transcript_json)

    if args.text:
        write_speaker_txt(utterances, args.output)
    else:
        write_utterances_csv(utterances, args.output)
    console.print(f"[green]✓[/green] Exported {len(utterances)} utterance(s) -> {args.output}")
    return 0


COMMANDS = {
    "compare": run_compare,
    "relabel": run_relabel,
    "export-transcript": run_export,
}


# ---------- main ----------
def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    # Handle show-defaults flag (doesn't require a command)
    if args.show_defaults:
        show_defaults()
        return 0

    log = setup_logging(
        log_level=args.log_level,
        log_file=args.log_file,
        structured_output=args.structured_logs,
    )
    config = build_config(args)
    console = Console(stderr=True)

    try:
        return COMMANDS[args.command](args, config, console)
    except EvaluationError as e:
        log_exception(log, e, {"command": args.command})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
