#!/usr/bin/env python3
# framework/cli.py - CLI argument parsing

import argparse
from typing import Optional

from diarize_eval.lib.logging_config import LOG_LEVELS
from diarize_eval.transcript_comparison.data_structures import EvaluationConfig


# ---------- CLI ----------
def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    defaults = EvaluationConfig.from_env()

    p = argparse.ArgumentParser(
        prog="diarize-eval",
        description="diarize-eval: score a diarized machine transcript against a gold standard transcript."
    )
    p.add_argument("-l", "--log-level", choices=LOG_LEVELS, type=str.upper, default=defaults.log_level, help=f"Set logging level [Default: {defaults.log_level}]")
    p.add_argument("--log-file", metavar="LOG_FILE", help="Also write logs to this file.")
    p.add_argument("--structured-logs", action="store_true", help="Emit logs as JSON lines.")
    p.add_argument("--no-progress", dest="show_progress", action="store_false", default=defaults.show_progress, help="Disable the progress display.")
    p.add_argument("--show-defaults", action="store_true", help="Show all default values and exit.")

    sub = p.add_subparsers(dest="command", metavar="COMMAND")

    compare = sub.add_parser("compare", help="Compare a machine transcript CSV against a gold standard CSV.")
    compare.add_argument("gold", metavar="GOLD_CSV", help="Gold standard CSV (Speaker,Utterance,Code).")
    compare.add_argument("transcript", metavar="TRANSCRIPT_CSV", help="Machine transcript CSV (Timestamp,Speaker,Utterance).")
    compare.add_argument("-o", "--output", required=True, metavar="OUTPUT", help="Where to write the comparison report.")
    compare.add_argument("-f", "--format", choices=["csv", "json"], default="csv", help="Report format [Default: csv]")
    compare.add_argument("-m", "--max-speakers", type=int, default=defaults.max_transcript_speakers, help=f"Refuse transcripts with more distinct speakers than this; 0 disables the check [Default: {defaults.max_transcript_speakers}]")
    compare.add_argument("--no-summary", dest="show_summary", action="store_false", default=defaults.show_summary, help="Do not print the summary table.")

    relabel = sub.add_parser("relabel", help="Rename the speakers of a machine transcript CSV.")
    relabel.add_argument("transcript", metavar="TRANSCRIPT_CSV", help="Machine transcript CSV to relabel.")
    relabel.add_argument("-o", "--output", required=True, metavar="OUTPUT", help="Where to write the relabeled transcript CSV.")
    source = relabel.add_mutually_exclusive_group(required=True)
    source.add_argument("--speaker-map", metavar="MAPPING", help="Speaker mapping (e.g., 'A=Interviewer,B=Participant').")
    source.add_argument("--from-gold", metavar="GOLD_CSV", help="Derive the mapping from the best alignment against this gold standard CSV.")
    relabel.add_argument("-m", "--max-speakers", type=int, default=defaults.max_transcript_speakers, help="Speaker limit used with --from-gold; 0 disables the check.")

    export = sub.add_parser("export-transcript", help="Convert a saved transcription JSON into a machine transcript CSV.")
    export.add_argument("transcript_json", metavar="TRANSCRIPT_JSON", help="JSON file with an 'utterances' list (start/end in ms, speaker, text).")
    export.add_argument("-o", "--output", required=True, metavar="OUTPUT", help="Where to write the transcript.")
    export.add_argument("--text", action="store_true", help="Write 'Speaker: text' lines instead of CSV.")

    args = p.parse_args(argv)

    if not args.show_defaults and not args.command:
        p.error("a command is required (compare, relabel, export-transcript)")

    return args


def show_defaults():
    """Display all default values used by the application."""
    defaults = EvaluationConfig.from_env()
    print("\n=== Default Values ===")
    print("\nConfiguration (DIARIZE_EVAL_* environment variables / .env):")
    print(f"  - Max Transcript Speakers: {defaults.max_transcript_speakers}  (DIARIZE_EVAL_MAX_SPEAKERS)")
    print(f"  - Log Level: {defaults.log_level}  (DIARIZE_EVAL_LOG_LEVEL)")
    print(f"  - Progress Display: {defaults.show_progress}  (DIARIZE_EVAL_PROGRESS)")
    print(f"  - Summary Table: {defaults.show_summary}  (DIARIZE_EVAL_SUMMARY)")

    print("\nFormats:")
    print("  - Gold CSV: Speaker,Utterance,Code")
    print("  - Transcript CSV: Timestamp,Speaker,Utterance")
    print("  - Report: csv (default) or json")
