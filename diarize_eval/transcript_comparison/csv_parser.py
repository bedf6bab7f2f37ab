"""
CSV parser module for transcript evaluation.

This module reads gold standard CSV files (Speaker, Utterance, Code) and
machine transcript CSV files (Timestamp, Speaker, Utterance) into typed rows.
Machine transcripts carry their utterance text bare rather than CSV-quoted, so
cells that spill past the header width are folded back into the last column.
Rows are written back out through ``render_csv_rows``.
"""

import csv
import io
import logging
from pathlib import Path
from typing import Dict, List, Sequence, Union

from diarize_eval.lib.logging_config import FormatError
from .data_structures import GoldRow, TranscriptRow

logger = logging.getLogger(__name__)

GOLD_REQUIRED_COLUMNS = ("Speaker", "Utterance")
TRANSCRIPT_REQUIRED_COLUMNS = ("Speaker", "Utterance")


def parse_csv_text(
    text: str,
    required_columns: Sequence[str] = (),
    source: str = "<text>",
    join_overflow: bool = False,
) -> List[Dict[str, str]]:
    """
    Parse CSV text with a header row into a list of ``header -> trimmed value`` dicts.

    Args:
        text: Full CSV contents
        required_columns: Header names that must be present
        source: Name used in error messages
        join_overflow: Re-join cells beyond the header width onto the last column
            with ``,`` instead of rejecting the row

    Returns:
        One dict per non-blank data row, in file order
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        header = next(reader, None)
        if header is None:
            header = []
        header = [name.strip() for name in header]

        missing = [column for column in required_columns if column not in header]
        if missing:
            raise FormatError(
                f"{source}: missing required column(s) {', '.join(missing)} "
                f"(found: {', '.join(header) or 'no header'})",
                path=source,
            )

        rows: List[Dict[str, str]] = []
        width = len(header)
        for cells in reader:
            if not cells or (len(cells) == 1 and not cells[0].strip()):
                continue
            if len(cells) > width:
                if not join_overflow:
                    raise FormatError(
                        f"{source}: line {reader.line_num} has {len(cells)} cells, "
                        f"expected at most {width}",
                        path=source,
                    )
                cells = cells[:width - 1] + [",".join(cells[width - 1:])]
            padded = list(cells) + [""] * (width - len(cells))
            rows.append({name: value.strip() for name, value in zip(header, padded)})
    except csv.Error as e:
        raise FormatError(f"{source}: malformed CSV near line {reader.line_num}: {e}", path=source, cause=e)

    return rows


def read_text_file(file_path: Union[str, Path]) -> str:
    """Read a whole UTF-8 text file, surfacing IO problems as ``FormatError``."""
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            return f.read()
    except FileNotFoundError as e:
        raise FormatError(f"CSV file not found: {path}", path=str(path), cause=e)
    except (OSError, UnicodeDecodeError) as e:
        raise FormatError(f"Error reading CSV file '{path}': {e}", path=str(path), cause=e)


class CSVTranscriptParser:
    """Parses gold standard and machine transcript CSV files into typed rows."""

    def __init__(self, config=None):
        """Initialize the parser with configuration."""
        self.config = config

    def parse_gold_text(self, text: str, source: str = "gold") -> List[GoldRow]:
        """
        Parse gold standard CSV text.

        Rows are kept as-is (after trimming) even when empty; consolidation
        decides what they mean.
        """
        records = parse_csv_text(text, GOLD_REQUIRED_COLUMNS, source=source)
        rows = [
            GoldRow(
                speaker=record["Speaker"],
                utterance=record["Utterance"],
                code=record.get("Code", ""),
            )
            for record in records
        ]
        logger.debug("Parsed %d gold row(s) from %s", len(rows), source)
        return rows

    def parse_transcript_text(self, text: str, source: str = "transcript") -> List[TranscriptRow]:
        """
        Parse machine transcript CSV text.

        Rows with an empty speaker or utterance carry no signal and are dropped.
        """
        records = parse_csv_text(text, TRANSCRIPT_REQUIRED_COLUMNS, source=source, join_overflow=True)
        rows: List[TranscriptRow] = []
        dropped = 0
        for record in records:
            speaker = record["Speaker"]
            utterance = record["Utterance"]
            if not speaker or not utterance:
                dropped += 1
                continue
            rows.append(TranscriptRow(
                timestamp=record.get("Timestamp", ""),
                speaker=speaker,
                utterance=utterance,
            ))
        if dropped:
            logger.debug("Dropped %d empty transcript row(s) from %s", dropped, source)
        logger.debug("Parsed %d transcript row(s) from %s", len(rows), source)
        return rows

    def load_gold_csv(self, file_path: Union[str, Path]) -> List[GoldRow]:
        """Load and parse a gold standard CSV file."""
        return self.parse_gold_text(read_text_file(file_path), source=str(file_path))

    def load_transcript_csv(self, file_path: Union[str, Path]) -> List[TranscriptRow]:
        """Load and parse a machine transcript CSV file."""
        return self.parse_transcript_text(read_text_file(file_path), source=str(file_path))


def load_gold_csv(file_path: Union[str, Path]) -> List[GoldRow]:
    return CSVTranscriptParser().load_gold_csv(file_path)


def load_transcript_csv(file_path: Union[str, Path]) -> List[TranscriptRow]:
    return CSVTranscriptParser().load_transcript_csv(file_path)


def render_csv_rows(rows: Sequence[Sequence[object]], lineterminator: str = "\n") -> str:
    """
    Render rows as CSV text with ``csv.writer``.

    ``csv.writer`` only quotes the line-break characters that occur in its
    line terminator, so a row holding a stray ``\\r`` or ``\\n`` is written
    with every field quoted.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator=lineterminator)
    quote_all_writer = csv.writer(buffer, lineterminator=lineterminator, quoting=csv.QUOTE_ALL)
    for row in rows:
        cells = ["" if cell is None else str(cell) for cell in row]
        if any("\r" in cell or "\n" in cell for cell in cells):
            quote_all_writer.writerow(cells)
        else:
            writer.writerow(cells)
    return buffer.getvalue()
