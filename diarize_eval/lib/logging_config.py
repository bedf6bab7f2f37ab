#!/usr/bin/env python3
from __future__ import annotations
import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, Any, Dict
from datetime import datetime
import json


LOGGER_NAME = "diarize_eval"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EvaluationError(Exception):
    """Base exception for transcript evaluation errors."""
    def __init__(self, message: str, stage: str = "unknown", cause: Optional[Exception] = None):
        super().__init__(message)
        self.stage = stage
        self.cause = cause
        self.timestamp = datetime.now()


class FormatError(EvaluationError):
    """Exception for input files that cannot be read into the expected row schema."""
    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, stage="loading", cause=cause)
        self.path = path


class SpeakerLimitError(EvaluationError):
    """Exception raised when a transcript has too many speakers for an exhaustive search."""
    def __init__(self, message: str, speaker_count: int, limit: int):
        super().__init__(message, stage="alignment")
        self.speaker_count = speaker_count
        self.limit = limit


class MappingError(EvaluationError):
    """Exception for malformed speaker label mappings."""
    def __init__(self, message: str, entry: Optional[str] = None):
        super().__init__(message, stage="relabel")
        self.entry = entry


class OutputError(EvaluationError):
    """Exception for report or transcript output errors."""
    def __init__(self, message: str, output_path: Optional[str] = None, cause: Optional[Exception] = None):
        super().__init__(message, stage="output", cause=cause)
        self.output_path = output_path


class StructuredFormatter(logging.Formatter):
    """Custom formatter that outputs structured JSON logs."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info)
            }

        # Attributes passed through ``extra=``
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


_STANDARD_RECORD_KEYS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'lineno', 'funcName', 'created',
    'msecs', 'relativeCreated', 'thread', 'threadName',
    'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'message', 'asctime'
}


class ColoredFormatter(logging.Formatter):
    """Colored formatter for console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m'
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        reset = self.COLORS['RESET']
        formatted = super().format(record)
        return f"{color}{formatted}{reset}"


def setup_logging(
    log_level: str = "WARNING",
    log_file: Optional[str] = None,
    console_output: bool = True,
    structured_output: bool = False
) -> logging.Logger:
    """
    Set up logging for the evaluation engine.

    Parameters
    ----------
    log_level : str
        Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_file : Optional[str]
        Path to log file. If None, no file logging.
    console_output : bool
        Whether to output to the console (stderr, so reports piped to stdout stay clean)
    structured_output : bool
        Whether to use structured JSON formatting

    Returns
    -------
    logging.Logger
        The configured package logger; module loggers propagate into it.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, log_level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)

        if structured_output:
            console_formatter = StructuredFormatter()
        else:
            console_formatter = ColoredFormatter(
                fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")

        if structured_output:
            file_formatter = StructuredFormatter()
        else:
            file_formatter = logging.Formatter(
                fmt='%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )

        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    context: Optional[Dict[str, Any]] = None
) -> None:
    """
    Log an exception with context information.

    Parameters
    ----------
    logger : logging.Logger
        Logger instance to use
    exception : Exception
        Exception to log
    context : Optional[Dict[str, Any]]
        Additional context information
    """
    extra: Dict[str, Any] = {
        "exception_type": type(exception).__name__,
        "exception_message": str(exception),
    }

    if isinstance(exception, EvaluationError):
        extra["stage"] = exception.stage
        extra["error_timestamp"] = exception.timestamp.isoformat()

        if isinstance(exception, FormatError) and exception.path:
            extra["input_path"] = exception.path
        elif isinstance(exception, SpeakerLimitError):
            extra["speaker_count"] = exception.speaker_count
            extra["speaker_limit"] = exception.limit
        elif isinstance(exception, OutputError) and exception.output_path:
            extra["output_path"] = exception.output_path

    if context:
        extra.update(context)

    logger.error(
        f"Exception in {extra.get('stage', 'unknown')}: {exception}",
        exc_info=logger.isEnabledFor(logging.DEBUG),
        extra=extra
    )
