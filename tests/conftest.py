#!/usr/bin/env python3
"""Shared fixtures for the diarize-eval test suite."""

import logging
from pathlib import Path

import pytest


GOLD_CSV = """Speaker,Utterance,Code
1,Hello how are you today,Q
1,I hope you slept well,Q
2,I am fine thanks for asking,A
1,What did you have for breakfast,Q
2,Toast and eggs with coffee,A
"""

TRANSCRIPT_CSV = """Timestamp,Speaker,Utterance
[0.16 - 2.40],A,hello how are you today i hope you slept well
[2.50 - 4.10],B,i am fine, thanks for asking
[4.20 - 6.00],A,what did you have for breakfast
[6.10 - 8.00],B,toast and eggs with coffee
"""


@pytest.fixture
def gold_csv(tmp_path: Path) -> Path:
    path = tmp_path / "gold.csv"
    path.write_text(GOLD_CSV, encoding="utf-8")
    return path


@pytest.fixture
def transcript_csv(tmp_path: Path) -> Path:
    path = tmp_path / "transcript.csv"
    path.write_text(TRANSCRIPT_CSV, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers the CLI attaches so they never outlive pytest's captured streams."""
    yield
    logger = logging.getLogger("diarize_eval")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
