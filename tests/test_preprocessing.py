#!/usr/bin/env python3
"""
Tests for token normalization, gold turn consolidation and speaker grouping.
"""

from diarize_eval.transcript_comparison.data_structures import ConsolidatedTurn, GoldRow, TranscriptRow
from diarize_eval.transcript_comparison.preprocessing import (
    consolidate_gold,
    distinct_speakers,
    group_by_speaker,
    normalize,
    normalize_to_text,
)


def test_normalize_strips_punctuation_and_lowercases():
    assert normalize('Hello, World! "Yes"; no: maybe?') == ["hello", "world", "yes", "no", "maybe"]


def test_normalize_removes_apostrophes_without_splitting():
    assert normalize("Don't stop") == ["dont", "stop"]


def test_normalize_keeps_other_symbols():
    assert normalize("well - ok (fine)") == ["well", "-", "ok", "(fine)"]


def test_normalize_collapses_whitespace():
    assert normalize("  a \t b\n\nc  ") == ["a", "b", "c"]


def test_normalize_empty_and_punctuation_only():
    assert normalize("") == []
    assert normalize(" ... !? ") == []


def test_normalize_is_idempotent():
    text = "It's   a TEST, isn't it?"
    once = normalize(text)
    assert normalize(normalize_to_text(once)) == once


def test_consolidate_merges_adjacent_rows():
    rows = [
        GoldRow("1", "hello"),
        GoldRow("1", "there"),
        GoldRow("2", "hi"),
        GoldRow("1", "again"),
    ]
    assert consolidate_gold(rows) == [
        ConsolidatedTurn("1", "hello there"),
        ConsolidatedTurn("2", "hi"),
        ConsolidatedTurn("1", "again"),
    ]


def test_consolidate_keeps_empty_utterances():
    rows = [GoldRow("1", "hello"), GoldRow("1", ""), GoldRow("2", "")]
    assert consolidate_gold(rows) == [
        ConsolidatedTurn("1", "hello "),
        ConsolidatedTurn("2", ""),
    ]


def test_consolidate_empty_input():
    assert consolidate_gold([]) == []


def test_consolidated_turns_never_repeat_speaker_back_to_back():
    rows = [GoldRow(s, "x") for s in "1122211312"]
    turns = consolidate_gold(rows)
    assert [t.speaker for t in turns] == ["1", "2", "1", "3", "1", "2"]
    assert all(a.speaker != b.speaker for a, b in zip(turns, turns[1:]))


def test_group_by_speaker_preserves_order():
    rows = [
        TranscriptRow("", "B", "one"),
        TranscriptRow("", "A", "two"),
        TranscriptRow("", "B", "three"),
        TranscriptRow("", "a", "four"),
    ]
    groups = group_by_speaker(rows)
    assert list(groups) == ["B", "A", "a"]
    assert groups["B"] == ["one", "three"]
    assert groups["A"] == ["two"]


def test_group_by_speaker_empty():
    assert group_by_speaker([]) == {}


def test_distinct_speakers_first_seen_order():
    turns = [ConsolidatedTurn("2", "a"), ConsolidatedTurn("1", "b"), ConsolidatedTurn("2", "c")]
    assert distinct_speakers(turns) == ["2", "1"]
