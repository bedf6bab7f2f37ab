#!/usr/bin/env python3
"""
Tests for the speaker-label search.
"""

import logging
from itertools import permutations

import pytest

from diarize_eval.transcript_comparison.alignment import (
    SpeakerLabelAligner,
    candidate_mappings,
    find_best_speaker_mapping,
    format_mapping,
    score_mapping,
)
from diarize_eval.transcript_comparison.data_structures import ConsolidatedTurn

ALIGNMENT_LOGGER = "diarize_eval.transcript_comparison.alignment"


def _turns(*pairs):
    return [ConsolidatedTurn(speaker, text) for speaker, text in pairs]


def test_candidate_mappings_enumerates_permutations():
    mappings = list(candidate_mappings(["1", "2"], ["A", "B"]))
    assert mappings == [{"1": "A", "2": "B"}, {"1": "B", "2": "A"}]


def test_candidate_mappings_empty_yields_one_empty_mapping():
    assert list(candidate_mappings(["1"], [])) == [{}]


def test_two_speakers_tries_two_mappings_and_picks_higher():
    turns = _turns(("1", "good morning everyone"), ("2", "thanks for having me"))
    groups = {"A": ["thanks for having me"], "B": ["good morning everyone"]}
    calls = []

    result = SpeakerLabelAligner().align(turns, groups, on_candidate=lambda: calls.append(1))

    assert len(calls) == 2
    assert result.candidates_evaluated == 2
    assert result.mapping == {"1": "B", "2": "A"}
    assert result.score == pytest.approx(2.0)


def test_winning_mapping_is_optimal():
    turns = _turns(
        ("1", "we start with the budget"),
        ("2", "the budget is tight"),
        ("3", "can we cut travel"),
        ("1", "travel is already cut"),
    )
    groups = {
        "X": ["can we cut travel costs"],
        "Y": ["we start with the budget", "travel is cut already"],
        "Z": ["budget is tight"],
    }
    result = SpeakerLabelAligner().align(turns, groups)

    all_scores = [
        score_mapping(turns, dict(zip(["1", "2", "3"], perm)), groups)
        for perm in permutations(groups)
    ]
    assert result.score == pytest.approx(max(all_scores))
    assert result.mapping == {"1": "Y", "2": "Z", "3": "X"}


def test_ties_keep_first_permutation():
    turns = _turns(("1", "same words"), ("2", "same words"))
    groups = {"A": ["same words"], "B": ["same words"]}
    assert find_best_speaker_mapping(turns, groups) == {"1": "A", "2": "B"}


def test_mismatch_logs_warning_and_maps_partially(caplog):
    turns = _turns(("1", "alpha beta"), ("2", "gamma delta"), ("3", "epsilon"))
    groups = {"A": ["gamma delta"], "B": ["alpha beta"]}

    with caplog.at_level(logging.WARNING, logger=ALIGNMENT_LOGGER):
        result = SpeakerLabelAligner().align(turns, groups)

    assert result.speaker_count_mismatch
    assert len(result.mapping) == 2
    assert result.mapping == {"1": "B", "2": "A"}
    assert result.mapped_speaker("3") == ""
    assert any("mismatch" in record.getMessage() for record in caplog.records)


def test_no_machine_speakers():
    turns = _turns(("1", "hello"))
    result = SpeakerLabelAligner().align(turns, {})
    assert result.mapping == {}
    assert result.score == 0.0
    assert result.candidates_evaluated == 1


def test_no_gold_turns():
    result = SpeakerLabelAligner().align([], {"A": ["hello"]})
    assert result.mapping == {}
    assert result.score == 0.0


def test_format_mapping():
    assert format_mapping({"1": "A", "2": "B"}) == "1->A, 2->B"
    assert format_mapping({}) == "(none)"
