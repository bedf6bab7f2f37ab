#!/usr/bin/env python3
"""
Tests for Jaccard similarity and best-match selection.
"""

import pytest

from diarize_eval.transcript_comparison.similarity import (
    best_match,
    best_similarity,
    count_captured_words,
    jaccard_similarity,
)


def test_partial_overlap():
    assert jaccard_similarity("hello there", "hello there friend") == pytest.approx(2 / 3)


def test_repeated_words_do_not_add_weight():
    assert jaccard_similarity("yes yes yes", "yes") == 1.0


def test_both_empty_is_one():
    assert jaccard_similarity("", "") == 1.0
    assert jaccard_similarity("...", "  ") == 1.0


def test_one_empty_is_zero():
    assert jaccard_similarity("", "hello") == 0.0
    assert jaccard_similarity("hello", "") == 0.0


@pytest.mark.parametrize("a,b", [
    ("the cat sat", "the dog sat down"),
    ("Hello, World!", "world hello"),
    ("", "something"),
    ("one two three", "four five"),
])
def test_symmetric_and_bounded(a, b):
    score = jaccard_similarity(a, b)
    assert score == jaccard_similarity(b, a)
    assert 0.0 <= score <= 1.0


def test_reflexive():
    assert jaccard_similarity("Some text, here.", "some text here") == 1.0


def test_best_match_prefers_first_on_tie():
    match = best_match("a b", ["a c", "b d", "a b"])
    assert match.text == "a b"
    tie = best_match("a b", ["a x", "b y"])
    assert tie.text == "a x"


def test_best_match_zero_similarity_still_matches():
    match = best_match("hello", ["goodbye", "farewell"])
    assert match is not None
    assert match.text == "goodbye"
    assert match.similarity == 0.0


def test_best_match_no_candidates():
    assert best_match("hello", []) is None
    assert best_similarity("hello", []) == 0.0


def test_count_captured_words_counts_distinct_gold_tokens():
    assert count_captured_words(["hello", "there"], "hello there friend") == 2
    assert count_captured_words(["yes", "yes", "no"], "yes maybe") == 1
    assert count_captured_words([], "anything") == 0
