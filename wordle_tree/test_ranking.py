"""Unit tests for the candidate ranker."""

from collections import Counter

import numpy as np
import pytest

from wordle_tree.patterns import build_matrix, score
from wordle_tree.ranking import rank_guesses, ranking_costs


WORDS = sorted([
    "cigar", "rebut", "sissy", "humph", "awake", "blush", "focal", "evade",
    "naval", "serve", "heath", "dwarf", "model", "karma", "stink", "grade",
])


def expected_cost(guess, answers):
    groups = Counter(score(guess, answer) for answer in answers)
    leftover = len(answers) - groups.get("ggggg", 0)
    return leftover / len(groups)


class TestRankingCosts:
    """Tests for the ranking cost."""

    def test_matches_group_sizes(self):
        matrix = build_matrix(WORDS, WORDS, show_progress=False)
        subset = np.array([0, 3, 4, 7, 9, 15])
        costs = ranking_costs(matrix, subset)
        answers = [WORDS[i] for i in subset]
        for i, guess in enumerate(WORDS):
            assert costs[i] == pytest.approx(expected_cost(guess, answers))

    def test_chunking_does_not_change_costs(self):
        matrix = build_matrix(WORDS, WORDS, show_progress=False)
        answers = np.arange(len(WORDS))
        assert np.array_equal(
            ranking_costs(matrix, answers, chunk_rows=3),
            ranking_costs(matrix, answers),
        )

    def test_exact_group_is_free(self):
        matrix = build_matrix(["cigar", "humph"], ["cigar", "rebut"], show_progress=False)
        costs = ranking_costs(matrix, np.array([0, 1]))
        # cigar: {ggggg: 1, other: 1} -> (2 - 1) / 2
        # humph: {bbbbb: 1, bybbb: 1} -> 2 / 2
        assert costs.tolist() == [0.5, 1.0]


class TestRankGuesses:
    """Tests for ordering guesses."""

    def test_ties_break_lexicographically(self):
        guesses = ["cigar", "humph", "rebut"]
        matrix = build_matrix(guesses, ["cigar", "rebut"], show_progress=False)
        order = rank_guesses(matrix, np.array([0, 1]))
        assert [guesses[i] for i in order] == ["cigar", "rebut", "humph"]

    def test_limit(self):
        matrix = build_matrix(WORDS, WORDS, show_progress=False)
        answers = np.arange(len(WORDS))
        full = rank_guesses(matrix, answers)
        top = rank_guesses(matrix, answers, limit=4)
        assert len(full) == len(WORDS)
        assert top.tolist() == full[:4].tolist()

    def test_order_is_by_cost(self):
        matrix = build_matrix(WORDS, WORDS, show_progress=False)
        answers = np.arange(len(WORDS))
        costs = ranking_costs(matrix, answers)
        order = rank_guesses(matrix, answers)
        ranked = [(costs[i], WORDS[i]) for i in order]
        assert ranked == sorted(ranked)
