"""
search.py

Depth-limited search for the decision tree with the fewest total guesses.

At every node the search tries the `breadth` best-ranked guesses, splits the
remaining answers by feedback, solves each group one level deeper, and keeps
the guess whose subtree needs the fewest guesses in total. A subtree that
cannot finish within `max_depth` guesses rules out the guess above it.

Near the root the per-group subproblems are large, so they are handed to a
multiprocessing pool. Only the process that owns the pool dispatches, and it
does so for groups under a node at depth <= PARALLEL_DEPTH. Workers own no
pool: the groups under the root go to workers, which then solve their depth-1
groups one after another. The parent dispatches depth-1 groups itself only
when a root guess leaves a single group to solve.
"""

import multiprocessing as mp
import os
from dataclasses import dataclass
from typing import Callable, Optional, Union

import numpy as np

from .patterns import ALL_EXACT, build_matrix, decode_pattern, encode_words, partition, score_row
from .ranking import rank_guesses
from .tree import DecisionTree
from .words import prepare_pools, validate_word


DEFAULT_BREADTH = 20
MAX_DEPTH = 7
PARALLEL_DEPTH = 1


_WORKER_STATE = {}


@dataclass(frozen=True)
class SearchParameters:
    """
    Search configuration, shared unchanged by every recursion level.

    Attributes
    ----------
    breadth : int
        Ranked guesses explored per node.
    answers_only : bool
        Restrict the guess pool to the answer pool.
    starting_word : str or None
        Forced first guess; only consulted at depth 0.
    max_depth : int
        Most guesses any answer may take.
    """

    breadth: int = DEFAULT_BREADTH
    answers_only: bool = False
    starting_word: Optional[str] = None
    max_depth: int = MAX_DEPTH

    def __post_init__(self):
        if self.breadth < 1:
            raise ValueError(f"breadth must be positive, got {self.breadth}")
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.starting_word is not None:
            object.__setattr__(self, "starting_word", validate_word(self.starting_word))


@dataclass(frozen=True)
class Found:
    tree: DecisionTree


@dataclass(frozen=True)
class Exhausted:
    """No strategy fits within the depth bound."""


EXHAUSTED = Exhausted()

SearchResult = Union[Found, Exhausted]


def _init_worker(guesses, answers, matrix, params):
    _WORKER_STATE["search"] = TreeSearch(guesses, answers, matrix, params)


def _worker_solve(task):
    depth, remaining = task
    return _WORKER_STATE["search"].solve(depth, remaining)


class TreeSearch:
    """
    Recursive tree builder over a fixed guess pool and answer pool.

    Answer sets are passed around as arrays of indices into *answers*;
    *matrix* holds the pattern code of every (guess, answer) pair.
    """

    def __init__(
        self, guesses, answers, matrix, params, pool=None, on_start=None, on_candidate=None
    ):
        self.guesses = guesses
        self.answers = answers
        self.matrix = matrix
        self.params = params
        self._pool = pool
        self._on_start = on_start
        self._on_candidate = on_candidate

    def solve(self, depth: int, remaining: np.ndarray) -> SearchResult:
        if len(remaining) == 0:
            raise ValueError("answer pool must not be empty")
        if depth >= self.params.max_depth:
            return EXHAUSTED
        if len(remaining) == 1:
            return Found(DecisionTree.leaf(self.answers[remaining[0]]))

        best = None
        for guess, row in self._candidates(depth, remaining):
            if depth == 0 and self._on_start is not None:
                self._on_start(guess)
            result = self._explore(depth, guess, row, remaining)
            if depth == 0 and self._on_candidate is not None:
                self._on_candidate(guess, result)
            # strict comparison: on ties the earlier-ranked guess stays
            if isinstance(result, Found) and (
                best is None or result.tree.total_guesses < best.total_guesses
            ):
                best = result.tree

        if best is None:
            return EXHAUSTED
        return Found(best)

    def _candidates(self, depth, remaining):
        if depth == 0 and self.params.starting_word is not None:
            word = self.params.starting_word
            return [(word, score_row(word, encode_words(self.answers)))]
        top = rank_guesses(self.matrix, remaining, limit=self.params.breadth)
        return [(self.guesses[i], self.matrix[i]) for i in top]

    def _explore(self, depth, guess, row, remaining) -> SearchResult:
        groups = partition(row[remaining], remaining)
        if depth > 0 and len(groups) == 1 and groups[0][0] != ALL_EXACT:
            # same answers one level down: never better than the same search there
            return EXHAUSTED
        pending = [group for code, group in groups if code != ALL_EXACT]
        results = iter(self._fan_out(depth, pending))

        children = {}
        total_guesses = len(remaining)
        max_guesses = 0
        for code, group in groups:
            if code == ALL_EXACT:
                child = DecisionTree.leaf(guess)
            else:
                result = next(results)
                if not isinstance(result, Found):
                    return EXHAUSTED
                child = result.tree
                total_guesses += child.total_guesses
            max_guesses = max(max_guesses, child.max_guesses + 1)
            children[decode_pattern(code)] = child

        return Found(DecisionTree(guess, total_guesses, max_guesses, children))

    def _fan_out(self, depth, groups):
        """Solve each group one level down, results in group order."""
        if self._pool is not None and depth <= PARALLEL_DEPTH and len(groups) > 1:
            return self._pool.map(_worker_solve, [(depth + 1, g) for g in groups])
        # lazy, so the first exhausted group stops the remaining ones
        return (self.solve(depth + 1, g) for g in groups)


def solve(
    answers,
    guesses=(),
    params: Optional[SearchParameters] = None,
    *,
    workers: Optional[int] = None,
    matrix: Optional[np.ndarray] = None,
    on_start: Optional[Callable[[str], None]] = None,
    on_candidate: Optional[Callable[[str, SearchResult], None]] = None,
) -> SearchResult:
    """
    Build the best decision tree for *answers* at depth 0.

    *guesses* are extra guess-only words. A precomputed *matrix* must match
    the prepared pools. *on_start* is called with every root guess before it
    is evaluated, *on_candidate* with the guess and its result afterwards.
    With ``workers=1`` nothing leaves the calling process.
    """
    if params is None:
        params = SearchParameters()

    guess_pool, answer_pool = prepare_pools(answers, guesses, params.answers_only)
    if matrix is None:
        matrix = build_matrix(guess_pool, answer_pool, show_progress=False)
    elif matrix.shape != (len(guess_pool), len(answer_pool)):
        raise ValueError(
            f"pattern matrix shape {matrix.shape} does not match pools "
            f"({len(guess_pool)}, {len(answer_pool)})"
        )

    worker_count = workers if workers is not None else (os.cpu_count() or 1)
    worker_count = max(1, int(worker_count))
    root = np.arange(len(answer_pool))

    if worker_count == 1:
        search = TreeSearch(
            guess_pool, answer_pool, matrix, params, on_start=on_start, on_candidate=on_candidate
        )
        return search.solve(0, root)

    start_methods = mp.get_all_start_methods()
    start_method = "fork" if "fork" in start_methods else "spawn"
    ctx = mp.get_context(start_method)

    with ctx.Pool(
        processes=worker_count,
        initializer=_init_worker,
        initargs=(guess_pool, answer_pool, matrix, params),
    ) as pool:
        search = TreeSearch(
            guess_pool,
            answer_pool,
            matrix,
            params,
            pool=pool,
            on_start=on_start,
            on_candidate=on_candidate,
        )
        return search.solve(0, root)
