"""
ranking.py

Orders guesses by how finely they split the remaining answers.

The cost of a guess is the average size of the feedback groups it leaves
behind, with the all-green group counted as free:

    cost = (|answers| - |all-green group|) / number_of_groups

Lower is better. This is a cheap proxy, not an exact expected guess count;
the search only ever looks at the first few guesses of this ordering.
"""

import numpy as np

from .patterns import ALL_EXACT, CODE_SPACE


CHUNK_ROWS = 1024


def ranking_costs(matrix, answers, chunk_rows=CHUNK_ROWS):
    """
    Cost of every guess row of *matrix* against the answer indices *answers*.

    Rows are processed in chunks; each chunk is offset into its own block of
    243 buckets so one bincount call covers the whole chunk.
    """
    n_guesses = matrix.shape[0]
    n_answers = len(answers)
    costs = np.empty(n_guesses, dtype=np.float64)

    for start in range(0, n_guesses, chunk_rows):
        block = matrix[start:start + chunk_rows][:, answers].astype(np.int64)
        rows = block.shape[0]
        offsets = np.arange(rows, dtype=np.int64)[:, None] * CODE_SPACE
        counts = np.bincount(
            (block + offsets).ravel(), minlength=rows * CODE_SPACE
        ).reshape(rows, CODE_SPACE)

        groups = np.count_nonzero(counts, axis=1)
        leftover = n_answers - counts[:, ALL_EXACT]
        costs[start:start + rows] = leftover / groups

    return costs


def rank_guesses(matrix, answers, limit=None):
    """
    Guess indices from best to worst cost.

    Ties keep index order, which is lexicographic word order because the
    guess pool is sorted.
    """
    costs = ranking_costs(matrix, answers)
    order = np.argsort(costs, kind="stable")
    if limit is not None:
        order = order[:limit]
    return order
