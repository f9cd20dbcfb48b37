"""
patterns.py

Scores guesses and builds the Wordle feedback pattern matrix.

Matrix shape:
    (n_guesses, n_answers)

Each cell contains an integer 0..242 encoding the 5-tile Wordle feedback
pattern in base-3, first tile most significant:

    0 = gray   (b)
    1 = yellow (y)
    2 = green  (g)

The search never scores words directly; it slices rows of this matrix, so
all guess/answer feedback is computed once per word list.
"""

from collections import Counter
from pathlib import Path

import numpy as np
from tqdm import tqdm

from .words import WORD_LENGTH


COLORS = "byg"
CODE_SPACE = 3**WORD_LENGTH
ALL_EXACT = CODE_SPACE - 1

_PLACE_VALUES = np.array([3**(WORD_LENGTH - 1 - i) for i in range(WORD_LENGTH)])


def feedback(guess: str, answer: str) -> list[int]:
    """
    Return per-tile feedback digits for a (guess, answer) pair.

    Standard Wordle duplicate-letter rules:

    1. First mark greens (correct letter in correct position).
       Each green consumes one instance of that letter from the answer.

    2. Then mark yellows (correct letter, wrong position) left to right, only
       while unused instances of that letter remain in the answer.
    """
    result = [0] * WORD_LENGTH
    counts = Counter(answer)

    # First pass: mark greens and consume letters
    for i in range(WORD_LENGTH):
        if guess[i] == answer[i]:
            result[i] = 2
            counts[guess[i]] -= 1

    # Second pass: mark yellows where letters remain unused
    for i in range(WORD_LENGTH):
        if result[i] == 0 and counts[guess[i]] > 0:
            result[i] = 1
            counts[guess[i]] -= 1

    return result


def score(guess: str, answer: str) -> str:
    """Feedback for *guess* against *answer* as a string such as ``"bybgg"``."""
    return "".join(COLORS[d] for d in feedback(guess, answer))


def encode_pattern(guess: str, answer: str) -> int:
    """Encode Wordle feedback for a (guess, answer) pair as a base-3 integer."""
    code = 0
    for r in feedback(guess, answer):
        code = code * 3 + r
    return code


def pattern_code(colors: str) -> int:
    """Inverse of :func:`decode_pattern`."""
    if len(colors) != WORD_LENGTH or set(colors) - set(COLORS):
        raise ValueError(f"invalid feedback pattern: {colors!r}")
    code = 0
    for c in colors:
        code = code * 3 + COLORS.index(c)
    return code


def decode_pattern(code: int) -> str:
    """Turn a base-3 pattern code back into its color string."""
    digits = []
    for _ in range(WORD_LENGTH):
        code, r = divmod(int(code), 3)
        digits.append(COLORS[r])
    return "".join(reversed(digits))


def encode_words(words) -> np.ndarray:
    """Pack words into an (n, 5) uint8 matrix of ASCII letter codes."""
    if not words:
        return np.zeros((0, WORD_LENGTH), dtype=np.uint8)
    buf = "".join(words).encode("ascii")
    return np.frombuffer(buf, dtype=np.uint8).reshape(-1, WORD_LENGTH)


def score_row(guess: str, answer_letters: np.ndarray) -> np.ndarray:
    """
    Pattern codes for one guess against every answer at once.

    Vectorized form of :func:`encode_pattern`. A yellow at tile i is granted
    when the answer still has more unmatched copies of that letter than the
    guess has already spent on yellows at earlier tiles.
    """
    g = np.frombuffer(guess.encode("ascii"), dtype=np.uint8)
    green = answer_letters == g
    # 0 never appears in ASCII letters, so it marks tiles consumed by greens
    unmatched = np.where(green, 0, answer_letters)

    digits = np.where(green, 2, 0).astype(np.uint8)
    for i in range(WORD_LENGTH):
        available = np.count_nonzero(unmatched == g[i], axis=1)
        spent = np.zeros(len(answer_letters), dtype=np.int64)
        for k in range(i):
            if g[k] == g[i]:
                spent += digits[:, k] == 1
        yellow = ~green[:, i] & (available > spent)
        digits[:, i] = np.where(yellow, 1, digits[:, i])

    return (digits.astype(np.int64) @ _PLACE_VALUES).astype(np.uint8)


def build_matrix(guesses, answers, show_progress=True) -> np.ndarray:
    """
    Compute the full pattern matrix from scratch.

    This is the most expensive step before the search starts, but it only
    needs to be done once per word list. Progress is shown so long builds
    don't look stuck.
    """
    answer_letters = encode_words(answers)
    matrix = np.zeros((len(guesses), len(answers)), dtype=np.uint8)

    if show_progress:
        print("Building pattern matrix...")
    for i, guess in enumerate(tqdm(guesses, disable=not show_progress)):
        matrix[i] = score_row(guess, answer_letters)

    return matrix


def load_or_build_matrix(guesses, answers, cache_path=None, sources=()) -> np.ndarray:
    """
    Load a previously built pattern matrix if it matches current dimensions.

    If the cache file is missing, its shape does not match the current pools,
    or any source word file is newer than it, the matrix is rebuilt and saved
    to ensure correctness.
    """
    if cache_path is None:
        return build_matrix(guesses, answers)

    cache_path = Path(cache_path)
    expected_shape = (len(guesses), len(answers))

    if cache_path.exists():
        matrix = np.load(cache_path)

        # Guard 1: matrix dimensions must match active word pools.
        shape_ok = matrix.shape == expected_shape

        # Guard 2: if any source word file is newer than the matrix cache,
        # assume the matrix is stale and force a rebuild.
        matrix_mtime = cache_path.stat().st_mtime
        cache_is_new_enough = all(
            matrix_mtime >= Path(src).stat().st_mtime
            for src in sources
            if Path(src).exists()
        )

        if shape_ok and cache_is_new_enough:
            print("Loaded compatible pattern matrix from disk.")
            return matrix

        if not shape_ok:
            print("Matrix shape mismatch. Rebuilding.")
        else:
            print("Matrix is older than word lists. Rebuilding.")

    matrix = build_matrix(guesses, answers)
    cache_path.parent.mkdir(parents=True, exist_ok=True)
    np.save(cache_path, matrix)
    print("Matrix saved to disk.")
    return matrix


def partition(codes: np.ndarray, answers: np.ndarray):
    """
    Split answer indices into groups sharing the same feedback code.

    *codes* holds one pattern code per entry of *answers*. Returns a list of
    (code, answer_indices) pairs in ascending code order; every answer lands
    in exactly one group.
    """
    order = np.argsort(codes, kind="stable")
    keys, starts = np.unique(codes[order], return_index=True)
    groups = np.split(answers[order], starts[1:])
    return [(int(k), g) for k, g in zip(keys, groups)]
