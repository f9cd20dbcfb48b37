"""
words.py

Handles loading and validating the Wordle word lists.
No numpy here, just clean text handling.
"""

import re
from pathlib import Path


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
ANSWERS_PATH = DATA_DIR / "answers.txt"
GUESSES_PATH = DATA_DIR / "guesses.txt"

WORD_LENGTH = 5
_WORD_RE = re.compile(rf"^[a-z]{{{WORD_LENGTH}}}$")


def load_word_list(path):
    """Load a newline-separated word list into a Python list."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"word list not found: {path}")
    with open(path, "r") as f:
        return [line.strip() for line in f if line.strip()]


def load_words(answers_path=ANSWERS_PATH, guesses_path=GUESSES_PATH):
    """
    Returns:
        answers: list of possible solution words
        guesses: list of guess-only words (answers are always legal guesses)
    """
    answers = load_word_list(answers_path)
    guesses = load_word_list(guesses_path)
    return answers, guesses


def validate_word(word: str) -> str:
    """Normalize a word and reject anything that is not five letters a-z."""
    normalized = word.strip().lower()
    if not _WORD_RE.match(normalized):
        raise ValueError(
            f"invalid word {word!r}: expected {WORD_LENGTH} letters a-z"
        )
    return normalized


def prepare_pools(answers, guesses=(), answers_only=False):
    """
    Build the (guess_pool, answer_pool) pair consumed by the search.

    Both pools are deduplicated and sorted, so index order is also
    lexicographic order. The guess pool always contains every answer; with
    answers_only it contains nothing else.
    """
    answer_pool = tuple(sorted({validate_word(w) for w in answers}))
    if not answer_pool:
        raise ValueError("answer pool must not be empty")

    if answers_only:
        return answer_pool, answer_pool

    extra = {validate_word(w) for w in guesses}
    guess_pool = tuple(sorted(extra.union(answer_pool)))
    return guess_pool, answer_pool
