"""
tree.py

The decision tree produced by the search.

Each node holds the word to guess, the statistics of the subtree below it,
and one child per feedback pattern the guess can produce. A node with no
children is a leaf: exactly one answer is left and guessing it wins.
"""

from dataclasses import dataclass, field
from typing import Iterator

from .patterns import score


@dataclass(frozen=True)
class DecisionTree:
    """
    A guessing strategy rooted at one guess.

    Attributes
    ----------
    guess : str
        Word to play at this node.
    total_guesses : int
        Guesses needed to find every answer below this node, summed.
    max_guesses : int
        Worst-case guesses needed for any answer below this node.
    children : dict[str, DecisionTree]
        Subtree per feedback pattern (``"bygbb"`` style), in ascending
        pattern-code order. The ``"ggggg"`` child marks the guess itself
        being the answer.
    """

    guess: str
    total_guesses: int = 1
    max_guesses: int = 1
    children: dict[str, "DecisionTree"] = field(default_factory=dict)

    @classmethod
    def leaf(cls, guess: str) -> "DecisionTree":
        return cls(guess=guess)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def average(self, n_answers: int) -> float:
        return self.total_guesses / n_answers

    def summary(self, n_answers: int) -> str:
        return (
            f"{self.guess}, total: {self.total_guesses}, "
            f"avg: {self.average(n_answers):.4f}, max: {self.max_guesses}"
        )

    def paths(self, prefix: tuple[str, ...] = ()) -> Iterator[tuple[str, ...]]:
        """
        Yield the guesses from the root to every leaf, one path per answer.

        The winning ``"ggggg"`` leaf repeats its parent's guess, so that path
        ends with the same word twice.
        """
        line = prefix + (self.guess,)
        if self.is_leaf:
            yield line
            return
        for child in self.children.values():
            yield from child.paths(line)

    def write(self, handle) -> int:
        """Write one comma-separated line per path; returns the line count."""
        count = 0
        for path in self.paths():
            handle.write(",".join(path) + "\n")
            count += 1
        return count

    def play(self, answer: str) -> list[str]:
        """Replay the strategy against *answer* and return the guesses made."""
        node = self
        played = []
        while True:
            played.append(node.guess)
            if node.guess == answer:
                return played
            pattern = score(node.guess, answer)
            if node.is_leaf or pattern not in node.children:
                raise ValueError(f"strategy does not cover answer {answer!r}")
            node = node.children[pattern]
