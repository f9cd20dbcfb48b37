"""
wordle_solver.py

CLI that builds a full Wordle decision tree and writes it to disk.

Every root guess considered is reported with its total, average and worst
case guess counts; the best tree is then written as one comma-separated line
of guesses per answer.

Optional:
-n-guesses N: ranked guesses explored at every node (default 20).
-answers-only: only allow guesses from the answer list.
-starting-word WORD: force the first guess.
-workers N: worker processes for the shallow levels (default: CPU count).
-output PATH: where to write the tree (default out.txt).
"""

import argparse
import os

from tqdm import tqdm

from wordle_tree.patterns import load_or_build_matrix
from wordle_tree.search import DEFAULT_BREADTH, Found, SearchParameters, solve
from wordle_tree.words import ANSWERS_PATH, DATA_DIR, GUESSES_PATH, load_words, prepare_pools


DEFAULT_OUTPUT = "out.txt"
DEFAULT_CACHE = DATA_DIR / "pattern_matrix.npy"


def run_solver(
    answers,
    guesses,
    params,
    output,
    workers=None,
    cache_path=None,
    sources=(),
    progress_mode="bar",
):
    guess_pool, answer_pool = prepare_pools(answers, guesses, params.answers_only)
    n_answers = len(answer_pool)

    print(f"{n_answers:,} answers, {len(guess_pool):,} allowed guesses.")
    matrix = load_or_build_matrix(guess_pool, answer_pool, cache_path, sources)

    n_candidates = 1 if params.starting_word is not None else min(params.breadth, len(guess_pool))
    worker_count = workers if workers is not None else (os.cpu_count() or 1)

    print(
        f"Searching {n_candidates} root guess(es), breadth {params.breadth}, "
        f"using {worker_count} worker(s)...\n"
    )

    with tqdm(total=n_candidates, desc="Root guess", disable=progress_mode == "off") as bar:

        def announce(guess):
            bar.set_postfix_str(f"{guess}...")

        def report(guess, result):
            bar.update(1)
            if isinstance(result, Found):
                tqdm.write(result.tree.summary(n_answers))
            else:
                tqdm.write(f"{guess}: no strategy within {params.max_depth} guesses")

        result = solve(
            answer_pool,
            guess_pool,
            params,
            workers=worker_count,
            matrix=matrix,
            on_start=announce,
            on_candidate=report,
        )

    if not isinstance(result, Found):
        raise SystemExit(f"No strategy found within {params.max_depth} guesses.")

    tree = result.tree
    print("\nDone!")
    print(tree.summary(n_answers))

    with open(output, "w", encoding="ascii") as handle:
        lines = tree.write(handle)
    print(f"Wrote {lines:,} answer paths to {output}.")
    return tree


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Build a Wordle decision tree minimizing total guesses."
    )
    parser.add_argument(
        "-n-guesses",
        type=int,
        default=DEFAULT_BREADTH,
        help=f"Ranked guesses explored at every node (default: {DEFAULT_BREADTH}).",
    )
    parser.add_argument(
        "-answers-only",
        action="store_true",
        help="Only allow guesses from the answer list.",
    )
    parser.add_argument(
        "-starting-word",
        type=str,
        default=None,
        help="Force the first guess instead of searching for it.",
    )
    parser.add_argument(
        "-workers",
        type=int,
        default=None,
        help="Worker processes for the shallow search levels (default: CPU count).",
    )
    parser.add_argument(
        "-answers",
        type=str,
        default=str(ANSWERS_PATH),
        help="Newline-separated answer list.",
    )
    parser.add_argument(
        "-guesses",
        type=str,
        default=str(GUESSES_PATH),
        help="Newline-separated list of guess-only words.",
    )
    parser.add_argument(
        "-output",
        type=str,
        default=DEFAULT_OUTPUT,
        help=f"Where to write the tree, one answer path per line (default: {DEFAULT_OUTPUT}).",
    )
    parser.add_argument(
        "-cache",
        type=str,
        default=str(DEFAULT_CACHE),
        help="Pattern matrix cache file.",
    )
    parser.add_argument(
        "-no-cache",
        action="store_true",
        help="Always rebuild the pattern matrix and do not save it.",
    )
    parser.add_argument(
        "-progress",
        choices=("bar", "off"),
        default="bar",
        help="Progress output style (default: bar).",
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    print("Wordle solver!")

    try:
        answers, guesses = load_words(args.answers, args.guesses)
        params = SearchParameters(
            breadth=args.n_guesses,
            answers_only=args.answers_only,
            starting_word=args.starting_word,
        )
        run_solver(
            answers,
            guesses,
            params,
            args.output,
            workers=args.workers,
            cache_path=None if args.no_cache else args.cache,
            sources=(args.answers, args.guesses),
            progress_mode=args.progress,
        )
    except (ValueError, FileNotFoundError) as exc:
        raise SystemExit(str(exc)) from exc


if __name__ == "__main__":
    main()
