"""Tests for the command-line entry point."""

import pytest

import wordle_solver


ANSWERS = ["cigar", "rebut", "sissy", "humph", "awake", "blush", "focal", "evade"]


@pytest.fixture
def word_files(tmp_path):
    answers = tmp_path / "answers.txt"
    guesses = tmp_path / "guesses.txt"
    answers.write_text("\n".join(ANSWERS) + "\n")
    guesses.write_text("slate\ncrane\n")
    return answers, guesses


def run(word_files, tmp_path, *extra):
    answers, guesses = word_files
    output = tmp_path / "out.txt"
    wordle_solver.main([
        "-answers", str(answers),
        "-guesses", str(guesses),
        "-output", str(output),
        "-workers", "1",
        "-progress", "off",
        "-no-cache",
        *extra,
    ])
    return output


class TestMain:

    def test_writes_one_line_per_answer(self, word_files, tmp_path, capsys):
        output = run(word_files, tmp_path, "-n-guesses", "3")
        lines = output.read_text().splitlines()
        assert len(lines) == len(ANSWERS)
        assert sorted(line.split(",")[-1] for line in lines) == sorted(ANSWERS)
        assert len({line.split(",")[0] for line in lines}) == 1

        out = capsys.readouterr().out
        assert "Wordle solver!" in out
        assert "Done!" in out

    def test_starting_word(self, word_files, tmp_path):
        output = run(word_files, tmp_path, "-starting-word", "crane")
        lines = output.read_text().splitlines()
        assert all(line.startswith("crane,") for line in lines)

    def test_cache_file(self, word_files, tmp_path):
        answers, guesses = word_files
        cache = tmp_path / "matrix.npy"
        output = tmp_path / "out.txt"
        wordle_solver.main([
            "-answers", str(answers),
            "-guesses", str(guesses),
            "-output", str(output),
            "-workers", "1",
            "-progress", "off",
            "-cache", str(cache),
            "-answers-only",
        ])
        assert cache.exists()
        assert output.exists()

    def test_bad_starting_word(self, word_files, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            run(word_files, tmp_path, "-starting-word", "cran")
        assert "invalid word" in str(excinfo.value)

    def test_missing_word_list(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            wordle_solver.main(["-answers", str(tmp_path / "nope.txt"), "-progress", "off"])
        assert "word list not found" in str(excinfo.value)
