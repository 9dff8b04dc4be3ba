import logging

import pytest

from catmaze.__main__ import main


@pytest.fixture(autouse=True)
def _drop_cli_log_handlers():
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
    root.setLevel(level)


def test_print_maze(capsys):
    assert main(["--print-maze", "11", "--seed", "7"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 11
    assert all(len(line) == 11 for line in lines)
    assert lines[1][0] == "."
    assert lines[9][10] == "."

    assert main(["--print-maze", "11", "--seed", "7"]) == 0
    assert capsys.readouterr().out.strip().splitlines() == lines


def test_print_maze_rejects_even_size(capsys):
    assert main(["--print-maze", "10"]) == 2
    assert "odd" in capsys.readouterr().err


def test_headless_run(capsys):
    rc = main(["--headless", "--difficulty", "easy", "--seed", "1", "--max-steps", "3", "--tick-rate", "0"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "catmaze (headless)" in out
    assert "Loop complete (steps=" in out
    assert '"maze_size": 11' in out


def test_auto_mode_honours_headless_env(monkeypatch, capsys):
    monkeypatch.setenv("CATMAZE_HEADLESS", "1")
    monkeypatch.delenv("CATMAZE_DIFFICULTY", raising=False)
    assert main(["--seed", "2", "--max-steps", "2", "--tick-rate", "0"]) == 0
    out = capsys.readouterr().out
    assert "catmaze (headless)" in out
    assert '"difficulty": "medium"' in out


def test_invalid_env_difficulty_is_reported(monkeypatch, capsys):
    monkeypatch.setenv("CATMAZE_DIFFICULTY", "impossible")
    assert main(["--headless", "--max-steps", "1"]) == 2
    assert "Unknown difficulty" in capsys.readouterr().err
