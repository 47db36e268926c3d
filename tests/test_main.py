import argparse
import json

import pytest

from main import format_board, main, parse_hint_lines, validate_puzzle_file
from model import PuzzleModel


@pytest.fixture
def puzzle_file(tmp_path, frame):
    path = tmp_path / "frame.json"
    PuzzleModel("Frame", frame, 1).save(str(path))
    return str(path)


@pytest.fixture
def ambiguous_file(tmp_path, checker_2x2):
    path = tmp_path / "checker.json"
    PuzzleModel("Checker", checker_2x2, 1).save(str(path))
    return str(path)


def test_parse_hint_lines():
    assert parse_hint_lines("2;1 1") == [[2], [1, 1]]
    assert parse_hint_lines("1,2; ;3") == [[1, 2], [], [3]]


def test_parse_hint_lines_rejects_garbage():
    with pytest.raises(argparse.ArgumentTypeError):
        parse_hint_lines("1;x")


def test_format_board():
    assert format_board([[1, -1], [0, 1]]) == "#.\n?#"


def test_solve_command(capsys):
    code = main(["solve", "--rows", "2;1 1", "--cols", "1;1;2"])
    out = capsys.readouterr().out
    assert code == 0
    assert out.splitlines()[:2] == [".##", "#.#"]
    assert "Solved successfully." in out


def test_solve_command_stalls(capsys):
    code = main(["solve", "--rows", "1;1", "--cols", "1;1"])
    out = capsys.readouterr().out
    assert code == 1
    assert out.splitlines()[:2] == ["??", "??"]


def test_solve_command_invalid_hint(capsys):
    code = main(["solve", "--rows", "3", "--cols", "1;1"])
    assert code == 1
    assert "Invalid hint" in capsys.readouterr().err


def test_validate_unique(puzzle_file, capsys):
    assert main(["validate", puzzle_file]) == 0
    assert "valid" in capsys.readouterr().out


def test_validate_ambiguous(ambiguous_file, capsys):
    assert main(["validate", ambiguous_file]) == 1
    captured = capsys.readouterr()
    assert "invalid" in captured.out
    assert "unique solution" in captured.err


def test_validate_reports_file_problems(tmp_path):
    missing = tmp_path / "missing.json"
    valid, errors, _ = validate_puzzle_file(str(missing))
    assert not valid and errors

    broken = tmp_path / "broken.json"
    broken.write_text('{"name": "x"}')
    valid, errors, _ = validate_puzzle_file(str(broken))
    assert not valid
    assert 'Missing required field: "solution"' in errors


def test_validate_warns_on_blank_puzzle(tmp_path):
    path = tmp_path / "blank.json"
    PuzzleModel(" ", [[0, 0], [0, 0]], 1).save(str(path))
    valid, errors, warnings = validate_puzzle_file(str(path))
    assert valid
    assert '"name" is empty' in warnings
    assert "Solution has no filled cells" in warnings


def test_analyze_json(puzzle_file, ambiguous_file, capsys):
    code = main(["analyze", "--json", "--workers", "2", puzzle_file, ambiguous_file])
    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report[puzzle_file]["difficulty"] == 1
    assert report[puzzle_file]["iterations"] == 1
    assert report[ambiguous_file]["solved"] is False


def test_analyze_text_and_errors(puzzle_file, tmp_path, capsys):
    missing = str(tmp_path / "missing.json")
    code = main(["analyze", puzzle_file, missing])
    captured = capsys.readouterr()
    assert code == 1
    assert f"{puzzle_file}: difficulty 1" in captured.out
    assert missing in captured.err


def test_analyze_with_config(puzzle_file, tmp_path, capsys):
    config = tmp_path / "strict.yaml"
    config.write_text("thresholds: [0.01, 0.02, 0.03, 0.04]\n")
    code = main(["analyze", "--json", "--config", str(config), puzzle_file])
    assert code == 0
    report = json.loads(capsys.readouterr().out)
    assert report[puzzle_file]["difficulty"] == 5


def test_analyze_bad_config(puzzle_file, tmp_path, capsys):
    config = tmp_path / "bad.yaml"
    config.write_text("thresholds: [0.5, 0.1, 0.2, 0.3]\n")
    assert main(["analyze", "--config", str(config), puzzle_file]) == 1
    assert "bad difficulty config" in capsys.readouterr().err
