from __future__ import annotations

import argparse
import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from config import DifficultyConfig, default_config_path, make_difficulty_config
from difficulty import DifficultyMetrics, estimate_difficulty
from model import Grid, PuzzleFormatError, PuzzleModel, check_solution
from solver import solve, solve_solution

logger = logging.getLogger(__name__)

SYMBOLS = {1: "#", -1: ".", 0: "?"}


def format_board(board: Grid) -> str:
    return "\n".join("".join(SYMBOLS[cell] for cell in row) for row in board)


def parse_hint_lines(text: str) -> List[List[int]]:
    """Parse "2;1 1;" into [[2], [1, 1], []]. Lines are ';'-separated."""
    lines = []
    for chunk in text.split(";"):
        parts = chunk.replace(",", " ").split()
        try:
            lines.append([int(p) for p in parts])
        except ValueError:
            raise argparse.ArgumentTypeError(f"Invalid hint line: {chunk!r}") from None
    return lines


def _load(path: str) -> PuzzleModel:
    return PuzzleModel.load(path)


def validate_puzzle_file(path: str) -> Tuple[bool, List[str], List[str]]:
    """Check structure and uniqueness. Returns (valid, errors, warnings)."""
    errors: List[str] = []
    warnings: List[str] = []
    try:
        puzzle = _load(path)
    except PuzzleFormatError as e:
        return False, e.errors, warnings
    except json.JSONDecodeError as e:
        return False, [f"Invalid JSON: {e}"], warnings
    except OSError as e:
        return False, [f"Cannot read {path}: {e}"], warnings

    if not puzzle.name.strip():
        warnings.append('"name" is empty')
    if not any(cell == 1 for row in puzzle.solution for cell in row):
        warnings.append("Solution has no filled cells")

    logger.info(f"{path}: {puzzle.width}x{puzzle.height}")
    grid, result = solve_solution(puzzle.solution)
    if not check_solution(grid, result.board):
        unknown = sum(row.count(0) for row in result.board)
        errors.append(
            "Puzzle does not have a unique solution "
            f"({result.message} {unknown} cells left undetermined)"
        )
    return not errors, errors, warnings


def _analyze_one(path: str, config: DifficultyConfig) -> Tuple[str, Optional[DifficultyMetrics], str]:
    try:
        puzzle = _load(path)
        return path, estimate_difficulty(puzzle.solution, config), ""
    except (PuzzleFormatError, OSError, json.JSONDecodeError) as e:
        return path, None, str(e)


def cmd_validate(args) -> int:
    valid, errors, warnings = validate_puzzle_file(args.file)
    for w in warnings:
        print(f"warning: {w}")
    for e in errors:
        print(f"error: {e}", file=sys.stderr)
    print("valid" if valid else "invalid")
    return 0 if valid else 1


def cmd_analyze(args) -> int:
    try:
        config = make_difficulty_config(args.config or default_config_path())
    except (OSError, ValueError, TypeError) as e:
        print(f"error: bad difficulty config: {e}", file=sys.stderr)
        return 1

    with ThreadPoolExecutor(max_workers=max(1, args.workers)) as pool:
        results = list(pool.map(lambda p: _analyze_one(p, config), args.files))

    status = 0
    report = {}
    for path, metrics, err in results:
        if metrics is None:
            print(f"error: {path}: {err}", file=sys.stderr)
            status = 1
            continue
        if args.json:
            report[path] = metrics.to_dict()
        else:
            print(
                f"{path}: difficulty {metrics.difficulty} "
                f"(raw {metrics.raw_score:.3f}, {metrics.iterations} rounds, "
                f"{metrics.first_pass_percent:.1f}% first pass, "
                f"{metrics.initial_forced_cells} forced, "
                f"{metrics.avg_possibilities:.1f} avg candidates)"
            )
    if args.json:
        print(json.dumps(report, indent=2))
    return status


def cmd_solve(args) -> int:
    try:
        result = solve(args.rows, args.cols, logger_fn=logger.debug)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    print(format_board(result.board))
    print(f"{result.message} ({result.rounds} rounds, {result.duration_ms} ms)")
    return 0 if result.solved else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nonogram solver and difficulty tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("validate", help="Check a puzzle file has a unique solution.")
    p.add_argument("file")
    p.set_defaults(func=cmd_validate)

    p = sub.add_parser("analyze", help="Rate the difficulty of puzzle files.")
    p.add_argument("files", nargs="+")
    p.add_argument("--config", default=None, help="YAML difficulty config.")
    p.add_argument("--workers", type=int, default=1)
    p.add_argument("--json", action="store_true", help="Print metrics as JSON.")
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("solve", help="Solve from row and column hints.")
    p.add_argument("--rows", type=parse_hint_lines, required=True, help='e.g. "2;1 1"')
    p.add_argument("--cols", type=parse_hint_lines, required=True, help='e.g. "1;1;2"')
    p.set_defaults(func=cmd_solve)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
