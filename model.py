from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Sequence

from constraints import column_hints, row_hints


class CellState(IntEnum):
    EMPTY = 0
    FILLED = 1
    CROSSED_OUT = 2


Grid = List[List[int]]


@dataclass
class Hint:
    value: int
    used: bool = False


class PuzzleFormatError(ValueError):
    def __init__(self, errors: Sequence[str]) -> None:
        super().__init__("; ".join(errors) if errors else "Invalid puzzle")
        self.errors = list(errors)


def validate_solution(solution: Any) -> List[str]:
    """Return a list of problems with a solution grid, empty if it is usable."""
    if not isinstance(solution, list):
        return ['"solution" must be a 2D array']
    if not solution:
        return ['"solution" cannot be empty']
    if not isinstance(solution[0], list) or not solution[0]:
        return ["Solution rows cannot be empty"]
    width = len(solution[0])
    errors: List[str] = []
    for r, row in enumerate(solution):
        if not isinstance(row, list):
            errors.append(f"Row {r} is not an array")
            continue
        if len(row) != width:
            errors.append(f"Row {r} has {len(row)} cells, expected {width}")
            continue
        for c, cell in enumerate(row):
            if isinstance(cell, bool) or cell not in (CellState.EMPTY, CellState.FILLED):
                errors.append(
                    f"Invalid cell value at [{r}][{c}]: {cell!r} (must be 0 or 1)"
                )
    return errors


def require_solution(solution: Any) -> Grid:
    errors = validate_solution(solution)
    if errors:
        raise ValueError("; ".join(errors))
    return [[int(cell) for cell in row] for row in solution]


def _is_filled(cell: int) -> bool:
    return cell == CellState.FILLED


def check_solution(solution: Sequence[Sequence[int]], game_state: Sequence[Sequence[int]]) -> bool:
    """True when a play grid agrees with the solution.

    Crossed-out cells are treated as "not filled": they fail only where the
    solution is filled. Empty play cells fail where the solution is filled.
    """
    height = len(solution)
    width = len(solution[0]) if height else 0
    if len(game_state) != height or any(len(row) != width for row in game_state):
        return False
    for r in range(height):
        for c in range(width):
            if _is_filled(game_state[r][c]) != _is_filled(solution[r][c]):
                return False
    return True


def is_line_complete(
    solution: Sequence[Sequence[int]],
    game_state: Sequence[Sequence[int]],
    is_row: bool,
    index: int,
) -> bool:
    if is_row:
        line = game_state[index]
        answer = solution[index]
    else:
        line = [row[index] for row in game_state]
        answer = [row[index] for row in solution]
    return all(
        not (_is_filled(want) and not _is_filled(have))
        for have, want in zip(line, answer)
    )


def hint_records(values: Sequence[int]) -> List[Hint]:
    return [Hint(value=v) for v in values]


class PuzzleModel:
    def __init__(self, name: str, solution: Grid, difficulty: int = 1) -> None:
        self.name = name
        self.solution = solution
        self.difficulty = difficulty

    @property
    def height(self) -> int:
        return len(self.solution)

    @property
    def width(self) -> int:
        return len(self.solution[0]) if self.solution else 0

    def row_hints(self) -> List[List[int]]:
        return row_hints(self.solution)

    def column_hints(self) -> List[List[int]]:
        return column_hints(self.solution)

    def empty_game_state(self) -> Grid:
        return [[CellState.EMPTY for _ in range(self.width)] for _ in range(self.height)]

    def copy_grid(self) -> Grid:
        return [list(row) for row in self.solution]

    def validate(self) -> List[str]:
        errors: List[str] = []
        if not isinstance(self.name, str):
            errors.append('"name" must be a string')
        if isinstance(self.difficulty, bool) or not isinstance(self.difficulty, int):
            errors.append('"difficulty" must be a number')
        elif not 1 <= self.difficulty <= 5:
            errors.append('"difficulty" must be an integer between 1 and 5')
        errors.extend(validate_solution(self.solution))
        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "difficulty": self.difficulty,
            "solution": self.copy_grid(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "PuzzleModel":
        if not isinstance(data, dict):
            raise PuzzleFormatError(["Puzzle must be a JSON object"])
        missing = [
            f'Missing required field: "{key}"'
            for key in ("name", "difficulty", "solution")
            if key not in data
        ]
        if missing:
            raise PuzzleFormatError(missing)
        puzzle = cls(data["name"], data["solution"], data["difficulty"])
        errors = puzzle.validate()
        if errors:
            raise PuzzleFormatError(errors)
        return puzzle

    @classmethod
    def load(cls, path: str) -> "PuzzleModel":
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)
