from __future__ import annotations

from typing import List, Sequence, Tuple

from model import CellState, Hint

Run = Tuple[int, int]


def find_runs(line: Sequence[int]) -> List[Run]:
    """Return (start, length) for every maximal run of filled cells."""
    runs: List[Run] = []
    start = -1
    for i, cell in enumerate(line):
        if cell == CellState.FILLED:
            if start < 0:
                start = i
        elif start >= 0:
            runs.append((start, i - start))
            start = -1
    if start >= 0:
        runs.append((start, len(line) - start))
    return runs


def _min_space(values: Sequence[int]) -> int:
    """Cells needed to place these blocks with single gaps between them."""
    if not values:
        return 0
    return sum(values) + len(values) - 1


def could_be_hint(
    run: Run, index: int, values: Sequence[int], line_length: int
) -> bool:
    """Whether a run could be the block for hint `index`, judged by length and room."""
    start, length = run
    if values[index] != length:
        return False
    if start < _min_space(values[:index]):
        return False
    return line_length - start - length >= _min_space(values[index + 1:])


def update_hint_usage(
    hints: Sequence[Hint], player_line: Sequence[int], solution_line: Sequence[int]
) -> List[Hint]:
    """Recompute which hints of a line the player has satisfied.

    Incoming `used` flags are ignored. A player run marks a hint only when it
    can belong to exactly one still-unmarked hint and sits exactly where the
    solution's run for that hint does.
    """
    updated = [Hint(value=h.value, used=False) for h in hints]
    values = [h.value for h in updated]
    answer_runs = find_runs(solution_line)
    line_length = len(player_line)

    for run in find_runs(player_line):
        possible = [
            i
            for i, hint in enumerate(updated)
            if not hint.used and could_be_hint(run, i, values, line_length)
        ]
        if len(possible) != 1:
            continue
        index = possible[0]
        if index < len(answer_runs) and answer_runs[index] == run:
            updated[index].used = True
    return updated
