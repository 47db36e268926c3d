from __future__ import annotations

from itertools import combinations
from math import comb
from typing import Iterable, List, Sequence, Tuple

import numpy as np

FILLED = 1
EMPTY = -1
UNKNOWN = 0

Hints = List[int]
Candidates = np.ndarray


class InvalidHint(ValueError):
    """Raised when a hint sequence cannot be placed in its line."""

    def __init__(self, hints: Sequence[int], length: int, reason: str) -> None:
        super().__init__(f"Invalid hint {list(hints)} for line of length {length}: {reason}")
        self.hints = list(hints)
        self.length = length
        self.reason = reason


def derive_hints(line: Iterable[int]) -> Hints:
    """Return the block lengths of the filled runs in a line, in order."""
    hints: Hints = []
    run = 0
    for cell in line:
        if cell == FILLED:
            run += 1
        elif run > 0:
            hints.append(run)
            run = 0
    if run > 0:
        hints.append(run)
    return hints


def row_hints(grid: Sequence[Sequence[int]]) -> List[Hints]:
    return [derive_hints(row) for row in grid]


def column_hints(grid: Sequence[Sequence[int]]) -> List[Hints]:
    if not grid:
        return []
    return [derive_hints(row[c] for row in grid) for c in range(len(grid[0]))]


def normalize_hints(hints: Sequence[int], length: int) -> Hints:
    """Drop the lone-zero alias for an empty line and check the rest.

    `[0]` and `[]` both describe an all-empty line. Anything else must be a
    run of positive blocks that fits with single-cell gaps between them.
    """
    values = list(hints)
    if values == [0]:
        return []
    for val in values:
        if isinstance(val, bool) or not isinstance(val, (int, np.integer)):
            raise InvalidHint(values, length, f"block {val!r} is not an integer")
        if val <= 0:
            raise InvalidHint(values, length, f"block {val} is not positive")
    if length < 0:
        raise InvalidHint(values, length, "negative line length")
    if values and sum(values) + len(values) - 1 > length:
        raise InvalidHint(values, length, "blocks and gaps exceed the line")
    return [int(v) for v in values]


def _slack(hints: Hints, length: int) -> int:
    if not hints:
        return length
    return length - sum(hints) - (len(hints) - 1)


def count_line_candidates(hints: Sequence[int], length: int) -> int:
    """Number of candidates `line_candidates` would generate, C(k + slack, k)."""
    values = normalize_hints(hints, length)
    if not values:
        return 1
    k = len(values)
    return comb(k + _slack(values, length), k)


def line_candidates(hints: Sequence[int], length: int) -> Candidates:
    """Enumerate every assignment of a line consistent with its hints.

    Each of the k blocks takes one of the k + slack slots; the remaining
    slots are the extra empty cells. Every block but the last is followed by
    its mandatory gap. Returns an int8 array of shape (candidates, length)
    holding FILLED and EMPTY.
    """
    values = normalize_hints(hints, length)
    if not values:
        return np.full((1, length), EMPTY, dtype=np.int8)
    k = len(values)
    slots = k + _slack(values, length)
    rows = []
    for chosen in combinations(range(slots), k):
        line = np.full(length, EMPTY, dtype=np.int8)
        pos = 0
        block = 0
        for slot in range(slots):
            if block < k and slot == chosen[block]:
                line[pos:pos + values[block]] = FILLED
                pos += values[block] + 1
                block += 1
            else:
                pos += 1
        rows.append(line)
    return np.stack(rows)


def agreed_cells(candidates: Candidates) -> List[Tuple[int, int]]:
    """Positions where every remaining candidate holds the same value.

    Returns (position, value) pairs. An empty candidate set agrees on nothing.
    """
    if candidates.shape[0] == 0:
        return []
    first = candidates[0]
    same = np.all(candidates == first, axis=0)
    return [(int(pos), int(first[pos])) for pos in np.flatnonzero(same)]


def prune(candidates: Candidates, pos: int, value: int) -> Candidates:
    """Keep only candidates holding `value` at `pos`."""
    return candidates[candidates[:, pos] == value]
