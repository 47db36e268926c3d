from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np

from constraints import (
    UNKNOWN,
    Candidates,
    agreed_cells,
    column_hints,
    line_candidates,
    prune,
    row_hints,
)
from model import Grid, check_solution, require_solution

logger = logging.getLogger(__name__)

Line = Tuple[bool, int]


@dataclass
class SolveTrace:
    """Instrumentation collected while solving, used for difficulty ratings."""

    cells_per_round: List[int] = field(default_factory=list)
    initial_candidate_counts: List[int] = field(default_factory=list)
    initial_forced_cells: int = 0

    @property
    def rounds(self) -> int:
        return len(self.cells_per_round)

    def record_initial(
        self, rows: Sequence[Candidates], cols: Sequence[Candidates]
    ) -> None:
        self.cells_per_round = []
        self.initial_candidate_counts = [c.shape[0] for c in rows] + [
            c.shape[0] for c in cols
        ]
        forced = sum(len(agreed_cells(c)) for c in rows) + sum(
            len(agreed_cells(c)) for c in cols
        )
        # Every cell is seen from its row and its column
        self.initial_forced_cells = forced // 2


@dataclass
class SolverResult:
    status: str
    board: Grid
    rounds: int
    duration_ms: int
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.status == "solved"


def _check_hint_list(hints: Sequence[Sequence[int]], kind: str) -> List[List[int]]:
    if isinstance(hints, (str, bytes)):
        raise ValueError(f"{kind} hints must be a list of lists of ints")
    checked = []
    for i, line in enumerate(hints):
        if isinstance(line, (str, bytes)) or not hasattr(line, "__iter__"):
            raise ValueError(f"{kind} hint {i} must be a list of ints, got {line!r}")
        checked.append(list(line))
    return checked


class NonogramSolver:
    """Line-crossing solver: intersect row and column candidates to a fixed point.

    Candidate sets are generated once here and copied per `solve` call, so a
    solver instance can be solved repeatedly with identical results.
    """

    def __init__(
        self, row_hints: Sequence[Sequence[int]], col_hints: Sequence[Sequence[int]]
    ) -> None:
        self.row_hints = _check_hint_list(row_hints, "Row")
        self.col_hints = _check_hint_list(col_hints, "Column")
        self.height = len(self.row_hints)
        self.width = len(self.col_hints)
        self.row_candidates = [line_candidates(h, self.width) for h in self.row_hints]
        self.col_candidates = [line_candidates(h, self.height) for h in self.col_hints]

    def round_limit(self) -> int:
        return max(1, self.height * self.width)

    def _order_lines(
        self,
        rows: Sequence[Candidates],
        cols: Sequence[Candidates],
        rows_done: List[bool],
        cols_done: List[bool],
    ) -> List[Line]:
        pending = [
            (rows[i].shape[0], 0, i) for i in range(self.height) if not rows_done[i]
        ] + [(cols[i].shape[0], 1, i) for i in range(self.width) if not cols_done[i]]
        pending.sort()
        return [(kind == 0, idx) for _count, kind, idx in pending]

    def solve(
        self,
        trace: Optional[SolveTrace] = None,
        logger_fn: Optional[Callable[[str], None]] = None,
    ) -> SolverResult:
        start = time.time()
        board = np.zeros((self.height, self.width), dtype=np.int8)
        rows = [c.copy() for c in self.row_candidates]
        cols = [c.copy() for c in self.col_candidates]
        rows_done = [False] * self.height
        cols_done = [False] * self.width
        if trace is not None:
            trace.record_initial(rows, cols)

        logger.debug(f"solve start: {self.height}x{self.width}")
        # Hard cap only; a round without a new cell or lock ends the loop first
        max_rounds = self.round_limit()
        status = "stalled"
        rounds = 0
        while rounds < max_rounds:
            rounds += 1
            known_before = int(np.count_nonzero(board))
            locked_before = sum(rows_done) + sum(cols_done)

            for is_row, idx in self._order_lines(rows, cols, rows_done, cols_done):
                done = rows_done if is_row else cols_done
                if done[idx]:
                    continue
                cands = rows[idx] if is_row else cols[idx]
                determined = 0
                for pos, val in agreed_cells(cands):
                    r, c = (idx, pos) if is_row else (pos, idx)
                    if board[r, c] != UNKNOWN:
                        continue
                    board[r, c] = val
                    determined += 1
                    if is_row:
                        cols[c] = prune(cols[c], r, val)
                    else:
                        rows[r] = prune(rows[r], c, val)
                line = board[idx] if is_row else board[:, idx]
                if not np.any(line == UNKNOWN):
                    done[idx] = True
                if logger_fn and determined:
                    kind = "Row" if is_row else "Col"
                    logger_fn(
                        f"{kind} {idx + 1}: {determined} cells determined "
                        f"from {cands.shape[0]} candidates"
                    )

            newly_known = int(np.count_nonzero(board)) - known_before
            if trace is not None:
                trace.cells_per_round.append(newly_known)
            if all(rows_done) and all(cols_done):
                status = "solved"
                break
            if newly_known == 0 and sum(rows_done) + sum(cols_done) == locked_before:
                break

        message = "Solved successfully."
        empty_lines = [f"row {i + 1}" for i, c in enumerate(rows) if c.shape[0] == 0]
        empty_lines += [f"column {i + 1}" for i, c in enumerate(cols) if c.shape[0] == 0]
        if empty_lines:
            status = "stalled"
            message = f"Contradictory hints: no arrangement left for {', '.join(empty_lines)}."
            logger.warning(message)
        elif status != "solved":
            unknown = int(np.count_nonzero(board == UNKNOWN))
            message = f"Stalled with {unknown} undetermined cells."

        duration_ms = int((time.time() - start) * 1000)
        logger.debug(f"solve end: {status} after {rounds} rounds in {duration_ms} ms")
        return SolverResult(
            status=status,
            board=board.tolist(),
            rounds=rounds,
            duration_ms=duration_ms,
            message=message,
        )


def solve(
    row_hints: Sequence[Sequence[int]],
    col_hints: Sequence[Sequence[int]],
    logger_fn: Optional[Callable[[str], None]] = None,
) -> SolverResult:
    return NonogramSolver(row_hints, col_hints).solve(logger_fn=logger_fn)


def solve_solution(
    solution: Sequence[Sequence[int]], trace: Optional[SolveTrace] = None
) -> Tuple[Grid, SolverResult]:
    """Solve the hints derived from a solution grid."""
    grid = require_solution(solution)
    solver = NonogramSolver(row_hints(grid), column_hints(grid))
    return grid, solver.solve(trace=trace)


def has_unique_solution(solution: Sequence[Sequence[int]]) -> bool:
    """True if the solution's own hints pin down every cell to that solution."""
    grid, result = solve_solution(solution)
    return check_solution(grid, result.board)
