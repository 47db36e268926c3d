"""
Difficulty estimation from the solver's own behaviour.

Factors, each normalized to [0, 1] where 1 is hard:
1. First round progress - share of cells left after the first round
2. Rounds needed - relative to the size of the puzzle
3. Single-line forced cells - share of cells no single line decides alone
4. Candidate space - log-scaled average initial candidates per line
"""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Dict, Optional, Sequence

from config import DifficultyConfig
from solver import SolveTrace, solve_solution

logger = logging.getLogger(__name__)


@dataclass
class DifficultyMetrics:
    difficulty: int
    raw_score: float
    first_pass_cells: int
    total_cells: int
    first_pass_percent: float
    iterations: int
    initial_forced_cells: int
    avg_possibilities: float
    solved: bool

    def to_dict(self) -> Dict:
        return asdict(self)


def calculate_raw_score(
    first_pass_cells: int,
    total_cells: int,
    iterations: int,
    initial_forced_cells: int,
    avg_possibilities: float,
    config: Optional[DifficultyConfig] = None,
) -> float:
    """Weighted combination of the four factors, in [0, 1] for default weights."""
    config = config or DifficultyConfig()
    weights = config.weights

    first_pass_score = 1 - first_pass_cells / total_cells

    expected_rounds = math.sqrt(total_cells) * config.expected_rounds_factor
    iteration_score = min(1.0, max(0, iterations - 1) / (expected_rounds * 2))

    forced_score = 1 - initial_forced_cells / total_cells

    possibility_score = min(
        1.0, math.log10(avg_possibilities + 1) / config.possibility_log_divisor
    )

    return (
        first_pass_score * weights["first_pass"]
        + iteration_score * weights["iterations"]
        + forced_score * weights["forced"]
        + possibility_score * weights["possibilities"]
    )


def score_to_bucket(raw_score: float, config: Optional[DifficultyConfig] = None) -> int:
    thresholds = (config or DifficultyConfig()).thresholds
    for bucket, limit in enumerate(thresholds, start=1):
        if raw_score < limit:
            return bucket
    return len(thresholds) + 1


def metrics_from_trace(
    trace: SolveTrace,
    total_cells: int,
    solved: bool = True,
    config: Optional[DifficultyConfig] = None,
) -> DifficultyMetrics:
    first_pass_cells = trace.cells_per_round[0] if trace.cells_per_round else 0
    counts = trace.initial_candidate_counts
    avg_possibilities = sum(counts) / len(counts) if counts else 0.0
    raw = calculate_raw_score(
        first_pass_cells,
        total_cells,
        trace.rounds,
        trace.initial_forced_cells,
        avg_possibilities,
        config,
    )
    return DifficultyMetrics(
        difficulty=score_to_bucket(raw, config),
        raw_score=raw,
        first_pass_cells=first_pass_cells,
        total_cells=total_cells,
        first_pass_percent=first_pass_cells / total_cells * 100,
        iterations=trace.rounds,
        initial_forced_cells=trace.initial_forced_cells,
        avg_possibilities=avg_possibilities,
        solved=solved,
    )


def estimate_difficulty(
    solution: Sequence[Sequence[int]], config: Optional[DifficultyConfig] = None
) -> DifficultyMetrics:
    """Rate a solution grid 1 (easy) to 5 (hard) by solving its derived hints."""
    trace = SolveTrace()
    grid, result = solve_solution(solution, trace=trace)
    total_cells = len(grid) * len(grid[0])
    metrics = metrics_from_trace(trace, total_cells, result.solved, config)
    logger.debug(
        f"difficulty {metrics.difficulty} (raw {metrics.raw_score:.3f}, "
        f"{metrics.iterations} rounds, {metrics.first_pass_percent:.1f}% first pass)"
    )
    return metrics


def rate_difficulty(
    solution: Sequence[Sequence[int]], config: Optional[DifficultyConfig] = None
) -> int:
    return estimate_difficulty(solution, config).difficulty
