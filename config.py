"""
Difficulty scoring configuration.

The weights and bucket thresholds were tuned by hand against existing puzzle
ratings. They can be overridden from a YAML file, e.g.

    weights:
      first_pass: 0.35
      iterations: 0.25
    thresholds: [0.15, 0.30, 0.50, 0.70]
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from typing import Dict, Optional, Tuple

import yaml

CONFIG_ENV_VAR = "NONOGRAM_DIFFICULTY_CONFIG"


def _default_weights() -> Dict[str, float]:
    return {
        "first_pass": 0.35,
        "iterations": 0.25,
        "forced": 0.25,
        "possibilities": 0.15,
    }


@dataclass
class DifficultyConfig:
    """Weights and cut-offs for mapping a solver trace to a 1-5 rating."""

    weights: Dict[str, float] = field(default_factory=_default_weights)

    # Expected rounds are this fraction of sqrt(total cells)
    expected_rounds_factor: float = 0.5

    # log10(avg candidates + 1) / possibility_log_divisor, capped at 1
    possibility_log_divisor: float = 3.0

    # Raw score below thresholds[i] maps to bucket i + 1
    thresholds: Tuple[float, ...] = (0.15, 0.30, 0.50, 0.70)

    def __post_init__(self):
        merged = _default_weights()
        unknown = set(self.weights) - set(merged)
        if unknown:
            raise ValueError(f"Unknown difficulty weights: {sorted(unknown)}")
        merged.update({k: float(v) for k, v in self.weights.items()})
        if any(v < 0 for v in merged.values()):
            raise ValueError(f"Difficulty weights must be non-negative: {merged}")
        self.weights = merged

        self.thresholds = tuple(float(t) for t in self.thresholds)
        if len(self.thresholds) != 4:
            raise ValueError("Exactly four bucket thresholds are required")
        if any(a >= b for a, b in zip(self.thresholds, self.thresholds[1:])):
            raise ValueError(
                f"Bucket thresholds must be strictly increasing: {self.thresholds}"
            )
        if self.expected_rounds_factor <= 0:
            raise ValueError("expected_rounds_factor must be positive")
        if self.possibility_log_divisor <= 0:
            raise ValueError("possibility_log_divisor must be positive")


def load_config(yaml_path: str) -> dict:
    """Load a difficulty config mapping from a YAML file."""
    with open(yaml_path, "r") as f:
        return yaml.safe_load(f) or {}


def make_difficulty_config(
    yaml_path: Optional[str] = None, **overrides
) -> DifficultyConfig:
    """Build a DifficultyConfig from YAML (if given) and keyword overrides.

    Keys that are not fields of DifficultyConfig are ignored.
    """
    known = {f.name for f in fields(DifficultyConfig)}
    values = {}
    if yaml_path:
        values.update(load_config(yaml_path))
    values.update(overrides)
    return DifficultyConfig(**{k: v for k, v in values.items() if k in known})


def default_config_path() -> Optional[str]:
    return os.getenv(CONFIG_ENV_VAR) or None
