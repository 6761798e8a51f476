"""Simulation configuration."""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Tunables shared by the integrator, the alignment test and the predictor.

    softening is a floor on pairwise distance, not a Plummer length.
    alignment_tolerance bounds the dimensionless alignment measure
    (twice the triangle area over the squared longest side).
    """

    G: float = 0.5
    dt: float = 0.1
    softening: float = 5.0
    alignment_tolerance: float = 0.02
    step_budget: int = 100_000
    warmup_steps: int = 100

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        for name in ("G", "dt", "softening", "alignment_tolerance"):
            if not math.isfinite(getattr(self, name)):
                raise ValueError(f"{name} must be finite")
        if self.dt <= 0.0:
            raise ValueError("dt must be > 0")
        if self.G < 0.0:
            raise ValueError("G must be >= 0")
        if self.softening <= 0.0:
            raise ValueError("softening must be > 0")
        if self.alignment_tolerance < 0.0:
            raise ValueError("alignment_tolerance must be >= 0")
        if int(self.step_budget) != self.step_budget or self.step_budget < 1:
            raise ValueError("step_budget must be an integer >= 1")
        if int(self.warmup_steps) != self.warmup_steps or self.warmup_steps < 0:
            raise ValueError("warmup_steps must be an integer >= 0")

    def replace(self, **changes: Any) -> "SimulationConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict[str, float | int]:
        return dataclasses.asdict(self)
