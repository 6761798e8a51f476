"""Collinearity tests over body positions.

Only the first three bodies are tested by default, whatever the body count.
Other triples can be tested through `SubsetCollinear`.

The alignment measure is dimensionless: twice the triangle area divided by
the squared longest side, i.e. the triangle height over its longest side
relative to that side's length. Uniform scaling leaves it unchanged.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable, Protocol, Sequence

import numpy as np

from .config import SimulationConfig
from .errors import InsufficientBodies
from .state.system import SystemState


FIRST_THREE = (0, 1, 2)


class AlignmentPredicate(Protocol):
    """Decides alignment over the three bodies at `indices`."""

    indices: tuple[int, int, int]

    def __call__(self, state: SystemState, config: SimulationConfig) -> bool:
        """Return True when the state counts as aligned."""


@dataclass(frozen=True, slots=True)
class EclipseOrder:
    middle: Hashable
    observer: Hashable
    occulted: Hashable


def triangle_area(p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]) -> float:
    """Shoelace area of the triangle p1, p2, p3."""
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])
    x3, y3 = float(p3[0]), float(p3[1])
    return 0.5 * abs(x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2))


def _triple(state: SystemState, indices: Sequence[int]) -> np.ndarray:
    n = state.n_bodies
    if n < 3:
        raise InsufficientBodies(n)
    if len(indices) != 3 or len(set(indices)) != 3:
        raise ValueError("alignment needs three distinct body indices")
    for i in indices:
        if not -n <= i < n:
            raise IndexError("body index out of range")
    return state.bodies.pos[list(indices)]


def _side_lengths(p: np.ndarray) -> tuple[float, float, float]:
    """Return |p0p1|, |p1p2|, |p0p2|."""
    return (
        math.hypot(p[1, 0] - p[0, 0], p[1, 1] - p[0, 1]),
        math.hypot(p[2, 0] - p[1, 0], p[2, 1] - p[1, 1]),
        math.hypot(p[2, 0] - p[0, 0], p[2, 1] - p[0, 1]),
    )


def alignment_measure(
    state: SystemState, indices: Sequence[int] = FIRST_THREE
) -> float:
    """Dimensionless deviation of three bodies from a common line.

    Coincident points count as perfectly aligned and return 0.0.
    """
    p = _triple(state, indices)
    d_max = max(_side_lengths(p))
    if d_max == 0.0:
        return 0.0
    area = triangle_area(p[0], p[1], p[2])
    return 2.0 * area / (d_max * d_max)


def alignment_error(state: SystemState, indices: Sequence[int] = FIRST_THREE) -> float:
    """Sine of the angle at the first body between the rays to the other two."""
    p = _triple(state, indices)
    ab = p[1] - p[0]
    ac = p[2] - p[0]
    ab_len = math.hypot(ab[0], ab[1])
    ac_len = math.hypot(ac[0], ac[1])
    if ab_len == 0.0 or ac_len == 0.0:
        return math.inf
    cross = abs(ab[0] * ac[1] - ab[1] * ac[0])
    return float(cross / (ab_len * ac_len))


def eclipse_order(state: SystemState, indices: Sequence[int] = FIRST_THREE) -> EclipseOrder:
    """Name the body lying between the other two.

    The middle body is the one opposite the longest side; the observer and
    occulted bodies keep their relative order from `indices`.
    """
    p = _triple(state, indices)
    ids = state.bodies.ids
    i, j, k = (ids[x] for x in indices)
    d01, d12, d02 = _side_lengths(p)
    longest = max(d01, d12, d02)
    if longest == d02:
        return EclipseOrder(middle=j, observer=i, occulted=k)
    if longest == d12:
        return EclipseOrder(middle=i, observer=j, occulted=k)
    return EclipseOrder(middle=k, observer=i, occulted=j)


@dataclass(frozen=True, slots=True)
class SubsetCollinear:
    indices: tuple[int, int, int] = FIRST_THREE

    def __call__(self, state: SystemState, config: SimulationConfig) -> bool:
        return alignment_measure(state, self.indices) < config.alignment_tolerance


def is_aligned(state: SystemState, config: SimulationConfig) -> bool:
    """True when the first three bodies are collinear within tolerance."""
    return alignment_measure(state) < config.alignment_tolerance
