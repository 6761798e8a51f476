"""Newtonian pairwise gravity with a minimum-separation floor."""

from __future__ import annotations

import numpy as np

from ..config import SimulationConfig
from ..state.system import SystemState


class NBodyGravity:
    """Pairwise gravity where each distance is clamped to at least `softening`.

    The clamp only bounds the force magnitude; its direction is still the
    unit displacement between the two bodies (zero if they coincide).
    """

    def __init__(self, G: float = 0.5, softening: float = 5.0) -> None:
        self.G = float(G)
        self.softening = float(softening)

    @classmethod
    def from_config(cls, config: SimulationConfig) -> "NBodyGravity":
        return cls(G=config.G, softening=config.softening)

    def pairwise_forces(self, state: SystemState) -> np.ndarray:
        """Return F with F[i, j] the force on body i due to body j, shape (N, N, 2)."""
        pos = state.bodies.pos
        mass = state.bodies.mass
        n = pos.shape[0]
        if n == 0:
            return np.zeros((0, 0, 2), dtype=np.float64)
        return _pairwise_forces(pos, mass, self.G, self.softening)

    def forces(self, state: SystemState) -> np.ndarray:
        if state.bodies.pos.shape[0] < 2:
            return np.zeros_like(state.bodies.pos)
        return np.sum(self.pairwise_forces(state), axis=1)

    def acc_bodies(self, state: SystemState) -> np.ndarray:
        return self.forces(state) / state.bodies.mass[:, np.newaxis]


def _pairwise_forces(
    pos: np.ndarray,
    mass: np.ndarray,
    G: float,
    softening: float,
) -> np.ndarray:
    # delta[i, j] = pos[j] - pos[i]; negating it is exact, so F is antisymmetric.
    delta = pos[None, :, :] - pos[:, None, :]
    dist = np.sqrt(np.sum(delta * delta, axis=-1))
    clamped = np.maximum(dist, softening)

    unit = np.zeros_like(delta)
    np.divide(delta, dist[..., np.newaxis], out=unit, where=dist[..., np.newaxis] > 0.0)
    inv_d2 = np.zeros_like(dist)
    np.divide(1.0, clamped * clamped, out=inv_d2, where=clamped > 0.0)

    magnitude = G * (mass[:, None] * mass[None, :]) * inv_d2
    np.fill_diagonal(magnitude, 0.0)
    return magnitude[..., np.newaxis] * unit
