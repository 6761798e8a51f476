"""Body diagnostics."""

from __future__ import annotations

import numpy as np

from ..state.system import SystemState


def total_mass(state: SystemState) -> float:
    if state.bodies.mass.size == 0:
        return 0.0
    return float(np.sum(state.bodies.mass))


def center_of_mass(state: SystemState) -> np.ndarray:
    if state.bodies.mass.size == 0:
        raise ValueError("cannot compute center of mass for empty body set")
    m = state.bodies.mass
    return np.sum(state.bodies.pos * m[:, np.newaxis], axis=0) / np.sum(m)


def linear_momentum(state: SystemState) -> np.ndarray:
    if state.bodies.mass.size == 0:
        return np.zeros(2, dtype=np.float64)
    m = state.bodies.mass
    return np.sum(state.bodies.vel * m[:, np.newaxis], axis=0)


def kinetic_energy(state: SystemState) -> float:
    if state.bodies.mass.size == 0:
        return 0.0
    v2 = np.sum(state.bodies.vel**2, axis=1)
    return float(0.5 * np.sum(state.bodies.mass * v2))


def potential_energy_gravity(
    state: SystemState, G: float, softening: float = 0.0
) -> float:
    """Pairwise potential with distances clamped to `softening`, like the force."""
    pos = state.bodies.pos
    mass = state.bodies.mass
    n = pos.shape[0]
    if n < 2:
        return 0.0

    delta = pos[None, :, :] - pos[:, None, :]
    dist = np.sqrt(np.sum(delta * delta, axis=-1))
    iu = np.triu_indices(n, k=1)
    d = np.maximum(dist[iu], softening)
    mprod = mass[iu[0]] * mass[iu[1]]
    with np.errstate(divide="ignore"):
        return float(-G * np.sum(mprod / d))


def total_energy_gravity(state: SystemState, G: float, softening: float = 0.0) -> float:
    return kinetic_energy(state) + potential_energy_gravity(state, G, softening)
