"""Integrator interfaces and implementations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from ..config import SimulationConfig
from ..forces.base import BodyModel
from ..forces.nbody_gravity import NBodyGravity
from ..state.system import SystemState


class Integrator(Protocol):
    def step(self, state: SystemState, model: BodyModel, dt: float) -> None:
        """Advance state by one fixed step (mutating)."""


@dataclass(slots=True)
class SymplecticEuler:
    """Kick with forces at the current positions, then drift with the new velocity."""

    def step(self, state: SystemState, model: BodyModel, dt: float) -> None:
        bodies = state.bodies
        if bodies.pos.shape[0] == 0:
            return
        a = model.acc_bodies(state)
        bodies.vel += a * dt
        bodies.pos += bodies.vel * dt
        state.elapsed_time += dt


def step(system: SystemState, config: SimulationConfig) -> None:
    """Advance `system` in place by one `config.dt` under mutual gravity."""
    SymplecticEuler().step(system, NBodyGravity.from_config(config), config.dt)
