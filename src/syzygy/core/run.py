"""Simulation run loop with optional sampling."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from .config import SimulationConfig
from .forces.base import BodyModel
from .forces.nbody_gravity import NBodyGravity
from .integrators import Integrator, SymplecticEuler
from .state.system import SystemState


@dataclass(slots=True)
class RunResult:
    final_state: SystemState
    time: np.ndarray | None = None
    pos: np.ndarray | None = None
    vel: np.ndarray | None = None


def run(
    state: SystemState,
    config: SimulationConfig,
    steps: int,
    sample_every: int | None = None,
    callback: Callable[[int, SystemState], None] | None = None,
    model: BodyModel | None = None,
    integrator: Integrator | None = None,
) -> RunResult:
    """Advance `state` in place by `steps` steps of `config.dt`.

    With `sample_every`, positions and velocities are recorded at step 0 and
    every `sample_every` steps after it, in memory only.
    """
    if steps < 0:
        raise ValueError("steps must be >= 0")
    if sample_every is not None and sample_every <= 0:
        raise ValueError("sample_every must be > 0")
    model = model if model is not None else NBodyGravity.from_config(config)
    integrator = integrator if integrator is not None else SymplecticEuler()

    times: list[float] = []
    pos: list[np.ndarray] = []
    vel: list[np.ndarray] = []

    def sample() -> None:
        times.append(state.elapsed_time)
        pos.append(state.bodies.pos.copy())
        vel.append(state.bodies.vel.copy())

    if sample_every is not None:
        sample()

    for step in range(1, steps + 1):
        integrator.step(state, model, config.dt)
        if callback is not None:
            callback(step, state)
        if sample_every is not None and step % sample_every == 0:
            sample()

    if sample_every is None:
        return RunResult(final_state=state)

    return RunResult(
        final_state=state,
        time=np.asarray(times, dtype=np.float64),
        pos=np.asarray(pos, dtype=np.float64),
        vel=np.asarray(vel, dtype=np.float64),
    )
