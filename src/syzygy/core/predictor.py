"""Fast-forward search for the next aligned configuration."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Union

from .alignment import (
    AlignmentPredicate,
    SubsetCollinear,
    alignment_measure,
)
from .config import SimulationConfig
from .errors import InsufficientBodies, PredictionCancelled
from .forces.base import BodyModel
from .forces.nbody_gravity import NBodyGravity
from .integrators import Integrator, SymplecticEuler
from .state.bodies import Body
from .state.system import SystemState


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Found:
    """First aligned state after `steps` steps; time_offset is steps * dt.

    alignment_measure is taken over the predicate's own `indices`.
    """

    steps: int
    time_offset: float
    predicted_bodies: tuple[Body, ...]
    predicted_time: float
    alignment_measure: float

    @property
    def found(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class NotFound:
    """No alignment within the step budget."""

    steps: int

    @property
    def found(self) -> bool:
        return False


PredictionResult = Union[Found, NotFound]


def predict_next_alignment(
    system: SystemState,
    config: SimulationConfig,
    *,
    predicate: AlignmentPredicate | None = None,
    model: BodyModel | None = None,
    integrator: Integrator | None = None,
    cancel: threading.Event | None = None,
) -> PredictionResult:
    """Advance a private copy of `system` until it aligns or the budget runs out.

    Matches at or before `config.warmup_steps` are ignored, so the smallest
    reported step count is `warmup_steps + 1`. At most `config.step_budget`
    integrator steps are taken. `system` is never modified.

    Raises InsufficientBodies for fewer than three bodies and
    PredictionCancelled when `cancel` is set mid-search.
    """
    if system.n_bodies < 3:
        raise InsufficientBodies(system.n_bodies)

    budget = int(config.step_budget)
    warmup = int(config.warmup_steps)
    if warmup >= budget:
        logger.debug("warm-up %d covers the whole budget %d", warmup, budget)
        return NotFound(steps=budget)

    predicate = predicate if predicate is not None else SubsetCollinear()
    model = model if model is not None else NBodyGravity.from_config(config)
    integrator = integrator if integrator is not None else SymplecticEuler()
    dt = config.dt

    sim = system.clone()
    logger.debug(
        "searching up to %d steps (warm-up %d, dt %g) from t=%g",
        budget,
        warmup,
        dt,
        system.elapsed_time,
    )
    steps = 0
    while steps < budget:
        if cancel is not None and cancel.is_set():
            raise PredictionCancelled(f"prediction cancelled after {steps} steps")
        integrator.step(sim, model, dt)
        steps += 1
        if steps <= warmup:
            continue
        if predicate(sim, config):
            logger.debug("alignment found after %d steps", steps)
            return Found(
                steps=steps,
                time_offset=steps * dt,
                predicted_bodies=sim.bodies.bodies(),
                predicted_time=sim.elapsed_time,
                alignment_measure=alignment_measure(sim, predicate.indices),
            )

    logger.debug("no alignment within %d steps", budget)
    return NotFound(steps=budget)
