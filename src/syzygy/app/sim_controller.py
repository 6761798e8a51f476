"""Headless simulation controller driven by a renderer's frame loop."""

from __future__ import annotations

import logging
import math
import threading
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

import numpy as np

from ..core.alignment import alignment_measure, eclipse_order, is_aligned
from ..core.config import SimulationConfig
from ..core.diagnostics import linear_momentum, total_energy_gravity
from ..core.errors import InsufficientBodies, PredictionCancelled
from ..core.forces import NBodyGravity
from ..core.integrators import SymplecticEuler
from ..core.predictor import Found, PredictionResult, predict_next_alignment
from ..core.presets import perturb, preset_bodies
from ..core.state import Body, SystemState
from ..io.scenario import load_scenario, scenario_to_runtime


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EclipseEvent:
    time: float
    middle: str
    observer: str
    occulted: str
    measure: float

    @property
    def description(self) -> str:
        return f"{self.middle} between {self.observer} and {self.occulted}"


class SimulationController:
    """Owns the live system and everything a renderer reads from it.

    Live stepping and prediction are mutually exclusive: a prediction pauses
    the clock, and any live step, reset or new prediction drops the cached
    (or in-flight) prediction.
    """

    def __init__(
        self,
        config: SimulationConfig | None = None,
        bodies: Iterable[Body] | None = None,
        *,
        speed: int = 1,
        trail_length: int = 200,
        eclipse_cooldown: float = 2.0,
        max_events: int = 10,
    ) -> None:
        if trail_length < 0:
            raise ValueError("trail_length must be >= 0")
        if max_events < 1:
            raise ValueError("max_events must be >= 1")
        self._config = config if config is not None else SimulationConfig()
        self.scenario_path: Path | None = None
        self.trail_length = trail_length
        self.eclipse_cooldown = float(eclipse_cooldown)
        self.eclipse_events: deque[EclipseEvent] = deque(maxlen=max_events)
        self.running = True
        self.speed = 1
        self.set_speed(speed)

        self._integrator = SymplecticEuler()
        self._lock = threading.Lock()
        self._generation = 0
        self._cancel: threading.Event | None = None
        self._worker: threading.Thread | None = None
        self._predicting = False
        self._prediction: PredictionResult | None = None

        self.load_bodies(bodies if bodies is not None else preset_bodies("default"))

    # -- loading and reset -------------------------------------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @config.setter
    def config(self, config: SimulationConfig) -> None:
        """Swap tunables; gravity is rebuilt and any prediction is dropped."""
        self._config = config
        self._model = NBodyGravity.from_config(config)
        self.cancel_prediction()

    def load_bodies(
        self, bodies: Iterable[Body], config: SimulationConfig | None = None
    ) -> None:
        self.load_state(SystemState.from_bodies(bodies), config)

    def load_state(
        self, state: SystemState, config: SimulationConfig | None = None
    ) -> None:
        if config is not None:
            self._config = config
        self._model = NBodyGravity.from_config(self._config)
        self.initial_state = state.clone()
        self.reset()

    def load_preset(self, name: str, seed: int | None = None) -> None:
        """Load a named preset; with `seed`, kick every body but the first."""
        bodies = preset_bodies(name)
        if seed is not None:
            rng = np.random.default_rng(seed)
            bodies = perturb(bodies, rng, keep={bodies[0].id})
        self.scenario_path = None
        self.load_bodies(bodies)

    def load_scenario(self, path: str | Path) -> None:
        scenario_path = Path(path)
        state, config = scenario_to_runtime(load_scenario(scenario_path))
        self.load_state(state, config)
        self.scenario_path = scenario_path

    def reset(self) -> None:
        self.cancel_prediction()
        self.state = self.initial_state.clone()
        self.current_step = 0
        self.eclipse_events.clear()
        self._last_eclipse_time = -math.inf
        self.trails = [deque(maxlen=self.trail_length) for _ in range(self.state.n_bodies)]

    # -- clock -------------------------------------------------------------

    @property
    def predicting(self) -> bool:
        return self._predicting

    def play(self) -> None:
        self.running = True

    def pause(self) -> None:
        self.running = False

    def toggle(self) -> bool:
        self.running = not self.running
        return self.running

    def set_speed(self, steps_per_frame: int) -> None:
        if int(steps_per_frame) != steps_per_frame or steps_per_frame < 1:
            raise ValueError("speed must be an integer >= 1")
        self.speed = int(steps_per_frame)

    def step_once(self) -> None:
        """Advance the live system one step, abandoning any prediction."""
        self.cancel_prediction()
        self._integrator.step(self.state, self._model, self.config.dt)
        self.current_step += 1
        for trail, pos in zip(self.trails, self.state.bodies.pos):
            trail.append((float(pos[0]), float(pos[1])))

    def frame(self) -> int:
        """Advance `speed` steps if running, then record any new eclipse."""
        if not self.running or self._predicting:
            return 0
        for _ in range(self.speed):
            self.step_once()
        self._check_eclipse()
        return self.speed

    def _check_eclipse(self) -> EclipseEvent | None:
        if self.state.n_bodies < 3 or not is_aligned(self.state, self.config):
            return None
        now = self.state.elapsed_time
        if now - self._last_eclipse_time <= self.eclipse_cooldown:
            return None
        order = eclipse_order(self.state)
        labels = dict(zip(self.state.bodies.ids, self.state.bodies.labels))
        event = EclipseEvent(
            time=now,
            middle=labels[order.middle],
            observer=labels[order.observer],
            occulted=labels[order.occulted],
            measure=alignment_measure(self.state),
        )
        self.eclipse_events.append(event)
        self._last_eclipse_time = now
        logger.info("eclipse at t=%.2f: %s", now, event.description)
        return event

    # -- prediction --------------------------------------------------------

    @property
    def prediction(self) -> PredictionResult | None:
        return self._prediction

    def predict(self) -> PredictionResult:
        """Run a blocking search from the live state and cache its result."""
        if self.state.n_bodies < 3:
            raise InsufficientBodies(self.state.n_bodies)
        self.cancel_prediction()
        self.pause()
        self._predicting = True
        try:
            result = predict_next_alignment(
                self.state, self.config, model=self._model, integrator=self._integrator
            )
        finally:
            self._predicting = False
        self._prediction = result
        _log_result(result)
        return result

    def predict_in_background(
        self, callback: Callable[[PredictionResult], None] | None = None
    ) -> threading.Thread:
        """Start a search on a worker thread; superseded searches are dropped."""
        if self.state.n_bodies < 3:
            raise InsufficientBodies(self.state.n_bodies)
        self.cancel_prediction()
        self.pause()
        snapshot = self.state.clone()
        cancel = threading.Event()
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._cancel = cancel
            self._predicting = True
        worker = threading.Thread(
            target=self._predict_worker,
            args=(snapshot, self.config, self._model, generation, cancel, callback),
            name="syzygy-predict",
            daemon=True,
        )
        self._worker = worker
        worker.start()
        return worker

    def _predict_worker(
        self,
        snapshot: SystemState,
        config: SimulationConfig,
        model: NBodyGravity,
        generation: int,
        cancel: threading.Event,
        callback: Callable[[PredictionResult], None] | None,
    ) -> None:
        try:
            result = predict_next_alignment(
                snapshot, config, model=model, integrator=self._integrator, cancel=cancel
            )
        except PredictionCancelled:
            logger.debug("discarded cancelled prediction (generation %d)", generation)
            return
        except Exception:
            with self._lock:
                if generation == self._generation:
                    self._predicting = False
                    self._cancel = None
            raise
        with self._lock:
            if generation != self._generation or cancel.is_set():
                return
            self._prediction = result
            self._predicting = False
            self._cancel = None
        _log_result(result)
        if callback is not None:
            callback(result)

    def cancel_prediction(self) -> None:
        """Drop the cached prediction and abandon any search in flight."""
        with self._lock:
            self._generation += 1
            if self._cancel is not None:
                self._cancel.set()
                self._cancel = None
            self._predicting = False
            self._prediction = None

    def wait_for_prediction(self, timeout: float | None = None) -> PredictionResult | None:
        worker = self._worker
        if worker is not None:
            worker.join(timeout)
        return self._prediction

    def time_until_prediction(self) -> float | None:
        result = self._prediction
        if not isinstance(result, Found):
            return None
        return result.predicted_time - self.state.elapsed_time

    # -- renderer queries --------------------------------------------------

    def body_positions(self) -> np.ndarray:
        return self.state.bodies.pos.astype(np.float32, copy=True)

    def trail(self, index: int) -> np.ndarray:
        points = self.trails[index]
        if not points:
            return np.zeros((0, 2), dtype=np.float32)
        return np.asarray(points, dtype=np.float32)

    def clear_trails(self) -> None:
        for trail in self.trails:
            trail.clear()

    def diagnostics(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "step": self.current_step,
            "time": self.state.elapsed_time,
            "energy": total_energy_gravity(
                self.state, self.config.G, self.config.softening
            ),
            "momentum": tuple(float(v) for v in linear_momentum(self.state)),
            "aligned": None,
            "predicting": self._predicting,
        }
        if self.state.n_bodies >= 3:
            info["aligned"] = is_aligned(self.state, self.config)
        return info


def _log_result(result: PredictionResult) -> None:
    if isinstance(result, Found):
        logger.info(
            "next alignment in %d steps (+%.1f time units)",
            result.steps,
            result.time_offset,
        )
    else:
        logger.info("no alignment within %d steps", result.steps)
