from __future__ import annotations

import threading
from pathlib import Path

import numpy as np
import pytest

from syzygy.app.sim_controller import SimulationController
from syzygy.core.config import SimulationConfig
from syzygy.core.errors import InsufficientBodies
from syzygy.core.integrators import step
from syzygy.core.predictor import Found, NotFound
from syzygy.core.presets import preset_state
from syzygy.core.state import Body


SCENARIOS = Path(__file__).resolve().parent.parent / "examples" / "scenarios"


def _line_bodies() -> list[Body]:
    return [
        Body(id="a", pos=(0.0, 0.0), vel=(0.0, 0.0), mass=1.0, radius=1.0, label="A"),
        Body(id="b", pos=(10.0, 0.0), vel=(0.0, 0.0), mass=1.0, radius=1.0, label="B"),
        Body(id="c", pos=(30.0, 0.0), vel=(0.0, 0.0), mass=1.0, radius=1.0, label="C"),
    ]


def _expanding_bodies() -> list[Body]:
    bodies = []
    for i, angle in enumerate(np.array([0.0, 2.0, 4.0]) * np.pi / 3.0):
        c, s = float(np.cos(angle)), float(np.sin(angle))
        bodies.append(
            Body(id=i, pos=(100.0 * c, 100.0 * s), vel=(c, s), mass=1.0, radius=1.0)
        )
    return bodies


def test_default_controller_loads_three_bodies() -> None:
    controller = SimulationController()
    assert controller.state.n_bodies == 3
    assert controller.running
    assert controller.prediction is None
    assert controller.body_positions().shape == (3, 2)


def test_frame_advances_speed_steps_and_pause_stops_it() -> None:
    controller = SimulationController(speed=5)
    assert controller.frame() == 5
    assert controller.current_step == 5
    assert controller.state.elapsed_time == pytest.approx(0.5)

    controller.pause()
    assert controller.frame() == 0
    assert controller.current_step == 5
    assert controller.toggle() is True
    with pytest.raises(ValueError):
        controller.set_speed(0)


def test_step_once_is_deterministic() -> None:
    controller = SimulationController()
    initial = controller.body_positions()
    controller.step_once()
    after_first = controller.body_positions()
    assert not np.array_equal(after_first, initial)

    controller.reset()
    assert np.array_equal(controller.body_positions(), initial)
    controller.step_once()
    assert np.array_equal(controller.body_positions(), after_first)


def test_predict_pauses_and_caches() -> None:
    config = SimulationConfig(warmup_steps=2, step_budget=20)
    controller = SimulationController(config, _line_bodies())
    result = controller.predict()

    assert isinstance(result, Found)
    assert result.steps == 3
    assert controller.prediction == result
    assert not controller.running
    assert controller.time_until_prediction() == pytest.approx(0.3)
    assert controller.current_step == 0


def test_live_step_and_reset_invalidate_prediction() -> None:
    config = SimulationConfig(warmup_steps=2, step_budget=20)
    controller = SimulationController(config, _line_bodies())
    controller.predict()
    controller.step_once()
    assert controller.prediction is None

    controller.predict()
    controller.reset()
    assert controller.prediction is None
    assert controller.current_step == 0


def test_eclipse_events_respect_cooldown() -> None:
    config = SimulationConfig(G=0.0, dt=0.25)
    controller = SimulationController(config, _line_bodies(), eclipse_cooldown=2.0)
    for _ in range(12):
        controller.frame()

    times = [event.time for event in controller.eclipse_events]
    assert times == [0.25, 2.5]
    event = controller.eclipse_events[0]
    assert event.description == "B between A and C"
    assert event.measure == 0.0


def test_event_log_is_bounded() -> None:
    config = SimulationConfig(G=0.0, dt=0.25)
    controller = SimulationController(
        config, _line_bodies(), eclipse_cooldown=0.0, max_events=4
    )
    for _ in range(10):
        controller.frame()
    assert len(controller.eclipse_events) == 4
    assert controller.eclipse_events[-1].time == 2.5


def test_trails_are_bounded() -> None:
    controller = SimulationController(trail_length=5)
    for _ in range(10):
        controller.step_once()
    assert controller.trail(0).shape == (5, 2)
    assert np.allclose(controller.trail(0)[-1], controller.body_positions()[0])
    controller.clear_trails()
    assert controller.trail(0).shape == (0, 2)


def test_background_prediction_matches_blocking() -> None:
    config = SimulationConfig(warmup_steps=2, step_budget=20)
    blocking = SimulationController(config, _line_bodies()).predict()

    controller = SimulationController(config, _line_bodies())
    delivered = []
    done = threading.Event()

    def on_result(result) -> None:
        delivered.append(result)
        done.set()

    controller.predict_in_background(on_result)
    assert done.wait(timeout=10.0)
    assert controller.wait_for_prediction(timeout=10.0) == blocking
    assert delivered == [blocking]
    assert not controller.predicting


def test_background_prediction_can_be_cancelled() -> None:
    config = SimulationConfig(G=0.0, warmup_steps=0, step_budget=10_000_000)
    controller = SimulationController(config, _expanding_bodies())
    worker = controller.predict_in_background()
    assert controller.predicting
    assert controller.frame() == 0

    controller.cancel_prediction()
    worker.join(timeout=10.0)
    assert not worker.is_alive()
    assert controller.prediction is None
    assert not controller.predicting


def test_live_step_cancels_background_prediction() -> None:
    config = SimulationConfig(G=0.0, warmup_steps=0, step_budget=10_000_000)
    controller = SimulationController(config, _expanding_bodies())
    worker = controller.predict_in_background()
    controller.step_once()
    worker.join(timeout=10.0)
    assert not worker.is_alive()
    assert controller.prediction is None
    assert controller.current_step == 1


def test_not_found_is_cached_as_result() -> None:
    config = SimulationConfig(G=0.0, warmup_steps=0, step_budget=30)
    controller = SimulationController(config, _expanding_bodies())
    assert controller.predict() == NotFound(steps=30)
    assert controller.time_until_prediction() is None


def test_prediction_needs_three_bodies() -> None:
    controller = SimulationController(bodies=_line_bodies()[:2])
    with pytest.raises(InsufficientBodies):
        controller.predict()
    with pytest.raises(InsufficientBodies):
        controller.predict_in_background()
    assert controller.frame() == 1
    assert controller.diagnostics()["aligned"] is None


def test_load_scenario_and_preset() -> None:
    controller = SimulationController()
    controller.load_scenario(SCENARIOS / "binary_planet_v1.json")
    assert controller.scenario_path is not None
    assert controller.config.dt == 0.04
    assert controller.state.bodies.labels == ("Star A", "Star B", "Planet")

    controller.load_preset("default", seed=3)
    assert controller.scenario_path is None
    other = SimulationController()
    other.load_preset("default", seed=3)
    assert np.array_equal(controller.state.bodies.vel, other.state.bodies.vel)
    assert controller.state.bodies.vel[0].tolist() == [0.0, 1.5]


def test_diagnostics() -> None:
    controller = SimulationController()
    controller.frame()
    info = controller.diagnostics()
    assert info["step"] == 1
    assert info["time"] == pytest.approx(0.1)
    assert np.allclose(info["momentum"], [0.0, 1250.0])
    assert isinstance(info["aligned"], bool)
    assert info["predicting"] is False


def test_config_change_rebuilds_gravity_for_both_prediction_paths() -> None:
    heavier = SimulationConfig(G=5.0, warmup_steps=0, step_budget=2000)
    blocking = SimulationController()
    blocking.predict()
    blocking.config = heavier
    assert blocking.prediction is None
    expected = blocking.predict()

    controller = SimulationController()
    controller.config = heavier
    controller.predict_in_background()
    assert controller.wait_for_prediction(timeout=30.0) == expected


def test_config_change_applies_to_live_steps() -> None:
    heavier = SimulationConfig(G=5.0)
    controller = SimulationController()
    controller.config = heavier
    controller.step_once()

    reference = preset_state("default")
    step(reference, heavier)
    assert np.array_equal(controller.state.bodies.pos, reference.bodies.pos)
    assert np.array_equal(controller.state.bodies.vel, reference.bodies.vel)
