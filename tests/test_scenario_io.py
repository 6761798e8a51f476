from __future__ import annotations

import copy
import json
from pathlib import Path

import numpy as np
import pytest

from syzygy.core.config import SimulationConfig
from syzygy.core.presets import preset_state
from syzygy.io import load_scenario, runtime_to_scenario, save_scenario, scenario_to_runtime


SCENARIOS = Path(__file__).resolve().parent.parent / "examples" / "scenarios"


def _base_defn() -> dict:
    return {
        "schema_version": 1,
        "simulation": {"dt": 0.05, "warmup_steps": 10},
        "bodies": [
            {"id": "a", "pos": [0.0, 0.0], "vel": [0.0, 1.0], "mass": 5.0},
            {"id": "b", "pos": [10.0, 0.0], "vel": [0.0, -1.0], "mass": 5.0, "radius": 2.0},
        ],
    }


def test_example_scenario_matches_default_preset() -> None:
    state, config = scenario_to_runtime(load_scenario(SCENARIOS / "three_body_default_v1.json"))
    expected = preset_state("default")
    assert config == SimulationConfig()
    assert np.array_equal(state.bodies.pos, expected.bodies.pos)
    assert np.array_equal(state.bodies.vel, expected.bodies.vel)
    assert np.array_equal(state.bodies.mass, expected.bodies.mass)
    assert state.bodies.labels == ("Sun", "Earth", "Mars")


def test_missing_simulation_fields_use_defaults() -> None:
    state, config = scenario_to_runtime(_base_defn())
    assert config.dt == 0.05
    assert config.warmup_steps == 10
    assert config.G == SimulationConfig().G
    assert state.bodies.ids == ("a", "b")
    assert np.allclose(state.bodies.radius, [1.0, 2.0])


def test_round_trip(tmp_path: Path) -> None:
    defn = load_scenario(SCENARIOS / "binary_planet_v1.json")
    out = tmp_path / "roundtrip.json"
    save_scenario(out, defn)
    assert load_scenario(out) == defn


def test_runtime_to_scenario_round_trip(tmp_path: Path) -> None:
    state = preset_state("stable")
    config = SimulationConfig(dt=0.02, step_budget=500)
    out = tmp_path / "stable.json"
    save_scenario(out, runtime_to_scenario(state, config, name="Stable"))

    loaded_state, loaded_config = scenario_to_runtime(load_scenario(out))
    assert loaded_config == config
    assert loaded_state.bodies.bodies() == state.bodies.bodies()
    assert json.loads(out.read_text(encoding="utf-8"))["metadata"]["name"] == "Stable"


@pytest.mark.parametrize(
    ("mutate", "match"),
    [
        (lambda d: d.update(schema_version=2), "schema_version"),
        (lambda d: d.pop("bodies"), "missing required field: scenario.bodies"),
        (lambda d: d["bodies"][0].pop("mass"), r"bodies\[0\].mass"),
        (lambda d: d["bodies"][0].update(mass=0.0), "mass must be > 0"),
        (lambda d: d["bodies"][1].update(radius=-1.0), "radius must be > 0"),
        (lambda d: d["bodies"][0].update(pos=[1.0, 2.0, 3.0]), "length 2"),
        (lambda d: d["bodies"][1].update(id="a"), "duplicate body id"),
        (lambda d: d["simulation"].update(integrator="rk4"), "unknown simulation field"),
        (lambda d: d["simulation"].update(step_budget=2.5), "must be an integer"),
        (lambda d: d["simulation"].update(dt="fast"), "must be a number"),
    ],
)
def test_invalid_scenarios(mutate, match: str) -> None:
    defn = copy.deepcopy(_base_defn())
    mutate(defn)
    with pytest.raises(ValueError, match=match):
        scenario_to_runtime(defn)


def test_invalid_config_values_surface_from_config() -> None:
    defn = _base_defn()
    defn["simulation"]["dt"] = -1.0
    with pytest.raises(ValueError, match="dt must be > 0"):
        scenario_to_runtime(defn)


def test_zero_softening_rejected_on_load(tmp_path: Path) -> None:
    defn = _base_defn()
    defn["simulation"]["softening"] = 0.0
    path = tmp_path / "hard.json"
    path.write_text(json.dumps(defn), encoding="utf-8")
    with pytest.raises(ValueError, match="simulation.softening must be > 0"):
        load_scenario(path)
