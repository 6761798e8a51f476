"""Scenario I/O and adapters.

A scenario holds initial conditions and simulation tunables only; it never
stores trajectories or live state.
"""

from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any

from ..core.config import SimulationConfig
from ..core.state import Body, SystemState


ScenarioDefinition = dict[str, Any]

_SIMULATION_KEYS = (
    "G",
    "dt",
    "softening",
    "alignment_tolerance",
    "step_budget",
    "warmup_steps",
)
_INT_KEYS = {"step_budget", "warmup_steps"}


def load_scenario(path: str | Path) -> ScenarioDefinition:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return _validate_scenario_v1(data)


def save_scenario(path: str | Path, defn: ScenarioDefinition) -> None:
    Path(path).write_text(
        json.dumps(defn, indent=2, sort_keys=True),
        encoding="utf-8",
    )


def scenario_to_runtime(
    defn: ScenarioDefinition,
) -> tuple[SystemState, SimulationConfig]:
    defn = _validate_scenario_v1(defn)
    sim = defn.get("simulation", {})
    overrides: dict[str, Any] = {}
    for key in _SIMULATION_KEYS:
        if key in sim:
            overrides[key] = int(sim[key]) if key in _INT_KEYS else float(sim[key])
    config = SimulationConfig(**overrides)

    bodies = []
    for idx, entry in enumerate(defn["bodies"]):
        bodies.append(
            Body(
                id=entry.get("id", idx),
                pos=(float(entry["pos"][0]), float(entry["pos"][1])),
                vel=(float(entry["vel"][0]), float(entry["vel"][1])),
                mass=float(entry["mass"]),
                radius=float(entry.get("radius", 1.0)),
                color=str(entry.get("color", "#ffffff")),
                label=str(entry.get("label", "")),
            )
        )
    return SystemState.from_bodies(bodies), config


def runtime_to_scenario(
    state: SystemState,
    config: SimulationConfig,
    name: str = "Untitled",
    description: str = "",
) -> ScenarioDefinition:
    """Build a definition whose initial conditions are the bodies of `state`."""
    return {
        "schema_version": 1,
        "metadata": {"name": name, "description": description},
        "simulation": config.to_dict(),
        "bodies": [
            {
                "id": body.id,
                "pos": list(body.pos),
                "vel": list(body.vel),
                "mass": body.mass,
                "radius": body.radius,
                "color": body.color,
                "label": body.label,
            }
            for body in state.bodies.bodies()
        ],
    }


def _require(obj: dict[str, Any], key: str, ctx: str) -> Any:
    if key not in obj:
        raise ValueError(f"missing required field: {ctx}.{key}")
    return obj[key]


def _number(value: Any, ctx: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{ctx} must be a number")
    if not math.isfinite(value):
        raise ValueError(f"{ctx} must be finite")
    return float(value)


def _vector2(value: Any, ctx: str) -> None:
    if not isinstance(value, list) or len(value) != 2:
        raise ValueError(f"{ctx} must have length 2")
    for i, item in enumerate(value):
        _number(item, f"{ctx}[{i}]")


def _validate_scenario_v1(data: Any) -> ScenarioDefinition:
    if not isinstance(data, dict):
        raise ValueError("scenario must be a JSON object")
    if data.get("schema_version") != 1:
        raise ValueError("schema_version must be 1")

    sim = data.get("simulation", {})
    if not isinstance(sim, dict):
        raise ValueError("simulation must be an object")
    for key, value in sim.items():
        if key not in _SIMULATION_KEYS:
            raise ValueError(f"unknown simulation field: {key}")
        _number(value, f"simulation.{key}")
        if key in _INT_KEYS and int(value) != value:
            raise ValueError(f"simulation.{key} must be an integer")
    if "softening" in sim and sim["softening"] <= 0.0:
        raise ValueError("simulation.softening must be > 0")

    bodies = _require(data, "bodies", "scenario")
    if not isinstance(bodies, list):
        raise ValueError("bodies must be a list")
    seen: set[Any] = set()
    for idx, entry in enumerate(bodies):
        ctx = f"bodies[{idx}]"
        if not isinstance(entry, dict):
            raise ValueError(f"{ctx} must be an object")
        _vector2(_require(entry, "pos", ctx), f"{ctx}.pos")
        _vector2(_require(entry, "vel", ctx), f"{ctx}.vel")
        if _number(_require(entry, "mass", ctx), f"{ctx}.mass") <= 0.0:
            raise ValueError(f"{ctx}.mass must be > 0")
        if "radius" in entry and _number(entry["radius"], f"{ctx}.radius") <= 0.0:
            raise ValueError(f"{ctx}.radius must be > 0")
        body_id = entry.get("id", idx)
        if not isinstance(body_id, (int, str)) or isinstance(body_id, bool):
            raise ValueError(f"{ctx}.id must be a string or integer")
        if body_id in seen:
            raise ValueError(f"duplicate body id: {body_id}")
        seen.add(body_id)

    return data
