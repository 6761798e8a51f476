"""Scenario file helpers."""

from .scenario import (  # noqa: F401
    ScenarioDefinition,
    load_scenario,
    runtime_to_scenario,
    save_scenario,
    scenario_to_runtime,
)
