"""Host-side helpers for driving the simulation from a frame loop."""

from .sim_controller import EclipseEvent, SimulationController  # noqa: F401
