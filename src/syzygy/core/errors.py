"""Error types raised by the simulation core."""

from __future__ import annotations


class InsufficientBodies(ValueError):
    """Raised when an alignment query needs more bodies than the system has."""

    def __init__(self, count: int, required: int = 3) -> None:
        super().__init__(f"alignment requires at least {required} bodies, got {count}")
        self.count = count
        self.required = required


class PredictionCancelled(RuntimeError):
    """Raised inside a prediction search once its cancel event is set."""
