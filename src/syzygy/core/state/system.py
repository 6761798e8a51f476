"""System state container."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .bodies import BodiesState, Body


@dataclass(slots=True)
class SystemState:
    bodies: BodiesState
    elapsed_time: float = 0.0

    @property
    def n_bodies(self) -> int:
        return len(self.bodies)

    def validate(self) -> None:
        self.bodies.validate()

    def clone(self) -> "SystemState":
        return SystemState(bodies=self.bodies.copy(), elapsed_time=self.elapsed_time)

    @classmethod
    def from_bodies(
        cls, bodies: Iterable[Body], elapsed_time: float = 0.0
    ) -> "SystemState":
        return cls(bodies=BodiesState.from_bodies(bodies), elapsed_time=elapsed_time)
