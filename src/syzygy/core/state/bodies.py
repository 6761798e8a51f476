"""Body values and the array store the integrator works on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Sequence

import numpy as np
from numpy.typing import NDArray


ArrayF = NDArray[np.float64]


@dataclass(frozen=True, slots=True)
class Body:
    id: Hashable
    pos: tuple[float, float]
    vel: tuple[float, float]
    mass: float
    radius: float
    color: str = "#ffffff"
    label: str = ""

    @property
    def name(self) -> str:
        return self.label or str(self.id)


@dataclass(slots=True)
class BodiesState:
    """Struct-of-arrays body store.

    pos and vel have shape (N, 2); mass and radius have shape (N,).
    ids, labels and colors are per-body metadata the core never reads.
    """
    pos: ArrayF
    vel: ArrayF
    mass: ArrayF
    radius: ArrayF
    ids: tuple[Hashable, ...] = ()
    labels: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        self.pos = np.ascontiguousarray(self.pos, dtype=np.float64).reshape(-1, 2)
        self.vel = np.ascontiguousarray(self.vel, dtype=np.float64).reshape(-1, 2)
        self.mass = np.ascontiguousarray(self.mass, dtype=np.float64).reshape(-1)
        self.radius = np.ascontiguousarray(self.radius, dtype=np.float64).reshape(-1)
        n = self.pos.shape[0]
        if not self.ids:
            self.ids = tuple(range(n))
        if not self.labels:
            self.labels = tuple(str(i) for i in self.ids)
        if not self.colors:
            self.colors = ("#ffffff",) * n
        self.ids = tuple(self.ids)
        self.labels = tuple(self.labels)
        self.colors = tuple(self.colors)
        self.validate()

    def __len__(self) -> int:
        return self.pos.shape[0]

    def validate(self) -> None:
        n = self.pos.shape[0]
        if self.vel.shape != self.pos.shape:
            raise ValueError("vel must have shape (N, 2)")
        if self.mass.shape != (n,):
            raise ValueError("mass must have shape (N,)")
        if self.radius.shape != (n,):
            raise ValueError("radius must have shape (N,)")
        if len(self.ids) != n or len(self.labels) != n or len(self.colors) != n:
            raise ValueError("ids, labels and colors must have one entry per body")
        if len(set(self.ids)) != n:
            raise ValueError("body ids must be unique")
        for name in ("pos", "vel", "mass", "radius"):
            if not np.all(np.isfinite(getattr(self, name))):
                raise ValueError(f"{name} must be finite")
        if np.any(self.mass <= 0.0):
            raise ValueError("mass must be > 0")
        if np.any(self.radius <= 0.0):
            raise ValueError("radius must be > 0")

    def copy(self) -> "BodiesState":
        return BodiesState(
            pos=self.pos.copy(),
            vel=self.vel.copy(),
            mass=self.mass.copy(),
            radius=self.radius.copy(),
            ids=self.ids,
            labels=self.labels,
            colors=self.colors,
        )

    def body(self, index: int) -> Body:
        return Body(
            id=self.ids[index],
            pos=(float(self.pos[index, 0]), float(self.pos[index, 1])),
            vel=(float(self.vel[index, 0]), float(self.vel[index, 1])),
            mass=float(self.mass[index]),
            radius=float(self.radius[index]),
            color=self.colors[index],
            label=self.labels[index],
        )

    def bodies(self) -> tuple[Body, ...]:
        return tuple(self.body(i) for i in range(len(self)))

    def index_of(self, body_id: Hashable) -> int:
        try:
            return self.ids.index(body_id)
        except ValueError:
            raise KeyError(f"unknown body id: {body_id!r}") from None

    @classmethod
    def from_bodies(cls, bodies: Iterable[Body]) -> "BodiesState":
        items: Sequence[Body] = list(bodies)
        return cls(
            pos=np.array([b.pos for b in items], dtype=np.float64).reshape(-1, 2),
            vel=np.array([b.vel for b in items], dtype=np.float64).reshape(-1, 2),
            mass=np.array([b.mass for b in items], dtype=np.float64),
            radius=np.array([b.radius for b in items], dtype=np.float64),
            ids=tuple(b.id for b in items),
            labels=tuple(b.name for b in items),
            colors=tuple(b.color for b in items),
        )
