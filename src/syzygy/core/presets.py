"""Built-in initial conditions."""

from __future__ import annotations

import dataclasses
from typing import Callable, Collection, Hashable, Sequence

import numpy as np

from .state.bodies import Body
from .state.system import SystemState


def default_bodies() -> list[Body]:
    """Heavy central body with two lighter companions, all on y = 300."""
    return [
        Body(id=1, pos=(400.0, 300.0), vel=(0.0, 1.5), mass=1000.0, radius=20.0,
             color="#FFD700", label="Sun"),
        Body(id=2, pos=(600.0, 300.0), vel=(0.0, -2.0), mass=200.0, radius=10.0,
             color="#00BFFF", label="Earth"),
        Body(id=3, pos=(200.0, 300.0), vel=(0.0, 1.0), mass=150.0, radius=8.0,
             color="#FF4500", label="Mars"),
    ]


def stable_bodies() -> list[Body]:
    scale = 150.0
    return [
        Body(id="sun", pos=(-scale, 0.0), vel=(0.0, -0.8), mass=100.0, radius=25.0,
             color="#FFD700", label="Sun"),
        Body(id="earth", pos=(scale * 0.5, scale * 0.866), vel=(0.7, 0.4), mass=50.0,
             radius=18.0, color="#4169E1", label="Earth"),
        Body(id="moon", pos=(scale * 0.5, -scale * 0.866), vel=(-0.7, 0.4), mass=30.0,
             radius=12.0, color="#C0C0C0", label="Moon"),
    ]


def chaos_bodies() -> list[Body]:
    return [
        Body(id="a", pos=(0.0, 0.0), vel=(0.0, 0.0), mass=150.0, radius=30.0,
             color="#FF4500", label="Star A"),
        Body(id="b", pos=(120.0, 80.0), vel=(-0.5, 0.8), mass=80.0, radius=20.0,
             color="#00CED1", label="Star B"),
        Body(id="c", pos=(-100.0, 120.0), vel=(0.6, -0.3), mass=60.0, radius=15.0,
             color="#9370DB", label="Star C"),
    ]


def binary_bodies() -> list[Body]:
    return [
        Body(id="a", pos=(-60.0, 0.0), vel=(0.0, 0.6), mass=100.0, radius=25.0,
             color="#FFA500", label="Star A"),
        Body(id="b", pos=(60.0, 0.0), vel=(0.0, -0.6), mass=100.0, radius=25.0,
             color="#FF6347", label="Star B"),
        Body(id="planet", pos=(0.0, 200.0), vel=(-1.2, 0.0), mass=20.0, radius=10.0,
             color="#32CD32", label="Planet"),
    ]


PRESETS: dict[str, Callable[[], list[Body]]] = {
    "default": default_bodies,
    "stable": stable_bodies,
    "chaos": chaos_bodies,
    "binary": binary_bodies,
}


def preset_bodies(name: str) -> list[Body]:
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"unknown preset: {name!r} (expected one of {', '.join(PRESETS)})"
        ) from None
    return factory()


def preset_state(name: str) -> SystemState:
    return SystemState.from_bodies(preset_bodies(name))


def perturb(
    bodies: Sequence[Body],
    rng: np.random.Generator,
    scale: float = 2.0,
    keep: Collection[Hashable] = (),
) -> list[Body]:
    """Add uniform velocity kicks in [-scale/2, scale/2) to every body not in `keep`."""
    out: list[Body] = []
    for body in bodies:
        if body.id in keep:
            out.append(body)
            continue
        kick = (rng.random(2) - 0.5) * scale
        vel = (body.vel[0] + float(kick[0]), body.vel[1] + float(kick[1]))
        out.append(dataclasses.replace(body, vel=vel))
    return out
