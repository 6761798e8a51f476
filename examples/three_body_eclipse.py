"""Three-body run that logs eclipses and forecasts the next one."""

from __future__ import annotations

import numpy as np

from syzygy.app import SimulationController
from syzygy.core.config import SimulationConfig
from syzygy.core.predictor import Found


if __name__ == "__main__":
    config = SimulationConfig(G=0.5, dt=0.1, softening=5.0, warmup_steps=100)
    controller = SimulationController(config, speed=5)

    frames = 2000
    report_every = 200
    e0 = controller.diagnostics()["energy"]

    for frame in range(1, frames + 1):
        controller.frame()
        if frame % report_every == 0:
            info = controller.diagnostics()
            print(
                f"frame {frame:5d} | t={info['time']:8.1f} | "
                f"|p|={np.linalg.norm(info['momentum']):.6e} | dE={info['energy'] - e0:.6e}"
            )

    for event in controller.eclipse_events:
        print(f"t={event.time:8.2f}  {event.description}  (measure {event.measure:.4f})")

    result = controller.predict()
    if isinstance(result, Found):
        print(f"next alignment in {result.steps} steps (+{result.time_offset:.1f})")
        for body in result.predicted_bodies:
            print(f"  {body.name}: ({body.pos[0]:.1f}, {body.pos[1]:.1f})")
    else:
        print(f"no alignment within {result.steps} steps")
