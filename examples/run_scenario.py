"""Run a scenario JSON and optionally save sampled positions."""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from syzygy.core.diagnostics import kinetic_energy, linear_momentum, total_energy_gravity
from syzygy.core.run import run
from syzygy.io import load_scenario, scenario_to_runtime


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("scenario", type=Path)
    parser.add_argument("--steps", type=int, default=1000)
    parser.add_argument("--every", type=int, default=10)
    parser.add_argument("--out", type=Path, default=None)
    args = parser.parse_args()

    state, config = scenario_to_runtime(load_scenario(args.scenario))
    result = run(state, config, args.steps, sample_every=args.every)
    final = result.final_state

    print("steps:", args.steps)
    print("dt:", config.dt)
    print("sim time:", final.elapsed_time)
    print("momentum:", linear_momentum(final))
    print("KE:", kinetic_energy(final))
    print("total energy:", total_energy_gravity(final, config.G, config.softening))

    if args.out is not None and result.time is not None:
        np.savez_compressed(args.out, time=result.time, pos=result.pos, vel=result.vel)
        print("saved samples to:", args.out)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
