"""Predict the next alignment of a preset or scenario from the command line."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from . import __version__
from .app.sim_controller import SimulationController
from .core.errors import InsufficientBodies
from .core.predictor import Found
from .core.presets import PRESETS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="syzygy", description=__doc__)
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--preset", choices=sorted(PRESETS), default="default")
    source.add_argument("--scenario", type=Path, default=None)
    parser.add_argument("--seed", type=int, default=None,
                        help="perturb preset velocities with this seed")
    parser.add_argument("--advance", type=int, default=0,
                        help="live steps to run before predicting")
    parser.add_argument("--warmup", type=int, default=None)
    parser.add_argument("--budget", type=int, default=None)
    parser.add_argument("--tolerance", type=float, default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"syzygy v{__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    controller = SimulationController()
    if args.scenario is not None:
        controller.load_scenario(args.scenario)
    else:
        controller.load_preset(args.preset, seed=args.seed)

    overrides = {}
    if args.warmup is not None:
        overrides["warmup_steps"] = args.warmup
    if args.budget is not None:
        overrides["step_budget"] = args.budget
    if args.tolerance is not None:
        overrides["alignment_tolerance"] = args.tolerance
    if overrides:
        try:
            controller.config = controller.config.replace(**overrides)
        except ValueError as exc:
            parser.error(str(exc))

    for _ in range(max(args.advance, 0)):
        controller.step_once()

    try:
        result = controller.predict()
    except InsufficientBodies as exc:
        print(f"cannot predict: {exc}")
        return 2

    info = controller.diagnostics()
    print("time:", info["time"])
    print("energy:", info["energy"])
    print("momentum:", info["momentum"])
    if isinstance(result, Found):
        print("next alignment in steps:", result.steps)
        print("time offset:", result.time_offset)
        for body in result.predicted_bodies:
            print(f"  {body.name}: x={body.pos[0]:.1f} y={body.pos[1]:.1f}")
    else:
        print(f"no alignment within {result.steps} steps")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
