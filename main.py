"""Headless entry point running a kart race with a simple autopilot."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from kartsim import (
    DriveInput,
    HazardKind,
    LevelLoadError,
    Simulation,
    discover_levels,
    load_level_file,
)
from kartsim.runtime import SimulationConfig, SimulationSession

# how far ahead (track fraction) the autopilot looks for blocking hazards
LOOKAHEAD = 0.03
DODGE_KINDS = (HazardKind.OBSTACLE, HazardKind.TREE, HazardKind.LAVA_ZONE, HazardKind.MUD_ZONE)


def main() -> None:
    args = _parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    levels_dir = Path(__file__).resolve().parent / "levels"
    available_levels = discover_levels(levels_dir)

    if args.list_levels:
        _print_level_list(available_levels)
        return

    level = _resolve_level(args.level, available_levels, levels_dir)
    session = SimulationSession(level, config=SimulationConfig(time_step=args.time_step))
    simulation = session.simulation

    max_steps = int(args.seconds / args.time_step)
    for _ in range(max_steps):
        snapshot = session.step(_autopilot(simulation))
        result = session.last_result
        if result is not None and result.checkpoint_reached is not None:
            print(
                f"[{snapshot.elapsed_time:6.2f}s] checkpoint {result.checkpoint_reached + 1}"
                f"/{snapshot.race.checkpoint_count}"
            )
        if simulation.state.lava_hit:
            print(f"[{snapshot.elapsed_time:6.2f}s] fell into lava at t={simulation.state.progress:.3f}")
            break
        if snapshot.race.finished:
            break

    race = simulation.race_state
    state = simulation.state
    if race.finished:
        print(f"Finished '{simulation.level.name}' in {race.finish_time:.2f}s")
    else:
        print(
            f"Did not finish '{simulation.level.name}': progress {state.progress:.3f}, "
            f"checkpoints {race.checkpoint_index}/{race.checkpoint_count}"
        )
    print(f"Collectibles picked up: {state.collectibles}")
    sys.exit(0 if race.finished else 1)


def _autopilot(simulation: Simulation) -> DriveInput:
    """Hold throttle and steer around the nearest blocking hazard ahead."""
    state = simulation.state
    target = 0.0
    for hazard in simulation.hazards:
        if hazard.kind not in DODGE_KINDS:
            continue
        ahead = hazard.t - state.progress
        if 0.0 <= ahead <= LOOKAHEAD:
            clearance = hazard.lateral_half + simulation.resolver.car.half_width + 0.5
            if abs(state.lateral - hazard.lateral) < clearance:
                side = 1.0 if hazard.lateral <= 0.0 else -1.0
                target = hazard.lateral + side * clearance
                break
    limit = simulation.lateral_limit
    target = max(-limit, min(limit, target))
    error = target - state.lateral
    return DriveInput(
        throttle=True,
        steer_left=error < -0.3,
        steer_right=error > 0.3,
    )


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Headless kart race demo")
    parser.add_argument(
        "--level",
        help="Level name (from levels directory) or path to a JSON file",
    )
    parser.add_argument(
        "--list-levels",
        action="store_true",
        help="List bundled levels and exit",
    )
    parser.add_argument("--seconds", type=float, default=60.0, help="Maximum race duration")
    parser.add_argument("--time-step", type=float, default=1.0 / 60.0, help="Fixed tick length")
    parser.add_argument("--log-level", default="warning", help="Logging level")
    return parser.parse_args()


def _print_level_list(available_levels) -> None:
    if not available_levels:
        print("No levels found.")
        return
    print("Available levels:")
    for name, loaded in available_levels.items():
        print(f"  {name:15s} -> {loaded.path}")


def _resolve_level(level_arg, available_levels, levels_dir: Path):
    if level_arg is None:
        return None

    candidate_path = Path(level_arg)
    if candidate_path.exists():
        try:
            return load_level_file(candidate_path)
        except LevelLoadError as exc:
            print(f"Warning: {exc}; falling back to default level.")
            return None

    if level_arg in available_levels:
        return available_levels[level_arg].level

    candidate_file = levels_dir / f"{level_arg}.json"
    if candidate_file.exists():
        try:
            return load_level_file(candidate_file)
        except LevelLoadError as exc:
            print(f"Warning: {exc}; falling back to default level.")
            return None

    print(f"Warning: level '{level_arg}' not found; using default level.")
    return None


if __name__ == "__main__":
    main()
