#!/usr/bin/env -S uv run
"""Run a headless stealth rollout and report how the encounter played out."""

from __future__ import annotations

import argparse
import math
from collections import Counter

from stealth_agents import StealthConfig, StealthSimulation
from stealth_agents.maze import is_connected


def run_rollout(
    *,
    size: int,
    ticks: int,
    dt: float,
    seed: int | None,
    debug: int,
    show_map: bool,
    keep_connected: bool,
    stop_on_knockout: bool,
) -> int:
    config = StealthConfig(size=size, keep_connected=keep_connected)
    sim = StealthSimulation(config, seed=seed, debug=debug)

    if show_map:
        print(sim.render())
        print()
    print(f"maze {size}x{size} connected={is_connected(sim.grid)}")
    for view in sim.views():
        print(f"  spawn {view.agent_id} at {view.position}")

    mode_ticks: dict[str, Counter[str]] = {agent.agent_id: Counter() for agent in sim.agents}
    for _ in range(ticks):
        for view in sim.step(dt):
            mode_ticks[view.agent_id][view.mode.value] += 1
        if stop_on_knockout and sim.finished:
            break

    print(f"ran {sim.step_count} ticks ({sim.time:.2f}s simulated)")
    for agent in sim.agents:
        state = agent.state
        recognized_at = state.perception.recognized_at
        seen = f"{recognized_at:.2f}s" if recognized_at is not None else "never"
        breakdown = " ".join(f"{mode}={count}" for mode, count in mode_ticks[agent.agent_id].most_common())
        print(
            f"  {state.agent_id}: mode={state.mode.value} cell={state.position} "
            f"heading={math.degrees(state.heading):.0f} first_recognition={seen}"
        )
        print(f"     ticks by mode: {breakdown}")

    if show_map:
        print()
        print(sim.render())

    if sim.debug_logger:
        sim.debug_logger.emit_summary()

    down = [agent.agent_id for agent in sim.agents if agent.state.is_down]
    print(f"outcome: {'knockout of ' + ', '.join(down) if down else 'no knockout'}")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--size", type=int, default=32, help="Maze side length in cells")
    parser.add_argument("--ticks", type=int, default=3000, help="Number of ticks to run")
    parser.add_argument("--dt", type=float, default=1 / 60, help="Seconds per tick (clamped to 0.05)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    parser.add_argument("--debug", type=int, default=0, choices=[0, 1, 2], help="Debug verbosity on stderr")
    parser.add_argument("--show-map", action="store_true", help="Print the maze before and after the run")
    parser.add_argument("--keep-connected", action="store_true", help="Reject cover that splits the maze")
    parser.add_argument("--stop-on-knockout", action="store_true", help="End the run at the first knockout")
    args = parser.parse_args()

    raise SystemExit(
        run_rollout(
            size=args.size,
            ticks=args.ticks,
            dt=args.dt,
            seed=args.seed,
            debug=args.debug,
            show_map=args.show_map,
            keep_connected=args.keep_connected,
            stop_on_knockout=args.stop_on_knockout,
        )
    )


if __name__ == "__main__":
    main()
