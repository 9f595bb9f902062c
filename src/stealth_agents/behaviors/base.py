"""
Shared plumbing for mode handlers: the Services bundle, the per-tick
context, and the path following and scanning primitives every mode uses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from stealth_agents.config import StealthConfig
from stealth_agents.maze import cell_center
from stealth_agents.types import Cell, KnockoutSignal

if TYPE_CHECKING:
    from stealth_agents.services import Navigator, Perception
    from stealth_agents.state import AgentState, AgentView


@dataclass
class Services:
    """Bundle of shared services passed to mode handlers."""

    navigator: Navigator
    perception: Perception
    config: StealthConfig

    def to_world(self, cell: Cell) -> tuple[float, float]:
        return cell_center(cell[0], cell[1], self.config.cell_size, self.navigator.size)


@dataclass
class TickContext:
    """Inputs and outputs of one agent update."""

    dt: float
    enemy: AgentView
    signals: list[KnockoutSignal] = field(default_factory=list)


ModeHandler = Callable[["AgentState", Services, TickContext], None]


def follow_path(state: AgentState, services: Services, dt: float) -> bool:
    """Advance along the current path; True once the last cell is reached.

    An empty or single-cell path counts as already arrived.
    """
    nav = state.nav
    if nav.progress + 1 >= len(nav.path):
        nav.clear_path()
        return True

    next_cell = nav.path[nav.progress + 1]
    tx, tz = services.to_world(next_cell)
    wx, wz = state.world_position
    dx, dz = tx - wx, tz - wz
    distance = math.hypot(dx, dz)
    if distance > 0:
        step = min(services.config.move_per_second * dt, distance)
        wx += dx / distance * step
        wz += dz / distance * step
        state.heading = math.atan2(dx, dz)
    state.world_position = (wx, wz)

    if math.hypot(tx - wx, tz - wz) < services.config.arrive_epsilon:
        nav.progress += 1
        state.position = next_cell
        if nav.progress >= len(nav.path) - 1:
            nav.clear_path()
            return True
    return False


def scan_step(state: AgentState, services: Services, dt: float) -> bool:
    """Turn toward the current scan heading; True once every heading was held."""
    headings = services.config.scan_heading_radians
    scan = state.scan
    scan.timer += dt
    state.heading += (headings[scan.step] - state.heading) * services.config.scan_turn_rate
    if scan.timer >= services.config.scan_hold_seconds:
        scan.step += 1
        scan.timer = 0.0
    return scan.step >= len(headings)
