"""Explore: walk the shuffled waypoint queue, scan at each stop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stealth_agents.types import AgentMode

from .base import Services, TickContext, follow_path

if TYPE_CHECKING:
    from stealth_agents.state import AgentState


def handle_explore(state: AgentState, services: Services, ctx: TickContext) -> None:
    nav = state.nav
    if not nav.path and nav.waypoints:
        waypoint = nav.waypoints.popleft()
        nav.waypoints.append(waypoint)
        nav.goal = waypoint
        nav.set_path(services.navigator.path_to(state.position, waypoint))

    if follow_path(state, services, ctx.dt):
        state.mode = AgentMode.SCAN
        state.scan.reset()
