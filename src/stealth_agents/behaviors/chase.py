"""
Chase and Flank: circle behind a recognized enemy and knock it out.

Both modes share this handler.  FLANK only records that the agent reached the
last flank point; movement is identical.  The knockout is not applied here;
a KnockoutSignal is queued for the simulation root to deliver.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from stealth_agents.types import AgentMode, Cell, KnockoutSignal

from .base import Services, TickContext, follow_path

if TYPE_CHECKING:
    from stealth_agents.state import AgentState, AgentView


def flank_point(enemy: AgentView) -> tuple[float, float]:
    """One cell behind the enemy's facing direction (unclamped)."""
    ex, ey = enemy.position
    return (ex - math.sin(enemy.heading), ey - math.cos(enemy.heading))


def handle_chase(state: AgentState, services: Services, ctx: TickContext) -> None:
    if not state.perception.recognized:
        state.mode = AgentMode.EXPLORE
        return

    enemy = ctx.enemy
    goal: Cell = services.navigator.clamp_to_floor(flank_point(enemy))
    state.nav.goal = goal
    path = services.navigator.path_to(state.position, goal)
    if path:
        state.nav.set_path(path)

    if follow_path(state, services, ctx.dt):
        state.mode = AgentMode.FLANK

    if services.perception.is_behind(state.position, enemy.position, enemy.heading):
        ctx.signals.append(KnockoutSignal(source_id=state.agent_id, target_id=enemy.agent_id, step=state.step))
