"""Lost: investigate the last seen cell and look around before giving up."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stealth_agents.types import AgentMode

from .base import Services, TickContext, follow_path, scan_step

if TYPE_CHECKING:
    from stealth_agents.state import AgentState


def handle_lost(state: AgentState, services: Services, ctx: TickContext) -> None:
    state.uncertain = True
    if not follow_path(state, services, ctx.dt):
        return
    if scan_step(state, services, ctx.dt):
        state.uncertain = False
        state.mode = AgentMode.EXPLORE
