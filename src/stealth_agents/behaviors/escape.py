"""Escape: run the flee path, then go back to exploring."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stealth_agents.types import AgentMode

from .base import Services, TickContext, follow_path

if TYPE_CHECKING:
    from stealth_agents.state import AgentState


def handle_escape(state: AgentState, services: Services, ctx: TickContext) -> None:
    if follow_path(state, services, ctx.dt):
        state.mode = AgentMode.EXPLORE
