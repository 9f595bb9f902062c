"""Scan: hold each look-around heading, then resume exploring."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stealth_agents.types import AgentMode

from .base import Services, TickContext, scan_step

if TYPE_CHECKING:
    from stealth_agents.state import AgentState


def handle_scan(state: AgentState, services: Services, ctx: TickContext) -> None:
    if state.scan.step >= len(services.config.scan_heading_radians):
        state.mode = AgentMode.EXPLORE
        return
    scan_step(state, services, ctx.dt)
