"""
Stealth agent brain.

AgentBrain owns one agent's state, senses the enemy every tick and delegates
movement to the handler for the current mode.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Iterable, Optional

from .behaviors import MODE_HANDLERS, Services, TickContext
from .maze import floor_cells
from .state import AgentState, AgentView
from .types import AgentMode, Cell, KnockoutSignal


class AgentBrain:
    """Per-agent coordinator that owns state and delegates to mode handlers."""

    def __init__(
        self,
        agent_id: str,
        start: Cell,
        services: Services,
        rng: Optional[random.Random] = None,
        waypoints: Optional[Iterable[Cell]] = None,
    ):
        self._services = services
        self._config = services.config
        self._rng = rng or random.Random()

        self.state = AgentState(
            agent_id=agent_id,
            position=start,
            world_position=services.to_world(start),
        )
        self.state.nav.goal = start
        if waypoints is None:
            self.state.nav.waypoints = self._build_exploration_queue()
        else:
            self.state.nav.waypoints = deque(waypoints)

    @property
    def agent_id(self) -> str:
        return self.state.agent_id

    def view(self) -> AgentView:
        return self.state.view()

    def _build_exploration_queue(self) -> deque[Cell]:
        """Every interior floor cell, shuffled once."""
        cells = [(x, y) for x, y in floor_cells(self._services.navigator.grid) if x >= 1 and y >= 1]
        self._rng.shuffle(cells)
        return deque(cells)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def update(self, dt: float, enemy: AgentView) -> list[KnockoutSignal]:
        """Advance this agent by ``dt`` seconds against the enemy snapshot.

        Returns knockout signals for the caller to deliver.  A DOWN agent
        does nothing.
        """
        state = self.state
        if state.is_down:
            return []

        state.step += 1
        state.elapsed += dt

        self.perceive(dt, enemy)
        self._react_to_threat(enemy)

        ctx = TickContext(dt=dt, enemy=enemy)
        MODE_HANDLERS[state.mode](state, self._services, ctx)
        return ctx.signals

    def perceive(self, dt: float, enemy: AgentView) -> bool:
        """Update visibility timers and recognition; returns this tick's visibility."""
        state = self.state
        perception = state.perception
        visible = self.can_see(enemy.position)
        perception.enemy_visible = visible

        if visible:
            perception.visibility_timer += dt
            perception.lost_timer = 0.0
        else:
            perception.visibility_timer = max(0.0, perception.visibility_timer - dt * self._config.visibility_decay)
            perception.lost_timer += dt

        if perception.visibility_timer >= self._config.recognize_seconds:
            perception.recognized = True
            perception.last_seen_enemy = enemy.position
            if perception.recognized_at is None:
                perception.recognized_at = state.elapsed
            if state.mode != AgentMode.ESCAPE:
                state.mode = AgentMode.CHASE

        if perception.recognized and perception.lost_timer >= self._config.lost_seconds:
            self._enter_lost()

        return visible

    def can_see(self, target: Cell) -> bool:
        return self._services.perception.can_see(self.state.position, self.state.heading, target)

    def _enter_lost(self) -> None:
        state = self.state
        perception = state.perception
        perception.recognized = False
        state.mode = AgentMode.LOST
        state.uncertain = False
        state.scan.reset()
        state.nav.goal = perception.last_seen_enemy
        if perception.last_seen_enemy is None:
            state.nav.clear_path()
        else:
            state.nav.set_path(self._services.navigator.path_to(state.position, perception.last_seen_enemy))

    def _react_to_threat(self, enemy: AgentView) -> None:
        """Flee from an enemy that has recognized us and is chasing."""
        if not (enemy.recognized and enemy.mode == AgentMode.CHASE):
            return
        if not self.can_see(enemy.position):
            return
        state = self.state
        state.mode = AgentMode.ESCAPE
        state.perception.recognized = False
        escape_path = self._services.navigator.path_away_from(state.position, enemy.position)
        state.nav.goal = escape_path[-1] if escape_path else state.position
        state.nav.set_path(escape_path)
