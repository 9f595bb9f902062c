"""
Stealth simulation root.

StealthSimulation owns the grid, the shared services and both agent brains.
It clamps the incoming delta time, updates the agents one after the other and
delivers knockout signals between them.

Update order matters: agents update in list order, so the second agent sees
the first agent's state as already updated for this tick.  Knockouts emitted
by an agent are delivered before the next agent updates, which means a
knocked out agent does not act in the tick it was knocked out.
"""

from __future__ import annotations

import random
from typing import Any, Optional, Sequence

import numpy as np

from .agent import AgentBrain
from .behaviors import Services
from .config import StealthConfig
from .debug_logger import DebugLogger
from .geometry import distance_sq
from .maze import format_grid, generate_maze, is_floor
from .services import Navigator, Perception
from .state import AgentView
from .types import AgentMode, Cell, CellType, KnockoutSignal

AGENT_IDS = ("A", "B")

# Draws before giving up on separating the two spawn cells
MAX_START_ATTEMPTS = 10_000


class StealthSimulation:
    """Two agents hunting each other through one maze."""

    def __init__(
        self,
        config: Optional[StealthConfig] = None,
        *,
        seed: Optional[int] = None,
        grid: Optional[np.ndarray] = None,
        starts: Optional[Sequence[Cell]] = None,
        debug: int = 0,
        output: Any = None,
    ):
        config = config or StealthConfig()
        self.rng = random.Random(seed)

        if grid is None:
            grid = generate_maze(config.size, self.rng, config)
        else:
            grid = np.asarray(grid, dtype=np.uint8)
            if grid.ndim != 2 or grid.shape[0] != grid.shape[1]:
                raise ValueError(f"grid must be square, got shape {grid.shape}")
            if grid.shape[0] != config.size:
                config = config.model_copy(update={"size": grid.shape[0]})
        self.config = config
        self.grid = grid

        self.navigator = Navigator(grid, self.rng, flee_distance=config.flee_distance)
        self.services = Services(
            navigator=self.navigator,
            perception=Perception(self.navigator, config),
            config=config,
        )

        if starts is None:
            starts = self._pick_starts()
        if len(starts) != len(AGENT_IDS):
            raise ValueError(f"expected {len(AGENT_IDS)} start cells, got {len(starts)}")
        for start in starts:
            if not is_floor(grid, start):
                raise ValueError(f"start cell {start} is not a floor cell")

        self.agents = [
            AgentBrain(agent_id, tuple(start), self.services, rng=self.rng)
            for agent_id, start in zip(AGENT_IDS, starts)
        ]
        self._by_id = {agent.agent_id: agent for agent in self.agents}

        self.step_count = 0
        self.time = 0.0
        self.debug_logger = DebugLogger(level=debug, output=output) if debug >= 1 else None

    def _pick_starts(self) -> list[Cell]:
        first = self.navigator.random_floor()
        for _ in range(MAX_START_ATTEMPTS):
            second = self.navigator.random_floor()
            if distance_sq(first, second) >= self.config.min_start_distance_sq:
                return [first, second]
        raise RuntimeError(
            f"could not place agents {self.config.min_start_distance_sq ** 0.5:.1f} cells apart "
            f"after {MAX_START_ATTEMPTS} attempts"
        )

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def step(self, dt: float) -> list[AgentView]:
        """Advance one tick; ``dt`` is clamped to ``[0, max_dt]`` seconds."""
        dt = min(self.config.max_dt, max(0.0, dt))
        self.step_count += 1
        self.time += dt

        for index, agent in enumerate(self.agents):
            enemy = self.enemy_of(index)
            signals = agent.update(dt, enemy.view())
            self._deliver(signals)

        if self.debug_logger:
            for agent in self.agents:
                state = agent.state
                self.debug_logger.record_agent_tick(
                    step=self.step_count,
                    agent_id=state.agent_id,
                    mode=state.mode.value,
                    position=state.position,
                    heading=state.heading,
                    recognized=state.recognized,
                    goal=state.nav.goal,
                    visibility=state.perception.visibility_timer,
                    lost=state.perception.lost_timer,
                )
            self.debug_logger.flush_tick()

        return self.views()

    def run(self, ticks: int, dt: float, stop_on_knockout: bool = False) -> list[AgentView]:
        for _ in range(ticks):
            self.step(dt)
            if stop_on_knockout and self.finished:
                break
        return self.views()

    def enemy_of(self, index: int) -> AgentBrain:
        return self.agents[(index + 1) % len(self.agents)]

    def _deliver(self, signals: list[KnockoutSignal]) -> None:
        for signal in signals:
            target = self._by_id.get(signal.target_id)
            if target is None or target.state.is_down:
                continue
            target.state.mode = AgentMode.DOWN
            if self.debug_logger:
                self.debug_logger.record_knockout(signal, self.step_count)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def views(self) -> list[AgentView]:
        return [agent.view() for agent in self.agents]

    def agent(self, agent_id: str) -> AgentBrain:
        return self._by_id[agent_id]

    @property
    def finished(self) -> bool:
        """True once any agent is down."""
        return any(agent.state.is_down for agent in self.agents)

    def render(self) -> str:
        """ASCII map with agents (their id, lower-case when down) and goals (``*``)."""
        marks: dict[Cell, str] = {}
        for agent in self.agents:
            goal = agent.state.nav.goal
            if goal is not None and self.grid[goal[1], goal[0]] == CellType.FLOOR:
                marks.setdefault(goal, "*")
        for agent in self.agents:
            label = agent.agent_id.lower() if agent.state.is_down else agent.agent_id
            marks[agent.state.position] = label
        return format_grid(self.grid, marks)
