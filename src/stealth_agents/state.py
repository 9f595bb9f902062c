"""
State classes for the stealth agents.

AgentState with its NavigationState, PerceptionState and ScanState parts,
plus the read-only AgentView handed to the other agent and to renderers.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Optional

from .types import AgentMode, Cell, WorldPos


@dataclass
class NavigationState:
    """Path following and exploration state."""

    # Current path (start cell first) and index of the cell we last reached
    path: list[Cell] = field(default_factory=list)
    progress: int = 0

    # Where the agent is currently heading (marker placement)
    goal: Optional[Cell] = None

    # Exploration waypoints, cycled round-robin
    waypoints: deque[Cell] = field(default_factory=deque)

    def set_path(self, path: list[Cell]) -> None:
        self.path = path
        self.progress = 0

    def clear_path(self) -> None:
        self.path = []
        self.progress = 0


@dataclass
class PerceptionState:
    """Visibility timers and recognition of the enemy."""

    visibility_timer: float = 0.0  # Accumulates while the enemy is visible
    lost_timer: float = 0.0  # Seconds since the enemy was last visible
    recognized: bool = False
    enemy_visible: bool = False  # Result of this tick's sight check
    last_seen_enemy: Optional[Cell] = None
    recognized_at: Optional[float] = None  # Sim time of the first recognition


@dataclass
class ScanState:
    """Progress through the look-around headings."""

    timer: float = 0.0
    step: int = 0

    def reset(self) -> None:
        self.timer = 0.0
        self.step = 0


@dataclass(frozen=True)
class AgentView:
    """Public snapshot of an agent, safe to hand to the other agent."""

    agent_id: str
    position: Cell
    world_position: WorldPos
    heading: float
    mode: AgentMode
    recognized: bool
    uncertain: bool
    goal: Optional[Cell]


@dataclass
class AgentState:
    """Complete state for one agent."""

    agent_id: str
    position: Cell
    world_position: WorldPos

    heading: float = 0.0
    mode: AgentMode = AgentMode.EXPLORE

    # "?" indicator shown while investigating the last seen cell
    uncertain: bool = False

    # Step counter and simulated seconds since spawn
    step: int = 0
    elapsed: float = 0.0

    nav: NavigationState = field(default_factory=NavigationState)
    perception: PerceptionState = field(default_factory=PerceptionState)
    scan: ScanState = field(default_factory=ScanState)

    @property
    def recognized(self) -> bool:
        return self.perception.recognized

    @property
    def is_down(self) -> bool:
        return self.mode == AgentMode.DOWN

    def view(self) -> AgentView:
        return AgentView(
            agent_id=self.agent_id,
            position=self.position,
            world_position=self.world_position,
            heading=self.heading,
            mode=self.mode,
            recognized=self.perception.recognized,
            uncertain=self.uncertain,
            goal=self.nav.goal,
        )
