"""Shared fixtures for stealth-agents tests."""

from __future__ import annotations

import random
from typing import Callable, Iterable, Optional

import numpy as np
import pytest

from stealth_agents.agent import AgentBrain
from stealth_agents.behaviors import Services
from stealth_agents.config import StealthConfig
from stealth_agents.services import Navigator, Perception
from stealth_agents.state import AgentView
from stealth_agents.types import AgentMode, Cell, CellType


def build_room(size: int, walls: Iterable[Cell] = ()) -> np.ndarray:
    """Open floor surrounded by a one-cell wall ring, plus extra wall cells."""
    grid = np.zeros((size, size), dtype=np.uint8)
    grid[0, :] = CellType.WALL
    grid[-1, :] = CellType.WALL
    grid[:, 0] = CellType.WALL
    grid[:, -1] = CellType.WALL
    for x, y in walls:
        grid[y, x] = CellType.WALL
    return grid


def build_services(grid: np.ndarray, config: Optional[StealthConfig] = None, seed: int = 0) -> Services:
    config = config or StealthConfig(size=grid.shape[0])
    navigator = Navigator(grid, random.Random(seed), flee_distance=config.flee_distance)
    return Services(navigator=navigator, perception=Perception(navigator, config), config=config)


def make_view(
    position: Cell,
    heading: float = 0.0,
    mode: AgentMode = AgentMode.EXPLORE,
    recognized: bool = False,
    agent_id: str = "B",
) -> AgentView:
    return AgentView(
        agent_id=agent_id,
        position=position,
        world_position=(0.0, 0.0),
        heading=heading,
        mode=mode,
        recognized=recognized,
        uncertain=False,
        goal=None,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def open_room() -> np.ndarray:
    """16x16 room with only the border ring walled."""
    return build_room(16)


@pytest.fixture
def make_brain() -> Callable[..., AgentBrain]:
    """Factory for a single AgentBrain on a given grid."""

    def _make(
        grid: np.ndarray,
        start: Cell,
        heading: float = 0.0,
        waypoints: Optional[Iterable[Cell]] = None,
        agent_id: str = "A",
    ) -> AgentBrain:
        services = build_services(grid)
        brain = AgentBrain(agent_id, start, services, rng=random.Random(7), waypoints=waypoints)
        brain.state.heading = heading
        return brain

    return _make
