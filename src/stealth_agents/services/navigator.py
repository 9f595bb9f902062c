"""
Navigator service for the stealth agents.

Grid-aware spatial queries shared by both agents: floor sampling, clamping,
path requests, flee-point selection and line of sight.  Paths are computed on
demand; nothing is cached between calls.
"""

from __future__ import annotations

import math
import random
from typing import Optional

import numpy as np

from stealth_agents.geometry import bresenham, distance_sq
from stealth_agents.maze import is_floor
from stealth_agents.pathfinding import find_path
from stealth_agents.types import DEBUG, Cell


class Navigator:
    """Wraps the read-only grid and answers movement questions about it."""

    def __init__(self, grid: np.ndarray, rng: Optional[random.Random] = None, flee_distance: int = 3):
        self.grid = grid
        self.size = grid.shape[0]
        self._rng = rng or random.Random()
        self._flee_distance = flee_distance

    def clamp_to_floor(self, cell: tuple[float, float]) -> Cell:
        """Round and bound a coordinate into the grid.

        A wall result is replaced with a random floor cell rather than the
        nearest one.
        """
        x = min(self.size - 1, max(0, math.floor(cell[0] + 0.5)))
        y = min(self.size - 1, max(0, math.floor(cell[1] + 0.5)))
        if not is_floor(self.grid, (x, y)):
            return self.random_floor()
        return (x, y)

    def random_floor(self) -> Cell:
        """Uniformly sample cells until one is floor."""
        while True:
            x = self._rng.randrange(self.size)
            y = self._rng.randrange(self.size)
            if is_floor(self.grid, (x, y)):
                return (x, y)

    def path_to(self, start: Cell, goal: Cell) -> list[Cell]:
        return find_path(self.grid, start, goal)

    def path_away_from(self, start: Cell, threat: Cell) -> list[Cell]:
        """Path to whichever reachable escape point lies farthest from the threat.

        Candidates sit ``flee_distance`` cells along each axis from ``start``.
        Returns an empty list when none of them is reachable.
        """
        d = self._flee_distance
        x, y = start
        candidates = [
            self.clamp_to_floor((x + d, y)),
            self.clamp_to_floor((x - d, y)),
            self.clamp_to_floor((x, y + d)),
            self.clamp_to_floor((x, y - d)),
        ]
        candidates.sort(key=lambda c: distance_sq(c, threat), reverse=True)
        for candidate in candidates:
            path = self.path_to(start, candidate)
            if path:
                return path
        if DEBUG:
            print(f"[stealth] NAV: no escape from {start} away from {threat}")
        return []

    def line_of_sight(self, a: Cell, b: Cell) -> bool:
        """True if no cell on the raster line from a to b is blocked.

        The start cell is skipped and the end cell is checked.  Cells outside
        the grid count as blocked.  Not symmetric: a->b and b->a may rasterize
        differently.
        """
        return all(is_floor(self.grid, p) for p in bresenham(a, b))
