"""A* pathfinding over the occupancy grid."""

from __future__ import annotations

import heapq
from typing import Optional

import numpy as np

from .geometry import MOVE_DELTAS, manhattan
from .maze import is_floor
from .types import Cell


def find_path(grid: np.ndarray, start: Cell, goal: Cell) -> list[Cell]:
    """Shortest 4-way path from start to goal, both inclusive.

    Uses Manhattan distance as the heuristic and unit step cost.  Returns an
    empty list when either end is a wall, out of bounds, or unreachable.
    """
    if not is_floor(grid, start) or not is_floor(grid, goal):
        return []
    if start == goal:
        return [start]

    tie = 0
    open_set: list[tuple[int, int, Cell]] = [(manhattan(start, goal), tie, start)]
    came_from: dict[Cell, Optional[Cell]] = {start: None}
    g_score: dict[Cell, int] = {start: 0}
    closed: set[Cell] = set()

    while open_set:
        _, _, current = heapq.heappop(open_set)
        if current in closed:
            continue
        if current == goal:
            return _reconstruct(came_from, current)
        closed.add(current)

        current_g = g_score[current]
        for dx, dy in MOVE_DELTAS.values():
            neighbor = (current[0] + dx, current[1] + dy)
            if neighbor in closed or not is_floor(grid, neighbor):
                continue
            tentative_g = current_g + 1
            if tentative_g < g_score.get(neighbor, tentative_g + 1):
                came_from[neighbor] = current
                g_score[neighbor] = tentative_g
                tie += 1
                heapq.heappush(open_set, (tentative_g + manhattan(neighbor, goal), tie, neighbor))

    return []


def _reconstruct(came_from: dict[Cell, Optional[Cell]], current: Cell) -> list[Cell]:
    path = [current]
    prev = came_from[current]
    while prev is not None:
        path.append(prev)
        prev = came_from[prev]
    path.reverse()
    return path
