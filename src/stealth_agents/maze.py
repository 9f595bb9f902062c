"""
Procedural stealth maze generation.

The grid is carved by a randomized depth-first backtracker on a 2-cell lattice
(odd coordinates are rooms, even coordinates are the walls between them), then
loosened with extra pockets and dotted with cover pillars.  Each stage is a
separate function so callers can stop after any of them.

Grids are ``numpy`` arrays of ``uint8`` indexed ``grid[y, x]``.
"""

from __future__ import annotations

import random
from collections import deque
from typing import Mapping, Optional

import numpy as np

from .config import StealthConfig
from .types import Cell, CellType, WorldPos

# 4-way offsets used for cover and connectivity checks
_ADJACENT = ((1, 0), (-1, 0), (0, 1), (0, -1))


def lattice_neighbors(x: int, y: int, size: int) -> list[Cell]:
    """Cells two steps away on the carving lattice, excluding the border ring."""
    candidates = [(x + 2, y), (x - 2, y), (x, y + 2), (x, y - 2)]
    return [(nx, ny) for nx, ny in candidates if 0 < nx < size - 1 and 0 < ny < size - 1]


def carve_maze(size: int, rng: random.Random) -> np.ndarray:
    """Carve a perfect maze: every floor cell reachable, no cycles."""
    grid = np.full((size, size), CellType.WALL, dtype=np.uint8)
    grid[1, 1] = CellType.FLOOR
    stack: list[Cell] = [(1, 1)]

    while stack:
        x, y = stack[-1]
        unvisited = [(nx, ny) for nx, ny in lattice_neighbors(x, y, size) if grid[ny, nx] == CellType.WALL]
        if not unvisited:
            stack.pop()
            continue
        nx, ny = unvisited[rng.randrange(len(unvisited))]
        # Open the wall between the two rooms
        grid[y + (ny - y) // 2, x + (nx - x) // 2] = CellType.FLOOR
        grid[ny, nx] = CellType.FLOOR
        stack.append((nx, ny))

    return grid


def inject_pockets(grid: np.ndarray, rng: random.Random, attempts: int) -> int:
    """Open random wall cells that sit between lattice floors.

    Adds shortcuts and alternate routes, so the maze is no longer a tree.
    Returns the number of cells opened.
    """
    size = grid.shape[0]
    opened = 0
    for _ in range(attempts):
        x = 1 + rng.randrange(size - 2)
        y = 1 + rng.randrange(size - 2)
        if grid[y, x] != CellType.WALL:
            continue
        floors = [(nx, ny) for nx, ny in lattice_neighbors(x, y, size) if grid[ny, nx] == CellType.FLOOR]
        if len(floors) >= 2:
            grid[y, x] = CellType.FLOOR
            opened += 1
    return opened


def place_cover(
    grid: np.ndarray,
    rng: random.Random,
    attempts: int,
    probability: float,
    keep_connected: bool = False,
) -> int:
    """Turn random corridor cells back into walls to block sight lines.

    Connectivity is not preserved unless ``keep_connected`` is set, in which
    case any pillar that would split the floor is rolled back.
    Returns the number of pillars placed.
    """
    size = grid.shape[0]
    placed = 0
    for _ in range(attempts):
        x = 1 + rng.randrange(size - 2)
        y = 1 + rng.randrange(size - 2)
        if grid[y, x] != CellType.FLOOR:
            continue
        if _floor_neighbor_count(grid, x, y) < 2:
            continue
        if rng.random() >= probability:
            continue
        grid[y, x] = CellType.WALL
        if keep_connected and not is_connected(grid):
            grid[y, x] = CellType.FLOOR
            continue
        placed += 1
    return placed


def generate_maze(
    size: int,
    rng: Optional[random.Random] = None,
    config: Optional[StealthConfig] = None,
) -> np.ndarray:
    """Build a complete stealth maze: carve, add pockets, add cover."""
    config = config or StealthConfig(size=size)
    rng = rng or random.Random()
    grid = carve_maze(size, rng)
    inject_pockets(grid, rng, attempts=config.pocket_factor * size)
    place_cover(
        grid,
        rng,
        attempts=config.cover_factor * size,
        probability=config.cover_probability,
        keep_connected=config.keep_connected,
    )
    return grid


def _floor_neighbor_count(grid: np.ndarray, x: int, y: int) -> int:
    size = grid.shape[0]
    count = 0
    for dx, dy in _ADJACENT:
        nx, ny = x + dx, y + dy
        if 0 <= nx < size and 0 <= ny < size and grid[ny, nx] == CellType.FLOOR:
            count += 1
    return count


def is_floor(grid: np.ndarray, cell: Cell) -> bool:
    """True if the cell is inside the grid and passable."""
    x, y = cell
    rows, cols = grid.shape
    return 0 <= x < cols and 0 <= y < rows and grid[y, x] == CellType.FLOOR


def floor_cells(grid: np.ndarray) -> list[Cell]:
    """All floor cells in row-major order as (x, y)."""
    return [(int(x), int(y)) for y, x in np.argwhere(grid == CellType.FLOOR)]


def reachable_from(grid: np.ndarray, start: Cell) -> set[Cell]:
    """Flood fill over 4-connected floor cells."""
    if not is_floor(grid, start):
        return set()
    seen = {start}
    queue: deque[Cell] = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in _ADJACENT:
            nxt = (x + dx, y + dy)
            if nxt not in seen and is_floor(grid, nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def is_connected(grid: np.ndarray) -> bool:
    """True when every floor cell can reach every other floor cell."""
    floors = floor_cells(grid)
    if not floors:
        return True
    return len(reachable_from(grid, floors[0])) == len(floors)


def cell_center(x: int, y: int, cell_size: float, map_size: int) -> WorldPos:
    """World (x, z) of a cell center, with the grid centered on the origin."""
    offset = (map_size * cell_size) / 2
    return (x * cell_size - offset + cell_size / 2, y * cell_size - offset + cell_size / 2)


def format_grid(grid: np.ndarray, marks: Optional[Mapping[Cell, str]] = None) -> str:
    """ASCII dump of the grid: ``#`` wall, ``.`` floor, plus single-char marks."""
    marks = marks or {}
    rows = []
    for y in range(grid.shape[0]):
        row = []
        for x in range(grid.shape[1]):
            if (x, y) in marks:
                row.append(marks[(x, y)][0])
            else:
                row.append("#" if grid[y, x] == CellType.WALL else ".")
        rows.append("".join(row))
    return "\n".join(rows)
