from __future__ import annotations

import math

from .types import Cell

MOVE_DELTAS: dict[str, Cell] = {
    "east": (1, 0),
    "west": (-1, 0),
    "south": (0, 1),
    "north": (0, -1),
}

DIRECTIONS = ["east", "west", "south", "north"]


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def distance_sq(a: Cell, b: Cell) -> int:
    return (a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2


def is_adjacent(pos1: Cell, pos2: Cell) -> bool:
    dx = abs(pos1[0] - pos2[0])
    dy = abs(pos1[1] - pos2[1])
    return (dx == 1 and dy == 0) or (dx == 0 and dy == 1)


def wrap_angle(angle: float) -> float:
    """Wrap an angle into [-pi, pi)."""
    return (angle + math.pi) % (2 * math.pi) - math.pi


def bearing(source: Cell, target: Cell) -> float:
    """Heading from source to target; 0 points along +y, pi/2 along +x."""
    return math.atan2(target[0] - source[0], target[1] - source[1])


def bresenham(start: Cell, end: Cell) -> list[Cell]:
    """Cells on the segment start -> end, start excluded, end included."""
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    x, y = x0, y0
    points: list[Cell] = []
    while True:
        if (x, y) != (x0, y0):
            points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy
    return points
