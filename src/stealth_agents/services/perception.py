"""
Perception service for the stealth agents.

Field-of-view and positional checks between two agents.  Distances and
bearings are measured in cells; headings follow the movement convention where
0 points along +y and pi/2 along +x.
"""

from __future__ import annotations

import math

from stealth_agents.config import StealthConfig
from stealth_agents.geometry import bearing, wrap_angle
from stealth_agents.types import Cell

from .navigator import Navigator


class Perception:
    """Vision cone and knockout geometry on top of the Navigator."""

    def __init__(self, navigator: Navigator, config: StealthConfig):
        self._navigator = navigator
        self._view_distance = config.view_distance
        self._half_fov = config.fov_radians / 2
        self._knockout_range = config.knockout_range
        self._knockout_half_cone = config.knockout_cone_radians

    def in_view_cone(self, position: Cell, heading: float, target: Cell) -> bool:
        """Distance and angle test only, ignoring walls."""
        dx = target[0] - position[0]
        dy = target[1] - position[1]
        if math.hypot(dx, dy) > self._view_distance:
            return False
        diff = wrap_angle(bearing(position, target) - heading)
        return abs(diff) <= self._half_fov

    def can_see(self, position: Cell, heading: float, target: Cell) -> bool:
        """Within view distance, inside the FOV cone and not occluded."""
        if not self.in_view_cone(position, heading, target):
            return False
        return self._navigator.line_of_sight(position, target)

    def is_behind(self, position: Cell, enemy_position: Cell, enemy_heading: float) -> bool:
        """True when ``position`` is close behind an enemy facing ``enemy_heading``.

        Close means within ``knockout_range`` cells; behind means within the
        knockout cone around the direction opposite the enemy's heading.
        """
        dx = enemy_position[0] - position[0]
        dy = enemy_position[1] - position[1]
        if math.hypot(dx, dy) > self._knockout_range:
            return False
        enemy_back = enemy_heading + math.pi
        diff = wrap_angle(bearing(enemy_position, position) - enemy_back)
        return abs(diff) < self._knockout_half_cone
