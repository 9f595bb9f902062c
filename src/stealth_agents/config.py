"""Simulation constants for the stealth agents.

All tunables live in one frozen pydantic model so that a bad value fails at
construction instead of deep inside a tick.  The defaults are the shipped
behavior; tests build variants with ``StealthConfig(size=9)`` and friends.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field


class StealthConfig(BaseModel):
    """Maze, perception, movement and timing constants."""

    model_config = ConfigDict(frozen=True)

    # Maze
    size: int = Field(default=32, ge=5, description="Grid side length in cells")
    cell_size: float = Field(default=1.4, gt=0, description="World units per cell")
    pocket_factor: int = Field(default=2, ge=0, description="Pocket attempts per grid row")
    cover_factor: int = Field(default=3, ge=0, description="Cover attempts per grid row")
    cover_probability: float = Field(default=0.3, ge=0, le=1)
    keep_connected: bool = Field(default=False, description="Skip cover that would split the floor")

    # Movement
    speed: float = Field(default=1.0, gt=0, description="Cells per second")
    arrive_epsilon: float = Field(default=0.05, gt=0, description="World units")

    # Perception
    fov_degrees: float = Field(default=70.0, gt=0, le=360)
    view_distance: float = Field(default=8.0, gt=0, description="Cells")
    recognize_seconds: float = Field(default=2.0, gt=0)
    visibility_decay: float = Field(default=0.5, ge=0, description="Fraction of dt lost per unseen tick")
    lost_seconds: float = Field(default=3.0, gt=0)

    # Scanning
    scan_headings_degrees: tuple[float, ...] = Field(default=(0.0, 90.0, -90.0), min_length=1)
    scan_hold_seconds: float = Field(default=1.0, gt=0)
    scan_turn_rate: float = Field(default=0.1, gt=0, le=1)

    # Interaction
    knockout_range: float = Field(default=1.0, ge=0, description="Cells")
    knockout_cone_degrees: float = Field(default=60.0, gt=0, le=180)
    flee_distance: int = Field(default=3, ge=1, description="Cells")
    min_start_distance_sq: int = Field(default=25, ge=0)

    # Clock
    max_dt: float = Field(default=0.05, gt=0, description="Seconds")

    @property
    def fov_radians(self) -> float:
        return math.radians(self.fov_degrees)

    @property
    def knockout_cone_radians(self) -> float:
        return math.radians(self.knockout_cone_degrees)

    @property
    def scan_heading_radians(self) -> tuple[float, ...]:
        return tuple(math.radians(d) for d in self.scan_headings_degrees)

    @property
    def move_per_second(self) -> float:
        """World units travelled per second."""
        return self.speed * self.cell_size
