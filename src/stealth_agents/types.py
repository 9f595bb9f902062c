"""
Types and constants for the stealth agents.

Cell and mode enums, the cell coordinate alias and the knockout signal.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum

# (x, y) grid coordinate; grids are indexed grid[y, x]
Cell = tuple[int, int]

# (x, z) continuous world coordinate used for movement and rendering
WorldPos = tuple[float, float]


class CellType(IntEnum):
    """Occupancy grid cell states."""

    FLOOR = 0  # Passable
    WALL = 1  # Blocks movement and sight


class AgentMode(Enum):
    """Behavioral modes of the agent state machine."""

    EXPLORE = "explore"  # Walk the waypoint queue
    SCAN = "scan"  # Look around after reaching a waypoint
    CHASE = "chase"  # Enemy recognized, heading for the flank point
    FLANK = "flank"  # Reached the flank point, still chasing
    LOST = "lost"  # Lost track, investigating the last seen cell
    ESCAPE = "escape"  # Running from a chasing enemy
    DOWN = "down"  # Knocked out (terminal)


# Modes that share the chase handler
CHASING_MODES = frozenset({AgentMode.CHASE, AgentMode.FLANK})


@dataclass(frozen=True)
class KnockoutSignal:
    """Request from a chasing agent to put its target into DOWN."""

    source_id: str
    target_id: str
    step: int = 0


# Debug flag for ad-hoc navigator diagnostics
DEBUG = False
