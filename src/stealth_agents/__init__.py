"""Stealth agents: two scripted agents hunting each other through a generated maze."""

from .agent import AgentBrain
from .config import StealthConfig
from .maze import generate_maze
from .pathfinding import find_path
from .simulation import StealthSimulation
from .state import AgentState, AgentView
from .types import AgentMode, Cell, CellType, KnockoutSignal

__all__ = [
    "AgentBrain",
    "AgentMode",
    "AgentState",
    "AgentView",
    "Cell",
    "CellType",
    "KnockoutSignal",
    "StealthConfig",
    "StealthSimulation",
    "find_path",
    "generate_maze",
]
