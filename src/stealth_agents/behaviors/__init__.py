"""Mode handlers for the stealth agents."""

from stealth_agents.types import AgentMode

from .base import ModeHandler, Services, TickContext, follow_path, scan_step
from .chase import flank_point, handle_chase
from .escape import handle_escape
from .explore import handle_explore
from .lost import handle_lost
from .scan import handle_scan

# DOWN has no handler: a knocked out agent does nothing
MODE_HANDLERS: dict[AgentMode, ModeHandler] = {
    AgentMode.EXPLORE: handle_explore,
    AgentMode.SCAN: handle_scan,
    AgentMode.CHASE: handle_chase,
    AgentMode.FLANK: handle_chase,
    AgentMode.LOST: handle_lost,
    AgentMode.ESCAPE: handle_escape,
}

__all__ = [
    "MODE_HANDLERS",
    "ModeHandler",
    "Services",
    "TickContext",
    "flank_point",
    "follow_path",
    "scan_step",
    "handle_chase",
    "handle_escape",
    "handle_explore",
    "handle_lost",
    "handle_scan",
]
