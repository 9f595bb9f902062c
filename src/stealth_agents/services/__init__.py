"""Services shared by the stealth agents."""

from .navigator import Navigator
from .perception import Perception

__all__ = ["Navigator", "Perception"]
