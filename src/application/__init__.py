"""Application services for the RF link planner.

PlanningSession is the composition root the host view layer calls into.
"""

from .config import PlannerSettings
from .session import InteractionMode, PlanningSession

__all__ = ["InteractionMode", "PlannerSettings", "PlanningSession"]
