"""Built-in segments for the status line.

Importing this module registers all built-in segments with the registry.
"""

from .context import ContextWindowSegment
from .cost import CostSegment
from .directory import DirectorySegment
from .git import GitSegment
from .model import ModelSegment
from .output_style import OutputStyleSegment
from .session import SessionSegment
from .update import UpdateSegment
from .usage import Usage5HourSegment, Usage7DaySegment, UsageSegment

__all__ = [
    "DirectorySegment",
    "GitSegment",
    "ModelSegment",
    "ContextWindowSegment",
    "UsageSegment",
    "Usage5HourSegment",
    "Usage7DaySegment",
    "CostSegment",
    "SessionSegment",
    "OutputStyleSegment",
    "UpdateSegment",
]
