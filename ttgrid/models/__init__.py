# Re-export common types
from .cell import ConsolidatedCell, SeparatorBoundary
from .grid import ConsolidatedGrid
from .issue import DataIssue
from .session import ScheduledSession, SectionSchedule

__all__ = [
    "ScheduledSession",
    "SectionSchedule",
    "ConsolidatedCell",
    "SeparatorBoundary",
    "ConsolidatedGrid",
    "DataIssue",
]
