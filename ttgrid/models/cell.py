from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .period import PERIODS_PER_DAY
from .session import ScheduledSession

BOUNDARY_YEAR = "year"
BOUNDARY_GROUP = "group"
BOUNDARY_NONE = "none"


@dataclass(frozen=True)
class ConsolidatedCell:
    day: int
    period: int
    column: int
    row_span: int
    col_span: int
    session: ScheduledSession | None
    section_ids: Tuple[str, ...]

    @property
    def slot_index(self) -> int:
        return self.day * PERIODS_PER_DAY + self.period

    @property
    def is_empty(self) -> bool:
        return self.session is None

    @property
    def is_merged(self) -> bool:
        return self.row_span > 1 or self.col_span > 1


@dataclass(frozen=True)
class SeparatorBoundary:
    column: int  # index of the section to the right of the boundary
    kind: str  # year, group, none
