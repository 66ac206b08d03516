from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from .cell import BOUNDARY_NONE, ConsolidatedCell, SeparatorBoundary
from .issue import DataIssue
from .period import PERIODS_PER_DAY, SLOT_COUNT
from .session import SectionSchedule


@dataclass
class ConsolidatedGrid:
    sections: List[SectionSchedule] = field(default_factory=list)
    rows: List[List[ConsolidatedCell]] = field(
        default_factory=lambda: [[] for _ in range(SLOT_COUNT)]
    )
    separators: List[SeparatorBoundary] = field(default_factory=list)
    issues: List[DataIssue] = field(default_factory=list)

    @property
    def column_count(self) -> int:
        return len(self.sections)

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def row(self, slot: int) -> List[ConsolidatedCell]:
        return self.rows[slot]

    def day_rows(self, day: int) -> List[List[ConsolidatedCell]]:
        start = day * PERIODS_PER_DAY
        return self.rows[start : start + PERIODS_PER_DAY]

    def cells(self) -> Iterable[ConsolidatedCell]:
        for row in self.rows:
            yield from row

    def merged_cells(self) -> List[ConsolidatedCell]:
        return [c for c in self.cells() if c.is_merged]

    def separator_before(self, column: int) -> str:
        for sep in self.separators:
            if sep.column == column:
                return sep.kind
        return BOUNDARY_NONE

    def separator_map(self) -> Dict[int, str]:
        return {s.column: s.kind for s in self.separators if s.kind != BOUNDARY_NONE}
