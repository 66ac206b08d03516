from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from ..data.filters import ViewFilter, apply_filter
from ..models.cell import (
    BOUNDARY_GROUP,
    BOUNDARY_NONE,
    BOUNDARY_YEAR,
    ConsolidatedCell,
    SeparatorBoundary,
)
from ..models.grid import ConsolidatedGrid
from ..models.period import SLOT_COUNT, day_of, period_of
from ..models.session import ScheduledSession, SectionSchedule
from .occupancy import SectionOccupancy, build_occupancy

logger = logging.getLogger(__name__)


def order_sections(sections: Iterable[SectionSchedule]) -> List[SectionSchedule]:
    return sorted(sections, key=lambda s: s.sort_key())


def compute_separators(sections: Sequence[SectionSchedule]) -> List[SeparatorBoundary]:
    seps: List[SeparatorBoundary] = []
    for i in range(1, len(sections)):
        prev, cur = sections[i - 1], sections[i]
        if prev.year != cur.year:
            kind = BOUNDARY_YEAR
        elif prev.group_id != cur.group_id:
            kind = BOUNDARY_GROUP
        else:
            kind = BOUNDARY_NONE
        seps.append(SeparatorBoundary(i, kind))
    return seps


def _joins_run(head: ScheduledSession, other: ScheduledSession | None) -> bool:
    # Equal durations keep the merged block rectangular. Adjacent sessions that
    # agree on every merge field but differ in length stay separate cells.
    return (
        other is not None
        and other.merge_key() == head.merge_key()
        and other.duration == head.duration
    )


def consolidate_row(slot: int, occupancies: Sequence[SectionOccupancy]) -> List[ConsolidatedCell]:
    day, period = day_of(slot), period_of(slot)
    cells: List[ConsolidatedCell] = []
    n = len(occupancies)
    col = 0
    while col < n:
        occ = occupancies[col]
        if slot in occ.occupied:
            col += 1
            continue
        session = occ.start_map.get(slot)
        if session is None:
            cells.append(
                ConsolidatedCell(day, period, col, 1, 1, None, (occ.section.section_id,))
            )
            col += 1
            continue
        run = 1
        while col + run < n and _joins_run(session, occupancies[col + run].start_map.get(slot)):
            run += 1
        ids = tuple(o.section.section_id for o in occupancies[col : col + run])
        cells.append(ConsolidatedCell(day, period, col, session.duration, run, session, ids))
        # Columns inside the run are skipped for this row only.
        col += run
    return cells


def consolidate(occupancies: Sequence[SectionOccupancy]) -> ConsolidatedGrid:
    sections = [o.section for o in occupancies]
    grid = ConsolidatedGrid(sections=sections, separators=compute_separators(sections))
    for occ in occupancies:
        grid.issues.extend(occ.issues)
    for slot in range(SLOT_COUNT):
        grid.rows[slot] = consolidate_row(slot, occupancies)
    logger.info(
        f"Consolidated {len(sections)} sections into "
        f"{sum(len(r) for r in grid.rows)} cells ({len(grid.merged_cells())} merged)"
    )
    return grid


def build_grid(
    sections: Iterable[SectionSchedule],
    view_filter: ViewFilter | None = None,
    *,
    sort: bool = True,
) -> ConsolidatedGrid:
    """Filter, order, index and consolidate in one pass."""
    selected = apply_filter(sections, view_filter or ViewFilter())
    if sort:
        selected = order_sections(selected)
    return consolidate([build_occupancy(s) for s in selected])
