from __future__ import annotations

from collections import Counter, defaultdict
from typing import TYPE_CHECKING, Dict, List, Tuple

from ..models.period import PERIODS_PER_DAY, SLOT_COUNT, is_valid_slot, same_day
from ..models.session import ScheduledSession

if TYPE_CHECKING:
    from ..models.grid import ConsolidatedGrid


def session_problem(session: ScheduledSession) -> str | None:
    """Return why a session cannot be placed on the grid, or None."""
    if not is_valid_slot(session.slot_index):
        return f"slot {session.slot_index} outside 0..{SLOT_COUNT - 1}"
    if session.duration < 1:
        return f"non-positive duration {session.duration}"
    if not is_valid_slot(session.last_slot) or not same_day(session.slot_index, session.last_slot):
        return f"slots {session.slot_index}..{session.last_slot} cross a day boundary"
    return None


def coverage_counts(grid: "ConsolidatedGrid") -> Dict[Tuple[int, int], int]:
    """How many cells cover each (column, slot) position."""
    counts: Counter = Counter()
    for cell in grid.cells():
        for dr in range(cell.row_span):
            for dc in range(cell.col_span):
                counts[(cell.column + dc, cell.slot_index + dr)] += 1
    return dict(counts)


def coverage_violations(grid: "ConsolidatedGrid") -> List[str]:
    counts = coverage_counts(grid)
    out: List[str] = []
    for col, section in enumerate(grid.sections):
        for slot in range(SLOT_COUNT):
            n = counts.get((col, slot), 0)
            if n != 1:
                out.append(f"{section.section_id}:{slot} covered {n} times")
    # Vertical spans must stay inside their day
    for cell in grid.cells():
        if cell.period + cell.row_span > PERIODS_PER_DAY:
            out.append(f"{','.join(cell.section_ids)}:{cell.slot_index} spans past the day")
    return out


def validate_grid(grid: "ConsolidatedGrid") -> Dict[str, object]:
    report: Dict[str, object] = {}
    report["section_count"] = grid.column_count
    cells = list(grid.cells())
    report["cell_count"] = len(cells)
    report["session_cell_count"] = sum(1 for c in cells if not c.is_empty)
    report["merged_cell_count"] = len(grid.merged_cells())
    report["horizontal_merge_count"] = sum(1 for c in cells if c.col_span > 1)

    issues_by_kind: Dict[str, List[str]] = defaultdict(list)
    for issue in grid.issues:
        where = "" if issue.slot_index is None else f":{issue.slot_index}"
        issues_by_kind[issue.kind].append(f"{issue.section_id}{where} {issue.detail}")
    report["issues_by_kind"] = dict(issues_by_kind)
    report["coverage_violations"] = coverage_violations(grid)
    report["separators"] = {
        grid.sections[s.column].section_id: s.kind for s in grid.separators if s.kind != "none"
    }
    return report
