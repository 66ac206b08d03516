from __future__ import annotations

from html import escape
from pathlib import Path
from typing import List

from ..data.filters import ViewFilter
from ..models.cell import ConsolidatedCell
from ..models.grid import ConsolidatedGrid
from ..models.period import DAYS, PERIODS_PER_DAY, period_label
from .labels import session_lines


def _sep_class(grid: ConsolidatedGrid, column: int) -> str:
    kind = grid.separator_before(column)
    return f" sep-{kind}" if kind != "none" else ""


def cell_html(grid: ConsolidatedGrid, cell: ConsolidatedCell) -> str:
    sep = _sep_class(grid, cell.column)
    if cell.session is None:
        return f"<td class='empty-cell{sep}'></td>"
    s = cell.session
    spans = ""
    if cell.row_span > 1:
        spans += f" rowspan='{cell.row_span}'"
    if cell.col_span > 1:
        spans += f" colspan='{cell.col_span}'"
    course_id, course_name, instructor, room = (escape(x) for x in session_lines(s))
    return (
        f"<td{spans} class='session-cell {escape(s.session_type)}{sep}'"
        f" data-sections='{escape(' '.join(cell.section_ids))}'>"
        f"<div class='session-content'>"
        f"<div class='course-code'>{course_id}</div>"
        f"<div class='course-name'>{course_name}</div>"
        f"<div class='instructor'>{instructor}</div>"
        f"<div class='room'>{room}</div>"
        f"</div></td>"
    )


def table_html(grid: ConsolidatedGrid) -> str:
    if grid.is_empty:
        return (
            "<div class='empty-state'><h3>No matching sessions found</h3>"
            "<p>Try changing the filters.</p></div>"
        )
    head_cells = "".join(
        f"<th class='section-header{_sep_class(grid, i)}'>"
        f"<div class='section-id'>{escape(sec.section_id)}</div>"
        f"<div class='section-details'>{escape(sec.group_id)} - Year {sec.year}</div></th>"
        for i, sec in enumerate(grid.sections)
    )
    rows_html: List[str] = []
    for day_idx, day in enumerate(DAYS):
        for period, cells in enumerate(grid.day_rows(day_idx)):
            day_cell = ""
            if period == 0:
                day_cell = (
                    f"<td rowspan='{PERIODS_PER_DAY}' class='day-cell'>"
                    f"<div class='day-label'>{day}</div></td>"
                )
            row_cells = "".join(cell_html(grid, c) for c in cells)
            rows_html.append(
                f"<tr>{day_cell}<td class='time-cell'>{period_label(period)}</td>{row_cells}</tr>"
            )
    return (
        "<table class='timetable-table'>"
        f"<thead><tr><th class='day-time-header' colspan='2'>Section</th>{head_cells}</tr></thead>"
        f"<tbody>{''.join(rows_html)}</tbody>"
        "</table>"
    )


def build_html(grid: ConsolidatedGrid, view_filter: ViewFilter | None = None) -> str:
    view_filter = view_filter or ViewFilter()
    title = escape(view_filter.describe())

    issue_note = ""
    if grid.issues:
        items = "".join(
            f"<li>{escape(i.section_id)}: {escape(i.detail)}</li>" for i in grid.issues[:50]
        )
        issue_note = (
            "<div class='issues'><h3>Data issues</h3>"
            "<p>These sessions were left out of the grid.</p>"
            f"<ul>{items}</ul></div>"
        )

    style = """
    <style>
    body { font-family: system-ui, Arial, sans-serif; margin: 20px; color: #111827; }
    .timetable-table { border-collapse: collapse; width: 100%; table-layout: fixed; }
    .timetable-table th, .timetable-table td { border: 1px solid #d1d5db; padding: 4px; text-align: center; vertical-align: middle; }
    .timetable-table thead th { background: #374151; color: #fff; }
    .section-details { font-size: 11px; font-weight: 400; }
    .day-cell { background: #f3f4f6; font-weight: 700; width: 90px; }
    .time-cell { background: #f9fafb; font-size: 12px; width: 100px; }
    .session-cell { font-size: 12px; line-height: 1.2; }
    .session-cell.lecture { background: #dbeafe; color: #1e40af; }
    .session-cell.lab { background: #fef3c7; color: #92400e; }
    .session-cell.tutorial { background: #d1fae5; color: #065f46; }
    .course-code { font-weight: 700; }
    .empty-cell { background: #fff; }
    .sep-group { border-left: 3px solid #6b7280 !important; }
    .sep-year { border-left: 5px solid #111827 !important; }
    .issues { margin-top: 16px; font-size: 13px; color: #92400e; }
    </style>
    """

    return (
        f"<html><head><meta charset='utf-8'><title>{title}</title>" + style + "</head><body>"
        f"<h1>{title}</h1>"
        + table_html(grid)
        + issue_note
        + "</body></html>"
    )


def write_html_ui(grid: ConsolidatedGrid, outputs_dir: Path, view_filter: ViewFilter | None = None) -> Path:
    ui_dir = outputs_dir / "ui"
    ui_dir.mkdir(parents=True, exist_ok=True)
    out_path = ui_dir / "index.html"
    out_path.write_text(build_html(grid, view_filter), encoding="utf-8")
    return out_path
