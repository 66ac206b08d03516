from __future__ import annotations

from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from ..data.filters import ViewFilter
from ..models.cell import BOUNDARY_GROUP, BOUNDARY_YEAR
from ..models.grid import ConsolidatedGrid
from ..models.period import DAYS, PERIODS_PER_DAY, period_label
from .labels import (
    GRID_LINE,
    HEADER_FILL,
    TIME_FILL,
    export_filename,
    generated_stamp,
    section_title,
    session_block,
    type_color,
)

TITLE_ROW = 1
STAMP_ROW = 2
HEADER_ROW = 3
FIRST_BODY_ROW = 4
FIRST_SECTION_COL = 2

SEPARATOR_STYLES = {BOUNDARY_GROUP: "medium", BOUNDARY_YEAR: "thick"}


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _border(left_style: str = "thin") -> Border:
    thin = Side(style="thin", color=GRID_LINE)
    left = thin if left_style == "thin" else Side(style=left_style, color="000000")
    return Border(left=left, right=thin, top=thin, bottom=thin)


def sheet_position(period: int, column: int) -> tuple[int, int]:
    """Worksheet (row, column) of a grid position."""
    return FIRST_BODY_ROW + period, FIRST_SECTION_COL + column


def _fill_sheet(ws, grid: ConsolidatedGrid, day: int, title: str, stamp: str) -> None:
    last_col = FIRST_SECTION_COL + grid.column_count - 1
    seps = grid.separator_map()

    ws.cell(row=TITLE_ROW, column=1, value=title)
    ws.cell(row=TITLE_ROW, column=1).font = Font(bold=True, size=14, color="1F2937")
    ws.cell(row=TITLE_ROW, column=1).alignment = Alignment(horizontal="center", vertical="center")
    ws.cell(row=STAMP_ROW, column=1, value=stamp)
    ws.cell(row=STAMP_ROW, column=1).font = Font(size=9, color="6B7280")

    header = ws.cell(row=HEADER_ROW, column=1, value="Time")
    header.fill = _fill(HEADER_FILL)
    header.font = Font(bold=True, color="FFFFFF")
    header.alignment = Alignment(horizontal="center", vertical="center")
    header.border = _border()
    for col, section in enumerate(grid.sections):
        c = ws.cell(row=HEADER_ROW, column=FIRST_SECTION_COL + col, value=section_title(section))
        c.fill = _fill(HEADER_FILL)
        c.font = Font(bold=True, color="FFFFFF")
        c.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
        c.border = _border(SEPARATOR_STYLES.get(seps.get(col, ""), "thin"))

    for period in range(PERIODS_PER_DAY):
        row = FIRST_BODY_ROW + period
        t = ws.cell(row=row, column=1, value=period_label(period))
        t.fill = _fill(TIME_FILL)
        t.font = Font(bold=True, color="374151")
        t.alignment = Alignment(horizontal="center", vertical="center")
        t.border = _border()
        for col in range(grid.column_count):
            c = ws.cell(row=row, column=FIRST_SECTION_COL + col)
            c.border = _border(SEPARATOR_STYLES.get(seps.get(col, ""), "thin"))
            c.alignment = Alignment(vertical="top", wrap_text=True)

    # Values and fills first; merging afterwards keeps the top-left styling.
    merges = []
    for cells in grid.day_rows(day):
        for cell in cells:
            r, c = sheet_position(cell.period, cell.column)
            target = ws.cell(row=r, column=c)
            if cell.session is None:
                target.fill = _fill("FFFFFF")
                continue
            target.value = session_block(cell.session)
            target.fill = _fill(type_color(cell.session) or "FFFFFF")
            if cell.is_merged:
                merges.append((r, c, r + cell.row_span - 1, c + cell.col_span - 1))
    for r1, c1, r2, c2 in merges:
        ws.merge_cells(start_row=r1, start_column=c1, end_row=r2, end_column=c2)
        ws.cell(row=r1, column=c1).alignment = Alignment(
            horizontal="center", vertical="center", wrap_text=True
        )

    ws.column_dimensions["A"].width = 18
    for col in range(FIRST_SECTION_COL, last_col + 1):
        ws.column_dimensions[get_column_letter(col)].width = 35
    ws.row_dimensions[TITLE_ROW].height = 25
    ws.row_dimensions[STAMP_ROW].height = 18
    ws.row_dimensions[HEADER_ROW].height = 35
    for period in range(PERIODS_PER_DAY):
        ws.row_dimensions[FIRST_BODY_ROW + period].height = 60


def build_workbook(
    grid: ConsolidatedGrid,
    view_filter: ViewFilter | None = None,
    generated_at: datetime | None = None,
) -> Workbook:
    """One sheet per day with merge ranges taken straight from the grid."""
    view_filter = view_filter or ViewFilter()
    generated_at = generated_at or datetime.now()
    stamp = generated_stamp(generated_at)
    wb = Workbook()
    wb.remove(wb.active)
    for day_idx, day in enumerate(DAYS):
        ws = wb.create_sheet(title=day)
        title = day if not view_filter.is_active else f"{day} | {view_filter.describe()}"
        _fill_sheet(ws, grid, day_idx, title, stamp)
    return wb


def write_xlsx(
    grid: ConsolidatedGrid,
    outputs_dir: Path,
    view_filter: ViewFilter | None = None,
    generated_at: datetime | None = None,
) -> Path:
    view_filter = view_filter or ViewFilter()
    generated_at = generated_at or datetime.now()
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / export_filename("xlsx", view_filter, generated_at)
    build_workbook(grid, view_filter, generated_at).save(path)
    return path
