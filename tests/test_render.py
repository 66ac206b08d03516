import re
from datetime import datetime
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.utils import get_column_letter

from ttgrid.data.filters import ViewFilter
from ttgrid.data.loader import load_response
from ttgrid.grid.consolidate import build_grid
from ttgrid.models.period import DAYS, SLOT_COUNT
from ttgrid.models.session import ScheduledSession, SectionSchedule
from ttgrid.render import EXPORTERS, export_documents
from ttgrid.render.html_ui import build_html
from ttgrid.render.pdf_out import build_pdf, day_matrix
from ttgrid.render.xlsx_out import FIRST_BODY_ROW, FIRST_SECTION_COL, HEADER_ROW, build_workbook, sheet_position

SAMPLE = Path(__file__).resolve().parents[1] / "data" / "sample_response.json"
STAMP = datetime(2026, 1, 4, 9, 30)


def _grid():
    sections, _ = load_response(SAMPLE)
    return build_grid(sections)


def _expected_ranges(grid, day: int) -> set[str]:
    out = set()
    for row in grid.day_rows(day):
        for cell in row:
            if cell.session is not None and cell.is_merged:
                r1, c1 = sheet_position(cell.period, cell.column)
                r2, c2 = r1 + cell.row_span - 1, c1 + cell.col_span - 1
                out.add(f"{get_column_letter(c1)}{r1}:{get_column_letter(c2)}{r2}")
    return out


def test_html_uses_grid_spans_and_separators() -> None:
    html = build_html(_grid())
    assert "rowspan='2' colspan='2'" in html
    assert "sep-year" in html and "sep-group" in html
    assert html.count("class='day-cell'") == len(DAYS)
    assert "rowspan='8' class='day-cell'" in html
    assert "data-sections='S1 S2'" in html


def test_html_empty_state() -> None:
    html = build_html(build_grid([]), ViewFilter(room="NOWHERE"))
    assert "No matching sessions found" in html
    assert "Room: NOWHERE" in html


def test_workbook_merges_match_grid() -> None:
    grid = _grid()
    wb = build_workbook(grid, generated_at=STAMP)
    assert wb.sheetnames == DAYS
    for day_idx, day in enumerate(DAYS):
        ws = wb[day]
        actual = {str(r) for r in ws.merged_cells.ranges if r.min_row >= FIRST_BODY_ROW}
        assert actual == _expected_ranges(grid, day_idx), day
    assert {str(r) for r in wb["Sunday"].merged_cells.ranges} == {"B4:C5", "D6:D7"}
    assert {str(r) for r in wb["Monday"].merged_cells.ranges} == {"D4:E5", "B6:B7", "C8:C9"}


def test_workbook_layout_and_borders() -> None:
    grid = _grid()
    ws = build_workbook(grid, generated_at=STAMP)["Sunday"]
    assert ws.cell(row=1, column=1).value == "Sunday"
    assert ws.cell(row=2, column=1).value.startswith("Generated: January 04, 2026")
    assert ws.cell(row=HEADER_ROW, column=1).value == "Time"
    assert ws.cell(row=HEADER_ROW, column=FIRST_SECTION_COL).value == "S1 - G1 (Year 1)"
    assert ws.cell(row=FIRST_BODY_ROW, column=1).value == "9:00 - 9:45"
    assert ws.cell(row=FIRST_BODY_ROW, column=FIRST_SECTION_COL).value.startswith("CS101 - Intro to Programming")
    # S3 starts a new group, S4 a new year
    assert ws.cell(row=FIRST_BODY_ROW + 7, column=FIRST_SECTION_COL + 2).border.left.style == "medium"
    assert ws.cell(row=FIRST_BODY_ROW + 7, column=FIRST_SECTION_COL + 3).border.left.style == "thick"
    assert ws.cell(row=FIRST_BODY_ROW + 7, column=FIRST_SECTION_COL + 1).border.left.style == "thin"
    assert ws.max_row == FIRST_BODY_ROW + 7


def test_workbook_round_trips_through_file(tmp_path) -> None:
    path = tmp_path / "t.xlsx"
    build_workbook(_grid(), generated_at=STAMP).save(path)
    wb = load_workbook(path)
    assert "B4:C5" in {str(r) for r in wb["Sunday"].merged_cells.ranges}


def test_pdf_flattens_the_same_geometry() -> None:
    grid = _grid()
    matrix = day_matrix(grid, 0)
    shared = matrix[0][0]
    assert shared is not None and shared.col_span == 2
    assert matrix[0][1] is shared and matrix[1][0] is shared and matrix[1][1] is shared
    assert matrix[1][2] is not None and matrix[1][2].is_empty
    assert all(cell is not None for row in matrix for cell in row)
    assert build_pdf(grid, generated_at=STAMP).startswith(b"%PDF")


def test_pdf_for_empty_grid() -> None:
    assert build_pdf(build_grid([]), ViewFilter(instructor="Nobody")).startswith(b"%PDF")


def test_export_documents_writes_both_files(tmp_path) -> None:
    result = export_documents(_grid(), tmp_path, ViewFilter(room="R101"), STAMP)
    assert result.ok
    assert set(result.paths) == {"pdf", "xlsx"}
    assert result.paths["xlsx"].name.startswith("timetable_R101_")
    assert all(p.exists() for p in result.paths.values())


def test_failing_exporter_does_not_block_others(tmp_path) -> None:
    def broken(grid, outputs_dir, view_filter, generated_at):
        raise RuntimeError("disk on fire")

    exporters = {"pdf": broken, "xlsx": EXPORTERS["xlsx"]}
    result = export_documents(_grid(), tmp_path, generated_at=STAMP, exporters=exporters)
    assert not result.ok
    assert "disk on fire" in str(result.errors["pdf"])
    assert result.paths["xlsx"].exists()


def test_pdf_keeps_one_page_per_day_for_wide_grids() -> None:
    sections = []
    for n in range(30):
        sessions = tuple(
            ScheduledSession(
                course_id=f"C{n}-{slot}",
                course_name="A rather long course name that wraps over several lines",
                instructor_name=f"Instructor {n}",
                room_id=f"R{n}",
                session_type="lecture",
                slot_index=slot,
            )
            for slot in range(SLOT_COUNT)
        )
        sections.append(
            SectionSchedule(section_id=f"S{n:02d}", group_id=f"G{n}", year=1 + n // 10, schedule=sessions)
        )
    data = build_pdf(build_grid(sections), generated_at=STAMP)
    assert len(re.findall(rb"/Type /Page(?!s)", data)) == len(DAYS)
