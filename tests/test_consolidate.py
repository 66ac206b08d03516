from pathlib import Path

from factories import lecture, section

from ttgrid.data.filters import ViewFilter
from ttgrid.data.loader import load_response
from ttgrid.grid.consolidate import build_grid, compute_separators, order_sections
from ttgrid.models.cell import SeparatorBoundary
from ttgrid.models.period import SLOT_COUNT
from ttgrid.validate.checks import coverage_counts, coverage_violations

SAMPLE = Path(__file__).resolve().parents[1] / "data" / "sample_response.json"


def test_shared_lecture_merges_across_sections_and_slots() -> None:
    a = section("A", lecture(0, duration=2))
    b = section("B", lecture(0, duration=2))
    c = section("C", lecture(5, course="MA101"))
    grid = build_grid([a, b, c])

    row0 = grid.row(0)
    assert len(row0) == 2
    merged, empty = row0
    assert (merged.column, merged.col_span, merged.row_span) == (0, 2, 2)
    assert merged.section_ids == ("A", "B")
    assert merged.session is not None and merged.session.course_id == "CS101"
    assert empty.is_empty and empty.section_ids == ("C",) and empty.column == 2

    row1 = grid.row(1)
    assert len(row1) == 1
    assert row1[0].is_empty and row1[0].section_ids == ("C",)


def test_any_differing_field_prevents_horizontal_merge() -> None:
    for override in ({"room": "R999"}, {"instructor": "Dr. Other"}, {"session_type": "lab"}, {"course_name": "Other"}):
        grid = build_grid([section("A", lecture(0)), section("B", lecture(0, **override))])
        row = grid.row(0)
        assert [c.col_span for c in row] == [1, 1], override


def test_different_course_prevents_merge() -> None:
    grid = build_grid([section("A", lecture(0)), section("B", lecture(0, course="CS102"))])
    assert [c.col_span for c in grid.row(0)] == [1, 1]


def test_different_durations_stay_separate() -> None:
    grid = build_grid([section("A", lecture(0, duration=2)), section("B", lecture(0))])
    assert [(c.col_span, c.row_span) for c in grid.row(0)] == [(1, 2), (1, 1)]
    # B is free in slot 1, A is still covered from above
    assert [(c.column, c.is_empty) for c in grid.row(1)] == [(1, True)]
    assert coverage_violations(grid) == []


def test_merge_needs_adjacent_columns() -> None:
    grid = build_grid([section("A", lecture(0)), section("B", lecture(0, course="X")), section("C", lecture(0))])
    assert [c.col_span for c in grid.row(0)] == [1, 1, 1]


def test_vertical_span_hides_tail_slots() -> None:
    grid = build_grid([section("A", lecture(2, duration=3))])
    starts = [c for c in grid.cells() if c.session is not None]
    assert len(starts) == 1 and starts[0].row_span == 3 and starts[0].slot_index == 2
    assert grid.row(3) == [] and grid.row(4) == []
    assert grid.row(5)[0].is_empty


def test_every_position_covered_exactly_once() -> None:
    sections, _ = load_response(SAMPLE)
    grid = build_grid(sections)
    counts = coverage_counts(grid)
    assert len(counts) == len(grid.sections) * SLOT_COUNT
    assert set(counts.values()) == {1}
    assert coverage_violations(grid) == []


def test_separator_precedence() -> None:
    secs = [
        section("S1", lecture(0), group="G1", year=1),
        section("S2", lecture(0), group="G2", year=1),
        section("S3", lecture(0), group="G2", year=2),
    ]
    assert compute_separators(secs) == [SeparatorBoundary(1, "group"), SeparatorBoundary(2, "year")]
    # Year wins even when the group changes too
    secs2 = [section("S1", lecture(0), group="G1", year=1), section("S2", lecture(0), group="G9", year=2)]
    assert compute_separators(secs2) == [SeparatorBoundary(1, "year")]


def test_merges_ignore_separators() -> None:
    grid = build_grid([
        section("S1", lecture(8, duration=2), group="G2", year=1),
        section("S2", lecture(8, duration=2), group="G3", year=2),
    ])
    assert grid.separator_before(1) == "year"
    cell = grid.row(8)[0]
    assert cell.col_span == 2 and cell.section_ids == ("S1", "S2")


def test_sections_ordered_by_year_group_id() -> None:
    secs = [
        section("B", lecture(0), group="G1", year=2),
        section("Z", lecture(0), group="G1", year=1),
        section("A", lecture(0), group="G2", year=1),
        section("C", lecture(0), group="G1", year=1),
    ]
    assert [s.section_id for s in order_sections(secs)] == ["C", "Z", "A", "B"]


def test_room_filter_leaves_single_column() -> None:
    a = section("A", lecture(0, room="R101"))
    b = section("B", lecture(0, room="R202"), lecture(3, room="R203"))
    grid = build_grid([a, b], ViewFilter(room="R101"))
    assert [s.section_id for s in grid.sections] == ["A"]
    assert all(len(row) == 1 for row in grid.rows)


def test_empty_sections_produce_no_column() -> None:
    grid = build_grid([section("A", lecture(0)), section("B")])
    assert [s.section_id for s in grid.sections] == ["A"]
    assert build_grid([]).is_empty
