from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    KeepInFrame,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from ..data.filters import ViewFilter
from ..models.cell import BOUNDARY_YEAR, ConsolidatedCell
from ..models.grid import ConsolidatedGrid
from ..models.period import DAYS, PERIODS_PER_DAY, period_label
from .labels import (
    GRID_LINE,
    HEADER_FILL,
    TIME_FILL,
    TYPE_TEXT_COLORS,
    export_filename,
    generated_stamp,
    session_lines,
    type_color,
)

Matrix = List[List[ConsolidatedCell | None]]

# Title, stamp and spacer on the first page
TITLE_BLOCK_HEIGHT = 30 * mm


def day_matrix(grid: ConsolidatedGrid, day: int) -> Matrix:
    """Periods x columns, every position pointing at the cell covering it.

    This is how merges are flattened for a table without spans: a merged
    cell's content repeats in each position it covers.
    """
    matrix: Matrix = [[None] * grid.column_count for _ in range(PERIODS_PER_DAY)]
    for row in grid.day_rows(day):
        for cell in row:
            for dr in range(cell.row_span):
                for dc in range(cell.col_span):
                    matrix[cell.period + dr][cell.column + dc] = cell
    return matrix


def _hex(color: str) -> colors.Color:
    return colors.HexColor(f"#{color}")


def _day_table(grid: ConsolidatedGrid, day: int, width: float) -> Table:
    styles = getSampleStyleSheet()
    cell_style = ParagraphStyle(
        "cell", parent=styles["BodyText"], fontSize=7, leading=8.5, alignment=TA_CENTER
    )
    head_style = ParagraphStyle(
        "head",
        parent=cell_style,
        fontName="Helvetica-Bold",
        fontSize=8,
        leading=10,
        textColor=colors.white,
    )
    matrix = day_matrix(grid, day)

    header = [Paragraph("Time", head_style)] + [
        Paragraph(f"{escape(s.section_id)}<br/>{escape(s.group_id)} - Year {s.year}", head_style)
        for s in grid.sections
    ]
    body = []
    for period, row in enumerate(matrix):
        line = [Paragraph(f"<b>{period_label(period)}</b>", cell_style)]
        for cell in row:
            if cell is None or cell.session is None:
                line.append("")
            else:
                text = "<br/>".join(escape(x) for x in session_lines(cell.session))
                line.append(Paragraph(text, cell_style))
        body.append(line)

    time_width = 25 * mm
    n = max(grid.column_count, 1)
    col_widths = [time_width] + [(width - time_width) / n] * grid.column_count
    table = Table([header] + body, repeatRows=1, colWidths=col_widths)

    grid_color = _hex(GRID_LINE)
    style_list = [
        ("BACKGROUND", (0, 0), (-1, 0), _hex(HEADER_FILL)),
        ("BACKGROUND", (0, 1), (0, -1), _hex(TIME_FILL)),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, grid_color),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    for r, row in enumerate(matrix, start=1):
        for c, cell in enumerate(row, start=1):
            fill = type_color(cell.session) if cell is not None else None
            if fill:
                style_list.append(("BACKGROUND", (c, r), (c, r), _hex(fill)))
                text = TYPE_TEXT_COLORS.get(cell.session.session_type)  # type: ignore[union-attr]
                if text:
                    style_list.append(("TEXTCOLOR", (c, r), (c, r), _hex(text)))
    for column, kind in grid.separator_map().items():
        weight = 2.0 if kind == BOUNDARY_YEAR else 1.2
        style_list.append(("LINEBEFORE", (column + 1, 0), (column + 1, -1), weight, colors.black))
    table.setStyle(TableStyle(style_list))
    return table


def build_pdf(
    grid: ConsolidatedGrid,
    view_filter: ViewFilter | None = None,
    generated_at: datetime | None = None,
) -> bytes:
    """One landscape page per day, in the grid's column order."""
    view_filter = view_filter or ViewFilter()
    generated_at = generated_at or datetime.now()
    output = io.BytesIO()
    doc = SimpleDocTemplate(
        output,
        pagesize=landscape(A4),
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=12 * mm,
        bottomMargin=14 * mm,
        title=view_filter.describe(),
    )
    styles = getSampleStyleSheet()
    stamp_style = ParagraphStyle("stamp", parent=styles["BodyText"], fontSize=9, textColor=_hex("6B7280"))

    elements = [
        Paragraph(f"<b>{escape(view_filter.describe())}</b>", styles["Title"]),
        Paragraph(generated_stamp(generated_at), stamp_style),
        Spacer(1, 4 * mm),
    ]
    # Each day is shrunk to fit its page so the page count stays one per day.
    frame_height = doc.height - 12
    for day_idx, day in enumerate(DAYS):
        if day_idx > 0:
            elements.append(PageBreak())
        content = [Paragraph(day, styles["Heading2"])]
        if grid.is_empty:
            content.append(Paragraph("No matching sessions found.", styles["BodyText"]))
        else:
            content.append(_day_table(grid, day_idx, doc.width))
        room = frame_height - (TITLE_BLOCK_HEIGHT if day_idx == 0 else 0)
        elements.append(KeepInFrame(doc.width, room, content, mode="shrink"))

    def footer(canvas, document) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(_hex("6B7280"))
        page_w, _ = document.pagesize
        canvas.drawRightString(
            page_w - 14 * mm, 8 * mm, f"Page {canvas.getPageNumber()} of {len(DAYS)}"
        )
        canvas.restoreState()

    doc.build(elements, onFirstPage=footer, onLaterPages=footer)
    return output.getvalue()


def write_pdf(
    grid: ConsolidatedGrid,
    outputs_dir: Path,
    view_filter: ViewFilter | None = None,
    generated_at: datetime | None = None,
) -> Path:
    view_filter = view_filter or ViewFilter()
    generated_at = generated_at or datetime.now()
    outputs_dir.mkdir(parents=True, exist_ok=True)
    path = outputs_dir / export_filename("pdf", view_filter, generated_at)
    path.write_bytes(build_pdf(grid, view_filter, generated_at))
    return path
