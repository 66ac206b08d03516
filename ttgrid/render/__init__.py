from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List

from ..data.filters import ViewFilter
from ..errors import ExportError
from ..models.grid import ConsolidatedGrid
from .html_ui import build_html, write_html_ui
from .pdf_out import build_pdf, write_pdf
from .xlsx_out import build_workbook, write_xlsx

Exporter = Callable[[ConsolidatedGrid, Path, ViewFilter, datetime], Path]

EXPORTERS: Dict[str, Exporter] = {
    "pdf": write_pdf,
    "xlsx": write_xlsx,
}


@dataclass
class ExportResult:
    paths: Dict[str, Path] = field(default_factory=dict)
    errors: Dict[str, ExportError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def export_documents(
    grid: ConsolidatedGrid,
    outputs_dir: Path,
    view_filter: ViewFilter | None = None,
    generated_at: datetime | None = None,
    exporters: Dict[str, Exporter] | None = None,
) -> ExportResult:
    """Run each document exporter on the same grid; one failing does not stop the others."""
    logger = logging.getLogger(__name__)
    view_filter = view_filter or ViewFilter()
    generated_at = generated_at or datetime.now()
    result = ExportResult()
    for name, exporter in (exporters or EXPORTERS).items():
        try:
            result.paths[name] = exporter(grid, outputs_dir, view_filter, generated_at)
            logger.info(f"Exported {name}: {result.paths[name]}")
        except Exception as e:
            logger.error(f"Export to {name} failed: {e}")
            result.errors[name] = ExportError(f"Could not export {name.upper()}: {e}")
    return result


__all__: List[str] = [
    "build_html",
    "write_html_ui",
    "build_pdf",
    "write_pdf",
    "build_workbook",
    "write_xlsx",
    "export_documents",
    "ExportResult",
    "EXPORTERS",
]
