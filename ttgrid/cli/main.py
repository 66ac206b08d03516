from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

import typer

from ..cache.manager import CacheManager
from ..cache.store import JsonFileStore
from ..config import Settings, load_settings
from ..data.collaborators import AggregationClient, SchedulerClient
from ..data.filters import ALL, ViewFilter, ViewState, all_instructors, all_rooms
from ..data.loader import load_response
from ..errors import CollaboratorError
from ..models.grid import ConsolidatedGrid
from ..pipeline import GenerationResult, TimetableService, render_view
from ..render import ExportResult, export_documents, write_html_ui
from ..validate.checks import validate_grid
from ..validate.report import format_validation_report, write_validation_report


def _setup_logging(project_root: Path, level: int = logging.INFO) -> None:
    logs_dir = project_root / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler(logs_dir / "ttgrid.log", encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )


def build_service(project_root: Path, settings: Settings) -> TimetableService:
    store = JsonFileStore(project_root / settings.cache_path, quota_bytes=settings.cache_quota_bytes)
    cache = CacheManager(
        store,
        namespace=settings.cache_namespace,
        ttl_seconds=settings.cache_ttl_seconds,
    )
    return TimetableService(
        AggregationClient(settings.aggregation_url, timeout=settings.timeout_seconds),
        SchedulerClient(settings.scheduler_url, timeout=settings.timeout_seconds),
        cache,
    )


@dataclass
class PipelineRun:
    grid: ConsolidatedGrid
    result: GenerationResult
    report: Dict[str, object]
    html_path: Path
    export: ExportResult = field(default_factory=ExportResult)


def run_pipeline(
    project_root: Path,
    state: ViewState,
    *,
    regenerate: bool = False,
    source: Path | None = None,
    export: bool = False,
    settings: Settings | None = None,
    service: TimetableService | None = None,
    generated_at: datetime | None = None,
) -> PipelineRun:
    """Obtain a schedule, consolidate it once, and hand it to every renderer.

    ``source`` renders a saved scheduler response without touching the
    collaborators or the cache. CollaboratorError propagates to the caller.
    """
    settings = settings or load_settings(project_root)
    if source is not None:
        sections, issues = load_response(source)
        result = GenerationResult(sections, issues)
    else:
        service = service or build_service(project_root, settings)
        result = service.regenerate(state) if regenerate else service.load_or_generate(state)

    grid = render_view(result, state)
    outputs_dir = project_root / settings.output_dir
    report = validate_grid(grid)
    write_validation_report(report, outputs_dir)
    html_path = write_html_ui(grid, outputs_dir, state.view_filter)
    run = PipelineRun(grid, result, report, html_path)
    if export:
        run.export = export_documents(grid, outputs_dir, state.view_filter, generated_at)
    return run


app = typer.Typer(add_completion=False, help="Timetable grid consolidation and export")


def _run_cli(
    timetable_id: str,
    instructor: str,
    room: str,
    source: Path | None,
    root: Path,
    log_level: str,
    *,
    regenerate: bool = False,
    export: bool = False,
) -> PipelineRun:
    _setup_logging(root, getattr(logging, log_level.upper(), logging.INFO))
    state = ViewState(timetable_id, ViewFilter(instructor=instructor, room=room))
    try:
        run = run_pipeline(root, state, regenerate=regenerate, source=source, export=export)
    except CollaboratorError as e:
        typer.echo(f"Timetable generation error: {e}", err=True)
        typer.echo("Check the data and scheduling services, then retry.", err=True)
        raise typer.Exit(code=1)
    origin = "cache" if run.result.from_cache else ("file" if source else "scheduler")
    typer.echo(f"Loaded {len(run.result.sections)} sections from {origin}")
    typer.echo(format_validation_report(run.report))
    typer.echo(f"Grid view: {run.html_path}")
    return run


TimetableArg = typer.Argument(..., help="Timetable identifier")
InstructorOpt = typer.Option(ALL, help="Only sessions taught by this instructor")
RoomOpt = typer.Option(ALL, help="Only sessions held in this room")
SourceOpt = typer.Option(None, help="Render a saved scheduler response instead")
RootOpt = typer.Option(Path("."), help="Project root (configs/, outputs/, logs/)")
LogLevelOpt = typer.Option("INFO", help="Log level")


@app.command("view")
def cli_view(
    timetable_id: str = TimetableArg,
    instructor: str = InstructorOpt,
    room: str = RoomOpt,
    source: Optional[Path] = SourceOpt,
    root: Path = RootOpt,
    log_level: str = LogLevelOpt,
) -> None:
    """Show the timetable, reusing a cached schedule when it is fresh."""
    _run_cli(timetable_id, instructor, room, source, root, log_level)


@app.command("generate")
def cli_generate(
    timetable_id: str = TimetableArg,
    instructor: str = InstructorOpt,
    room: str = RoomOpt,
    root: Path = RootOpt,
    log_level: str = LogLevelOpt,
) -> None:
    """Call the scheduler again and refresh the cache."""
    _run_cli(timetable_id, instructor, room, None, root, log_level, regenerate=True)


@app.command("export")
def cli_export(
    timetable_id: str = TimetableArg,
    instructor: str = InstructorOpt,
    room: str = RoomOpt,
    source: Optional[Path] = SourceOpt,
    root: Path = RootOpt,
    log_level: str = LogLevelOpt,
) -> None:
    """Write the PDF and spreadsheet documents next to the grid view."""
    run = _run_cli(timetable_id, instructor, room, source, root, log_level, export=True)
    for name, path in run.export.paths.items():
        typer.echo(f"{name.upper()}: {path}")
    for err in run.export.errors.values():
        typer.echo(str(err), err=True)


@app.command("options")
def cli_options(
    timetable_id: str = TimetableArg,
    source: Optional[Path] = SourceOpt,
    root: Path = RootOpt,
    log_level: str = LogLevelOpt,
) -> None:
    """List the instructors and rooms that can be used as filters."""
    run = _run_cli(timetable_id, ALL, ALL, source, root, log_level)
    typer.echo("Instructors: " + ", ".join(all_instructors(run.result.sections)))
    typer.echo("Rooms: " + ", ".join(all_rooms(run.result.sections)))


@app.command("clear-cache")
def cli_clear_cache(
    timetable_id: str = TimetableArg,
    root: Path = RootOpt,
) -> None:
    settings = load_settings(root)
    service = build_service(root, settings)
    if service.cache is not None:
        service.cache.invalidate(timetable_id)
    typer.echo(f"Cleared cached schedule for {timetable_id}")


if __name__ == "__main__":
    app()
