from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from .cache.manager import CacheManager
from .data.filters import ViewState
from .data.loader import parse_sections
from .grid.consolidate import build_grid
from .models.grid import ConsolidatedGrid
from .models.issue import DataIssue
from .models.session import SectionSchedule


class Aggregator(Protocol):
    def fetch(self, timetable_id: str) -> Dict[str, Any]: ...


class Scheduler(Protocol):
    def schedule(self, payload: Dict[str, Any]) -> List[Dict[str, Any]]: ...


@dataclass
class GenerationResult:
    sections: List[SectionSchedule] = field(default_factory=list)
    issues: List[DataIssue] = field(default_factory=list)
    from_cache: bool = False


class TimetableService:
    """Loads a timetable's schedule from cache or the external collaborators.

    No guard against overlapping generations: callers issue one at a time.
    """

    def __init__(self, aggregation: Aggregator, scheduler: Scheduler, cache: CacheManager | None = None):
        self.aggregation = aggregation
        self.scheduler = scheduler
        self.cache = cache
        self.logger = logging.getLogger(__name__)

    def load_or_generate(self, state: ViewState) -> GenerationResult:
        if self.cache is not None:
            payload = self.cache.load(state.timetable_key)
            if payload is not None:
                sections, issues = parse_sections(payload)
                return GenerationResult(sections, issues, from_cache=True)
        return self._generate(state)

    def regenerate(self, state: ViewState) -> GenerationResult:
        if self.cache is not None:
            self.cache.invalidate(state.timetable_key)
        return self._generate(state)

    def _generate(self, state: ViewState) -> GenerationResult:
        self.logger.info(f"Generating schedule for timetable {state.timetable_key}")
        data = self.aggregation.fetch(state.timetable_key)
        payload = self.scheduler.schedule(data)
        sections, issues = parse_sections(payload)
        if self.cache is not None:
            self.cache.store(state.timetable_key, payload)
        return GenerationResult(sections, issues, from_cache=False)


def render_view(result: GenerationResult, state: ViewState) -> ConsolidatedGrid:
    grid = build_grid(result.sections, state.view_filter)
    # Ingestion issues come first, then whatever the occupancy pass found.
    grid.issues = list(result.issues) + grid.issues
    return grid
