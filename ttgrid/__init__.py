"""Consolidates per-section timetables into a merged weekly grid and renders it."""

from .data.filters import ViewFilter, ViewState
from .grid.consolidate import build_grid

__all__ = ["ViewFilter", "ViewState", "build_grid"]
