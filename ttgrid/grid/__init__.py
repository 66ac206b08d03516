from .consolidate import build_grid, compute_separators, consolidate, consolidate_row, order_sections
from .occupancy import SectionOccupancy, build_occupancy

__all__ = [
    "SectionOccupancy",
    "build_occupancy",
    "order_sections",
    "compute_separators",
    "consolidate_row",
    "consolidate",
    "build_grid",
]
