from .filters import ALL, ViewFilter, ViewState, all_instructors, all_rooms, apply_filter
from .loader import load_response, parse_schedule_response, parse_sections, section_to_dict

__all__ = [
    "ALL",
    "ViewFilter",
    "ViewState",
    "apply_filter",
    "all_instructors",
    "all_rooms",
    "parse_sections",
    "parse_schedule_response",
    "section_to_dict",
    "load_response",
]
