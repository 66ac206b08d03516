from __future__ import annotations

from datetime import datetime
from typing import Dict, List

from ..data.filters import ViewFilter
from ..models.session import ScheduledSession, SectionSchedule

TYPE_COLORS: Dict[str, str] = {
    "lecture": "DBEAFE",
    "lab": "FEF3C7",
    "tutorial": "D1FAE5",
}

TYPE_TEXT_COLORS: Dict[str, str] = {
    "lecture": "1E40AF",
    "lab": "92400E",
    "tutorial": "065F46",
}

TYPE_SHORT = {"lecture": "LEC", "lab": "LAB", "tutorial": "TUT"}

GRID_LINE = "D1D5DB"
HEADER_FILL = "374151"
TIME_FILL = "F3F4F6"


def type_color(session: ScheduledSession | None) -> str | None:
    if session is None:
        return None
    return TYPE_COLORS.get(session.session_type)


def short_type(session: ScheduledSession) -> str:
    return TYPE_SHORT.get(session.session_type, session.session_type.upper())


def section_title(section: SectionSchedule) -> str:
    return f"{section.section_id} - {section.group_id} (Year {section.year})"


def section_details(section: SectionSchedule) -> str:
    return f"{section.group_id} - Year {section.year}"


def session_lines(session: ScheduledSession) -> List[str]:
    return [session.course_id, session.course_name, session.instructor_name, session.room_id]


def session_block(session: ScheduledSession) -> str:
    """Multi-line text used by the spreadsheet export."""
    return (
        f"{session.course_id} - {session.course_name}\n"
        f"Instructor: {session.instructor_name}\n"
        f"Room: {session.room_id}\n"
        f"Type: {short_type(session)}"
    )


def generated_stamp(moment: datetime) -> str:
    return f"Generated: {moment.strftime('%B %d, %Y %I:%M %p')}"


def export_filename(ext: str, view_filter: ViewFilter, moment: datetime) -> str:
    millis = int(moment.timestamp() * 1000)
    return f"timetable{view_filter.file_suffix()}_{millis}.{ext}"
