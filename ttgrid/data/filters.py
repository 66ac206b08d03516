from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Iterable, List

from ..models.session import ScheduledSession, SectionSchedule

ALL = "all"


@dataclass(frozen=True)
class ViewFilter:
    instructor: str = ALL
    room: str = ALL

    @property
    def is_active(self) -> bool:
        return self.instructor != ALL or self.room != ALL

    def matches(self, session: ScheduledSession) -> bool:
        if self.instructor != ALL and self.instructor not in (
            session.instructor_name,
            session.instructor_id,
        ):
            return False
        if self.room != ALL and session.room_id != self.room:
            return False
        return True

    def describe(self) -> str:
        text = "Generated Timetable"
        if self.instructor != ALL:
            text += f" | Instructor: {self.instructor}"
        if self.room != ALL:
            text += f" | Room: {self.room}"
        return text

    def file_suffix(self) -> str:
        suffix = ""
        if self.instructor != ALL:
            suffix += "_" + re.sub(r"\s+", "_", self.instructor)
        if self.room != ALL:
            suffix += f"_{self.room}"
        return suffix


@dataclass(frozen=True)
class ViewState:
    """What the user is looking at: which timetable, narrowed how."""

    timetable_key: str
    view_filter: ViewFilter = field(default_factory=ViewFilter)


def apply_filter(sections: Iterable[SectionSchedule], view_filter: ViewFilter) -> List[SectionSchedule]:
    """Narrow each section's schedule and drop sections left with nothing.

    Runs before occupancy building; consolidation never sees unfiltered data.
    """
    out: List[SectionSchedule] = []
    for section in sections:
        kept = tuple(s for s in section.schedule if view_filter.matches(s))
        if not kept:
            continue
        if len(kept) == len(section.schedule):
            out.append(section)
        else:
            out.append(replace(section, schedule=kept))
    return out


def all_instructors(sections: Iterable[SectionSchedule]) -> List[str]:
    return sorted({s.instructor_name for sec in sections for s in sec.schedule if s.instructor_name})


def all_rooms(sections: Iterable[SectionSchedule]) -> List[str]:
    return sorted({s.room_id for sec in sections for s in sec.schedule if s.room_id})
