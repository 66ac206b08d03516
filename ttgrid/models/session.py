from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

SESSION_TYPES = ("lecture", "lab", "tutorial")

MergeKey = Tuple[str, str, str, str, str]  # (course, name, instructor, room, type)


@dataclass(frozen=True)
class ScheduledSession:
    course_id: str
    course_name: str
    instructor_name: str
    room_id: str
    session_type: str
    slot_index: int
    duration: int = 1
    instructor_id: str | None = None

    @property
    def last_slot(self) -> int:
        return self.slot_index + self.duration - 1

    def covered_slots(self) -> range:
        return range(self.slot_index, self.slot_index + self.duration)

    def merge_key(self) -> MergeKey:
        # Section-specific fields are not part of the key.
        return (
            self.course_id,
            self.course_name,
            self.instructor_name,
            self.room_id,
            self.session_type,
        )


@dataclass(frozen=True)
class SectionSchedule:
    section_id: str
    group_id: str
    year: int = 0
    student_count: int = 0
    schedule: Tuple[ScheduledSession, ...] = field(default_factory=tuple)

    def sort_key(self) -> Tuple[int, str, str]:
        return (self.year, self.group_id, self.section_id)
