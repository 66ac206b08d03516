from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set

from ..models.issue import MALFORMED_SESSION, OVERLAPPING_SESSIONS, DataIssue
from ..models.session import ScheduledSession, SectionSchedule
from ..validate.checks import session_problem


@dataclass
class SectionOccupancy:
    section: SectionSchedule
    start_map: Dict[int, ScheduledSession] = field(default_factory=dict)
    occupied: Set[int] = field(default_factory=set)
    issues: List[DataIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    def claims(self, slot: int) -> bool:
        return slot in self.start_map or slot in self.occupied


def build_occupancy(section: SectionSchedule) -> SectionOccupancy:
    """Index one section's sessions by start slot.

    ``occupied`` holds the tail slots of multi-slot sessions (never the start
    slot). Overlapping sessions are reported and dropped, first one wins.
    """
    logger = logging.getLogger(__name__)
    occ = SectionOccupancy(section)
    sid = section.section_id
    for session in section.schedule:
        problem = session_problem(session)
        if problem:
            occ.issues.append(DataIssue(MALFORMED_SESSION, sid, session.slot_index, problem))
            logger.warning(f"Section {sid}: dropping {session.course_id} ({problem})")
            continue
        clash = [s for s in session.covered_slots() if occ.claims(s)]
        if clash:
            detail = f"{session.course_id} overlaps slot(s) {', '.join(str(s) for s in clash)}"
            occ.issues.append(DataIssue(OVERLAPPING_SESSIONS, sid, session.slot_index, detail))
            logger.warning(f"Section {sid}: {detail}; keeping the earlier session")
            continue
        occ.start_map[session.slot_index] = session
        for i in range(1, session.duration):
            occ.occupied.add(session.slot_index + i)
    return occ
