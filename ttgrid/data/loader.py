from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..errors import CollaboratorError
from ..models.issue import MALFORMED_SESSION, DataIssue
from ..models.session import ScheduledSession, SectionSchedule
from ..validate.checks import session_problem

logger = logging.getLogger(__name__)

TYPE_ALIASES = {
    "lec": "lecture",
    "lecture": "lecture",
    "lab": "lab",
    "tut": "tutorial",
    "tutorial": "tutorial",
}


def normalize_type(raw: object) -> str:
    text = str(raw or "").strip().lower()
    return TYPE_ALIASES.get(text, text)


def _as_int(value: object, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def parse_session(record: Dict[str, Any]) -> ScheduledSession:
    instructor_id = record.get("instructorID")
    return ScheduledSession(
        course_id=str(record.get("courseID", "")),
        course_name=str(record.get("courseName", "")),
        instructor_name=str(record.get("instructorName") or instructor_id or ""),
        room_id=str(record.get("roomID", "")),
        session_type=normalize_type(record.get("sessionType", record.get("type"))),
        slot_index=_as_int(record.get("slotIndex"), -1),
        duration=_as_int(record.get("duration"), 1),
        instructor_id=str(instructor_id) if instructor_id is not None else None,
    )


def parse_section(record: Dict[str, Any]) -> Tuple[SectionSchedule, List[DataIssue]]:
    section_id = str(record.get("sectionID", ""))
    issues: List[DataIssue] = []
    sessions: List[ScheduledSession] = []
    schedule = record.get("schedule") or []
    if not isinstance(schedule, list):
        issues.append(DataIssue(MALFORMED_SESSION, section_id, None, "schedule is not a list"))
        logger.warning(f"Ignoring schedule of {section_id}: not a list")
        schedule = []
    for raw in schedule:
        if not isinstance(raw, dict):
            detail = f"session record {raw!r} is not an object"
            issues.append(DataIssue(MALFORMED_SESSION, section_id, None, detail))
            logger.warning(f"Dropping non-object session record in {section_id}")
            continue
        session = parse_session(raw)
        problem = session_problem(session)
        if problem:
            issues.append(DataIssue(MALFORMED_SESSION, section_id, session.slot_index, problem))
            logger.warning(f"Dropping session {session.course_id} in {section_id}: {problem}")
            continue
        sessions.append(session)
    section = SectionSchedule(
        section_id=section_id,
        group_id=str(record.get("groupID", "")),
        year=_as_int(record.get("year"), 0),
        student_count=_as_int(record.get("studentCount"), 0),
        schedule=tuple(sessions),
    )
    return section, issues


def parse_sections(records: List[Dict[str, Any]]) -> Tuple[List[SectionSchedule], List[DataIssue]]:
    sections: List[SectionSchedule] = []
    issues: List[DataIssue] = []
    for record in records:
        if not isinstance(record, dict):
            raise CollaboratorError(f"Malformed section record: {record!r}")
        section, section_issues = parse_section(record)
        sections.append(section)
        issues.extend(section_issues)
    return sections, issues


def parse_schedule_response(body: object) -> List[Dict[str, Any]]:
    """Unwrap the scheduler envelope ``{success, sections}``.

    A bare list is accepted as an already-unwrapped payload (the cached form).
    """
    if isinstance(body, list):
        sections = body
    elif not isinstance(body, dict):
        raise CollaboratorError("Invalid response from scheduling service")
    elif not body.get("success"):
        message = body.get("error") or body.get("message") or "Schedule generation failed"
        raise CollaboratorError(str(message))
    else:
        sections = body.get("sections") or []
    if not isinstance(sections, list) or not all(isinstance(s, dict) for s in sections):
        raise CollaboratorError("Scheduling service returned malformed sections")
    return sections


def session_to_dict(session: ScheduledSession) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "courseID": session.course_id,
        "courseName": session.course_name,
        "instructorName": session.instructor_name,
        "roomID": session.room_id,
        "type": session.session_type,
        "slotIndex": session.slot_index,
        "duration": session.duration,
    }
    if session.instructor_id is not None:
        out["instructorID"] = session.instructor_id
    return out


def section_to_dict(section: SectionSchedule) -> Dict[str, Any]:
    return {
        "sectionID": section.section_id,
        "groupID": section.group_id,
        "year": section.year,
        "studentCount": section.student_count,
        "schedule": [session_to_dict(s) for s in section.schedule],
    }


def load_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def load_response(path: Path) -> Tuple[List[SectionSchedule], List[DataIssue]]:
    return parse_sections(parse_schedule_response(load_json(path)))
