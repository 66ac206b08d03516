import pytest

from ttgrid.data.loader import (
    normalize_type,
    parse_schedule_response,
    parse_sections,
    section_to_dict,
)
from ttgrid.errors import CollaboratorError
from ttgrid.models.issue import MALFORMED_SESSION


def _record(**overrides):
    rec = {
        "slotIndex": 0,
        "courseID": "CS101",
        "courseName": "Intro to Programming",
        "type": "Lecture",
        "roomID": "R101",
        "instructorID": "I1",
        "instructorName": "Dr. Salma Adel",
        "duration": 2,
    }
    rec.update(overrides)
    return rec


def test_type_aliases() -> None:
    assert normalize_type("lec") == normalize_type("Lecture") == "lecture"
    assert normalize_type("Lab") == "lab"
    assert normalize_type("tut") == normalize_type("Tutorial") == "tutorial"
    assert normalize_type("Seminar") == "seminar"


def test_parse_scheduler_sections_with_defaults() -> None:
    sections, issues = parse_sections([{"sectionID": "S1", "groupID": "G1", "schedule": [_record()]}])
    assert issues == []
    sec = sections[0]
    assert (sec.section_id, sec.group_id, sec.year, sec.student_count) == ("S1", "G1", 0, 0)
    s = sec.schedule[0]
    assert s.session_type == "lecture"
    assert (s.slot_index, s.duration, s.instructor_id) == (0, 2, "I1")


def test_malformed_sessions_are_dropped_and_reported() -> None:
    records = [
        {
            "sectionID": "S1",
            "groupID": "G1",
            "year": 1,
            "schedule": [
                _record(slotIndex=7, duration=2),
                _record(slotIndex=40, duration=1),
                _record(slotIndex=3, duration=-1),
                _record(slotIndex=10, duration=1),
            ],
        }
    ]
    sections, issues = parse_sections(records)
    assert [s.slot_index for s in sections[0].schedule] == [10]
    assert len(issues) == 3
    assert {i.kind for i in issues} == {MALFORMED_SESSION}
    assert all(i.section_id == "S1" for i in issues)


def test_unsuccessful_response_raises_with_message() -> None:
    with pytest.raises(CollaboratorError, match="No valid solution found."):
        parse_schedule_response({"success": False, "error": "No valid solution found."})
    with pytest.raises(CollaboratorError):
        parse_schedule_response("nonsense")


def test_response_envelope_and_bare_list() -> None:
    body = {"success": True, "sections": [{"sectionID": "S1"}]}
    assert parse_schedule_response(body) == [{"sectionID": "S1"}]
    assert parse_schedule_response([{"sectionID": "S2"}]) == [{"sectionID": "S2"}]


def test_section_serialises_to_wire_form() -> None:
    sections, _ = parse_sections([{"sectionID": "S1", "groupID": "G1", "year": 2, "schedule": [_record()]}])
    wire = section_to_dict(sections[0])
    assert wire["sectionID"] == "S1" and wire["year"] == 2
    assert wire["schedule"][0]["type"] == "lecture"
    assert wire["schedule"][0]["instructorID"] == "I1"


def test_non_object_session_records_are_reported() -> None:
    sections, issues = parse_sections(
        [
            {"sectionID": "S1", "schedule": ["garbage", _record()]},
            {"sectionID": "S2", "schedule": "not a list"},
        ]
    )
    assert [len(s.schedule) for s in sections] == [1, 0]
    assert [(i.kind, i.section_id) for i in issues] == [(MALFORMED_SESSION, "S1"), (MALFORMED_SESSION, "S2")]


def test_non_object_section_records_are_rejected() -> None:
    with pytest.raises(CollaboratorError):
        parse_schedule_response({"success": True, "sections": ["S1"]})
    with pytest.raises(CollaboratorError):
        parse_schedule_response([42])
    with pytest.raises(CollaboratorError):
        parse_sections([None])
