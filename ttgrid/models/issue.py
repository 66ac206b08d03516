from dataclasses import dataclass

MALFORMED_SESSION = "malformed-session"
OVERLAPPING_SESSIONS = "overlapping-sessions"


@dataclass(frozen=True)
class DataIssue:
    kind: str
    section_id: str
    slot_index: int | None
    detail: str
