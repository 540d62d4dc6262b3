"""Service for detecting overlaps between sessions."""

from __future__ import annotations

from unconf.domain.models import Session


def sessions_overlap(a: Session, b: Session) -> bool:
    """Return True if the two sessions share any instant.

    Overlap rule: max(start) < min(end). Sessions that merely touch at a
    boundary do not overlap. A session never overlaps itself (same id), and
    a session without both times never overlaps anything.
    """
    if a.id == b.id or not a.is_scheduled or not b.is_scheduled:
        return False
    return max(a.start_time, b.start_time) < min(a.end_time, b.end_time)


def find_venue_conflicts(session: Session, existing: list[Session]) -> list[Session]:
    """Return existing sessions at the same location that overlap *session*."""
    if session.location_id is None:
        return []
    return [
        other
        for other in existing
        if other.location_id == session.location_id and sessions_overlap(session, other)
    ]
