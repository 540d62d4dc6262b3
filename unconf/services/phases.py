"""Service for deciding which phase an event is in at a given instant."""

from __future__ import annotations

from datetime import datetime, tzinfo

from unconf.config import settings
from unconf.domain.models import Event, EventPhase


def _in_window(now: datetime, start: datetime | None, end: datetime | None) -> bool:
    # An unset end means the window never closes
    if start is None:
        return False
    return start <= now and (end is None or now < end)


def has_phases(event: Event) -> bool:
    return any(
        (
            event.proposal_phase_start,
            event.voting_phase_start,
            event.scheduling_phase_start,
        )
    )


def in_proposal_phase(event: Event, now: datetime) -> bool:
    return _in_window(now, event.proposal_phase_start, event.proposal_phase_end)


def in_voting_phase(event: Event, now: datetime) -> bool:
    return _in_window(now, event.voting_phase_start, event.voting_phase_end)


def in_scheduling_phase(event: Event, now: datetime) -> bool:
    """Events without any configured phase are always open for scheduling."""
    if not has_phases(event):
        return True
    return _in_window(now, event.scheduling_phase_start, event.scheduling_phase_end)


def get_current_phase(event: Event, now: datetime) -> EventPhase:
    """Return the first matching phase, checked as proposal, voting, scheduling."""
    if in_proposal_phase(event, now):
        return EventPhase.PROPOSAL
    if in_voting_phase(event, now):
        return EventPhase.VOTING
    if in_scheduling_phase(event, now):
        return EventPhase.SCHEDULING
    return EventPhase.INACTIVE


def phase_start_description(
    start: datetime | None, display_tz: tzinfo | None = None
) -> str:
    if start is None:
        return "is not enabled"
    zone = display_tz or settings.display_tz
    return "will be enabled on " + start.astimezone(zone).strftime("%d/%m, %H:%M")
