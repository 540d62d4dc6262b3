"""Service for warning hosts about commitments that clash with a draft session."""

from __future__ import annotations

from datetime import datetime, tzinfo

from unconf.config import settings
from unconf.domain.models import RSVP, Guest, HostSchedule, Session
from unconf.services.overlap import sessions_overlap


def _format_time(value: datetime, zone: tzinfo) -> str:
    return value.astimezone(zone).strftime("%H:%M")


def _describe(host_name: str, verb: str, session: Session, zone: tzinfo) -> str:
    return (
        f"{host_name} is {verb} {session.title} "
        f"from {_format_time(session.start_time, zone)} "
        f"to {_format_time(session.end_time, zone)}"
    )


def _unique_overlapping(candidate: Session, sessions: list[Session]) -> list[Session]:
    seen: set[str] = set()
    result: list[Session] = []
    for ses in sessions:
        if ses.id in seen or not sessions_overlap(ses, candidate):
            continue
        seen.add(ses.id)
        result.append(ses)
    return result


def compute_clashes(
    candidate: Session,
    hosts: list[HostSchedule],
    sessions: list[Session],
    display_tz: tzinfo | None = None,
) -> list[str]:
    """Describe every hosting or attending commitment that overlaps *candidate*.

    Lines are grouped per host in the given order, hosting clashes before
    attending clashes. RSVP references are resolved against *sessions*;
    references to sessions that no longer exist are ignored. The result is
    advisory and never blocks a submission on its own.
    """
    zone = display_tz or settings.display_tz
    by_id = {ses.id: ses for ses in sessions}

    lines: list[str] = []
    for host in hosts:
        hosting = _unique_overlapping(candidate, host.hosted_sessions)
        attending = _unique_overlapping(
            candidate,
            [by_id[sid] for sid in host.rsvp_session_ids if sid in by_id],
        )
        lines.extend(_describe(host.name, "hosting", ses, zone) for ses in hosting)
        lines.extend(_describe(host.name, "attending", ses, zone) for ses in attending)
    return lines


def build_host_schedules(
    guests: list[Guest], sessions: list[Session], rsvps: list[RSVP]
) -> list[HostSchedule]:
    """Assemble each guest's hosted sessions and RSVP'd session ids."""
    return [
        HostSchedule(
            guest_id=guest.id,
            name=guest.name,
            hosted_sessions=[ses for ses in sessions if guest.id in ses.host_ids],
            rsvp_session_ids=[r.session_id for r in rsvps if r.guest_id == guest.id],
        )
        for guest in guests
    ]
