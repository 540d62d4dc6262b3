"""Service for turning session form submissions into validated Session records."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone, tzinfo

from dateutil import parser as date_parser

from unconf.config import settings
from unconf.domain.models import Day, Location, Session, SessionParams
from unconf.services.overlap import find_venue_conflicts


def parse_session_time(
    day: Day,
    start_time_string: str,
    duration_minutes: int,
    display_tz: tzinfo | None = None,
) -> tuple[datetime, datetime]:
    """Resolve a form start time ("14:30" or "2:30 PM") on *day* to UTC bounds.

    The time is read as wall-clock time in the display zone on the day's
    local date. Raises ``ValueError`` if the string is not a time.
    """
    zone = display_tz or settings.display_tz
    local_date = day.start.astimezone(zone).date()
    parsed = date_parser.parse(
        start_time_string, default=datetime.combine(local_date, time())
    )
    start = parsed.replace(tzinfo=zone).astimezone(timezone.utc)
    return start, start + timedelta(minutes=duration_minutes)


def prepare_session(
    params: SessionParams,
    day: Day,
    location: Location | None = None,
    display_tz: tzinfo | None = None,
) -> Session:
    """Build the Session record a form submission describes.

    The session takes its capacity from *location*.
    """
    start, end = parse_session_time(
        day, params.start_time_string, params.duration, display_tz
    )
    return Session(
        title=params.title,
        description=params.description,
        closed=params.closed,
        host_ids=list(params.host_ids),
        location_id=params.location_id,
        capacity=location.capacity if location else 0,
        start_time=start,
        end_time=end,
        attendee_scheduled=True,
        proposal_id=params.proposal_id,
        event_id=day.event_id,
    )


def validate_session(
    session: Session, day: Day, existing: list[Session], now: datetime
) -> list[str]:
    """Return the reasons *session* cannot be stored; empty when it is valid.

    *existing* should exclude the session itself when it is being edited.
    """
    errors: list[str] = []
    if not session.title.strip():
        errors.append("Title is required")
    if not session.location_id:
        errors.append("Location is required")
    if not session.host_ids:
        errors.append("At least one host is required")
    if not session.is_scheduled:
        errors.append("Start and end time are required")
        return errors
    if session.start_time <= now:
        errors.append("Session must start in the future")
    if not day.start_bookings <= session.start_time < day.end_bookings:
        errors.append("Session must start within the day's booking hours")
    elif session.end_time > day.end_bookings:
        errors.append("Session must end before bookings close")
    for other in find_venue_conflicts(session, existing):
        errors.append(f"Location is already booked for {other.title}")
    return errors


def can_edit(session: Session) -> bool:
    """Only attendee-scheduled sessions that organizers have not frozen."""
    return session.attendee_scheduled and not session.blocker
