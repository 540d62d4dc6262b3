"""Service for computing the start times offered by the session form."""

from __future__ import annotations

from datetime import datetime, timedelta, tzinfo

from unconf.config import settings
from unconf.domain.models import CandidateSlot, Day, Session

SLOT_MINUTES = 30
NO_LOCATION_MAX_DURATION = 180  # 3 hours


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def get_available_start_times(
    day: Day,
    sessions: list[Session],
    current_session: Session,
    location_id: str | None = None,
    display_tz: tzinfo | None = None,
) -> list[CandidateSlot]:
    """Enumerate half-hour start times across the day's booking window.

    Without a location every tick is offered with a generic three hour cap.
    With a location, a tick inside another session there (``start <= t <
    end``) is unavailable with a max duration of 0; a free tick may run until
    the next session at that location starts, or until bookings close.
    *current_session* is ignored so that editing a session never blocks its
    own slot.
    """
    zone = display_tz or settings.display_tz
    here: list[Session] = []
    if location_id:
        here = sorted(
            (
                s
                for s in sessions
                if s.location_id == location_id
                and s.id != current_session.id
                and s.is_scheduled
            ),
            key=lambda s: s.start_time,
        )

    slots: list[CandidateSlot] = []
    t = day.start_bookings
    step = timedelta(minutes=SLOT_MINUTES)
    while t < day.end_bookings:
        formatted_time = t.astimezone(zone).strftime("%H:%M")
        if not location_id:
            slots.append(
                CandidateSlot(
                    formatted_time=formatted_time,
                    time=t,
                    max_duration=NO_LOCATION_MAX_DURATION,
                    available=True,
                )
            )
        elif any(s.start_time <= t < s.end_time for s in here):
            slots.append(
                CandidateSlot(
                    formatted_time=formatted_time, time=t, max_duration=0, available=False
                )
            )
        else:
            next_session = next((s for s in here if s.start_time > t), None)
            latest_end = next_session.start_time if next_session else day.end_bookings
            slots.append(
                CandidateSlot(
                    formatted_time=formatted_time,
                    time=t,
                    max_duration=_minutes_between(t, latest_end),
                    available=True,
                )
            )
        t += step

    return slots
