"""Helpers for presenting session durations on the schedule."""

from __future__ import annotations

from datetime import datetime, timedelta

from unconf.domain.models import Session


def subtract_break(duration_minutes: int) -> int:
    """Leave room for a break: 5 minutes up to an hour, 10 minutes beyond."""
    return duration_minutes - 5 if duration_minutes <= 60 else duration_minutes - 10


def end_time_minus_break(session: Session) -> datetime | None:
    """Displayed end time of a stored session, with its enforced break removed."""
    if not session.is_scheduled:
        return None
    minutes = int((session.end_time - session.start_time).total_seconds() // 60)
    return session.start_time + timedelta(minutes=subtract_break(minutes))


def format_duration(minutes: int, long_format: bool = False) -> str:
    minute_str = " minutes" if long_format else "m"
    if minutes < 60:
        return f"{minutes}{minute_str}"
    hours, remaining = divmod(minutes, 60)
    if long_format:
        hour_str = " hour" if hours == 1 else " hours"
    else:
        hour_str = "h"
    if remaining:
        return f"{hours}{hour_str} {remaining}{minute_str}"
    return f"{hours}{hour_str}"
