"""Tests for packaging and validating session form submissions."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from dateutil import tz

from unconf.domain.models import Day, Location, Session, SessionParams
from unconf.services.session_form import (
    can_edit,
    parse_session_time,
    prepare_session,
    validate_session,
)

BERLIN = tz.gettz("Europe/Berlin")
_NOW = datetime(2025, 9, 1, 12, 0, tzinfo=timezone.utc)
_GARDEN = Location(id="garden", name="Garden", capacity=10)


def _make_day(**overrides) -> Day:
    defaults = dict(
        event_id="evt",
        start=datetime(2025, 9, 20, 8, 0, tzinfo=BERLIN),
        end=datetime(2025, 9, 20, 23, 0, tzinfo=BERLIN),
        start_bookings=datetime(2025, 9, 20, 9, 0, tzinfo=BERLIN),
        end_bookings=datetime(2025, 9, 20, 22, 0, tzinfo=BERLIN),
    )
    defaults.update(overrides)
    return Day(**defaults)


def _params(**overrides) -> SessionParams:
    defaults = dict(
        title="Forecasting 101",
        description="Calibration games",
        host_ids=["alice"],
        location_id="garden",
        day_id="day-1",
        start_time_string="14:30",
        duration=60,
    )
    defaults.update(overrides)
    return SessionParams(**defaults)


# ---------------------------------------------------------------------------
# parse_session_time
# ---------------------------------------------------------------------------


def test_parse_24_hour_time_in_display_zone():
    start, end = parse_session_time(_make_day(), "14:30", 90, BERLIN)
    # Berlin is UTC+2 in September
    assert start == datetime(2025, 9, 20, 12, 30, tzinfo=timezone.utc)
    assert end == datetime(2025, 9, 20, 14, 0, tzinfo=timezone.utc)
    assert start.tzinfo == timezone.utc


def test_parse_12_hour_time():
    start, _ = parse_session_time(_make_day(), "2:30 PM", 30, BERLIN)
    assert start == datetime(2025, 9, 20, 12, 30, tzinfo=timezone.utc)


def test_parse_uses_local_date_of_day():
    """A day stored in UTC late in the evening still resolves to its Berlin date."""
    day = _make_day(start=datetime(2025, 9, 19, 22, 30, tzinfo=timezone.utc))
    start, _ = parse_session_time(day, "10:00", 30, BERLIN)
    assert start == datetime(2025, 9, 20, 8, 0, tzinfo=timezone.utc)


def test_parse_rejects_non_time():
    with pytest.raises(ValueError):
        parse_session_time(_make_day(), "whenever", 30, BERLIN)


# ---------------------------------------------------------------------------
# prepare_session
# ---------------------------------------------------------------------------


def test_prepare_session_builds_scheduled_record():
    session = prepare_session(
        _params(proposal_id="prop-1", closed=True), _make_day(), _GARDEN, BERLIN
    )

    assert session.title == "Forecasting 101"
    assert session.host_ids == ["alice"]
    assert session.location_id == "garden"
    assert session.capacity == 10
    assert session.attendee_scheduled is True
    assert session.closed is True
    assert session.proposal_id == "prop-1"
    assert session.event_id == "evt"
    assert session.start_time == datetime(2025, 9, 20, 12, 30, tzinfo=timezone.utc)
    assert session.end_time == datetime(2025, 9, 20, 13, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# validate_session
# ---------------------------------------------------------------------------


def test_valid_session_has_no_errors():
    session = prepare_session(_params(), _make_day(), display_tz=BERLIN)
    assert validate_session(session, _make_day(), [], _NOW) == []


def test_missing_fields_are_reported():
    session = prepare_session(
        _params(title="  ", host_ids=[], location_id=None), _make_day(), display_tz=BERLIN
    )
    errors = validate_session(session, _make_day(), [], _NOW)
    assert "Title is required" in errors
    assert "Location is required" in errors
    assert "At least one host is required" in errors


def test_past_session_is_rejected():
    session = prepare_session(_params(), _make_day(), display_tz=BERLIN)
    later = datetime(2025, 9, 21, tzinfo=timezone.utc)
    assert validate_session(session, _make_day(), [], later) == [
        "Session must start in the future"
    ]


def test_overlap_at_same_location_is_rejected():
    session = prepare_session(_params(), _make_day(), display_tz=BERLIN)
    booked = Session(
        title="Board games",
        start_time=datetime(2025, 9, 20, 13, 0, tzinfo=timezone.utc),
        end_time=datetime(2025, 9, 20, 14, 0, tzinfo=timezone.utc),
        location_id="garden",
    )
    assert validate_session(session, _make_day(), [booked], _NOW) == [
        "Location is already booked for Board games"
    ]


def test_back_to_back_sessions_are_valid():
    session = prepare_session(_params(), _make_day(), display_tz=BERLIN)
    before = Session(
        title="Breakfast chat",
        start_time=datetime(2025, 9, 20, 11, 30, tzinfo=timezone.utc),
        end_time=datetime(2025, 9, 20, 12, 30, tzinfo=timezone.utc),
        location_id="garden",
    )
    assert validate_session(session, _make_day(), [before], _NOW) == []


def test_start_outside_booking_hours_is_rejected():
    day = _make_day()
    late = prepare_session(_params(start_time_string="22:00"), day, display_tz=BERLIN)
    early = prepare_session(_params(start_time_string="08:30"), day, display_tz=BERLIN)

    expected = ["Session must start within the day's booking hours"]
    assert validate_session(late, day, [], _NOW) == expected
    assert validate_session(early, day, [], _NOW) == expected


def test_session_running_past_booking_close_is_rejected():
    day = _make_day()
    session = prepare_session(
        _params(start_time_string="21:30", duration=60), day, display_tz=BERLIN
    )
    assert validate_session(session, day, [], _NOW) == ["Session must end before bookings close"]

    last_slot = prepare_session(
        _params(start_time_string="21:30", duration=30), day, display_tz=BERLIN
    )
    assert validate_session(last_slot, day, [], _NOW) == []


def test_unscheduled_session_is_invalid():
    session = Session(title="Someday", host_ids=["alice"], location_id="garden")
    errors = validate_session(session, _make_day(), [], _NOW)
    assert errors == ["Start and end time are required"]


# ---------------------------------------------------------------------------
# can_edit
# ---------------------------------------------------------------------------


def test_can_edit_rules():
    assert can_edit(Session(title="Open")) is True
    assert can_edit(Session(title="Frozen", blocker=True)) is False
    assert can_edit(Session(title="Organizer slot", attendee_scheduled=False)) is False
