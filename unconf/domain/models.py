"""Domain models for the unconference scheduling system."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class EventPhase(StrEnum):
    PROPOSAL = "proposal"
    VOTING = "voting"
    SCHEDULING = "scheduling"
    INACTIVE = "inactive"


class VoteChoice(StrEnum):
    INTERESTED = "interested"
    MAYBE = "maybe"
    SKIP = "skip"


# A session never runs longer than a day
MAX_DURATION_MINUTES = 24 * 60


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class Event(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    website: str = ""
    start: datetime
    end: datetime
    proposal_phase_start: datetime | None = None
    proposal_phase_end: datetime | None = None
    voting_phase_start: datetime | None = None
    voting_phase_end: datetime | None = None
    scheduling_phase_start: datetime | None = None
    scheduling_phase_end: datetime | None = None


class Day(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str | None = None
    start: datetime
    end: datetime
    start_bookings: datetime
    end_bookings: datetime

    @model_validator(mode="after")
    def _bookings_in_order(self) -> Day:
        if self.end_bookings < self.start_bookings:
            raise ValueError("end_bookings must not precede start_bookings")
        return self


class Location(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    capacity: int = 0
    bookable: bool = True
    color: str = ""
    # Empty means the location is shared by every event
    event_ids: list[str] = Field(default_factory=list)


class Guest(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    email: str = ""


class Session(BaseModel):
    """A scheduled (or not yet scheduled) session.

    An empty ``id`` marks a session that has not been stored yet. Unscheduled
    sessions carry ``None`` for both times rather than a zero-length interval.
    """

    id: str = Field(default_factory=_new_id)
    title: str = ""
    description: str = ""
    start_time: datetime | None = None
    end_time: datetime | None = None
    host_ids: list[str] = Field(default_factory=list)
    location_id: str | None = None
    capacity: int = 0
    attendee_scheduled: bool = True
    blocker: bool = False
    closed: bool = False
    proposal_id: str | None = None
    event_id: str | None = None

    @model_validator(mode="after")
    def _end_after_start(self) -> Session:
        if (
            self.start_time is not None
            and self.end_time is not None
            and self.end_time <= self.start_time
        ):
            raise ValueError("end_time must be after start_time")
        return self

    @property
    def is_scheduled(self) -> bool:
        return self.start_time is not None and self.end_time is not None


def new_empty_session() -> Session:
    """Return the placeholder used while a session is still being drafted."""
    return Session(id="")


class RSVP(BaseModel):
    id: str = Field(default_factory=_new_id)
    session_id: str
    guest_id: str


class SessionProposal(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    title: str
    description: str = ""
    host_ids: list[str] = Field(default_factory=list)
    duration_minutes: int | None = Field(default=None, gt=0)


class Vote(BaseModel):
    id: str = Field(default_factory=_new_id)
    proposal_id: str
    guest_id: str
    choice: VoteChoice


# ---------------------------------------------------------------------------
# Engine values (computed, never stored)
# ---------------------------------------------------------------------------


class CandidateSlot(BaseModel):
    formatted_time: str
    time: datetime
    max_duration: int
    available: bool


class HostSchedule(BaseModel):
    """A prospective host's existing commitments."""

    guest_id: str
    name: str
    hosted_sessions: list[Session] = Field(default_factory=list)
    rsvp_session_ids: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class SessionParams(BaseModel):
    title: str = ""
    description: str = ""
    closed: bool = False
    host_ids: list[str] = Field(default_factory=list)
    location_id: str | None = None
    day_id: str
    start_time_string: str
    duration: int = Field(gt=0, le=MAX_DURATION_MINUTES)
    proposal_id: str | None = None


class ClashRequest(BaseModel):
    day_id: str
    host_ids: list[str] = Field(default_factory=list)
    start_time_string: str | None = None
    duration: int = Field(default=60, gt=0, le=MAX_DURATION_MINUTES)
    session_id: str | None = None


class ClashResponse(BaseModel):
    clashes: list[str] = Field(default_factory=list)


class ProposalRequest(BaseModel):
    title: str = ""
    description: str = ""
    host_ids: list[str] = Field(default_factory=list)
    duration_minutes: int | None = Field(default=None, gt=0)


class VoteRequest(BaseModel):
    proposal_id: str
    guest_id: str
    choice: VoteChoice


class RsvpToggleRequest(BaseModel):
    session_id: str
    guest_id: str
    remove: bool = False


class PhaseResponse(BaseModel):
    event_id: str
    phase: EventPhase


class QuickVoteResponse(BaseModel):
    proposal: SessionProposal | None = None
    voted: int
    total: int
