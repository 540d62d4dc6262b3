"""FastAPI application and entry point for the unconference scheduling service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException

from unconf.config import configure_logging, settings
from unconf.domain.bus import EventBus
from unconf.domain.events import (
    ProposalDeleted,
    RsvpToggled,
    SessionCreated,
    SessionDeleted,
    SessionUpdated,
)
from unconf.domain.handlers import HandlerRegistry
from unconf.domain.models import (
    RSVP,
    CandidateSlot,
    ClashRequest,
    ClashResponse,
    Day,
    Event,
    Location,
    PhaseResponse,
    ProposalRequest,
    QuickVoteResponse,
    RsvpToggleRequest,
    Session,
    SessionParams,
    SessionProposal,
    Vote,
    VoteRequest,
    new_empty_session,
)
from unconf.repos.memory import (
    DayRepository,
    EventRepository,
    GuestRepository,
    LocationRepository,
    ProposalRepository,
    RsvpRepository,
    SessionRepository,
    VoteRepository,
    seed_demo_data,
)
from unconf.services.availability import get_available_start_times
from unconf.services.clashes import build_host_schedules, compute_clashes
from unconf.services.phases import (
    get_current_phase,
    in_proposal_phase,
    in_scheduling_phase,
    in_voting_phase,
)
from unconf.services.session_form import (
    can_edit,
    parse_session_time,
    prepare_session,
    validate_session,
)
from unconf.services.voting import next_quick_vote_proposal, tally_votes

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.title)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = EventRepository()
day_repo = DayRepository()
location_repo = LocationRepository()
guest_repo = GuestRepository()
session_repo = SessionRepository()
rsvp_repo = RsvpRepository()
proposal_repo = ProposalRepository()
vote_repo = VoteRepository()

handler_registry = HandlerRegistry(bus=event_bus, rsvp_repo=rsvp_repo, vote_repo=vote_repo)

if settings.seed_data:
    seed_demo_data(event_repo, day_repo, location_repo, guest_repo, session_repo)


# ── Lookups ───────────────────────────────────────────────────────────


def _get_event(event_id: str) -> Event:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


def _get_day(day_id: str) -> Day:
    day = day_repo.get(day_id)
    if day is None:
        raise HTTPException(status_code=404, detail="Day not found")
    return day


def _get_session(session_id: str) -> Session:
    session = session_repo.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def _get_proposal(proposal_id: str) -> SessionProposal:
    proposal = proposal_repo.get(proposal_id)
    if proposal is None:
        raise HTTPException(status_code=404, detail="Proposal not found")
    return proposal


def _build_session(params: SessionParams, day: Day) -> Session:
    location = None
    if params.location_id:
        location = location_repo.get(params.location_id)
        if location is None:
            raise HTTPException(status_code=404, detail="Location not found")
        if location not in location_repo.list_bookable(day.event_id):
            raise HTTPException(status_code=422, detail=["Location is not bookable"])
    try:
        return prepare_session(params, day, location)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=[str(exc)]) from exc


def _check_valid(session: Session, day: Day, existing: list[Session]) -> None:
    errors = validate_session(session, day, existing, datetime.now(timezone.utc))
    if errors:
        logger.warning("Rejected session %r: %s", session.title, "; ".join(errors))
        raise HTTPException(status_code=422, detail=errors)


# ── Events, days and locations ────────────────────────────────────────


@app.get("/events", response_model=list[Event])
def list_events() -> list[Event]:
    return event_repo.list_all()


@app.get("/events/{event_id}/phase", response_model=PhaseResponse)
def get_event_phase(event_id: str, now: datetime | None = None) -> PhaseResponse:
    """Return the phase the event is in. *now* overrides the wall clock."""
    event = _get_event(event_id)
    current_time = now or datetime.now(timezone.utc)
    return PhaseResponse(event_id=event.id, phase=get_current_phase(event, current_time))


@app.get("/events/{event_id}/days", response_model=list[Day])
def list_days(event_id: str) -> list[Day]:
    _get_event(event_id)
    return day_repo.list_for_event(event_id)


@app.get("/events/{event_id}/locations", response_model=list[Location])
def list_locations(event_id: str) -> list[Location]:
    """Return the locations that can be booked for this event."""
    _get_event(event_id)
    return location_repo.list_bookable(event_id)


# ── Scheduling form support ───────────────────────────────────────────


@app.get("/days/{day_id}/start-times", response_model=list[CandidateSlot])
def list_start_times(
    day_id: str, location_id: str | None = None, session_id: str | None = None
) -> list[CandidateSlot]:
    """Offer half-hour start times for a day, with availability at a location."""
    day = _get_day(day_id)
    current = _get_session(session_id) if session_id else new_empty_session()
    sessions = session_repo.list_scheduled(day.event_id)
    return get_available_start_times(day, sessions, current, location_id)


@app.post("/sessions/clashes", response_model=ClashResponse)
def check_clashes(payload: ClashRequest) -> ClashResponse:
    """Warn about hosts who are already hosting or attending at that time."""
    day = _get_day(payload.day_id)
    candidate = new_empty_session()
    if payload.start_time_string:
        try:
            start, end = parse_session_time(day, payload.start_time_string, payload.duration)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=[str(exc)]) from exc
        candidate = Session(id=payload.session_id or "", start_time=start, end_time=end)

    sessions = session_repo.list_scheduled(day.event_id)
    hosts = build_host_schedules(
        guest_repo.list_by_ids(payload.host_ids), sessions, rsvp_repo.list_all()
    )
    return ClashResponse(clashes=compute_clashes(candidate, hosts, sessions))


# ── Sessions ──────────────────────────────────────────────────────────


@app.get("/events/{event_id}/sessions", response_model=list[Session])
def list_sessions(event_id: str) -> list[Session]:
    _get_event(event_id)
    return sorted(session_repo.list_scheduled(event_id), key=lambda s: s.start_time)


@app.get("/sessions/{session_id}", response_model=Session)
def get_session(session_id: str) -> Session:
    return _get_session(session_id)


@app.post("/sessions", response_model=Session)
def create_session(payload: SessionParams) -> Session:
    """Add a session to the schedule after checking it fits."""
    day = _get_day(payload.day_id)
    event = event_repo.get(day.event_id) if day.event_id else None
    if event is not None and not in_scheduling_phase(event, datetime.now(timezone.utc)):
        raise HTTPException(status_code=403, detail="Scheduling is not open")

    session = _build_session(payload, day)
    _check_valid(session, day, session_repo.list_scheduled(day.event_id))
    session_repo.add(session)

    event_bus.publish(SessionCreated(session_id=session.id))
    return session


@app.put("/sessions/{session_id}", response_model=Session)
def update_session(session_id: str, payload: SessionParams) -> Session:
    previous = _get_session(session_id)
    if not can_edit(previous):
        raise HTTPException(status_code=403, detail="Cannot edit via web app")

    day = _get_day(payload.day_id)
    session = _build_session(payload, day).model_copy(update={"id": session_id})
    others = [s for s in session_repo.list_scheduled(day.event_id) if s.id != session_id]
    _check_valid(session, day, others)
    session_repo.add(session)

    event_bus.publish(SessionUpdated(session_id=session_id, host_ids=session.host_ids))
    return session


@app.delete("/sessions/{session_id}", status_code=200)
def delete_session(session_id: str) -> dict:
    """Delete a session together with every RSVP against it."""
    session = _get_session(session_id)
    if not can_edit(session):
        raise HTTPException(status_code=403, detail="Cannot delete via web app")
    session_repo.delete(session_id)
    event_bus.publish(SessionDeleted(session_id=session_id))
    return {"status": "deleted"}


# ── RSVPs ─────────────────────────────────────────────────────────────


@app.post("/rsvps/toggle")
def toggle_rsvp(payload: RsvpToggleRequest) -> dict:
    session = _get_session(payload.session_id)
    if payload.guest_id in session.host_ids:
        raise HTTPException(status_code=400, detail="Hosts cannot RSVP to their own session")

    if payload.remove:
        rsvp_repo.delete(payload.session_id, payload.guest_id)
    elif rsvp_repo.find(payload.session_id, payload.guest_id) is None:
        rsvp_repo.add(RSVP(session_id=payload.session_id, guest_id=payload.guest_id))

    event_bus.publish(
        RsvpToggled(
            session_id=payload.session_id,
            guest_id=payload.guest_id,
            attending=not payload.remove,
        )
    )
    return {"status": "removed" if payload.remove else "attending"}


@app.get("/rsvps", response_model=list[RSVP])
def list_guest_rsvps(guest_id: str) -> list[RSVP]:
    return rsvp_repo.list_for_guest(guest_id)


@app.get("/sessions/{session_id}/rsvps", response_model=list[RSVP])
def list_session_rsvps(session_id: str) -> list[RSVP]:
    _get_session(session_id)
    return rsvp_repo.list_for_session(session_id)


# ── Proposals and voting ──────────────────────────────────────────────


@app.get("/events/{event_id}/proposals", response_model=list[SessionProposal])
def list_proposals(event_id: str) -> list[SessionProposal]:
    _get_event(event_id)
    return proposal_repo.list_for_event(event_id)


@app.post("/events/{event_id}/proposals", response_model=SessionProposal)
def create_proposal(event_id: str, payload: ProposalRequest) -> SessionProposal:
    event = _get_event(event_id)
    if not in_proposal_phase(event, datetime.now(timezone.utc)):
        raise HTTPException(status_code=403, detail="Proposals are not open")
    if not payload.title.strip():
        raise HTTPException(status_code=422, detail=["Title is required"])

    proposal = SessionProposal(event_id=event.id, **payload.model_dump())
    proposal_repo.add(proposal)
    logger.info("Proposal %s added to event %s", proposal.id, event.id)
    return proposal


@app.put("/proposals/{proposal_id}", response_model=SessionProposal)
def update_proposal(proposal_id: str, payload: ProposalRequest) -> SessionProposal:
    proposal = _get_proposal(proposal_id)
    if not payload.title.strip():
        raise HTTPException(status_code=422, detail=["Title is required"])

    updated = proposal.model_copy(update=payload.model_dump())
    proposal_repo.add(updated)
    return updated


@app.delete("/proposals/{proposal_id}", status_code=200)
def delete_proposal(proposal_id: str) -> dict:
    _get_proposal(proposal_id)
    proposal_repo.delete(proposal_id)
    event_bus.publish(ProposalDeleted(proposal_id=proposal_id))
    return {"status": "deleted"}


@app.get("/proposals/{proposal_id}/tally")
def get_proposal_tally(proposal_id: str) -> dict:
    _get_proposal(proposal_id)
    return tally_votes(proposal_id, vote_repo.list_for_proposals([proposal_id]))


@app.post("/votes", response_model=Vote)
def cast_vote(payload: VoteRequest) -> Vote:
    """Record a vote, replacing any earlier vote by the guest on that proposal."""
    proposal = _get_proposal(payload.proposal_id)
    event = _get_event(proposal.event_id)
    if not in_voting_phase(event, datetime.now(timezone.utc)):
        raise HTTPException(status_code=403, detail="Voting is not open")

    vote = Vote(**payload.model_dump())
    vote_repo.upsert(vote)
    return vote


@app.delete("/votes", status_code=200)
def retract_vote(guest_id: str, proposal_id: str) -> dict:
    vote_repo.delete(guest_id, proposal_id)
    return {"status": "deleted"}


@app.get("/votes", response_model=list[Vote])
def list_votes(guest_id: str, event_id: str) -> list[Vote]:
    _get_event(event_id)
    proposal_ids = [p.id for p in proposal_repo.list_for_event(event_id)]
    return vote_repo.list_for_guest(guest_id, proposal_ids)


@app.get("/events/{event_id}/quick-voting", response_model=QuickVoteResponse)
def quick_voting(event_id: str, guest_id: str) -> QuickVoteResponse:
    """Serve the least-voted proposal this guest has not voted on yet."""
    _get_event(event_id)
    proposals = proposal_repo.list_for_event(event_id)
    votes = vote_repo.list_for_proposals([p.id for p in proposals])
    voted = sum(1 for v in votes if v.guest_id == guest_id)
    return QuickVoteResponse(
        proposal=next_quick_vote_proposal(proposals, votes, guest_id),
        voted=voted,
        total=len(proposals),
    )
