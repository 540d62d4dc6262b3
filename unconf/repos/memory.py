"""In-memory repositories for events, schedule data, RSVPs and votes."""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone

from unconf.domain.models import (
    RSVP,
    Day,
    Event,
    Guest,
    Location,
    Session,
    SessionProposal,
    Vote,
)


class EventRepository:
    """Dict-backed store for Event instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> Event | None:
        return self._store.get(event_id)

    def get_by_name(self, name: str) -> Event | None:
        return next((e for e in self._store.values() if e.name == name), None)

    def list_all(self) -> list[Event]:
        return list(self._store.values())


class DayRepository:
    """Dict-backed store for Day instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Day] = {}

    def add(self, day: Day) -> None:
        self._store[day.id] = day

    def get(self, day_id: str) -> Day | None:
        return self._store.get(day_id)

    def list_for_event(self, event_id: str | None) -> list[Day]:
        """Days of one event, earliest first. ``None`` returns every day."""
        days = [d for d in self._store.values() if event_id is None or d.event_id == event_id]
        return sorted(days, key=lambda d: d.start)


class LocationRepository:
    """Dict-backed store for Location instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Location] = {}

    def add(self, location: Location) -> None:
        self._store[location.id] = location

    def get(self, location_id: str) -> Location | None:
        return self._store.get(location_id)

    def list_bookable(self, event_id: str | None = None) -> list[Location]:
        return [
            loc
            for loc in self._store.values()
            if loc.bookable
            and (event_id is None or not loc.event_ids or event_id in loc.event_ids)
        ]


class GuestRepository:
    """Dict-backed store for Guest instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Guest] = {}

    def add(self, guest: Guest) -> None:
        self._store[guest.id] = guest

    def get(self, guest_id: str) -> Guest | None:
        return self._store.get(guest_id)

    def list_all(self) -> list[Guest]:
        return list(self._store.values())

    def list_by_ids(self, guest_ids: list[str]) -> list[Guest]:
        """Known guests among *guest_ids*, in the order given."""
        return [self._store[gid] for gid in guest_ids if gid in self._store]


class SessionRepository:
    """Dict-backed store for Session instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Session] = {}

    def add(self, session: Session) -> None:
        self._store[session.id] = session

    def get(self, session_id: str) -> Session | None:
        return self._store.get(session_id)

    def list_all(self) -> list[Session]:
        return list(self._store.values())

    def list_scheduled(self, event_id: str | None = None) -> list[Session]:
        """Sessions with a time and a location, optionally for one event."""
        return [
            s
            for s in self._store.values()
            if s.is_scheduled
            and s.location_id is not None
            and (event_id is None or s.event_id == event_id)
        ]

    def delete(self, session_id: str) -> None:
        self._store.pop(session_id, None)


class RsvpRepository:
    """List-backed store for RSVP instances."""

    def __init__(self) -> None:
        self._rsvps: list[RSVP] = []

    def add(self, rsvp: RSVP) -> None:
        self._rsvps.append(rsvp)

    def find(self, session_id: str, guest_id: str) -> RSVP | None:
        return next(
            (r for r in self._rsvps if r.session_id == session_id and r.guest_id == guest_id),
            None,
        )

    def list_all(self) -> list[RSVP]:
        return list(self._rsvps)

    def list_for_guest(self, guest_id: str) -> list[RSVP]:
        return [r for r in self._rsvps if r.guest_id == guest_id]

    def list_for_session(self, session_id: str) -> list[RSVP]:
        return [r for r in self._rsvps if r.session_id == session_id]

    def delete(self, session_id: str, guest_id: str) -> int:
        return self._remove(lambda r: r.session_id == session_id and r.guest_id == guest_id)

    def delete_for_session(self, session_id: str, guest_ids: list[str] | None = None) -> int:
        """Delete a session's RSVPs, or only those of *guest_ids*. Returns the count."""
        return self._remove(
            lambda r: r.session_id == session_id
            and (guest_ids is None or r.guest_id in guest_ids)
        )

    def _remove(self, predicate) -> int:
        before = len(self._rsvps)
        self._rsvps = [r for r in self._rsvps if not predicate(r)]
        return before - len(self._rsvps)


class ProposalRepository:
    """Dict-backed store for SessionProposal instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, SessionProposal] = {}

    def add(self, proposal: SessionProposal) -> None:
        self._store[proposal.id] = proposal

    def get(self, proposal_id: str) -> SessionProposal | None:
        return self._store.get(proposal_id)

    def list_for_event(self, event_id: str) -> list[SessionProposal]:
        return [p for p in self._store.values() if p.event_id == event_id]

    def delete(self, proposal_id: str) -> None:
        self._store.pop(proposal_id, None)


class VoteRepository:
    """List-backed store for Vote instances; one vote per guest and proposal."""

    def __init__(self) -> None:
        self._votes: list[Vote] = []

    def upsert(self, vote: Vote) -> None:
        """Store *vote*, replacing the guest's earlier vote on that proposal."""
        self.delete(vote.guest_id, vote.proposal_id)
        self._votes.append(vote)

    def delete(self, guest_id: str, proposal_id: str) -> None:
        self._votes = [
            v
            for v in self._votes
            if not (v.guest_id == guest_id and v.proposal_id == proposal_id)
        ]

    def delete_for_proposal(self, proposal_id: str) -> int:
        before = len(self._votes)
        self._votes = [v for v in self._votes if v.proposal_id != proposal_id]
        return before - len(self._votes)

    def list_for_proposals(self, proposal_ids: list[str]) -> list[Vote]:
        wanted = set(proposal_ids)
        return [v for v in self._votes if v.proposal_id in wanted]

    def list_for_guest(self, guest_id: str, proposal_ids: list[str] | None = None) -> list[Vote]:
        return [
            v
            for v in self._votes
            if v.guest_id == guest_id
            and (proposal_ids is None or v.proposal_id in proposal_ids)
        ]


# ---------------------------------------------------------------------------
# Seed data – a small event a few days out, useful for trying the form
# ---------------------------------------------------------------------------


def seed_demo_data(
    event_repo: EventRepository,
    day_repo: DayRepository,
    location_repo: LocationRepository,
    guest_repo: GuestRepository,
    session_repo: SessionRepository,
) -> Event:
    today = datetime.now(timezone.utc).date()
    first_day = datetime.combine(today + timedelta(days=3), time(7, 0), tzinfo=timezone.utc)

    event = Event(
        name="Demo Unconference",
        description="A weekend of attendee-run sessions.",
        start=first_day,
        end=first_day + timedelta(days=2),
    )
    event_repo.add(event)

    for offset in (0, 1):
        start = first_day + timedelta(days=offset)
        day_repo.add(
            Day(
                event_id=event.id,
                start=start,
                end=start + timedelta(hours=15),
                start_bookings=start + timedelta(hours=2),
                end_bookings=start + timedelta(hours=13),
            )
        )

    garden = Location(name="Garden", capacity=40, color="green")
    library = Location(name="Library", capacity=15, color="blue")
    location_repo.add(garden)
    location_repo.add(library)
    location_repo.add(Location(name="Kitchen", capacity=10, bookable=False))

    alice = Guest(name="Alice", email="alice@example.com")
    bob = Guest(name="Bob", email="bob@example.com")
    guest_repo.add(alice)
    guest_repo.add(bob)

    session_repo.add(
        Session(
            title="Opening circle",
            start_time=first_day + timedelta(hours=2),
            end_time=first_day + timedelta(hours=3),
            host_ids=[alice.id],
            location_id=garden.id,
            capacity=garden.capacity,
            attendee_scheduled=False,
            blocker=True,
            event_id=event.id,
        )
    )
    session_repo.add(
        Session(
            title="Intro to forecasting",
            start_time=first_day + timedelta(hours=4),
            end_time=first_day + timedelta(hours=5),
            host_ids=[bob.id],
            location_id=library.id,
            capacity=library.capacity,
            event_id=event.id,
        )
    )
    return event
