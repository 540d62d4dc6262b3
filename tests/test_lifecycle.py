"""Tests for the event bus lifecycle: RSVP and vote cleanup handlers."""

from __future__ import annotations

import pytest

from unconf.domain.bus import EventBus
from unconf.domain.events import (
    ProposalDeleted,
    RsvpToggled,
    SessionCreated,
    SessionDeleted,
    SessionUpdated,
)
from unconf.domain.handlers import HandlerRegistry
from unconf.domain.models import RSVP, Vote, VoteChoice
from unconf.repos.memory import RsvpRepository, VoteRepository


@pytest.fixture()
def env():
    """Fresh bus + repos + registry for each test."""
    bus = EventBus()
    rsvp_repo = RsvpRepository()
    vote_repo = VoteRepository()
    registry = HandlerRegistry(bus=bus, rsvp_repo=rsvp_repo, vote_repo=vote_repo)

    class Env:
        pass

    e = Env()
    e.bus = bus
    e.rsvp_repo = rsvp_repo
    e.vote_repo = vote_repo
    e.registry = registry
    return e


# ---------------------------------------------------------------------------
# Bus
# ---------------------------------------------------------------------------


def test_handlers_run_in_subscription_order():
    bus = EventBus()
    calls: list[str] = []
    bus.subscribe(SessionCreated, lambda e: calls.append("first"))
    bus.subscribe(SessionCreated, lambda e: calls.append("second"))
    bus.subscribe(SessionDeleted, lambda e: calls.append("other"))

    bus.publish(SessionCreated(session_id="s1"))

    assert calls == ["first", "second"]


def test_handler_errors_reach_the_publisher():
    bus = EventBus()

    def boom(event):
        raise RuntimeError("handler failed")

    bus.subscribe(SessionDeleted, boom)
    with pytest.raises(RuntimeError):
        bus.publish(SessionDeleted(session_id="s1"))


def test_publish_without_subscribers_is_a_no_op():
    EventBus().publish(RsvpToggled(session_id="s1", guest_id="bob", attending=True))


# ---------------------------------------------------------------------------
# RSVP cleanup
# ---------------------------------------------------------------------------


def test_session_deleted_removes_its_rsvps(env):
    env.rsvp_repo.add(RSVP(session_id="s1", guest_id="bob"))
    env.rsvp_repo.add(RSVP(session_id="s1", guest_id="carol"))
    env.rsvp_repo.add(RSVP(session_id="s2", guest_id="bob"))

    env.bus.publish(SessionDeleted(session_id="s1"))

    assert env.rsvp_repo.list_for_session("s1") == []
    assert [r.session_id for r in env.rsvp_repo.list_for_guest("bob")] == ["s2"]


def test_new_host_loses_rsvp(env):
    """A guest who RSVP'd and then became a host no longer attends."""
    env.rsvp_repo.add(RSVP(session_id="s1", guest_id="bob"))
    env.rsvp_repo.add(RSVP(session_id="s1", guest_id="carol"))
    env.rsvp_repo.add(RSVP(session_id="s2", guest_id="bob"))

    env.bus.publish(SessionUpdated(session_id="s1", host_ids=["alice", "bob"]))

    assert [r.guest_id for r in env.rsvp_repo.list_for_session("s1")] == ["carol"]
    assert env.rsvp_repo.find("s2", "bob") is not None


def test_created_and_toggled_leave_rsvps_alone(env):
    env.rsvp_repo.add(RSVP(session_id="s1", guest_id="bob"))

    env.bus.publish(SessionCreated(session_id="s1"))
    env.bus.publish(RsvpToggled(session_id="s1", guest_id="bob", attending=True))

    assert len(env.rsvp_repo.list_all()) == 1


# ---------------------------------------------------------------------------
# Vote cleanup
# ---------------------------------------------------------------------------


def test_proposal_deleted_removes_its_votes(env):
    env.vote_repo.upsert(Vote(proposal_id="p1", guest_id="bob", choice=VoteChoice.INTERESTED))
    env.vote_repo.upsert(Vote(proposal_id="p1", guest_id="carol", choice=VoteChoice.SKIP))
    env.vote_repo.upsert(Vote(proposal_id="p2", guest_id="bob", choice=VoteChoice.MAYBE))

    env.bus.publish(ProposalDeleted(proposal_id="p1"))

    assert env.vote_repo.list_for_proposals(["p1"]) == []
    assert len(env.vote_repo.list_for_proposals(["p2"])) == 1
