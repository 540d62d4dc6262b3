"""Domain event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from unconf.domain.bus import EventBus
from unconf.domain.events import (
    ProposalDeleted,
    RsvpToggled,
    SessionCreated,
    SessionDeleted,
    SessionUpdated,
)
from unconf.repos.memory import RsvpRepository, VoteRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repositories."""

    def __init__(
        self,
        bus: EventBus,
        rsvp_repo: RsvpRepository,
        vote_repo: VoteRepository,
    ) -> None:
        self.bus = bus
        self.rsvp_repo = rsvp_repo
        self.vote_repo = vote_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(SessionCreated, self.on_session_created)
        self.bus.subscribe(SessionUpdated, self.on_session_updated)
        self.bus.subscribe(SessionDeleted, self.on_session_deleted)
        self.bus.subscribe(RsvpToggled, self.on_rsvp_toggled)
        self.bus.subscribe(ProposalDeleted, self.on_proposal_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_session_created(self, event: SessionCreated) -> None:
        logger.info("Session %s added", event.session_id)

    def on_session_updated(self, event: SessionUpdated) -> None:
        # A guest who RSVP'd and was later added as a host no longer attends
        removed = self.rsvp_repo.delete_for_session(event.session_id, event.host_ids)
        logger.info(
            "Session %s updated; removed %d RSVP(s) held by hosts",
            event.session_id,
            removed,
        )

    def on_session_deleted(self, event: SessionDeleted) -> None:
        removed = self.rsvp_repo.delete_for_session(event.session_id)
        logger.info("Deleted %d RSVPs for session %s", removed, event.session_id)

    def on_rsvp_toggled(self, event: RsvpToggled) -> None:
        logger.info(
            "Guest %s %s session %s",
            event.guest_id,
            "joined" if event.attending else "left",
            event.session_id,
        )

    def on_proposal_deleted(self, event: ProposalDeleted) -> None:
        removed = self.vote_repo.delete_for_proposal(event.proposal_id)
        logger.info("Deleted %d votes for proposal %s", removed, event.proposal_id)
