"""Domain events published when sessions, RSVPs and proposals change."""

from __future__ import annotations

from pydantic import BaseModel


class SessionCreated(BaseModel):
    """Fired when a new Session is stored."""

    session_id: str


class SessionUpdated(BaseModel):
    """Fired after a host edits a session; carries the hosts after the edit."""

    session_id: str
    host_ids: list[str]


class SessionDeleted(BaseModel):
    session_id: str


class RsvpToggled(BaseModel):
    session_id: str
    guest_id: str
    attending: bool


class ProposalDeleted(BaseModel):
    proposal_id: str
