"""Service for proposal voting: quick-voting order and tallies."""

from __future__ import annotations

from collections import Counter

from unconf.domain.models import SessionProposal, Vote, VoteChoice


def vote_counts(votes: list[Vote]) -> Counter[str]:
    """Total number of votes per proposal id."""
    return Counter(v.proposal_id for v in votes)


def next_quick_vote_proposal(
    proposals: list[SessionProposal], votes: list[Vote], guest_id: str
) -> SessionProposal | None:
    """Pick the least-voted proposal the guest has not voted on yet.

    *votes* is every vote for the event, so totals include other guests.
    Ties keep the order of *proposals*. Returns ``None`` once the guest has
    voted on everything.
    """
    voted = {v.proposal_id for v in votes if v.guest_id == guest_id}
    counts = vote_counts(votes)
    eligible = [p for p in proposals if p.id not in voted]
    if not eligible:
        return None
    # sorted() is stable, so equal counts keep their input order
    return sorted(eligible, key=lambda p: counts[p.id])[0]


def tally_votes(proposal_id: str, votes: list[Vote]) -> dict[VoteChoice, int]:
    counts = Counter(v.choice for v in votes if v.proposal_id == proposal_id)
    return {choice: counts.get(choice, 0) for choice in VoteChoice}
