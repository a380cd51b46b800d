"""Single-vote casting against a voter and an election."""

from __future__ import annotations

from app.services.context import TransactionContext
from app.services.election_service import ElectionRegistry
from app.services.voter_service import VoterRegistry
from app.utils.errors import StateConflictError, ValidationError


class VoteCaster:
    """Validate one ballot and stage the paired voter/election updates."""

    def __init__(
        self,
        voters: VoterRegistry | None = None,
        elections: ElectionRegistry | None = None,
    ) -> None:
        self.voters = voters or VoterRegistry()
        self.elections = elections or ElectionRegistry()

    def cast(
        self,
        ctx: TransactionContext,
        voter_id: str,
        election_id: str,
        candidate: str,
    ) -> None:
        """Record ``voter_id``'s vote for ``candidate`` in ``election_id``.

        Checks run in a fixed order and the first failure aborts before
        anything is staged. On success both records are staged in ``ctx.tx``;
        they reach the store only through that transaction's single commit.
        """
        voter = self.voters.get(ctx, voter_id)
        if not voter.eligible:
            raise StateConflictError(f"Voter {voter_id} is not eligible", code="NOT_ELIGIBLE")
        if voter.has_voted:
            raise StateConflictError(f"Voter {voter_id} has already voted", code="ALREADY_VOTED")

        election = self.elections.get(ctx, election_id)
        if not election.is_open(ctx.now()):
            raise StateConflictError(
                f"Election {election_id} is not active", code="ELECTION_NOT_ACTIVE"
            )
        if candidate not in election.votes:
            raise ValidationError(f"Unknown candidate: {candidate}", code="UNKNOWN_CANDIDATE")

        election.votes[candidate] += 1
        voter.has_voted = True

        self.elections.save(ctx, election)
        self.voters.save(ctx, voter)
