"""Voter registration and lookup."""

from __future__ import annotations

from app.schemas.voter import Voter
from app.services.context import TransactionContext
from app.utils.errors import NotFoundError, StateConflictError, ValidationError

VOTER_PREFIX = "voter:"


def voter_key(voter_id: str) -> str:
    return f"{VOTER_PREFIX}{voter_id}"


def _read_voter(ctx: TransactionContext, voter_id: str) -> bytes | None:
    data = ctx.tx.get(voter_key(voter_id))
    if data is None:
        # Records written before keys were namespaced live under the bare id.
        data = ctx.tx.get(voter_id)
    return data


class VoterRegistry:
    """Create and read voter records inside a caller-supplied transaction."""

    def register(self, ctx: TransactionContext, voter_id: str, name: str) -> Voter:
        """Create an eligible voter who has not voted.

        Registration is create-once: an existing id is never overwritten, so
        a voter's HasVoted history cannot be reset by re-registering.
        """
        if not voter_id.strip():
            raise ValidationError("Voter id is required")
        if not name.strip():
            raise ValidationError("Voter name is required")
        if _read_voter(ctx, voter_id) is not None:
            raise StateConflictError(f"Voter {voter_id} is already registered", code="VOTER_EXISTS")

        voter = Voter(id=voter_id, name=name, eligible=True, has_voted=False)
        self.save(ctx, voter)
        return voter

    def get(self, ctx: TransactionContext, voter_id: str) -> Voter:
        """Load one voter or raise VOTER_NOT_FOUND."""
        data = _read_voter(ctx, voter_id)
        if data is None:
            raise NotFoundError(f"Voter {voter_id}", code="VOTER_NOT_FOUND")
        return Voter.from_bytes(data)

    def save(self, ctx: TransactionContext, voter: Voter) -> None:
        ctx.tx.put(voter_key(voter.id), voter.to_bytes())
