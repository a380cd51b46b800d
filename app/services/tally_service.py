"""Read-only access to final vote counts."""

from __future__ import annotations

from app.services.context import TransactionContext
from app.services.election_service import ElectionRegistry
from app.utils.errors import StateConflictError


class TallyReader:
    """Expose an election's counts once its end instant has passed."""

    def __init__(self, elections: ElectionRegistry | None = None) -> None:
        self.elections = elections or ElectionRegistry()

    def tally(self, ctx: TransactionContext, election_id: str) -> dict[str, int]:
        """Return candidate -> count, in candidate order, for an ended election."""
        election = self.elections.get(ctx, election_id)
        if not election.has_ended(ctx.now()):
            raise StateConflictError(
                f"Election {election_id} is still ongoing", code="ELECTION_ONGOING"
            )
        return dict(election.votes)

    def results(self, ctx: TransactionContext, election_id: str) -> dict[str, int]:
        """Final results; same rule and output as ``tally``."""
        return self.tally(ctx, election_id)
