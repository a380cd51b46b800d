"""Transactional operation surface for voters, elections and ballots."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from app.schemas.election import Election
from app.schemas.voter import Voter
from app.services.context import TransactionContext
from app.services.election_service import ElectionRegistry
from app.services.record_store import RecordStore
from app.services.tally_service import TallyReader
from app.services.vote_service import VoteCaster
from app.services.voter_service import VoterRegistry
from app.utils.errors import PersistenceConflictError
from app.utils.time import Clock, SystemClock

T = TypeVar("T")
logger = logging.getLogger(__name__)


def retry_on_conflict(operation: Callable[[], T], attempts: int) -> T:
    """Run ``operation`` again from scratch after each commit conflict.

    Only PersistenceConflictError is retried; the last one is re-raised once
    ``attempts`` runs have failed.
    """
    attempts = max(1, attempts)
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except PersistenceConflictError as exc:
            if attempt == attempts:
                raise
            logger.info(
                "Retrying after conflict on %s (attempt %s/%s)", exc.key, attempt, attempts
            )
    raise AssertionError("unreachable")


class VotingService:
    """Stateless orchestrator: one call, one transaction, one commit."""

    def __init__(self, store: RecordStore, clock: Clock | None = None) -> None:
        self.store = store
        self.clock = clock or SystemClock()
        self.voters = VoterRegistry()
        self.elections = ElectionRegistry()
        self.caster = VoteCaster(self.voters, self.elections)
        self.tallies = TallyReader(self.elections)

    def _run(self, work: Callable[[TransactionContext], T]) -> T:
        ctx = TransactionContext(tx=self.store.begin(), clock=self.clock)
        result = work(ctx)
        ctx.tx.commit()
        return result

    def register_voter(self, voter_id: str, name: str) -> Voter:
        """Register a new voter."""
        voter = self._run(lambda ctx: self.voters.register(ctx, voter_id, name))
        logger.info("Registered voter %s", voter_id)
        return voter

    def get_voter(self, voter_id: str) -> Voter:
        return self._run(lambda ctx: self.voters.get(ctx, voter_id))

    def create_election(
        self,
        election_id: str,
        title: str,
        candidates: Sequence[str],
        start_time: str,
        end_time: str,
    ) -> Election:
        """Create a new election with all counts at zero."""
        election = self._run(
            lambda ctx: self.elections.create(
                ctx, election_id, title, candidates, start_time, end_time
            )
        )
        logger.info(
            "Created election %s with %s candidates", election_id, len(election.candidates)
        )
        return election

    def get_election(self, election_id: str) -> dict[str, Any]:
        """Return an election payload including its derived status."""

        def load(ctx: TransactionContext) -> dict[str, Any]:
            election = self.elections.get(ctx, election_id)
            payload = election.model_dump(mode="json")
            payload["status"] = election.status_at(ctx.now())
            return payload

        return self._run(load)

    def cast_vote(self, voter_id: str, election_id: str, candidate: str) -> None:
        """Cast one vote; the voter and election writes commit together."""
        self._run(lambda ctx: self.caster.cast(ctx, voter_id, election_id, candidate))
        logger.info("Voter %s cast a vote in election %s", voter_id, election_id)

    def tally_votes(self, election_id: str) -> dict[str, int]:
        """Return final counts for an ended election."""
        return self._run(lambda ctx: self.tallies.tally(ctx, election_id))

    def get_election_results(self, election_id: str) -> dict[str, int]:
        """Alias of ``tally_votes`` for callers asking for final results."""
        return self._run(lambda ctx: self.tallies.results(ctx, election_id))
