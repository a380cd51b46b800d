"""Election creation, lookup and window validation."""

from __future__ import annotations

from collections.abc import Sequence

from app.schemas.election import Election
from app.services.context import TransactionContext
from app.utils.errors import NotFoundError, StateConflictError, ValidationError
from app.utils.time import parse_timestamp

ELECTION_PREFIX = "election:"


def election_key(election_id: str) -> str:
    return f"{ELECTION_PREFIX}{election_id}"


def _read_election(ctx: TransactionContext, election_id: str) -> bytes | None:
    data = ctx.tx.get(election_key(election_id))
    if data is None:
        # Records written before keys were namespaced live under the bare id.
        data = ctx.tx.get(election_id)
    return data


def validate_candidates(candidates: Sequence[str]) -> list[str]:
    """Return the candidate list unchanged after rejecting bad entries.

    Duplicates are rejected rather than collapsed so Votes and Candidates
    always describe the same set.
    """
    names = list(candidates)
    if not names:
        raise ValidationError("At least one candidate is required", code="INVALID_CANDIDATES")
    if any(not isinstance(name, str) or not name.strip() for name in names):
        raise ValidationError("Candidate names must be non-empty", code="INVALID_CANDIDATES")

    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise ValidationError(f"Duplicate candidate: {name}", code="DUPLICATE_CANDIDATE")
        seen.add(name)
    return names


class ElectionRegistry:
    """Create and read election records inside a caller-supplied transaction."""

    def create(
        self,
        ctx: TransactionContext,
        election_id: str,
        title: str,
        candidates: Sequence[str],
        start_time: str,
        end_time: str,
    ) -> Election:
        """Validate and persist a new election with every count at zero."""
        if not election_id.strip():
            raise ValidationError("Election id is required")
        try:
            starts_at = parse_timestamp(start_time)
            ends_at = parse_timestamp(end_time)
        except ValueError as exc:
            raise ValidationError(
                f"Invalid timestamp: {exc}", code="INVALID_TIME_FORMAT"
            ) from exc
        if ends_at < starts_at:
            raise ValidationError("End time is before start time", code="INVALID_WINDOW")

        names = validate_candidates(candidates)
        if _read_election(ctx, election_id) is not None:
            raise StateConflictError(
                f"Election {election_id} already exists", code="ELECTION_EXISTS"
            )

        election = Election(
            id=election_id,
            title=title,
            candidates=names,
            votes={name: 0 for name in names},
            start_time=starts_at,
            end_time=ends_at,
        )
        self.save(ctx, election)
        return election

    def get(self, ctx: TransactionContext, election_id: str) -> Election:
        """Load one election or raise ELECTION_NOT_FOUND."""
        data = _read_election(ctx, election_id)
        if data is None:
            raise NotFoundError(f"Election {election_id}", code="ELECTION_NOT_FOUND")
        return Election.from_bytes(data)

    def save(self, ctx: TransactionContext, election: Election) -> None:
        ctx.tx.put(election_key(election.id), election.to_bytes())
