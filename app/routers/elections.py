"""Election, ballot and tally endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_voting_service
from app.schemas.election import ElectionCreate, VoteCreate
from app.services.voting_service import VotingService, retry_on_conflict

router = APIRouter()


@router.post("", status_code=201)
def create_election(
    payload: ElectionCreate,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Create a new election."""
    retry_on_conflict(
        lambda: service.create_election(
            election_id=payload.election_id,
            title=payload.title,
            candidates=payload.candidates,
            start_time=payload.start_time,
            end_time=payload.end_time,
        ),
        settings.conflict_retry_attempts,
    )
    return {"election": service.get_election(payload.election_id)}


@router.get("/{election_id}")
def get_election(
    election_id: str,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Return election details with derived status."""
    return {"election": service.get_election(election_id)}


@router.post("/{election_id}/votes")
def cast_vote(
    election_id: str,
    payload: VoteCreate,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Cast one vote, retrying from scratch on commit conflicts."""
    retry_on_conflict(
        lambda: service.cast_vote(payload.voter_id, election_id, payload.candidate),
        settings.conflict_retry_attempts,
    )
    return {"ok": True}


@router.get("/{election_id}/tally")
def tally_votes(
    election_id: str,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Return final vote counts once the election has ended."""
    return {"election_id": election_id, "votes": service.tally_votes(election_id)}


@router.get("/{election_id}/results")
def get_election_results(
    election_id: str,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Return final election results (same rule as the tally)."""
    return {"election_id": election_id, "votes": service.get_election_results(election_id)}
