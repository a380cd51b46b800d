"""Voter endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_voting_service
from app.schemas.voter import VoterCreate
from app.services.voting_service import VotingService, retry_on_conflict

router = APIRouter()


@router.post("", status_code=201)
def register_voter(
    payload: VoterCreate,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Register a voter; ids are create-once."""
    voter = retry_on_conflict(
        lambda: service.register_voter(payload.voter_id, payload.name),
        settings.conflict_retry_attempts,
    )
    return {"voter": voter.model_dump()}


@router.get("/{voter_id}")
def get_voter(
    voter_id: str,
    service: VotingService = Depends(get_voting_service),
) -> dict:
    """Return one voter record."""
    return {"voter": service.get_voter(voter_id).model_dump()}
