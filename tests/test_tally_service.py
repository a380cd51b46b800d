"""Tally and results tests."""

from __future__ import annotations

from datetime import timedelta

import pytest

from app.services.record_store import MemoryRecordStore
from app.services.voting_service import VotingService
from app.utils.errors import NotFoundError, StateConflictError
from app.utils.time import FixedClock


def test_tally_before_end_is_ongoing(service: VotingService, open_election: str) -> None:
    service.cast_vote("V1", open_election, "A")
    with pytest.raises(StateConflictError) as exc_info:
        service.tally_votes(open_election)
    assert exc_info.value.code == "ELECTION_ONGOING"


def test_results_follow_the_same_rule(service: VotingService, open_election: str) -> None:
    with pytest.raises(StateConflictError) as exc_info:
        service.get_election_results(open_election)
    assert exc_info.value.code == "ELECTION_ONGOING"


def test_full_scenario(service: VotingService, clock: FixedClock, open_election: str) -> None:
    """Register, vote, fail to tally early, then read {A: 1, B: 0} after the end."""
    service.cast_vote("V1", open_election, "A")
    with pytest.raises(StateConflictError):
        service.tally_votes(open_election)

    clock.advance(timedelta(hours=1, minutes=1))
    assert service.tally_votes(open_election) == {"A": 1, "B": 0}
    assert service.get_election_results(open_election) == {"A": 1, "B": 0}


def test_tally_at_exact_end_instant(
    service: VotingService, clock: FixedClock, open_election: str
) -> None:
    clock.advance(timedelta(hours=1))
    assert service.tally_votes(open_election) == {"A": 0, "B": 0}


def test_tally_does_not_mutate(
    service: VotingService, store: MemoryRecordStore, clock: FixedClock, open_election: str
) -> None:
    clock.advance(timedelta(days=1))
    version = store.read("election:E1").version
    tally = service.tally_votes(open_election)
    tally["A"] = 99
    assert store.read("election:E1").version == version
    assert service.tally_votes(open_election) == {"A": 0, "B": 0}


def test_tally_missing_election(service: VotingService) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        service.tally_votes("nope")
    assert exc_info.value.code == "ELECTION_NOT_FOUND"
