"""HTTP endpoint tests for voters, elections, ballots and tallies."""

from __future__ import annotations

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from app.utils.time import FixedClock

ELECTION = {
    "election_id": "E1",
    "title": "Board seat",
    "candidates": ["A", "B"],
    "start_time": "2026-03-01T11:00:00Z",
    "end_time": "2026-03-01T13:00:00Z",
}


@pytest.fixture
def seeded(client: TestClient) -> TestClient:
    assert client.post("/voters", json={"voter_id": "V1", "name": "Ada"}).status_code == 201
    assert client.post("/elections", json=ELECTION).status_code == 201
    return client


def test_register_and_get_voter(client: TestClient) -> None:
    response = client.post("/voters", json={"voter_id": "V1", "name": "Ada"})
    assert response.status_code == 201
    assert response.json()["voter"] == {
        "id": "V1",
        "name": "Ada",
        "eligible": True,
        "has_voted": False,
    }
    assert client.get("/voters/V1").json()["voter"]["name"] == "Ada"


def test_register_twice_conflicts(seeded: TestClient) -> None:
    response = seeded.post("/voters", json={"voter_id": "V1", "name": "Other"})
    assert response.status_code == 409
    assert response.json()["code"] == "VOTER_EXISTS"


def test_missing_voter_is_404(client: TestClient) -> None:
    response = client.get("/voters/ghost")
    assert response.status_code == 404
    assert response.json() == {"error": "Voter ghost not found", "code": "VOTER_NOT_FOUND"}


def test_create_election_returns_status(client: TestClient) -> None:
    response = client.post("/elections", json=ELECTION)
    assert response.status_code == 201
    election = response.json()["election"]
    assert election["votes"] == {"A": 0, "B": 0}
    assert election["status"] == "active"


def test_create_election_inverted_window(client: TestClient) -> None:
    payload = {**ELECTION, "start_time": ELECTION["end_time"], "end_time": ELECTION["start_time"]}
    response = client.post("/elections", json=payload)
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_WINDOW"
    assert client.get("/elections/E1").status_code == 404


def test_create_election_bad_timestamp(client: TestClient) -> None:
    response = client.post("/elections", json={**ELECTION, "start_time": "noon"})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_TIME_FORMAT"


def test_malformed_body_uses_standard_error_shape(client: TestClient) -> None:
    response = client.post("/voters", json={"voter_id": "V1"})
    assert response.status_code == 422
    assert response.json()["code"] == "INVALID_INPUT"


def test_vote_then_tally_scenario(seeded: TestClient, clock: FixedClock) -> None:
    """Cast for A, see ELECTION_ONGOING, then read final results after the end."""
    response = seeded.post("/elections/E1/votes", json={"voter_id": "V1", "candidate": "A"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}

    ongoing = seeded.get("/elections/E1/tally")
    assert ongoing.status_code == 409
    assert ongoing.json()["code"] == "ELECTION_ONGOING"

    clock.advance(timedelta(hours=2))
    tally = seeded.get("/elections/E1/tally")
    assert tally.status_code == 200
    assert tally.json() == {"election_id": "E1", "votes": {"A": 1, "B": 0}}
    assert seeded.get("/elections/E1/results").json()["votes"] == {"A": 1, "B": 0}


@pytest.mark.parametrize(
    ("body", "status", "code"),
    [
        ({"voter_id": "ghost", "candidate": "A"}, 404, "VOTER_NOT_FOUND"),
        ({"voter_id": "V1", "candidate": "C"}, 422, "UNKNOWN_CANDIDATE"),
    ],
)
def test_vote_errors(seeded: TestClient, body: dict, status: int, code: str) -> None:
    response = seeded.post("/elections/E1/votes", json=body)
    assert response.status_code == status
    assert response.json()["code"] == code
    assert seeded.get("/elections/E1").json()["election"]["votes"] == {"A": 0, "B": 0}


def test_double_vote_is_rejected(seeded: TestClient) -> None:
    seeded.post("/elections/E1/votes", json={"voter_id": "V1", "candidate": "A"})
    response = seeded.post("/elections/E1/votes", json={"voter_id": "V1", "candidate": "A"})
    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_VOTED"
    assert seeded.get("/elections/E1").json()["election"]["votes"]["A"] == 1


def test_vote_after_end_is_not_active(seeded: TestClient, clock: FixedClock) -> None:
    clock.advance(timedelta(hours=3))
    response = seeded.post("/elections/E1/votes", json={"voter_id": "V1", "candidate": "A"})
    assert response.status_code == 409
    assert response.json()["code"] == "ELECTION_NOT_ACTIVE"
    assert seeded.get("/voters/V1").json()["voter"]["has_voted"] is False
