"""Pytest fixtures for backend tests."""

from __future__ import annotations

import os
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from app.services.record_store import MemoryRecordStore
from app.services.voting_service import VotingService
from app.utils.time import FixedClock, format_timestamp

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


def _set_default_env() -> None:
    os.environ.setdefault("RECORD_STORE", "memory")
    os.environ.setdefault("CONFLICT_RETRY_ATTEMPTS", "5")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def store() -> MemoryRecordStore:
    return MemoryRecordStore()


@pytest.fixture
def service(store: MemoryRecordStore, clock: FixedClock) -> VotingService:
    return VotingService(store, clock)


@pytest.fixture
def open_election(service: VotingService) -> str:
    """Register V1 and create E1 (A, B) open from one hour ago to one hour ahead."""
    service.register_voter("V1", "Ada")
    service.create_election(
        "E1",
        "Board seat",
        ["A", "B"],
        format_timestamp(NOW - timedelta(hours=1)),
        format_timestamp(NOW + timedelta(hours=1)),
    )
    return "E1"


@pytest.fixture
def client(store: MemoryRecordStore, clock: FixedClock) -> Iterator[TestClient]:
    """Create a FastAPI test client bound to the test store and clock."""
    _set_default_env()
    from app.dependencies import get_clock, get_record_store
    from app.main import app

    app.dependency_overrides[get_record_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
