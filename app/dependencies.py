"""FastAPI dependency injection helpers."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.config import settings
from app.services.record_store import MemoryRecordStore, RecordStore
from app.services.voting_service import VotingService
from app.utils.time import Clock, SystemClock


@lru_cache(maxsize=1)
def get_record_store() -> RecordStore:
    """Return the process-wide record store selected by RECORD_STORE."""
    backend = settings.record_store.strip().lower()
    if backend == "memory":
        return MemoryRecordStore()
    if backend == "supabase":
        from app.services.supabase_store import SupabaseRecordStore
        from app.utils.supabase_client import get_service_client

        return SupabaseRecordStore(
            get_service_client(),
            table=settings.records_table,
            commit_function=settings.commit_function,
            slow_query_threshold_ms=settings.slow_request_log_threshold_ms,
        )
    raise ValueError(f"Unknown record store backend: {settings.record_store!r}")


def get_clock() -> Clock:
    """Return the clock used for election window checks."""
    return SystemClock()


def get_voting_service(
    store: RecordStore = Depends(get_record_store),
    clock: Clock = Depends(get_clock),
) -> VotingService:
    """Build the stateless voting orchestrator for one request."""
    return VotingService(store, clock)
