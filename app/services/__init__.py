"""Service package exports with lazy loading."""

from __future__ import annotations

from importlib import import_module
from typing import Any

_EXPORTS = {
    "ElectionRegistry": "app.services.election_service",
    "MemoryRecordStore": "app.services.record_store",
    "RecordStore": "app.services.record_store",
    "SupabaseRecordStore": "app.services.supabase_store",
    "TallyReader": "app.services.tally_service",
    "Transaction": "app.services.record_store",
    "TransactionContext": "app.services.context",
    "VoteCaster": "app.services.vote_service",
    "VoterRegistry": "app.services.voter_service",
    "VotingService": "app.services.voting_service",
}

__all__ = sorted(_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module = import_module(_EXPORTS[name])
    return getattr(module, name)
