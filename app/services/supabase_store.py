"""Record store backed by a Supabase ``records`` table."""

from __future__ import annotations

import base64
import logging
import time
from typing import Any

import httpx
from postgrest import APIError

from app.services.record_store import RecordStore, VersionedValue
from app.utils.errors import PersistenceConflictError, StorageError
from supabase import Client

logger = logging.getLogger(__name__)


class SupabaseRecordStore(RecordStore):
    """Versioned records stored as rows ``(key, value, version)``.

    Reads go through PostgREST. Commits call one Postgres function which
    checks every read version and applies every write inside a single
    database transaction, returning ``{"success": bool, "reason": str,
    "key": str}``.
    """

    def __init__(
        self,
        client: Client,
        table: str = "records",
        commit_function: str = "commit_records",
        slow_query_threshold_ms: int = 0,
    ) -> None:
        self.client = client
        self.table = table
        self.commit_function = commit_function
        self.slow_query_threshold_ms = slow_query_threshold_ms

    def execute(self, query, default: Any = None) -> Any:
        """Execute a Supabase query and normalize backend errors."""
        started = time.perf_counter()
        try:
            response = query.execute()
        except APIError as exc:
            message = getattr(exc, "message", "Record store request failed")
            raise StorageError(str(message)) from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"Record store unreachable: {exc}") from exc

        elapsed_ms = (time.perf_counter() - started) * 1000
        if self.slow_query_threshold_ms > 0 and elapsed_ms >= self.slow_query_threshold_ms:
            logger.warning("Slow Supabase query %.1fms", elapsed_ms)
        data = response.data
        return default if data is None and default is not None else data

    def read(self, key: str) -> VersionedValue | None:
        rows = self.execute(
            self.client.table(self.table).select("value,version").eq("key", key).limit(1),
            default=[],
        )
        if not rows:
            return None
        row = rows[0]
        try:
            value = base64.b64decode(row["value"], validate=True)
            version = int(row["version"])
        except (KeyError, TypeError, ValueError) as exc:
            raise StorageError(f"Corrupt record at {key}") from exc
        return VersionedValue(value=value, version=version)

    def commit(self, reads: dict[str, int], writes: dict[str, bytes]) -> None:
        payload = {
            "p_reads": [{"key": key, "version": version} for key, version in reads.items()],
            "p_writes": [
                {"key": key, "value": base64.b64encode(value).decode("ascii")}
                for key, value in writes.items()
            ],
        }
        rows = self.execute(self.client.rpc(self.commit_function, payload), default=[])
        if not rows:
            raise StorageError("Record commit returned no result")

        result = rows[0] if isinstance(rows, list) else rows
        if bool(result.get("success")):
            return
        self._raise_for_reason(str(result.get("reason") or ""), str(result.get("key") or ""))

    @staticmethod
    def _raise_for_reason(reason: str, key: str) -> None:
        if reason == "version_conflict":
            logger.warning("Commit conflict on %s", key or "<unknown>")
            raise PersistenceConflictError(key or "record")
        raise StorageError(f"Record commit failed: {reason or 'unknown reason'}")
