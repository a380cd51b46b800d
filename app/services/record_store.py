"""Versioned key-value record store with optimistic multi-key commits."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.utils.errors import PersistenceConflictError, StorageError

logger = logging.getLogger(__name__)

# Version recorded for a key that did not exist when it was read.
ABSENT = 0


@dataclass(frozen=True)
class VersionedValue:
    """Stored bytes plus the version that produced them."""

    value: bytes
    version: int


class RecordStore(ABC):
    """Key -> bytes store whose commits are conditional on read versions."""

    @abstractmethod
    def read(self, key: str) -> VersionedValue | None:
        """Return the current value and version for ``key``, or None."""

    @abstractmethod
    def commit(self, reads: dict[str, int], writes: dict[str, bytes]) -> None:
        """Apply ``writes`` atomically if every key in ``reads`` is unchanged.

        Raises:
            PersistenceConflictError: a read key's version moved since it was read.
            StorageError: the backend failed.
        """

    def begin(self) -> Transaction:
        """Open a new transaction against this store."""
        return Transaction(self)


class Transaction:
    """One unit of work: snapshot reads, buffered writes, a single commit."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self._reads: dict[str, int] = {}
        self._values: dict[str, bytes | None] = {}
        self._writes: dict[str, bytes] = {}
        self._committed = False

    def get(self, key: str) -> bytes | None:
        """Return the value for ``key`` as seen by this transaction."""
        if key in self._writes:
            return self._writes[key]
        if key not in self._values:
            current = self.store.read(key)
            if current is None:
                self._reads[key] = ABSENT
                self._values[key] = None
            else:
                self._reads[key] = current.version
                self._values[key] = current.value
        return self._values[key]

    def exists(self, key: str) -> bool:
        """Return True when ``key`` holds a value."""
        return self.get(key) is not None

    def put(self, key: str, value: bytes) -> None:
        """Buffer a write; it takes effect only if the transaction commits."""
        if self._committed:
            raise StorageError("Transaction already committed")
        self._writes[key] = value

    @property
    def pending_writes(self) -> dict[str, bytes]:
        return dict(self._writes)

    def commit(self) -> None:
        """Commit buffered writes conditionally on every key read so far."""
        if self._committed:
            raise StorageError("Transaction already committed")
        self._committed = True
        if not self._writes:
            return
        self.store.commit(dict(self._reads), dict(self._writes))


class MemoryRecordStore(RecordStore):
    """In-process record store used for development and tests."""

    def __init__(self) -> None:
        self._data: dict[str, VersionedValue] = {}
        self._lock = threading.Lock()

    def read(self, key: str) -> VersionedValue | None:
        with self._lock:
            return self._data.get(key)

    def commit(self, reads: dict[str, int], writes: dict[str, bytes]) -> None:
        with self._lock:
            for key, version in reads.items():
                current = self._data.get(key)
                current_version = current.version if current else ABSENT
                if current_version != version:
                    logger.warning(
                        "Commit conflict on %s (read v%s, now v%s)",
                        key,
                        version,
                        current_version,
                    )
                    raise PersistenceConflictError(key)

            for key, value in writes.items():
                current = self._data.get(key)
                next_version = (current.version if current else ABSENT) + 1
                self._data[key] = VersionedValue(value=bytes(value), version=next_version)

    def keys(self) -> list[str]:
        """Return a sorted snapshot of stored keys."""
        with self._lock:
            return sorted(self._data)
