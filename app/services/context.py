"""Per-operation transaction context handed to every registry call."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.services.record_store import Transaction
from app.utils.time import Clock


@dataclass
class TransactionContext:
    """The open transaction plus the clock for one logical operation."""

    tx: Transaction
    clock: Clock

    def now(self) -> datetime:
        return self.clock.now()
