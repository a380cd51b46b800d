"""Time utility helpers and the clock abstraction."""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from typing import Protocol

RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


class Clock(Protocol):
    """Anything that can report the current instant."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock backed by the host's UTC time."""

    def now(self) -> datetime:
        return now_utc()


def now_utc() -> datetime:
    """Return current timezone-aware UTC datetime."""
    return datetime.now(tz=UTC)


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 timestamp (``Z`` or explicit offset) into UTC.

    Raises:
        ValueError: when the text is empty, malformed, or lacks an offset.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Missing required timestamp value")

    normalized = value.strip()
    if not RFC3339_PATTERN.fullmatch(normalized):
        raise ValueError(f"Timestamp {value!r} is not YYYY-MM-DDTHH:MM:SS with an offset")
    normalized = normalized[:10] + "T" + normalized[11:]
    if normalized[-1] in "zZ":
        normalized = normalized[:-1] + "+00:00"

    parsed = datetime.fromisoformat(normalized)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as RFC 3339 UTC text with a ``Z`` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    text = value.astimezone(UTC).isoformat()
    return text.replace("+00:00", "Z")


class FixedClock:
    """Clock pinned to a settable instant, for replays and tests."""

    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, delta: timedelta) -> None:
        self.current += delta
