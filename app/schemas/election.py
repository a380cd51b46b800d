"""Election record and request schemas."""

from __future__ import annotations

from datetime import UTC, datetime

import pydantic
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from app.utils.errors import StorageError
from app.utils.time import format_timestamp

STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"
STATUS_ENDED = "ended"


class Election(BaseModel):
    """Persisted election record with its running tally."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="ID")
    title: str = Field(..., alias="Title")
    candidates: list[str] = Field(..., alias="Candidates")
    votes: dict[str, int] = Field(default_factory=dict, alias="Votes")
    start_time: datetime = Field(..., alias="StartTime")
    end_time: datetime = Field(..., alias="EndTime")

    @field_validator("start_time", "end_time")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: datetime) -> str:
        return format_timestamp(value)

    @model_validator(mode="after")
    def _check_tally(self) -> Election:
        unknown = set(self.votes) - set(self.candidates)
        if unknown:
            raise ValueError(f"Votes reference unknown candidates: {sorted(unknown)}")
        if any(count < 0 for count in self.votes.values()):
            raise ValueError("Vote counts must be non-negative")
        if self.end_time < self.start_time:
            raise ValueError("EndTime precedes StartTime")
        # Records written before a candidate had votes may omit its count.
        self.votes = {candidate: self.votes.get(candidate, 0) for candidate in self.candidates}
        return self

    def status_at(self, now: datetime) -> str:
        """Derive pending/active/ended from the window; never stored.

        The window is inclusive, so at exactly ``end_time`` the election is
        still ``active`` (a ballot is accepted) while ``has_ended`` already
        allows the tally. From the next instant on it is ``ended``.
        """
        if now < self.start_time:
            return STATUS_PENDING
        if now > self.end_time:
            return STATUS_ENDED
        return STATUS_ACTIVE

    def is_open(self, now: datetime) -> bool:
        """Return True when votes may be cast (window is inclusive)."""
        return self.start_time <= now <= self.end_time

    def has_ended(self, now: datetime) -> bool:
        """Return True once results may be read."""
        return now >= self.end_time

    def to_bytes(self) -> bytes:
        """Encode the record for the record store."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Election:
        """Decode a stored record, raising StorageError on corrupt bytes."""
        try:
            return cls.model_validate_json(data)
        except pydantic.ValidationError as exc:
            raise StorageError("Stored election record is corrupt") from exc


class ElectionCreate(BaseModel):
    """Request body for creating an election.

    Timestamps stay as text so malformed values surface as INVALID_TIME_FORMAT.
    """

    election_id: str = Field(..., min_length=1, max_length=128)
    title: str = Field(..., min_length=1, max_length=200)
    candidates: list[str]
    start_time: str
    end_time: str


class VoteCreate(BaseModel):
    """Request body for casting a vote."""

    voter_id: str = Field(..., min_length=1)
    candidate: str
