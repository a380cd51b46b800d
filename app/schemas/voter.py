"""Voter record and request schemas."""

from __future__ import annotations

import pydantic
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.utils.errors import StorageError


class Voter(BaseModel):
    """Persisted voter record.

    Field names on the wire are part of the storage contract. Older records
    spelled the eligibility flag ``Eligible``; both spellings are accepted.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="ID")
    name: str = Field(..., alias="Name")
    eligible: bool = Field(
        True,
        validation_alias=AliasChoices("Eligibility", "Eligible", "eligible"),
        serialization_alias="Eligibility",
    )
    has_voted: bool = Field(False, alias="HasVoted")

    def to_bytes(self) -> bytes:
        """Encode the record for the record store."""
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes) -> Voter:
        """Decode a stored record, raising StorageError on corrupt bytes."""
        try:
            return cls.model_validate_json(data)
        except pydantic.ValidationError as exc:
            raise StorageError("Stored voter record is corrupt") from exc


class VoterCreate(BaseModel):
    """Request body for registering a voter."""

    voter_id: str = Field(..., min_length=1, max_length=128)
    name: str = Field(..., min_length=1, max_length=200)
