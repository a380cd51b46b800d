"""Custom exception hierarchy for the Ballot Ledger API."""

from __future__ import annotations


class AppError(Exception):
    """Base application error with a stable machine-readable code."""

    retriable = False

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, str]:
        """Serialize the error in the API standard shape."""
        return {"error": self.message, "code": self.code}


class ValidationError(AppError):
    """Raised for malformed input: timestamps, windows, candidate lists."""

    def __init__(self, reason: str, code: str = "INVALID_INPUT") -> None:
        super().__init__(message=reason, code=code, status_code=422)


class NotFoundError(AppError):
    """Raised when a requested voter or election does not exist."""

    def __init__(self, resource: str, code: str = "NOT_FOUND") -> None:
        super().__init__(message=f"{resource} not found", code=code, status_code=404)


class StateConflictError(AppError):
    """Raised when a record's current state forbids the operation."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(message=reason, code=code, status_code=409)


class PersistenceConflictError(AppError):
    """Raised at commit time when a key changed after it was read.

    This is the only error callers are expected to retry automatically.
    """

    retriable = True

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            message=f"Concurrent update detected on {key}",
            code="WRITE_CONFLICT",
            status_code=409,
        )


class StorageError(AppError):
    """Raised when the underlying record store fails or holds corrupt data."""

    def __init__(self, reason: str = "Record store unavailable") -> None:
        super().__init__(message=reason, code="STORAGE_ERROR", status_code=503)
