"""Error taxonomy for the record store. Callers catch these, never generic errors."""

from typing import Any


class TrackerError(Exception):
    """Base for all baby tracker errors."""


class StorageUnavailable(TrackerError):
    """Underlying storage could not be opened or used. Fatal at startup."""


class NotFound(TrackerError):
    """No record with the given id exists for the record kind."""

    def __init__(self, kind: str, record_id: Any) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} record {record_id!r} not found")


class ValidationError(TrackerError):
    """Missing required field, malformed date or out-of-range value."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or [message]
        super().__init__(message)


class DataAnomaly(TrackerError):
    """Stored data violates an invariant. Logged and displayed with a default."""


class NegativeDuration(DataAnomaly):
    """Sleep session ends before it starts."""


class TrackingStateError(TrackerError):
    """Sleep tracker operation not allowed in the current state."""
