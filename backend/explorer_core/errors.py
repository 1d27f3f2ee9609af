"""Error kinds raised by the explorer core."""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Machine-readable error kinds returned alongside error details."""
    MalformedRecord = "malformed_record"
    InvalidImage = "invalid_image"
    StorageFailure = "storage_failure"


class ExplorerError(Exception):
    """Base class for explorer core errors. Subclasses set kind."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedRecord(ExplorerError):
    """A stored record does not have the shape the application expects."""

    kind = ErrorKind.MalformedRecord

    def __init__(self, record_type: str, record_id: object, reason: str) -> None:
        super().__init__(f"{record_type} {record_id!r} is malformed: {reason}")
        self.record_type = record_type
        self.record_id = record_id
        self.reason = reason


class InvalidImage(ExplorerError):
    """Upload rejected: unsupported content type or too large."""

    kind = ErrorKind.InvalidImage


class StorageFailure(ExplorerError):
    """Blob store could not write or delete an object."""

    kind = ErrorKind.StorageFailure
