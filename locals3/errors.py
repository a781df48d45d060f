import enum
from pathlib import Path
from typing import Optional


class ErrorKind(str, enum.Enum):
    BUCKET_NOT_FOUND = "BucketNotFound"
    OBJECT_NOT_FOUND = "ObjectNotFound"
    DIRECTORY_NOT_EMPTY = "DirectoryNotEmpty"
    IO_ERROR = "IOError"
    CORRUPT_METADATA = "CorruptMetadata"
    UNSUPPORTED_PAYLOAD = "UnsupportedPayload"
    INVALID_NAME = "InvalidName"


class StoreError(Exception):
    """Base for every failure raised by the storage layer.

    Carries the kind, the path involved and the underlying OS or parse
    error, if any.
    """

    kind: ErrorKind = ErrorKind.IO_ERROR

    def __init__(self, message: str, path: Optional[Path] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def __str__(self) -> str:
        text = self.message
        if self.path is not None:
            text = f"{text}: {self.path}"
        if self.cause is not None:
            text = f"{text} ({self.cause})"
        return text


class BucketNotFound(StoreError):
    kind = ErrorKind.BUCKET_NOT_FOUND


class ObjectNotFound(StoreError):
    kind = ErrorKind.OBJECT_NOT_FOUND


class DirectoryNotEmpty(StoreError):
    kind = ErrorKind.DIRECTORY_NOT_EMPTY


class StorageIOError(StoreError):
    kind = ErrorKind.IO_ERROR


class CorruptMetadata(StoreError):
    kind = ErrorKind.CORRUPT_METADATA


class UnsupportedPayload(StoreError):
    kind = ErrorKind.UNSUPPORTED_PAYLOAD


class InvalidName(StoreError):
    kind = ErrorKind.INVALID_NAME
