"""Filesystem-backed emulation of an object-storage service."""

from .errors import (
    BucketNotFound,
    CorruptMetadata,
    DirectoryNotEmpty,
    ErrorKind,
    InvalidName,
    ObjectNotFound,
    StorageIOError,
    StoreError,
    UnsupportedPayload,
)
from .filestore import FileStore
from .models import Bucket, StorageObject, UploadPayload

__version__ = "0.1.0"
