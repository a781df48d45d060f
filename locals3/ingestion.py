import asyncio
import hashlib
import os
import uuid
from pathlib import Path

import structlog

from .errors import StorageIOError
from .metadata import MetadataCodec
from .models import StorageObject, UploadPayload, to_datetime

logger = structlog.get_logger(__name__)


def _write_replace(path: Path, data: bytes) -> None:
    # Readers only ever see a complete artifact or the previous one.
    tmp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}.tmp")
    try:
        tmp_path.write_bytes(data)
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


def _stat_times(path: Path) -> dict:
    stats = path.stat()
    return {"modified_date": to_datetime(stats.st_mtime), "creation_date": to_datetime(stats.st_ctime)}


def _digest(path: Path) -> dict:
    data = path.read_bytes()
    return {"size": len(data), "md5": hashlib.md5(data).hexdigest()}


class ContentIngestion:
    """Persists an uploaded payload as an object's content and metadata artifacts."""

    def __init__(self, codec: MetadataCodec):
        self.codec = codec

    async def ingest(self, payload: UploadPayload, content_path: Path, metadata_path: Path) -> StorageObject:
        try:
            data = await asyncio.to_thread(payload.temp_path.read_bytes)
        except OSError as exc:
            raise StorageIOError("Error reading upload", path=payload.temp_path, cause=exc) from exc

        try:
            await asyncio.to_thread(_write_replace, content_path, data)
        except OSError as exc:
            raise StorageIOError("Error writing content", path=content_path, cause=exc) from exc

        try:
            times, digest = await asyncio.gather(
                asyncio.to_thread(_stat_times, content_path),
                asyncio.to_thread(_digest, content_path),
            )
        except OSError as exc:
            raise StorageIOError("Error reading stored content", path=content_path, cause=exc) from exc

        obj = StorageObject(
            key=payload.key,
            content_type=payload.content_type,
            custom_metadata=self.codec.custom_metadata_names(payload.headers),
            **times,
            **digest,
        )
        try:
            await asyncio.to_thread(_write_replace, metadata_path, self.codec.encode(obj))
        except OSError as exc:
            # The content artifact stays in place without a descriptor.
            raise StorageIOError("Error writing metadata", path=metadata_path, cause=exc) from exc

        logger.debug("object_ingested", key=obj.key, size=obj.size, md5=obj.md5)
        return obj
