import asyncio
import os
import re
from pathlib import Path
from typing import Optional

import structlog

from .errors import BucketNotFound, CorruptMetadata, ObjectNotFound, StorageIOError, UnsupportedPayload
from .ingestion import ContentIngestion
from .metadata import MetadataCodec
from .models import Bucket, StorageObject, UploadPayload
from .paths import CONTENT_FILE, METADATA_FILE, bucket_path, key_from_path, object_path

logger = structlog.get_logger(__name__)

MULTIPART_PATTERN = re.compile(r"^multipart/form-data; boundary=.+$")


def _object_dirs(bucket_dir: Path) -> list[Path]:
    """Directories under the bucket that hold a metadata artifact.

    The tree may change while it is walked; vanished entries are skipped.
    """
    found = []
    for dirpath, dirnames, filenames in os.walk(bucket_dir):
        dirnames.sort()
        if METADATA_FILE in filenames and dirpath != str(bucket_dir):
            found.append(Path(dirpath))
    return found


def _clear_partial_writes(object_dir: Path) -> None:
    # Temporary artifacts left behind by an interrupted write.
    for name in (CONTENT_FILE, METADATA_FILE):
        for leftover in object_dir.glob(f"{name}.*.tmp"):
            leftover.unlink(missing_ok=True)


def _prune_empty_parents(directory: Path, stop: Path) -> None:
    while directory != stop and stop in directory.parents:
        try:
            directory.rmdir()
        except OSError:
            return
        directory = directory.parent


class ObjectStore:
    """Objects are nested directories under a bucket, one per key.

    Each object directory holds a content artifact with the raw bytes and a
    metadata artifact with the JSON descriptor. Nothing is cached; every
    call reads the disk again.
    """

    def __init__(self, root: Path, ingestion: ContentIngestion, codec: MetadataCodec):
        self.root = root
        self.ingestion = ingestion
        self.codec = codec

    async def _require_dir(self, path: Path) -> None:
        if not await asyncio.to_thread(path.is_dir):
            raise ObjectNotFound("Object not found", path=path)

    async def exists(self, bucket: Bucket, key: str) -> bool:
        await self._require_dir(object_path(self.root, bucket.name, key))
        return True

    async def get(self, bucket: Bucket, key: str) -> tuple[StorageObject, bytes]:
        path = object_path(self.root, bucket.name, key)
        await self._require_dir(path)

        async def read(name: str) -> bytes:
            try:
                return await asyncio.to_thread((path / name).read_bytes)
            except OSError as exc:
                raise StorageIOError("Error reading object", path=path / name, cause=exc) from exc

        content, metadata = await asyncio.gather(read(CONTENT_FILE), read(METADATA_FILE))
        return self.codec.decode(key, metadata), content

    async def head(self, bucket: Bucket, key: str) -> StorageObject:
        """Descriptor only; the content artifact is not read."""
        path = object_path(self.root, bucket.name, key)
        await self._require_dir(path)
        try:
            metadata = await asyncio.to_thread((path / METADATA_FILE).read_bytes)
        except OSError as exc:
            raise StorageIOError("Error reading object", path=path / METADATA_FILE, cause=exc) from exc
        return self.codec.decode(key, metadata)

    async def list(self, bucket: Bucket, prefix: Optional[str] = None) -> list[StorageObject]:
        bucket_dir = bucket_path(self.root, bucket.name)
        object_dirs = await asyncio.to_thread(_object_dirs, bucket_dir)

        matches = []
        for object_dir in object_dirs:
            key = key_from_path(bucket_dir, object_dir)
            if prefix and not key.startswith(prefix):
                continue
            try:
                data = await asyncio.to_thread((object_dir / METADATA_FILE).read_bytes)
            except OSError:
                continue
            try:
                matches.append(self.codec.decode(key, data))
            except CorruptMetadata as exc:
                logger.warning("metadata_skipped", bucket=bucket.name, key=key, error=str(exc))
        return matches

    async def put(self, bucket: Bucket, key: str, payload: UploadPayload) -> StorageObject:
        path = object_path(self.root, bucket.name, key)
        request_type = payload.header("content-type") or ""
        if not MULTIPART_PATTERN.match(request_type):
            raise UnsupportedPayload(f"Unsupported upload encoding {request_type!r}", path=path)

        bucket_dir = bucket_path(self.root, bucket.name)
        if not await asyncio.to_thread(bucket_dir.is_dir):
            raise BucketNotFound("Bucket not found", path=bucket_dir)

        try:
            await asyncio.to_thread(path.mkdir, parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError("Error creating object directory", path=path, cause=exc) from exc

        obj = await self.ingestion.ingest(payload.model_copy(update={"key": key}), path / CONTENT_FILE, path / METADATA_FILE)
        logger.info("object_put", bucket=bucket.name, key=key, size=obj.size)
        return obj

    async def delete(self, bucket: Bucket, key: str) -> None:
        path = object_path(self.root, bucket.name, key)
        await self._require_dir(path)

        results = await asyncio.gather(
            asyncio.to_thread((path / METADATA_FILE).unlink),
            asyncio.to_thread((path / CONTENT_FILE).unlink),
            return_exceptions=True,
        )
        try:
            await asyncio.to_thread(_clear_partial_writes, path)
        except OSError as exc:
            logger.debug("partial_writes_not_removed", bucket=bucket.name, key=key, error=str(exc))
        try:
            await asyncio.to_thread(path.rmdir)
        except OSError as exc:
            logger.debug("object_dir_not_removed", bucket=bucket.name, key=key, error=str(exc))

        for result in results:
            if isinstance(result, BaseException):
                raise StorageIOError("Error deleting object", path=path, cause=result) from result

        await asyncio.to_thread(_prune_empty_parents, path.parent, bucket_path(self.root, bucket.name))
        logger.info("object_deleted", bucket=bucket.name, key=key)
