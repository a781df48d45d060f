import asyncio
import errno
import stat
from pathlib import Path

import structlog

from .errors import BucketNotFound, DirectoryNotEmpty, StorageIOError
from .models import Bucket, to_datetime
from .paths import bucket_path

logger = structlog.get_logger(__name__)

BUCKET_MODE = 0o766


def _scan_buckets(root: Path) -> list[Bucket]:
    buckets = []
    for entry in root.iterdir():
        try:
            if not entry.is_dir():
                continue
            stats = entry.stat()
        except OSError:
            # removed between listing and stat
            continue
        buckets.append(Bucket(name=entry.name, creation_date=to_datetime(stats.st_ctime)))
    return buckets


class BucketDirectory:
    """Buckets are the directories directly under the storage root."""

    def __init__(self, root: Path):
        self.root = root

    async def list(self) -> list[Bucket]:
        try:
            return await asyncio.to_thread(_scan_buckets, self.root)
        except OSError as exc:
            raise StorageIOError("Error listing buckets", path=self.root, cause=exc) from exc

    async def get(self, name: str) -> Bucket:
        path = bucket_path(self.root, name)
        try:
            stats = await asyncio.to_thread(path.stat)
        except OSError as exc:
            raise BucketNotFound("Bucket not found", path=path, cause=exc) from exc
        if not stat.S_ISDIR(stats.st_mode):
            raise BucketNotFound("Bucket not found", path=path)
        return Bucket(name=name, creation_date=to_datetime(stats.st_ctime))

    async def create(self, name: str) -> Bucket:
        path = bucket_path(self.root, name)
        try:
            await asyncio.to_thread(path.mkdir, BUCKET_MODE)
            logger.info("bucket_created", bucket=name)
        except FileExistsError:
            pass
        except OSError as exc:
            raise StorageIOError("Error creating bucket", path=path, cause=exc) from exc
        return await self.get(name)

    async def delete(self, bucket: Bucket) -> None:
        path = bucket_path(self.root, bucket.name)
        try:
            await asyncio.to_thread(path.rmdir)
        except FileNotFoundError as exc:
            raise BucketNotFound("Bucket not found", path=path, cause=exc) from exc
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                raise DirectoryNotEmpty("Bucket is not empty", path=path, cause=exc) from exc
            raise StorageIOError("Error deleting bucket", path=path, cause=exc) from exc
        logger.info("bucket_deleted", bucket=bucket.name)
