from pathlib import Path
from typing import Union

from .buckets import BucketDirectory
from .ingestion import ContentIngestion
from .metadata import MetadataCodec
from .objects import ObjectStore


class FileStore:
    """Bucket and object storage rooted at one directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)
        self.codec = MetadataCodec()
        self.buckets = BucketDirectory(self.root)
        self.objects = ObjectStore(self.root, ContentIngestion(self.codec), self.codec)

    def ensure_root(self) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
