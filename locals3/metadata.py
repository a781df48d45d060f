import re
from typing import Iterable

from pydantic import ValidationError

from .errors import CorruptMetadata
from .models import MetadataRecord, StorageObject

CUSTOM_METADATA_PATTERN = re.compile(r"^x-amz-meta-(.*)$")


class MetadataCodec:
    """Reads and writes the JSON descriptor kept next to each object's bytes."""

    def encode(self, obj: MetadataRecord) -> bytes:
        return obj.model_dump_json(by_alias=True, exclude={"key"}).encode("utf-8")

    def decode(self, key: str, data: bytes) -> StorageObject:
        # The key lives in the directory path, never in the file.
        try:
            record = MetadataRecord.model_validate_json(data)
        except ValidationError as exc:
            raise CorruptMetadata(f"Unparsable metadata for key {key!r}", cause=exc) from exc
        return StorageObject(key=key, **dict(record))

    def custom_metadata_names(self, header_names: Iterable[str]) -> list[str]:
        """Return the x-amz-meta-* header names, as received. Values are not kept."""
        return [name for name in header_names if CUSTOM_METADATA_PATTERN.match(name)]
