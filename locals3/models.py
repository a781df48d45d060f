from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_serializer


def to_datetime(timestamp: float) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def js_isoformat(value: datetime) -> str:
    # Same text JSON.stringify produces for a Date: UTC, milliseconds, "Z".
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class Bucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    creation_date: datetime


class MetadataRecord(BaseModel):
    """The descriptor stored in an object's metadata artifact.

    Field order is the on-disk field order.
    """

    model_config = ConfigDict(populate_by_name=True)

    md5: str
    content_type: Optional[str] = Field(default=None, alias="contentType")
    size: int
    modified_date: datetime = Field(alias="modifiedDate")
    creation_date: datetime = Field(alias="creationDate")
    custom_metadata: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("customMetaData", "customMetadata"),
        serialization_alias="customMetaData",
    )

    @field_serializer("modified_date", "creation_date")
    def _serialize_date(self, value: datetime) -> str:
        return js_isoformat(value)


class StorageObject(MetadataRecord):
    key: str


class UploadPayload(BaseModel):
    """An upload that the request layer has already buffered to disk."""

    key: str
    content_type: Optional[str] = None
    temp_path: Path
    headers: Mapping[str, str] = Field(default_factory=dict)

    def header(self, name: str) -> Optional[str]:
        name = name.lower()
        for header_name, value in self.headers.items():
            if header_name.lower() == name:
                return value
        return None
