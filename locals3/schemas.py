from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class BucketCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, pattern=r"^[^/\\]+$")


class BucketOut(BaseModel):
    name: str
    creation_date: datetime

    model_config = ConfigDict(from_attributes=True)


class ObjectOut(BaseModel):
    key: str
    size: int
    md5: str
    content_type: Optional[str]
    modified_date: datetime
    creation_date: datetime
    custom_metadata: list[str]

    model_config = ConfigDict(from_attributes=True)
