"""Tests for the metadata artifact codec."""

from datetime import datetime, timezone

import pytest

from locals3.errors import CorruptMetadata
from locals3.metadata import MetadataCodec
from locals3.models import StorageObject

STAMP = datetime(2020, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)


def _object(**overrides) -> StorageObject:
    fields = dict(
        key="2020/a.jpg",
        md5="902fbdd2b1df0c4f70b4a5d23525e932",
        content_type="image/jpeg",
        size=3,
        modified_date=STAMP,
        creation_date=STAMP,
        custom_metadata=["x-amz-meta-owner"],
    )
    fields.update(overrides)
    return StorageObject(**fields)


def test_encode_writes_fields_in_order_without_key() -> None:
    data = MetadataCodec().encode(_object())

    assert data == (
        b'{"md5":"902fbdd2b1df0c4f70b4a5d23525e932","contentType":"image/jpeg","size":3,'
        b'"modifiedDate":"2020-01-02T03:04:05.678Z","creationDate":"2020-01-02T03:04:05.678Z",'
        b'"customMetaData":["x-amz-meta-owner"]}'
    )


def test_decode_injects_caller_key() -> None:
    codec = MetadataCodec()

    decoded = codec.decode("other/key", codec.encode(_object()))

    assert decoded.key == "other/key"
    assert decoded.size == 3
    assert decoded.content_type == "image/jpeg"
    assert decoded.custom_metadata == ["x-amz-meta-owner"]
    assert decoded.modified_date == datetime(2020, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def test_decode_accepts_legacy_custom_metadata_spelling() -> None:
    data = (
        b'{"md5":"abc","contentType":"text/plain","size":1,'
        b'"modifiedDate":"2014-06-01T10:00:00.000Z","creationDate":"2014-06-01T10:00:00.000Z",'
        b'"customMetadata":["x-amz-meta-a"]}'
    )

    decoded = MetadataCodec().decode("k", data)

    assert decoded.custom_metadata == ["x-amz-meta-a"]


def test_decode_without_content_type_or_custom_metadata() -> None:
    data = b'{"md5":"abc","size":1,"modifiedDate":"2014-06-01T10:00:00.000Z","creationDate":"2014-06-01T10:00:00.000Z"}'

    decoded = MetadataCodec().decode("k", data)

    assert decoded.content_type is None
    assert decoded.custom_metadata == []


@pytest.mark.parametrize("data", [b"", b"not json", b'{"md5": "abc"}', b"[1, 2]"])
def test_decode_rejects_corrupt_metadata(data: bytes) -> None:
    with pytest.raises(CorruptMetadata):
        MetadataCodec().decode("k", data)


def test_custom_metadata_names_keeps_matching_names_only() -> None:
    headers = {
        "content-type": "multipart/form-data; boundary=x",
        "x-amz-meta-owner": "alice",
        "x-amz-acl": "private",
        "X-Amz-Meta-Upper": "kept as received",
        "x-amz-meta-tag": "v",
    }

    names = MetadataCodec().custom_metadata_names(headers)

    assert names == ["x-amz-meta-owner", "x-amz-meta-tag"]
