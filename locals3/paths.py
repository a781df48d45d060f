"""Mapping of bucket names and object keys onto the storage root.

Layout::

    <root>/<bucket>/<key segment>/.../<key segment>/.dummys3_content
    <root>/<bucket>/<key segment>/.../<key segment>/.dummys3_metadata
"""

from pathlib import Path

from .errors import InvalidName

CONTENT_FILE = ".dummys3_content"
METADATA_FILE = ".dummys3_metadata"

KEY_SEPARATOR = "/"

_RESERVED_SEGMENTS = {"", ".", "..", CONTENT_FILE, METADATA_FILE}


def _check_segment(segment: str, name: str) -> None:
    if segment in _RESERVED_SEGMENTS or "\\" in segment or "\x00" in segment:
        raise InvalidName(f"Invalid name segment {segment!r} in {name!r}")


def bucket_path(root: Path, bucket_name: str) -> Path:
    if KEY_SEPARATOR in bucket_name:
        raise InvalidName(f"Bucket name may not contain '/': {bucket_name!r}")
    _check_segment(bucket_name, bucket_name)
    return root / bucket_name


def key_segments(key: str) -> list[str]:
    segments = key.split(KEY_SEPARATOR)
    for segment in segments:
        _check_segment(segment, key)
    return segments


def object_path(root: Path, bucket_name: str, key: str) -> Path:
    return bucket_path(root, bucket_name).joinpath(*key_segments(key))


def key_from_path(bucket_dir: Path, object_dir: Path) -> str:
    return KEY_SEPARATOR.join(object_dir.relative_to(bucket_dir).parts)
