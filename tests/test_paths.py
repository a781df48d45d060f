"""Tests for name to path mapping."""

from pathlib import Path

import pytest

from locals3.errors import InvalidName
from locals3.paths import CONTENT_FILE, bucket_path, key_from_path, object_path


def test_key_segments_become_nested_directories(tmp_path: Path) -> None:
    path = object_path(tmp_path, "photos", "2020/01/a.jpg")

    assert path == tmp_path / "photos" / "2020" / "01" / "a.jpg"
    assert key_from_path(tmp_path / "photos", path) == "2020/01/a.jpg"


@pytest.mark.parametrize("key", ["../escape", "a/../../b", "a//b", "/abs", "a/", ".", f"a/{CONTENT_FILE}", "a\\b"])
def test_object_path_rejects_unsafe_keys(tmp_path: Path, key: str) -> None:
    with pytest.raises(InvalidName):
        object_path(tmp_path, "bucket", key)


@pytest.mark.parametrize("name", ["", ".", "..", "a/b"])
def test_bucket_path_rejects_unsafe_names(tmp_path: Path, name: str) -> None:
    with pytest.raises(InvalidName):
        bucket_path(tmp_path, name)
