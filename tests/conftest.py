from pathlib import Path

import pytest

from locals3.filestore import FileStore
from locals3.models import UploadPayload

MULTIPART = "multipart/form-data; boundary=----locals3boundary"


@pytest.fixture
def store(tmp_path: Path) -> FileStore:
    fs = FileStore(tmp_path / "root")
    fs.ensure_root()
    return fs


@pytest.fixture
def make_payload(tmp_path: Path):
    uploads = tmp_path / "uploads"
    uploads.mkdir()

    def _make(key: str, data: bytes, content_type: str = "application/octet-stream", headers=None) -> UploadPayload:
        temp_path = uploads / f"upload-{len(list(uploads.iterdir()))}"
        temp_path.write_bytes(data)
        if headers is None:
            headers = {"content-type": MULTIPART}
        return UploadPayload(key=key, content_type=content_type, temp_path=temp_path, headers=headers)

    return _make
