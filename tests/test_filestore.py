import io
from datetime import datetime, timezone

import pytest

from hvr.filestore import LocalFileStore

MOD_TIME = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_creates_base_directory(tmp_path):
    base = tmp_path / "a" / "b"
    store = LocalFileStore(base)
    assert base.is_dir()
    assert store.base_dir == base


def test_save_bytes_and_get(tmp_path):
    store = LocalFileStore(tmp_path / "files")
    payload = b"zip payload"
    path = store.save("test-lib", "1.0.0", payload, MOD_TIME)
    assert path == str(tmp_path / "files" / "test-lib" / "1.0.0.zip")
    stored = store.get(path)
    assert stored.content == payload
    assert stored.mod_time == MOD_TIME


def test_save_stream(tmp_path):
    store = LocalFileStore(tmp_path)
    payload = bytes(range(256)) * 10
    path = store.save("lib", "2.0.0", io.BytesIO(payload), MOD_TIME)
    stored = store.get(path)
    assert stored.content == payload
    assert stored.mod_time.timestamp() == MOD_TIME.timestamp()


def test_save_overwrites(tmp_path):
    store = LocalFileStore(tmp_path)
    store.save("lib", "1.0.0", b"old", MOD_TIME)
    path = store.save("lib", "1.0.0", b"new", MOD_TIME)
    assert store.get(path).content == b"new"


def test_get_missing(tmp_path):
    store = LocalFileStore(tmp_path)
    with pytest.raises(FileNotFoundError):
        store.get(tmp_path / "nope.zip")