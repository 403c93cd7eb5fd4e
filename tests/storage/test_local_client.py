"""Tests for LocalStorageClient."""

import io
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from conftest import T1, T2, T3
from results_resource.errors import ObjectNotFoundError, StorageUnavailableError
from results_resource.storage.local_client import LocalStorageClient


class TestListKeys:
    def test_lists_posix_keys_under_prefix(self, results_root: Path):
        (results_root / "other").mkdir()
        (results_root / "other" / T1).write_text("x")

        client = LocalStorageClient(str(results_root), path_prefix="nested/")
        assert client.list_keys() == [f"nested/{T1}", f"nested/{T2}", f"nested/{T3}"]

    def test_missing_root(self, tmp_path: Path):
        with pytest.raises(StorageUnavailableError, match="not a directory"):
            LocalStorageClient(str(tmp_path / "nope")).list_keys()


class TestGetPutDelete:
    def test_get_copies_content(self, results_root: Path):
        sink = io.BytesIO()
        LocalStorageClient(str(results_root)).get(f"nested/{T2}", sink)
        assert sink.getvalue() == f"<testsuite name='{T2}'/>".encode()

    def test_get_missing(self, results_root: Path):
        with pytest.raises(ObjectNotFoundError, match="missing.xml"):
            LocalStorageClient(str(results_root)).get("nested/missing.xml", io.BytesIO())

    def test_put_then_delete(self, tmp_path: Path):
        client = LocalStorageClient(str(tmp_path))
        client.put(f"deep/dir/{T1}", io.BytesIO(b"data"))
        assert (tmp_path / "deep" / "dir" / T1).read_bytes() == b"data"
        assert client.list_keys() == [f"deep/dir/{T1}"]

        client.delete(f"deep/dir/{T1}")
        assert client.list_keys() == []

    def test_key_cannot_escape_root(self, tmp_path: Path):
        with pytest.raises(StorageUnavailableError, match="escapes"):
            LocalStorageClient(str(tmp_path / "root")).get("../secret.xml", io.BytesIO())

    def test_failed_put_leaves_existing_object_untouched(self, tmp_path: Path):
        client = LocalStorageClient(str(tmp_path))
        client.put(T1, io.BytesIO(b"original"))

        broken = MagicMock()
        broken.read.side_effect = [b"partial", OSError("read failed")]
        with pytest.raises(StorageUnavailableError, match="unable to upload"):
            client.put(T1, broken)

        assert (tmp_path / T1).read_bytes() == b"original"
        assert sorted(p.name for p in tmp_path.iterdir()) == [T1]
