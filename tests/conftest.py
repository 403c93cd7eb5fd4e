from pathlib import Path
from typing import BinaryIO, Iterable
from unittest.mock import MagicMock

import pytest

from results_resource.errors import ObjectNotFoundError
from results_resource.storage.base import ResultsStorageClient

T1 = "test-results-2018-01-01T15:04:05Z.xml"
T2 = "test-results-2018-01-02T15:04:05Z.xml"
T3 = "test-results-2018-01-03T15:04:05Z.xml"


def make_storage(keys: Iterable[str]) -> MagicMock:
    """A storage mock whose ``get`` writes ``content-of-<key>`` into the sink."""
    keys = list(keys)
    storage = MagicMock(spec=ResultsStorageClient)
    storage.list_keys.return_value = keys

    def _get(key: str, sink: BinaryIO) -> None:
        if key not in keys:
            raise ObjectNotFoundError(key)
        sink.write(f"content-of-{key}".encode())

    storage.get.side_effect = _get
    return storage


@pytest.fixture
def shuffled_keys() -> list[str]:
    return [T2, T1, T3]


@pytest.fixture
def storage(shuffled_keys) -> MagicMock:
    return make_storage(shuffled_keys)


@pytest.fixture
def results_root(tmp_path: Path) -> Path:
    """A local storage root seeded with three archives under ``nested/``."""
    root = tmp_path / "bucket"
    nested = root / "nested"
    nested.mkdir(parents=True)
    for key in (T2, T1, T3):
        (nested / key).write_text(f"<testsuite name='{key}'/>")
    return root
