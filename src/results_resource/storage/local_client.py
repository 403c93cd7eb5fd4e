"""Storage client over a plain directory, for offline pipelines and tests."""

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, List

from ..errors import ObjectNotFoundError, StorageUnavailableError
from .base import ResultsStorageClient

log = logging.getLogger(__name__)


class LocalStorageClient(ResultsStorageClient):
    """Keys are POSIX paths relative to *root*."""

    def __init__(self, root: str, path_prefix: str = ""):
        self._root = Path(root)
        self._prefix = path_prefix

    def list_keys(self) -> List[str]:
        if not self._root.is_dir():
            raise StorageUnavailableError(f"storage root '{self._root}' is not a directory")
        keys = sorted(
            path.relative_to(self._root).as_posix()
            for path in self._root.rglob("*")
            if path.is_file()
        )
        return [key for key in keys if key.startswith(self._prefix)]

    def get(self, key: str, sink: BinaryIO) -> None:
        path = self._path_for(key)
        if not path.is_file():
            raise ObjectNotFoundError(key)
        try:
            with open(path, "rb") as source:
                shutil.copyfileobj(source, sink)
        except OSError as e:
            raise StorageUnavailableError(f"unable to fetch '{key}': {e}") from e

    def put(self, key: str, source: BinaryIO) -> None:
        """Write *source* to a temp file beside the target, then rename."""
        path = self._path_for(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
        except OSError as e:
            raise StorageUnavailableError(f"unable to upload '{key}': {e}") from e

        try:
            with os.fdopen(fd, "wb") as sink:
                shutil.copyfileobj(source, sink)
            os.replace(tmp_path, path)
        except BaseException as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            if isinstance(e, OSError):
                raise StorageUnavailableError(f"unable to upload '{key}': {e}") from e
            raise

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageUnavailableError(f"unable to delete '{key}': {e}") from e

    def _path_for(self, key: str) -> Path:
        path = (self._root / key).resolve()
        if not path.is_relative_to(self._root.resolve()):
            raise StorageUnavailableError(f"key '{key}' escapes storage root '{self._root}'")
        return path
