"""
Fetch-window resolution for the ``in`` step.

Selects the target version and everything older, keeps the most recent
``max(limit)`` of them, downloads them into the destination directory and
then renders each requested summary over that directory.
"""

import logging
import os
import posixpath
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from .errors import DuplicateArchiveError, OutputDirError, ResourceError
from .models import InRequest, InResponse, Summary, Version
from .storage.base import ResultsStorageClient
from .versions import parse_key_timestamp, resolve_keys, sort_keys
from .viewer import JunitViewer

log = logging.getLogger(__name__)

TEST_SUITE_COUNT = "test_suite_count"


@dataclass(frozen=True)
class DownloadTask:
    """One archive to materialize locally."""

    key: str
    destination: Path


def effective_limit(summaries: Iterable[Summary]) -> int:
    """Largest limit across all summaries; 0 means no truncation."""
    return max((summary.limit for summary in summaries), default=0)


def resolve_fetch_window(
    keys: Iterable[str], target_version: Version, summaries: Sequence[Summary]
) -> List[str]:
    """Keys to download, most recent first.

    Includes the target itself and everything strictly older, truncated to the
    most permissive summary limit.
    """
    target = parse_key_timestamp(target_version.key)

    selected = [pair for pair in resolve_keys(keys) if pair.timestamp <= target]
    window = [pair.key for pair in sort_keys(selected, descending=True)]

    limit = effective_limit(summaries)
    if limit > 0 and len(window) > limit:
        window = window[:limit]
    return window


def plan_downloads(keys: Iterable[str], output_dir: Path) -> List[DownloadTask]:
    """One task per key, written under the key's base name.

    Raises:
        DuplicateArchiveError: If two keys share a base name.
    """
    tasks: List[DownloadTask] = []
    claimed: dict[Path, str] = {}
    for key in keys:
        destination = output_dir / posixpath.basename(key)
        if destination in claimed:
            raise DuplicateArchiveError(claimed[destination], key)
        claimed[destination] = key
        tasks.append(DownloadTask(key=key, destination=destination))
    return tasks


def ensure_output_dir(output_dir: Path) -> None:
    if not output_dir.exists():
        raise OutputDirError(str(output_dir), "does not exist")
    if not output_dir.is_dir():
        raise OutputDirError(str(output_dir), "is not a directory")
    if not os.access(output_dir, os.W_OK | os.X_OK):
        raise OutputDirError(str(output_dir), "is not writable")


class Getter:
    """Resolves, downloads and summarizes the window for one ``in`` request."""

    def __init__(self, storage: ResultsStorageClient, viewer: JunitViewer):
        self._storage = storage
        self._viewer = viewer

    def get(self, request: InRequest) -> InResponse:
        fetched = self.fetch(
            request.version,
            request.params.summaries,
            Path(request.output_dir),
        )
        return InResponse(
            version=request.version,
            metadata={TEST_SUITE_COUNT: str(fetched)},
        )

    def fetch(
        self,
        target_version: Version,
        summaries: Sequence[Summary],
        output_dir: Path,
    ) -> int:
        """Download the window ending at *target_version* and print summaries.

        Returns the number of archives fetched. Files written before a failure
        are left in place.
        """
        # Fail on a malformed target before listing storage.
        parse_key_timestamp(target_version.key)
        ensure_output_dir(output_dir)

        keys = self._storage.list_keys()
        window = resolve_fetch_window(keys, target_version, summaries)
        tasks = plan_downloads(window, output_dir)
        log.info(
            "Fetching %d of %d stored archive(s) up to %s",
            len(tasks),
            len(keys),
            target_version.key,
        )

        # TODO: download in parallel; summaries must still wait for all tasks.
        for task in tasks:
            self._download(task)

        for summary in summaries:
            log.debug("Printing '%s' summary (limit=%d)", summary.type, summary.limit)
            self._viewer.print_summary(summary, output_dir)

        return len(tasks)

    def _download(self, task: DownloadTask) -> None:
        """Stream *task* into a temp file beside its destination, then rename.

        A failed download leaves nothing behind for its own key.
        """
        directory = task.destination.parent
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".", suffix=".tmp")
        except OSError as e:
            raise OutputDirError(str(directory), str(e)) from e

        try:
            with os.fdopen(fd, "wb") as sink:
                self._storage.get(task.key, sink)
            os.replace(tmp_path, task.destination)
        except BaseException as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            if isinstance(e, OSError) and not isinstance(e, ResourceError):
                raise OutputDirError(str(directory), str(e)) from e
            raise
        log.debug("Downloaded %s -> %s", task.key, task.destination)
