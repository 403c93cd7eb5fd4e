"""Resolves which stored archives are new relative to a starting version."""

import logging
from typing import Iterable, List, Optional

from .models import Version
from .storage.base import ResultsStorageClient
from .versions import parse_key_timestamp, resolve_keys, sort_keys

log = logging.getLogger(__name__)


def resolve_check(
    keys: Iterable[str], starting_version: Optional[Version] = None
) -> List[Version]:
    """Return versions at or after *starting_version*, oldest first.

    The starting version itself is included when still present so the caller
    can confirm it exists. With no starting version every key is returned.
    """
    starting = None
    if starting_version is not None and not starting_version.is_empty():
        starting = parse_key_timestamp(starting_version.key)

    eligible = [
        pair
        for pair in resolve_keys(keys)
        if starting is None or pair.timestamp >= starting
    ]
    return [Version(key=pair.key) for pair in sort_keys(eligible)]


class Checker:
    """Lists storage and resolves the ``check`` response."""

    def __init__(self, storage: ResultsStorageClient):
        self._storage = storage

    def check(self, starting_version: Optional[Version] = None) -> List[Version]:
        # Reject a malformed marker before touching storage.
        if starting_version is not None and not starting_version.is_empty():
            parse_key_timestamp(starting_version.key)

        keys = self._storage.list_keys()
        versions = resolve_check(keys, starting_version)
        log.info(
            "Found %d version(s) out of %d stored archive(s) since %s",
            len(versions),
            len(keys),
            starting_version.key if starting_version and starting_version.key else "the beginning",
        )
        return versions
