"""
Exception types raised by the resource.

Every failure aborts the current check/fetch call; nothing is retried or
recovered locally. The CLI layer turns these into a log line and a
non-zero exit.
"""


class ResourceError(Exception):
    """Base class for all resource errors."""


class ConfigurationError(ResourceError):
    """Invalid source configuration or request envelope."""


class VersionParseError(ResourceError):
    """A storage key could not be turned into a version."""

    def __init__(self, message: str, key: str):
        super().__init__(message)
        self.key = key


class InvalidKeyError(VersionParseError):
    """Key does not look like ``<prefix>/test-results-<timestamp>.xml``."""

    def __init__(self, key: str):
        super().__init__(f"invalid filename '{key}'", key)


class InvalidTimestampError(VersionParseError):
    """Key has the right shape but the embedded timestamp is not RFC 3339."""

    def __init__(self, key: str, raw_timestamp: str):
        super().__init__(f"invalid timestamp '{raw_timestamp}' in key '{key}'", key)
        self.raw_timestamp = raw_timestamp


class StorageUnavailableError(ResourceError):
    """Transport or auth failure talking to the object store."""


class ObjectNotFoundError(ResourceError):
    """Requested key does not exist in the object store."""

    def __init__(self, key: str):
        super().__init__(f"could not find file with key '{key}'")
        self.key = key


class OutputDirError(ResourceError, OSError):
    """Local output directory is missing or not writable."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"output directory '{path}' is unusable: {reason}")
        self.path = path


class SummaryError(ResourceError):
    """The external summary tool failed."""


class NoResultsFoundError(SummaryError):
    """No result archives were present for the summary tool to read."""

    def __init__(self, results_dir: str):
        super().__init__(f"found no .xml files in results dir '{results_dir}'")
        self.results_dir = results_dir


class UnsupportedSummaryKindError(SummaryError):
    """Summary type is not one the summary tool understands."""

    def __init__(self, kind: str, supported: tuple[str, ...]):
        super().__init__(
            f"unsupported summary type {kind!r}. Supported: {', '.join(supported)}"
        )
        self.kind = kind


class DuplicateArchiveError(ResourceError):
    """Two keys in the fetch window would land on the same local file."""

    def __init__(self, first_key: str, second_key: str):
        super().__init__(
            f"keys '{first_key}' and '{second_key}' share a file name and would overwrite each other"
        )
        self.keys = (first_key, second_key)
