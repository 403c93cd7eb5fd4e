"""
CI pipeline resource for timestamped test-result archives kept in object storage.

Provides:
- Version resolution for ``check`` (new archives since a marker)
- Fetch-window resolution for ``in`` (bounded window ending at a target)
- Storage clients for S3, GCS, Azure and local directories
- A summary port that shells out to ``junit-viewer``
"""

__version__ = "0.3.0"

from .check import Checker, resolve_check
from .errors import (
    ConfigurationError,
    DuplicateArchiveError,
    InvalidKeyError,
    InvalidTimestampError,
    NoResultsFoundError,
    ObjectNotFoundError,
    OutputDirError,
    ResourceError,
    StorageUnavailableError,
    SummaryError,
    UnsupportedSummaryKindError,
    VersionParseError,
)
from .fetch import Getter, resolve_fetch_window
from .models import CheckRequest, InParams, InRequest, InResponse, Source, Summary, Version
from .versions import TimestampedKey, parse_key_timestamp, resolve_keys, sort_keys

__all__ = [
    "__version__",
    "Checker",
    "resolve_check",
    "Getter",
    "resolve_fetch_window",
    "CheckRequest",
    "InParams",
    "InRequest",
    "InResponse",
    "Source",
    "Summary",
    "Version",
    "TimestampedKey",
    "parse_key_timestamp",
    "resolve_keys",
    "sort_keys",
    "ResourceError",
    "VersionParseError",
    "InvalidKeyError",
    "InvalidTimestampError",
    "StorageUnavailableError",
    "ObjectNotFoundError",
    "OutputDirError",
    "SummaryError",
    "NoResultsFoundError",
    "UnsupportedSummaryKindError",
    "ConfigurationError",
    "DuplicateArchiveError",
]
