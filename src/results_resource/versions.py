"""
Key timestamp codec and version ordering.

Storage keys look like ``<optional-prefix>/test-results-<timestamp>.xml`` where
the timestamp is RFC 3339 (e.g. ``2006-01-02T15:04:05Z``). The embedded
timestamp is the only thing the resolvers compare on; callers only ever see the
key string.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterable, List

from .errors import InvalidKeyError, InvalidTimestampError

KEY_PATTERN = re.compile(r"/?test-results-(.+)\.xml$")

RFC3339_PATTERN = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt]"
    r"(?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)

# Canonical layout used when building keys, always UTC.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

KEY_TEMPLATE = "test-results-{timestamp}.xml"


@dataclass(frozen=True)
class TimestampedKey:
    """A storage key paired with its decoded timestamp."""

    key: str
    timestamp: datetime


def _parse_offset(raw: str) -> timezone:
    if raw in ("Z", "z"):
        return timezone.utc
    sign = -1 if raw[0] == "-" else 1
    hours, minutes = int(raw[1:3]), int(raw[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {raw}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_rfc3339(value: str) -> datetime:
    """Parse an RFC 3339 timestamp into an aware datetime.

    Fractional seconds of any precision are accepted and truncated to
    microseconds.

    Raises:
        ValueError: If *value* is not a valid RFC 3339 timestamp.
    """
    match = RFC3339_PATTERN.match(value)
    if not match:
        raise ValueError(f"not an RFC 3339 timestamp: {value}")

    parsed = datetime.strptime(
        f"{match.group('date')}T{match.group('time')}", "%Y-%m-%dT%H:%M:%S"
    )
    fraction = match.group("fraction")
    if fraction:
        parsed = parsed.replace(microsecond=int(fraction[:6].ljust(6, "0")))
    return parsed.replace(tzinfo=_parse_offset(match.group("offset")))


def parse_key_timestamp(key: str) -> datetime:
    """Extract the embedded timestamp from a storage key.

    Raises:
        InvalidKeyError: If the key does not match ``test-results-<ts>.xml``.
        InvalidTimestampError: If the embedded substring is not RFC 3339.
    """
    match = KEY_PATTERN.search(key)
    if not match:
        raise InvalidKeyError(key)

    raw = match.group(1)
    try:
        return parse_rfc3339(raw)
    except ValueError as e:
        raise InvalidTimestampError(key, raw) from e


def key_for_timestamp(timestamp: datetime, prefix: str = "") -> str:
    """Build a key in the canonical shape for *timestamp*."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    name = KEY_TEMPLATE.format(
        timestamp=timestamp.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)
    )
    if not prefix:
        return name
    return f"{prefix.rstrip('/')}/{name}"


def resolve_keys(keys: Iterable[str]) -> List[TimestampedKey]:
    """Decode every key up front, failing on the first invalid one."""
    return [TimestampedKey(key=key, timestamp=parse_key_timestamp(key)) for key in keys]


def sort_keys(
    pairs: Iterable[TimestampedKey], descending: bool = False
) -> List[TimestampedKey]:
    """Stable sort by timestamp. Order among equal timestamps is unspecified."""
    return sorted(pairs, key=lambda pair: pair.timestamp, reverse=descending)
