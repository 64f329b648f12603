"""Strict RFC 3339 timestamp parsing for caller-supplied date-times.

Bare dates, missing offsets, space-separated forms, surrounding whitespace
and non-ASCII digits are rejected rather than silently normalised.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

from rehab_outcomes.errors import INVALID_TIMESTAMP, ValidationError

_RFC3339 = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"[Tt](?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:\d{2})\Z",
    re.ASCII,
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_offset(offset: str) -> timezone:
    if offset in ("Z", "z"):
        return timezone.utc
    sign = 1 if offset[0] == "+" else -1
    hours, minutes = int(offset[1:3]), int(offset[4:6])
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {offset}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def parse_timestamp(value: str, field: str = "timestamp") -> datetime:
    """Parse an RFC 3339 date-time into an aware datetime.

    Raises:
        ValidationError: with code ``INVALID_TIMESTAMP`` if the text is not a
            complete date-time with an explicit offset.
    """
    match = _RFC3339.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValidationError.from_definition(INVALID_TIMESTAMP, field=field, value=value)

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    try:
        return datetime(
            int(match.group("year")),
            int(match.group("month")),
            int(match.group("day")),
            int(match.group("hour")),
            int(match.group("minute")),
            int(match.group("second")),
            int(fraction),
            tzinfo=_parse_offset(match.group("offset")),
        )
    except ValueError as e:
        raise ValidationError.from_definition(INVALID_TIMESTAMP, field=field, value=value) from e


def parse_optional_timestamp(value: Optional[str], field: str = "timestamp") -> datetime:
    """Parse ``value`` if supplied, otherwise return the current UTC time."""
    if not value:
        return utcnow()
    return parse_timestamp(value, field)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes (e.g. read back from SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
