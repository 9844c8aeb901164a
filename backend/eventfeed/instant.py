"""Single normalization point for timestamp values entering the engine.

Event dates arrive as native datetimes, ISO strings, epoch seconds, or
document-store timestamp wrappers (objects with ``to_datetime()`` or their
serialized ``{"seconds": .., "nanoseconds": ..}`` form). Everything is
resolved here to one timezone-aware UTC ``datetime`` so nothing downstream
branches on representation.
"""
from datetime import date, datetime, timezone
from typing import Any, Optional

import pytz

from eventfeed.errors import InvalidInstant


def _from_epoch(seconds: Any, nanos: Any = 0) -> datetime:
    try:
        return datetime.fromtimestamp(seconds + int(nanos) / 1_000_000_000, tz=timezone.utc)
    except (OverflowError, OSError, TypeError, ValueError) as exc:
        raise InvalidInstant(f"Epoch out of range or not numeric: {seconds!r}") from exc


def normalize_instant(value: Any) -> Optional[datetime]:
    """Resolve ``value`` to an aware UTC datetime, or ``None`` for ``None``."""
    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, bool):
        raise InvalidInstant(f"Not a timestamp: {value!r}")

    if isinstance(value, (int, float)):
        return _from_epoch(value)

    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidInstant(f"Unparseable timestamp: {value!r}") from exc
        return normalize_instant(parsed)

    if isinstance(value, dict):
        for secs_key, nanos_key in (("seconds", "nanoseconds"), ("_seconds", "_nanoseconds")):
            if secs_key in value:
                return _from_epoch(value[secs_key], value.get(nanos_key, 0))
        raise InvalidInstant(f"Unrecognised timestamp mapping: {value!r}")

    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return normalize_instant(to_datetime())

    raise InvalidInstant(f"Unsupported timestamp type: {type(value).__name__}")


def day_key(value: Any, tz_name: str = "UTC") -> Optional[str]:
    """ISO ``YYYY-MM-DD`` of ``value`` as seen on a calendar in ``tz_name``."""
    instant = normalize_instant(value)
    if instant is None:
        return None
    tz = pytz.timezone(tz_name)
    return instant.astimezone(tz).date().isoformat()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
