"""Date bucketing index for the calendar view."""
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

import pytz

from eventfeed.config import settings
from eventfeed.instant import day_key
from eventfeed.schemas.event import EventOut

logger = logging.getLogger(__name__)

DayLike = Union[str, date, datetime]


class DateIndex:
    """Events grouped by ISO calendar day, input order kept within a day."""

    def __init__(self, tz_name: str):
        self.tz_name = tz_name
        self._buckets: dict[str, list[EventOut]] = {}

    def add(self, event: EventOut) -> Optional[str]:
        key = day_key(event.date, self.tz_name)
        if key is None:
            return None
        self._buckets.setdefault(key, []).append(event)
        return key

    def _key(self, day: DayLike) -> str:
        if isinstance(day, datetime):
            return day_key(day, self.tz_name)
        if isinstance(day, date):
            return day.isoformat()
        return day

    def events_on(self, day: DayLike) -> list[EventOut]:
        """Events on ``day``; unknown days give an empty list."""
        return list(self._buckets.get(self._key(day), []))

    def dates(self) -> list[str]:
        return list(self._buckets)

    def as_dict(self) -> dict[str, list[EventOut]]:
        return {key: list(events) for key, events in self._buckets.items()}

    def marked(self, selected: Optional[DayLike] = None) -> dict[str, dict[str, Any]]:
        """Presentation overlay: every bucket marked, one day flagged selected.

        A selected day with no events is included unmarked and empty.
        """
        overlay = {
            key: {"marked": True, "selected": False, "events": list(events)}
            for key, events in self._buckets.items()
        }
        if selected is not None:
            selected_key = self._key(selected)
            entry = overlay.setdefault(selected_key, {"marked": False, "selected": False, "events": []})
            entry["selected"] = True
        return overlay

    def __contains__(self, day: DayLike) -> bool:
        return self._key(day) in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)


def build_date_index(events: Iterable[EventOut], tz_name: Optional[str] = None) -> DateIndex:
    """Bucket ``events`` by calendar day. Events without a date are skipped."""
    tz_name = tz_name or settings.CALENDAR_TIMEZONE
    # Fail fast on a bad zone name rather than per event
    pytz.timezone(tz_name)

    index = DateIndex(tz_name)
    skipped = 0
    for event in events:
        if index.add(event) is None:
            skipped += 1
    logger.debug("Bucketed events into %d days (%d without a date) in %s", len(index), skipped, tz_name)
    return index
