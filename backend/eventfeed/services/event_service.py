"""Event catalogue service — create, edit, delete and search events.

Responsibilities:
- Authorization hook: only the owner may edit or delete
- Field validation shared by create and edit (required text, date+time
  not in the past, positive attendee cap)
- Newest-first listing and text/category search

Deleting an event leaves RSVP and favorites records that reference it.
"""
import logging
from datetime import datetime
from typing import Any, Optional

import pytz

from eventfeed.config import settings
from eventfeed.errors import NotAuthorized, ValidationFailed
from eventfeed.instant import normalize_instant, utcnow
from eventfeed.models.event import EventCategory
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.event import EventCreate, EventOut, EventUpdate
from eventfeed.session import UserSession

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "All"


def combine_date_and_time(date_value: datetime, time_value: datetime, tz_name: str) -> datetime:
    """Day of ``date_value`` at the hour and minute of ``time_value``, on the calendar zone."""
    tz = pytz.timezone(tz_name)
    local_day = normalize_instant(date_value).astimezone(tz).date()
    local_time = normalize_instant(time_value).astimezone(tz).time().replace(second=0, microsecond=0)
    return tz.localize(datetime.combine(local_day, local_time))


def _validate(fields: dict[str, Any], check_schedule: bool, now: Optional[datetime] = None) -> None:
    for name in ("title", "description", "location"):
        if not (fields.get(name) or "").strip():
            raise ValidationFailed(f"{name.capitalize()} is required")
    if fields.get("category") is None:
        raise ValidationFailed("Category is required")
    if fields.get("date") is None:
        raise ValidationFailed("Date is required")
    if fields.get("time") is None:
        raise ValidationFailed("Time is required")

    max_attendees = fields.get("max_attendees")
    if max_attendees is not None and max_attendees <= 0:
        raise ValidationFailed("Max attendees must be a positive number")

    if check_schedule:
        starts_at = combine_date_and_time(fields["date"], fields["time"], settings.CALENDAR_TIMEZONE)
        if starts_at < (now or utcnow()):
            raise ValidationFailed("Event date and time cannot be in the past")


def _check_authorization(event: EventOut, actor_user_id: str) -> None:
    if event.owner_id != actor_user_id:
        raise NotAuthorized()


async def create_event(
    repo: EventRepository,
    session: UserSession,
    payload: EventCreate,
    now: Optional[datetime] = None,
) -> EventOut:
    """Validate and store a new event owned by the session's user."""
    owner_id = session.require_user()
    fields = payload.model_dump()
    fields["title"] = fields["title"].strip()
    fields["description"] = fields["description"].strip()
    fields["location"] = fields["location"].strip()
    _validate(fields, check_schedule=True, now=now)

    event_id = await repo.create_event({**fields, "owner_id": owner_id, "attendees": []})
    logger.info("Created event '%s' (%s) by owner %s", fields["title"], event_id, owner_id)
    return await repo.get_event(event_id)


async def update_event(
    repo: EventRepository,
    session: UserSession,
    event_id: str,
    payload: EventUpdate,
    now: Optional[datetime] = None,
) -> EventOut:
    """Apply an owner edit. The schedule is re-checked only when it changes."""
    actor = session.require_user()
    event = await repo.get_event(event_id)
    _check_authorization(event, actor)

    changes = payload.model_dump(exclude_unset=True)
    for name in ("title", "description", "location"):
        if changes.get(name) is not None:
            changes[name] = changes[name].strip()

    merged = {**event.model_dump(), **changes}
    _validate(merged, check_schedule="date" in changes or "time" in changes, now=now)

    await repo.update_event(event_id, changes)
    logger.info("Updated event %s (%s)", event_id, ", ".join(sorted(changes)) or "no changes")
    return await repo.get_event(event_id)


async def delete_event(repo: EventRepository, session: UserSession, event_id: str) -> None:
    actor = session.require_user()
    event = await repo.get_event(event_id)
    _check_authorization(event, actor)
    await repo.delete_event(event_id)
    logger.info("Deleted event %s by owner %s", event_id, actor)


async def list_events(repo: EventRepository) -> list[EventOut]:
    return await repo.list_events("created_at", "desc")


def filter_events(
    events: list[EventOut],
    query: Optional[str] = None,
    category: Optional[str] = None,
) -> list[EventOut]:
    """Case-insensitive match on title, description or location, then category."""
    filtered = events
    if query:
        needle = query.lower()
        filtered = [
            e for e in filtered
            if needle in e.title.lower()
            or needle in (e.description or "").lower()
            or needle in (e.location or "").lower()
        ]
    if category and category != ALL_CATEGORIES:
        wanted = EventCategory(category)
        filtered = [e for e in filtered if e.category == wanted]
    return filtered


async def search_events(
    repo: EventRepository,
    query: Optional[str] = None,
    category: Optional[str] = None,
) -> list[EventOut]:
    if category and category != ALL_CATEGORIES:
        try:
            EventCategory(category)
        except ValueError as exc:
            raise ValidationFailed(f"Unknown category: {category}") from exc
    return filter_events(await list_events(repo), query, category)
