"""RSVP ledger — per-(user, event) attendance plus the event's attendee list.

``rsvp`` never checks ``max_attendees``; capacity is informational only
(see ``capacity``). The attendee append reads the event and writes the
whole list back without coordination, so a concurrent owner edit of the
same event can drop the new attendee.
"""
import logging

from eventfeed.errors import EventNotFound, NotFound
from eventfeed.models.rsvp import RSVPStatus
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.engagement import RSVPRecord
from eventfeed.schemas.event import CapacityOut, EventOut
from eventfeed.session import UserSession

logger = logging.getLogger(__name__)


async def rsvp(
    repo: EventRepository,
    session: UserSession,
    event_id: str,
    status: str = RSVPStatus.attending.value,
) -> RSVPRecord:
    """Upsert the RSVP, then make sure the user appears once in ``attendees``.

    Raises ``EventNotFound`` when the event is gone by the time the attendee
    list is updated; the RSVP record has already been written by then.
    """
    user_id = session.require_user()

    record = await repo.put_rsvp(user_id, event_id, status)
    logger.info("User %s RSVP'd '%s' to event %s", user_id, status, event_id)

    try:
        event = await repo.get_event(event_id)
        if user_id not in event.attendees:
            await repo.update_event(event_id, {"attendees": event.attendees + [user_id]})
            logger.info("Added %s to attendees of event %s", user_id, event_id)
    except NotFound as exc:
        logger.warning("Event %s vanished after RSVP by %s", event_id, user_id)
        raise EventNotFound(event_id) from exc

    return record


async def get_user_rsvps(repo: EventRepository, session: UserSession) -> list[RSVPRecord]:
    user_id = session.require_user()
    return await repo.list_rsvps(user_id)


async def has_rsvp(repo: EventRepository, session: UserSession, event_id: str) -> bool:
    return any(r.event_id == event_id for r in await get_user_rsvps(repo, session))


def capacity(event: EventOut) -> CapacityOut:
    """Attendance against the optional cap, for display gating only."""
    count = len(event.attendees or [])
    is_full = bool(event.max_attendees) and count >= event.max_attendees
    return CapacityOut(attendee_count=count, max_attendees=event.max_attendees, is_full=is_full)
