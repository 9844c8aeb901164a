"""Favorites ledger — per-user set of bookmarked event ids.

Toggle is a plain read-modify-write of the whole set with no version
check: two devices toggling at once can lose one toggle (last writer
wins on the record). Reads propagate repository failures unless lenient
reads are switched on in settings.
"""
import logging
from typing import Optional

from eventfeed.config import settings
from eventfeed.errors import RepositoryUnavailable
from eventfeed.instant import utcnow
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.engagement import FavoritesRecord
from eventfeed.schemas.event import EventOut
from eventfeed.session import UserSession

logger = logging.getLogger(__name__)


async def toggle_favorite(repo: EventRepository, session: UserSession, event_id: str) -> list[str]:
    """Add ``event_id`` to the user's favorites, or remove it if present.

    Returns the set as written.
    """
    user_id = session.require_user()

    record = await repo.get_favorites_record(user_id)
    current = list(record.favorites) if record else []

    if event_id in current:
        updated = [fid for fid in current if fid != event_id]
        action = "removed"
    else:
        updated = current + [event_id]
        action = "added"

    await repo.put_favorites_record(
        user_id, FavoritesRecord(user_id=user_id, favorites=updated, updated_at=utcnow())
    )
    logger.info("User %s %s favorite %s (%d total)", user_id, action, event_id, len(updated))
    return updated


async def get_favorites(
    repo: EventRepository,
    session: UserSession,
    lenient: Optional[bool] = None,
) -> list[str]:
    """Return the user's favorite event ids, ``[]`` when no record exists."""
    user_id = session.require_user()
    if lenient is None:
        lenient = settings.FAVORITES_LENIENT_READS

    try:
        record = await repo.get_favorites_record(user_id)
    except RepositoryUnavailable:
        if not lenient:
            raise
        logger.warning("Favorites read failed for user %s; returning empty set", user_id, exc_info=True)
        return []

    logger.debug("Loaded favorites for user %s", user_id)
    return list(record.favorites) if record else []


async def is_favorite(repo: EventRepository, session: UserSession, event_id: str) -> bool:
    return event_id in await get_favorites(repo, session)


async def favorite_events(repo: EventRepository, session: UserSession) -> list[EventOut]:
    """Favorited events in list order. Ids of deleted events are skipped."""
    favorites = set(await get_favorites(repo, session))
    if not favorites:
        return []
    events = await repo.list_events("created_at", "desc")
    return [event for event in events if event.event_id in favorites]
