"""Recommendation ranker.

Scores every event the user does not own: a flat bonus if the user
favorited it, plus one point per attendee. The sort is stable, so events
with equal scores keep the newest-first order of the event listing. RSVP
history is loaded but does not contribute to the score yet.
"""
import logging
from typing import Optional

from eventfeed.config import settings
from eventfeed.errors import RecommendationUnavailable, RepositoryUnavailable
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.event import EventOut
from eventfeed.session import UserSession

logger = logging.getLogger(__name__)


def score_event(event: EventOut, favorites: set[str], favorite_weight: int) -> int:
    score = favorite_weight if event.event_id in favorites else 0
    return score + len(event.attendees or [])


def rank_events(
    events: list[EventOut],
    user_id: str,
    favorites: set[str],
    limit: int,
    favorite_weight: int,
) -> list[EventOut]:
    """Pure ranking step: exclude own events, stable-sort by score, truncate."""
    candidates = [event for event in events if event.owner_id != user_id]
    # sorted() is stable; ties keep their listing order
    ranked = sorted(candidates, key=lambda e: score_event(e, favorites, favorite_weight), reverse=True)
    return ranked[:limit]


async def recommend(
    repo: EventRepository,
    session: UserSession,
    limit: Optional[int] = None,
    favorite_weight: Optional[int] = None,
) -> list[EventOut]:
    """Return at most ``limit`` events ranked for the session's user."""
    user_id = session.require_user()
    limit = settings.RECOMMENDATION_LIMIT if limit is None else limit
    favorite_weight = settings.FAVORITE_WEIGHT if favorite_weight is None else favorite_weight

    try:
        rsvps = await repo.list_rsvps(user_id)
        record = await repo.get_favorites_record(user_id)
        events = await repo.list_events("created_at", "desc")
    except RepositoryUnavailable as exc:
        logger.error("Recommendations unavailable for user %s: %s", user_id, exc.detail)
        raise RecommendationUnavailable() from exc

    favorites = set(record.favorites) if record else set()
    ranked = rank_events(events, user_id, favorites, limit, favorite_weight)
    logger.info(
        "Ranked %d of %d events for user %s (%d favorites, %d rsvps)",
        len(ranked), len(events), user_id, len(favorites), len(rsvps),
    )
    return ranked
