"""Favorites API routes."""
from fastapi import APIRouter, Depends

from eventfeed.dependencies import get_repository
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.engagement import FavoritesOut
from eventfeed.schemas.event import EventOut
from eventfeed.services import favorites_service
from eventfeed.session import UserSession, get_session

router = APIRouter()


@router.get("/", response_model=FavoritesOut)
async def get_favorites(
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    favorites = await favorites_service.get_favorites(repo, session)
    return FavoritesOut(user_id=session.require_user(), favorites=favorites)


@router.get("/events", response_model=list[EventOut])
async def get_favorite_events(
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Favorited events that still exist, newest first."""
    return await favorites_service.favorite_events(repo, session)


@router.post("/{event_id}/toggle", response_model=FavoritesOut)
async def toggle_favorite(
    event_id: str,
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Add the event to the caller's favorites, or remove it if already there."""
    favorites = await favorites_service.toggle_favorite(repo, session, event_id)
    return FavoritesOut(user_id=session.require_user(), favorites=favorites)
