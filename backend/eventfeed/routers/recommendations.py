"""Recommendation feed route."""
from fastapi import APIRouter, Depends

from eventfeed.dependencies import get_repository
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.event import EventOut
from eventfeed.services import recommendation_service
from eventfeed.session import UserSession, get_session

router = APIRouter()


@router.get("/", response_model=list[EventOut])
async def get_recommendations(
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Up to ten events ranked for the caller. An empty list means no recommendations."""
    return await recommendation_service.recommend(repo, session)
