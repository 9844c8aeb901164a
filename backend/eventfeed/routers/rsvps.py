"""RSVP API routes."""
from typing import Optional
from fastapi import APIRouter, Depends

from eventfeed.dependencies import get_repository
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.engagement import RSVPRecord, RSVPRequest
from eventfeed.services import rsvp_service
from eventfeed.session import UserSession, get_session

router = APIRouter()


@router.get("/", response_model=list[RSVPRecord])
async def list_rsvps(
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    return await rsvp_service.get_user_rsvps(repo, session)


@router.post("/{event_id}", response_model=RSVPRecord)
async def rsvp(
    event_id: str,
    payload: Optional[RSVPRequest] = None,
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """RSVP the caller to an event. Capacity is not enforced here."""
    status = (payload or RSVPRequest()).status
    return await rsvp_service.rsvp(repo, session, event_id, status)
