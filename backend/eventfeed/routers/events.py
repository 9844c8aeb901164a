"""Event API routes — delegates to event_service for validation and ownership."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from eventfeed.dependencies import get_repository
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.event import CapacityOut, EventCreate, EventOut, EventUpdate
from eventfeed.services import event_service, rsvp_service
from eventfeed.session import UserSession, get_session

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event(
    payload: EventCreate,
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Create a new event owned by the calling user."""
    return await event_service.create_event(repo, session, payload)


@router.get("/", response_model=list[EventOut])
async def list_events(repo: EventRepository = Depends(get_repository)):
    """All events, newest first."""
    return await event_service.list_events(repo)


@router.get("/search", response_model=list[EventOut])
async def search_events(
    q: Optional[str] = Query(None, description="Text matched against title, description and location"),
    category: Optional[str] = Query(None, description="Category name, or 'All'"),
    repo: EventRepository = Depends(get_repository),
):
    return await event_service.search_events(repo, q, category)


@router.get("/{event_id}", response_model=EventOut)
async def get_event(event_id: str, repo: EventRepository = Depends(get_repository)):
    return await repo.get_event(event_id)


@router.get("/{event_id}/capacity", response_model=CapacityOut)
async def get_capacity(event_id: str, repo: EventRepository = Depends(get_repository)):
    """Attendee count against the optional cap (informational)."""
    return rsvp_service.capacity(await repo.get_event(event_id))


@router.put("/{event_id}", response_model=EventOut)
async def update_event(
    event_id: str,
    payload: EventUpdate,
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Update an event (owner only)."""
    return await event_service.update_event(repo, session, event_id, payload)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    repo: EventRepository = Depends(get_repository),
    session: UserSession = Depends(get_session),
):
    """Delete an event (owner only). RSVPs and favorites pointing at it remain."""
    await event_service.delete_event(repo, session, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
