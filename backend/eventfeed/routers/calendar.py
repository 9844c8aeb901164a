"""Calendar view routes — events bucketed by day."""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query

from eventfeed.dependencies import get_repository
from eventfeed.repositories.base import EventRepository
from eventfeed.schemas.engagement import CalendarDayOut
from eventfeed.schemas.event import EventOut
from eventfeed.services.calendar_service import build_date_index

router = APIRouter()


@router.get("/", response_model=list[CalendarDayOut])
async def get_calendar(
    selected: Optional[date] = Query(None, description="Day to flag as selected"),
    repo: EventRepository = Depends(get_repository),
):
    """Every day that has events, plus the selected day if given."""
    index = build_date_index(await repo.list_events("created_at", "desc"))
    overlay = index.marked(selected)
    return [CalendarDayOut(date=day, **entry) for day, entry in sorted(overlay.items())]


@router.get("/{day}", response_model=list[EventOut])
async def get_day(day: date, repo: EventRepository = Depends(get_repository)):
    index = build_date_index(await repo.list_events("created_at", "desc"))
    return index.events_on(day)
