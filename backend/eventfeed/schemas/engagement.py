"""Pydantic schemas for favorites, RSVPs and calendar buckets."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, field_validator

from eventfeed.instant import normalize_instant
from eventfeed.models.rsvp import RSVPStatus
from eventfeed.schemas.event import EventOut


class FavoritesRecord(BaseModel):
    user_id: str
    favorites: list[str] = []
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("updated_at", mode="before")
    @classmethod
    def normalize_updated_at(cls, value: Any) -> Optional[datetime]:
        return normalize_instant(value)


class FavoritesOut(BaseModel):
    user_id: str
    favorites: list[str]


class RSVPRecord(BaseModel):
    user_id: str
    event_id: str
    # Open enumeration; unknown statuses from newer writers pass through as text
    status: str = RSVPStatus.attending.value
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, value: Any) -> Optional[datetime]:
        return normalize_instant(value)

    @property
    def rsvp_id(self) -> str:
        return f"{self.user_id}_{self.event_id}"


class RSVPRequest(BaseModel):
    status: str = RSVPStatus.attending.value


class CalendarDayOut(BaseModel):
    date: str
    marked: bool
    selected: bool = False
    events: list[EventOut] = []
