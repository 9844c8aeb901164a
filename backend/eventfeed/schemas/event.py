"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import BaseModel, field_validator

from eventfeed.instant import normalize_instant
from eventfeed.models.event import EventCategory


class EventCreate(BaseModel):
    title: str = ""
    description: str = ""
    location: str = ""
    category: EventCategory = EventCategory.general
    date: Optional[datetime] = None
    time: Optional[datetime] = None
    max_attendees: Optional[int] = None

    @field_validator("date", "time", mode="before")
    @classmethod
    def normalize_instants(cls, value: Any) -> Optional[datetime]:
        return normalize_instant(value)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    category: Optional[EventCategory] = None
    date: Optional[datetime] = None
    time: Optional[datetime] = None
    max_attendees: Optional[int] = None

    @field_validator("date", "time", mode="before")
    @classmethod
    def normalize_instants(cls, value: Any) -> Optional[datetime]:
        return normalize_instant(value)


class EventOut(BaseModel):
    event_id: str
    title: str
    description: str = ""
    location: str = ""
    category: EventCategory = EventCategory.general
    date: Optional[datetime] = None
    time: Optional[datetime] = None
    owner_id: str
    attendees: list[str] = []
    max_attendees: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("date", "time", "created_at", mode="before")
    @classmethod
    def normalize_instants(cls, value: Any) -> Optional[datetime]:
        return normalize_instant(value)

    @field_validator("attendees", mode="before")
    @classmethod
    def attendees_default(cls, value: Any) -> list[str]:
        return list(value or [])


class CapacityOut(BaseModel):
    attendee_count: int
    max_attendees: Optional[int] = None
    is_full: bool
