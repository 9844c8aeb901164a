"""Event ORM model."""
import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, DateTime, Integer, JSON, Enum as SAEnum
from eventfeed.database import Base


class EventCategory(str, enum.Enum):
    general = "General"
    conference = "Conference"
    workshop = "Workshop"
    meetup = "Meetup"
    social = "Social"
    sports = "Sports"
    music = "Music"
    food = "Food"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Event(Base):
    __tablename__ = "events"

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    location = Column(String(500), nullable=False, default="")
    category = Column(
        SAEnum(EventCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EventCategory.general,
    )
    date = Column(DateTime(timezone=True), nullable=True)
    time = Column(DateTime(timezone=True), nullable=True)
    owner_id = Column(String(128), nullable=False, index=True)
    # Denormalized attendee user ids; no foreign keys so RSVP/favorite references may dangle
    attendees = Column(JSON, nullable=False, default=list)
    max_attendees = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
