"""RSVP ORM model — at most one row per (user, event)."""
import enum
from sqlalchemy import Column, String, DateTime
from eventfeed.database import Base


class RSVPStatus(str, enum.Enum):
    attending = "attending"


class RSVP(Base):
    __tablename__ = "rsvps"

    user_id = Column(String(128), primary_key=True)
    # Not a foreign key: deleting an event leaves its RSVPs in place
    event_id = Column(String(36), primary_key=True)
    # Open enumeration, stored as text so new statuses need no migration
    status = Column(String(32), nullable=False, default=RSVPStatus.attending.value)
    created_at = Column(DateTime(timezone=True), nullable=False)
