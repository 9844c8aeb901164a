"""UserFavorites ORM model — one row per user, created on first toggle."""
from sqlalchemy import Column, String, DateTime, JSON
from eventfeed.database import Base


class UserFavorites(Base):
    __tablename__ = "user_favorites"

    user_id = Column(String(128), primary_key=True)
    favorites = Column(JSON, nullable=False, default=list)
    updated_at = Column(DateTime(timezone=True), nullable=False)
