"""FastAPI dependencies shared by the routers."""
from typing import Optional

from eventfeed.config import settings
from eventfeed.database import SessionLocal
from eventfeed.repositories.base import EventRepository
from eventfeed.repositories.sql import SqlEventRepository

_repository: Optional[EventRepository] = None


def get_repository() -> EventRepository:
    """The process-wide repository; tests override this dependency."""
    global _repository
    if _repository is None:
        _repository = SqlEventRepository(SessionLocal, timeout=settings.REPOSITORY_TIMEOUT_SECONDS)
    return _repository
