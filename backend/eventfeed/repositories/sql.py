"""SQLAlchemy-backed event repository."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from sqlalchemy import asc, desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from eventfeed.errors import NotFound, RepositoryUnavailable
from eventfeed.instant import normalize_instant, utcnow
from eventfeed.models.event import Event
from eventfeed.models.favorite import UserFavorites
from eventfeed.models.rsvp import RSVP
from eventfeed.repositories.base import (
    MUTABLE_EVENT_FIELDS,
    EventRepository,
    SnapshotBroadcaster,
    check_ordering,
)
from eventfeed.schemas.engagement import FavoritesRecord, RSVPRecord
from eventfeed.schemas.event import EventOut

logger = logging.getLogger(__name__)

T = TypeVar("T")

INSTANT_FIELDS = ("date", "time", "created_at")


def _normalized(fields: dict[str, Any]) -> dict[str, Any]:
    """SQLite drops offsets, so every instant is stored as UTC."""
    return {
        key: normalize_instant(value) if key in INSTANT_FIELDS else value
        for key, value in fields.items()
    }


class SqlEventRepository(EventRepository):
    """Each call runs in its own session and commits before returning."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        timeout: Optional[float] = None,
        broadcaster: Optional[SnapshotBroadcaster] = None,
    ):
        super().__init__(broadcaster)
        self.session_factory = session_factory
        self.timeout = timeout

    async def _run(self, operation: str, work: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Execute ``work`` in a fresh session, mapping store failures."""

        async def _in_session() -> T:
            async with self.session_factory() as session:
                result = await work(session)
                await session.commit()
                return result

        try:
            return await asyncio.wait_for(_in_session(), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("Repository %s timed out after %ss", operation, self.timeout)
            raise RepositoryUnavailable(f"{operation} timed out") from exc
        except (SQLAlchemyError, OSError) as exc:
            logger.exception("Repository %s failed", operation)
            raise RepositoryUnavailable(f"{operation} failed: {exc}") from exc

    # ── events ──────────────────────────────────────────────────────
    async def list_events(self, order_by: str = "created_at", direction: str = "desc") -> list[EventOut]:
        check_ordering(order_by, direction)
        column = getattr(Event, order_by)
        ordering = desc(column) if direction == "desc" else asc(column)

        async def work(session: AsyncSession) -> list[EventOut]:
            rows = (await session.execute(select(Event).order_by(ordering))).scalars().all()
            return [EventOut.model_validate(row) for row in rows]

        return await self._run("list_events", work)

    async def get_event(self, event_id: str) -> EventOut:
        async def work(session: AsyncSession) -> Optional[EventOut]:
            row = await session.get(Event, event_id)
            return EventOut.model_validate(row) if row else None

        event = await self._run("get_event", work)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        return event

    async def create_event(self, data: dict[str, Any]) -> str:
        async def work(session: AsyncSession) -> str:
            event = Event(**_normalized(data))
            session.add(event)
            await session.flush()
            return event.event_id

        event_id = await self._run("create_event", work)
        self.broadcaster.publish()
        return event_id

    async def update_event(self, event_id: str, fields: dict[str, Any]) -> None:
        async def work(session: AsyncSession) -> bool:
            event = await session.get(Event, event_id)
            if event is None:
                return False
            for field, value in _normalized(fields).items():
                if field in MUTABLE_EVENT_FIELDS:
                    setattr(event, field, list(value) if field == "attendees" else value)
            return True

        if not await self._run("update_event", work):
            raise NotFound(f"Event {event_id} not found")
        self.broadcaster.publish()

    async def delete_event(self, event_id: str) -> None:
        async def work(session: AsyncSession) -> bool:
            event = await session.get(Event, event_id)
            if event is None:
                return False
            await session.delete(event)
            return True

        if not await self._run("delete_event", work):
            raise NotFound(f"Event {event_id} not found")
        self.broadcaster.publish()

    # ── favorites ───────────────────────────────────────────────────
    async def get_favorites_record(self, user_id: str) -> Optional[FavoritesRecord]:
        async def work(session: AsyncSession) -> Optional[FavoritesRecord]:
            row = await session.get(UserFavorites, user_id)
            return FavoritesRecord.model_validate(row) if row else None

        return await self._run("get_favorites_record", work)

    async def put_favorites_record(self, user_id: str, record: FavoritesRecord) -> None:
        async def work(session: AsyncSession) -> None:
            await session.merge(UserFavorites(
                user_id=user_id,
                favorites=list(record.favorites),
                updated_at=normalize_instant(record.updated_at) or utcnow(),
            ))

        await self._run("put_favorites_record", work)

    # ── rsvps ───────────────────────────────────────────────────────
    async def list_rsvps(self, user_id: str) -> list[RSVPRecord]:
        async def work(session: AsyncSession) -> list[RSVPRecord]:
            stmt = select(RSVP).where(RSVP.user_id == user_id).order_by(RSVP.created_at)
            rows = (await session.execute(stmt)).scalars().all()
            return [RSVPRecord.model_validate(row) for row in rows]

        return await self._run("list_rsvps", work)

    async def put_rsvp(self, user_id: str, event_id: str, status: str) -> RSVPRecord:
        async def work(session: AsyncSession) -> RSVPRecord:
            row = await session.merge(RSVP(
                user_id=user_id,
                event_id=event_id,
                status=status,
                created_at=utcnow(),
            ))
            return RSVPRecord.model_validate(row)

        return await self._run("put_rsvp", work)
