"""Dict-backed event repository for tests and local tooling."""
import itertools
import uuid
from typing import Any, Optional

from eventfeed.errors import NotFound, RepositoryUnavailable
from eventfeed.instant import utcnow
from eventfeed.repositories.base import (
    MUTABLE_EVENT_FIELDS,
    EventRepository,
    SnapshotBroadcaster,
    check_ordering,
)
from eventfeed.schemas.engagement import FavoritesRecord, RSVPRecord
from eventfeed.schemas.event import EventOut


class InMemoryEventRepository(EventRepository):
    """Keeps documents in dicts and hands out copies.

    Set ``fail_with`` to make every call fail, or add operation names to
    ``failing_operations`` to fail only those.
    """

    def __init__(self, broadcaster: Optional[SnapshotBroadcaster] = None):
        super().__init__(broadcaster)
        self.events: dict[str, EventOut] = {}
        self.favorites: dict[str, FavoritesRecord] = {}
        self.rsvps: dict[tuple[str, str], RSVPRecord] = {}
        self.fail_with: Optional[Exception] = None
        self.failing_operations: set[str] = set()
        self.calls: list[str] = []
        self._insertion = itertools.count()
        self._order: dict[str, int] = {}

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_with is not None or operation in self.failing_operations:
            cause = self.fail_with or ConnectionError(f"{operation} unavailable")
            raise RepositoryUnavailable(f"{operation} failed: {cause}") from cause

    def seed(self, *events: dict[str, Any]) -> list[str]:
        """Insert raw event documents as-is, keeping any ids they carry."""
        ids = []
        for raw in events:
            doc = dict(raw)
            doc.setdefault("event_id", str(uuid.uuid4()))
            doc.setdefault("title", doc["event_id"])
            doc.setdefault("created_at", utcnow())
            event = EventOut.model_validate(doc)
            self.events[event.event_id] = event
            self._order[event.event_id] = next(self._insertion)
            ids.append(event.event_id)
        return ids

    # ── events ──────────────────────────────────────────────────────
    async def list_events(self, order_by: str = "created_at", direction: str = "desc") -> list[EventOut]:
        self._enter("list_events")
        check_ordering(order_by, direction)

        def key(event: EventOut):
            value = getattr(event, order_by)
            return (value is not None, value if value is not None else 0, self._order[event.event_id])

        ordered = sorted(self.events.values(), key=key, reverse=direction == "desc")
        return [event.model_copy(deep=True) for event in ordered]

    async def get_event(self, event_id: str) -> EventOut:
        self._enter("get_event")
        event = self.events.get(event_id)
        if event is None:
            raise NotFound(f"Event {event_id} not found")
        return event.model_copy(deep=True)

    async def create_event(self, data: dict[str, Any]) -> str:
        self._enter("create_event")
        doc = {"event_id": str(uuid.uuid4()), "created_at": utcnow(), **data}
        event = EventOut.model_validate(doc)
        self.events[event.event_id] = event
        self._order[event.event_id] = next(self._insertion)
        self.broadcaster.publish()
        return event.event_id

    async def update_event(self, event_id: str, fields: dict[str, Any]) -> None:
        self._enter("update_event")
        current = self.events.get(event_id)
        if current is None:
            raise NotFound(f"Event {event_id} not found")
        changes = {k: v for k, v in fields.items() if k in MUTABLE_EVENT_FIELDS}
        self.events[event_id] = EventOut.model_validate({**current.model_dump(), **changes})
        self.broadcaster.publish()

    async def delete_event(self, event_id: str) -> None:
        self._enter("delete_event")
        if self.events.pop(event_id, None) is None:
            raise NotFound(f"Event {event_id} not found")
        self._order.pop(event_id, None)
        self.broadcaster.publish()

    # ── favorites ───────────────────────────────────────────────────
    async def get_favorites_record(self, user_id: str) -> Optional[FavoritesRecord]:
        self._enter("get_favorites_record")
        record = self.favorites.get(user_id)
        return record.model_copy(deep=True) if record else None

    async def put_favorites_record(self, user_id: str, record: FavoritesRecord) -> None:
        self._enter("put_favorites_record")
        self.favorites[user_id] = record.model_copy(deep=True)

    # ── rsvps ───────────────────────────────────────────────────────
    async def list_rsvps(self, user_id: str) -> list[RSVPRecord]:
        self._enter("list_rsvps")
        return [r.model_copy() for (uid, _), r in self.rsvps.items() if uid == user_id]

    async def put_rsvp(self, user_id: str, event_id: str, status: str) -> RSVPRecord:
        self._enter("put_rsvp")
        record = RSVPRecord(user_id=user_id, event_id=event_id, status=status, created_at=utcnow())
        self.rsvps[(user_id, event_id)] = record
        return record.model_copy()
