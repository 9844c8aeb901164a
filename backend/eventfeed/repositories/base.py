"""Abstract event repository — the boundary between the engine and the store.

The ledgers and the ranker only ever talk to an ``EventRepository``. Each
implementation normalizes timestamps on the way in (through the schemas),
raises ``NotFound`` for absent documents and wraps every store failure in
``RepositoryUnavailable``.
"""
import abc
import asyncio
import logging
from typing import Any, AsyncIterator, Optional

from eventfeed.schemas.engagement import FavoritesRecord, RSVPRecord
from eventfeed.schemas.event import EventOut

logger = logging.getLogger(__name__)

ORDERABLE_FIELDS = ("created_at", "date", "title")
DIRECTIONS = ("asc", "desc")

# Fields an event update may touch; identity and creation stamp are fixed
MUTABLE_EVENT_FIELDS = (
    "title",
    "description",
    "location",
    "category",
    "date",
    "time",
    "attendees",
    "max_attendees",
)


def check_ordering(order_by: str, direction: str) -> None:
    if order_by not in ORDERABLE_FIELDS:
        raise ValueError(f"Cannot order events by {order_by!r}")
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown sort direction {direction!r}")


class SnapshotBroadcaster:
    """Wakes every live subscription after an event write."""

    def __init__(self):
        self._queues: set[asyncio.Queue] = set()

    def register(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue()
        self._queues.add(queue)
        return queue

    def unregister(self, queue: asyncio.Queue) -> None:
        self._queues.discard(queue)

    def publish(self) -> None:
        for queue in self._queues:
            queue.put_nowait(None)

    @property
    def subscriber_count(self) -> int:
        return len(self._queues)


class EventRepository(abc.ABC):
    """Async read/write/subscribe interface over the event collection."""

    def __init__(self, broadcaster: Optional[SnapshotBroadcaster] = None):
        self.broadcaster = broadcaster or SnapshotBroadcaster()

    # ── events ──────────────────────────────────────────────────────
    @abc.abstractmethod
    async def list_events(self, order_by: str = "created_at", direction: str = "desc") -> list[EventOut]:
        ...

    @abc.abstractmethod
    async def get_event(self, event_id: str) -> EventOut:
        """Return the event or raise ``NotFound``."""

    @abc.abstractmethod
    async def create_event(self, data: dict[str, Any]) -> str:
        """Insert a new event and return its repository-assigned id."""

    @abc.abstractmethod
    async def update_event(self, event_id: str, fields: dict[str, Any]) -> None:
        """Apply a partial update or raise ``NotFound``."""

    @abc.abstractmethod
    async def delete_event(self, event_id: str) -> None:
        """Remove the event or raise ``NotFound``. Never cascades."""

    # ── favorites ───────────────────────────────────────────────────
    @abc.abstractmethod
    async def get_favorites_record(self, user_id: str) -> Optional[FavoritesRecord]:
        ...

    @abc.abstractmethod
    async def put_favorites_record(self, user_id: str, record: FavoritesRecord) -> None:
        ...

    # ── rsvps ───────────────────────────────────────────────────────
    @abc.abstractmethod
    async def list_rsvps(self, user_id: str) -> list[RSVPRecord]:
        ...

    @abc.abstractmethod
    async def put_rsvp(self, user_id: str, event_id: str, status: str) -> RSVPRecord:
        """Upsert the (user, event) RSVP; re-RSVP overwrites."""

    # ── live snapshots ──────────────────────────────────────────────
    async def subscribe(
        self, order_by: str = "created_at", direction: str = "desc"
    ) -> AsyncIterator[list[EventOut]]:
        """Yield the current event list, then a fresh list after every write.

        Bursts of writes that land before the consumer catches up collapse
        into a single snapshot.
        """
        check_ordering(order_by, direction)
        queue = self.broadcaster.register()
        try:
            yield await self.list_events(order_by, direction)
            while True:
                await queue.get()
                while not queue.empty():
                    queue.get_nowait()
                yield await self.list_events(order_by, direction)
        finally:
            self.broadcaster.unregister(queue)
            logger.debug("Event subscription closed")
