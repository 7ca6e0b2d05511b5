"""Asynchronous durable store for notification records with live snapshots."""

from __future__ import annotations

import functools
import logging
from typing import Callable, Iterable, TypeVar

import anyio
from sqlalchemy.orm import Session, sessionmaker

from waffl.domain.entities import NotificationRecord, NotificationSnapshot
from waffl.infrastructure.repositories import NotificationRepository

from .feed import FeedListener, NotificationChangeFeed, notification_feed

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_WINDOW_SIZE = 50


class NotificationSubscription:
    """Live view of one recipient's newest notifications.

    Iterating yields a full :class:`NotificationSnapshot` right away and then
    one more after every change signal for the recipient. The sequence only
    ends when :meth:`close` is called; a new subscription can be opened at any
    time with :meth:`NotificationStore.watch`.
    """

    def __init__(
        self,
        store: "NotificationStore",
        listener: FeedListener,
        *,
        limit: int,
    ) -> None:
        self._store = store
        self._listener = listener
        self._limit = limit
        self._primed = False
        self._closed = False

    @property
    def recipient_id(self) -> str:
        return self._listener.recipient_id

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "NotificationSubscription":
        return self

    async def __anext__(self) -> NotificationSnapshot:
        if self._closed:
            raise StopAsyncIteration
        if self._primed and not await self._listener.wait():
            raise StopAsyncIteration
        self._primed = True
        if self._closed:
            raise StopAsyncIteration
        return await self._store.snapshot(self.recipient_id, limit=self._limit)

    def close(self) -> None:
        """Release the change-feed registration and end the iteration."""

        if self._closed:
            return
        self._closed = True
        self._store.feed.unlisten(self._listener)
        self._listener.close()

    async def __aenter__(self) -> "NotificationSubscription":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()


class NotificationStore:
    """Run repository operations off the event loop and signal live views.

    Every mutating call publishes a change for the affected recipient once
    the transaction has committed.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        *,
        feed: NotificationChangeFeed | None = None,
        window_size: int = DEFAULT_WINDOW_SIZE,
    ) -> None:
        self._session_factory = session_factory
        self.feed = feed if feed is not None else notification_feed
        self.window_size = window_size

    async def create(self, record: NotificationRecord) -> NotificationRecord:
        saved = await self._run(lambda repository: repository.create(record))
        self.feed.publish(saved.recipient_id)
        return saved

    async def snapshot(
        self, recipient_id: str, *, limit: int | None = None
    ) -> NotificationSnapshot:
        window = limit or self.window_size
        records = await self._run(
            lambda repository: repository.list_for_recipient(recipient_id, limit=window)
        )
        return NotificationSnapshot(recipient_id=recipient_id, records=tuple(records))

    def watch(self, recipient_id: str, *, limit: int | None = None) -> NotificationSubscription:
        """Open a live subscription; must be called from the event loop."""

        listener = self.feed.listen(recipient_id)
        return NotificationSubscription(self, listener, limit=limit or self.window_size)

    async def update_read_state(
        self, recipient_id: str, notification_id: str, *, is_read: bool
    ) -> NotificationRecord:
        saved = await self._run(
            lambda repository: repository.set_read_state(
                notification_id, recipient_id=recipient_id, is_read=is_read
            )
        )
        self.feed.publish(recipient_id)
        return saved

    async def mark_many_as_read(self, recipient_id: str, notification_ids: Iterable[str]) -> int:
        ids = list(notification_ids)
        updated = await self._run(
            lambda repository: repository.mark_as_read(ids, recipient_id=recipient_id)
        )
        if updated:
            self.feed.publish(recipient_id)
        return updated

    async def delete(self, recipient_id: str, notification_id: str) -> None:
        await self._run(
            lambda repository: repository.delete(notification_id, recipient_id=recipient_id)
        )
        self.feed.publish(recipient_id)

    async def _run(self, operation: Callable[[NotificationRepository], T]) -> T:
        return await anyio.to_thread.run_sync(functools.partial(self._execute, operation))

    def _execute(self, operation: Callable[[NotificationRepository], T]) -> T:
        with self._session_factory() as session:
            return operation(NotificationRepository(session))


__all__ = ["DEFAULT_WINDOW_SIZE", "NotificationStore", "NotificationSubscription"]
