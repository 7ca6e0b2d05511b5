"""Live notification view of the signed-in user with optimistic read state.

The center keeps the newest window of the user's notifications in sync with
the durable store and derives the unread count from it. Mutations (mark one,
mark all, delete) are shown immediately and confirmed in the background:

* every in-flight change is tracked per record as a pending operation;
* the displayed ``is_read`` of a record is the value of its newest pending
  operation, or the last durable value known for it;
* when an operation fails it is dropped, so the record falls back to
  whatever is currently known to be durable (or to another operation still
  in flight), never to the value captured when the failed operation began.

The unread count is recomputed from the displayed window after each change
and is never adjusted incrementally.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Callable

from waffl.domain.entities import (
    NotificationNotFoundError,
    NotificationRecord,
    NotificationSnapshot,
    SessionContext,
)
from waffl.infrastructure.notifications import NotificationStore, NotificationSubscription

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationViewState:
    """What screens render: the ordered window and its unread count."""

    notifications: tuple[NotificationRecord, ...]
    unread_count: int
    is_loading: bool


@dataclass(eq=False)
class _PendingReadChange:
    notification_id: str
    is_read: bool


ViewListener = Callable[[NotificationViewState], None]


class NotificationCenter:
    """Notification list, unread count and read-state actions for one session."""

    def __init__(self, store: NotificationStore, *, window_size: int | None = None) -> None:
        self._store = store
        self._window_size = window_size or store.window_size
        self._session: SessionContext | None = None
        self._subscription: NotificationSubscription | None = None
        self._task: asyncio.Task | None = None
        self._window: list[NotificationRecord] = []
        self._pending: dict[str, list[_PendingReadChange]] = {}
        self._hidden: set[str] = set()
        self._deleting: set[str] = set()
        self._notifications: tuple[NotificationRecord, ...] = ()
        self._unread_count = 0
        self._listeners: list[ViewListener] = []
        self.is_loading = False

    @property
    def session(self) -> SessionContext | None:
        return self._session

    @property
    def notifications(self) -> tuple[NotificationRecord, ...]:
        return self._notifications

    @property
    def unread_count(self) -> int:
        return self._unread_count

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and not self._subscription.closed

    def has_unread(self) -> bool:
        return self._unread_count > 0

    def notification_count(self) -> int:
        return len(self._notifications)

    def view_state(self) -> NotificationViewState:
        return NotificationViewState(
            notifications=self._notifications,
            unread_count=self._unread_count,
            is_loading=self.is_loading,
        )

    def add_listener(self, listener: ViewListener) -> Callable[[], None]:
        """Call ``listener`` after every view change; returns an unsubscribe hook."""

        self._listeners.append(listener)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    # Session lifecycle

    async def sign_in(self, session: SessionContext) -> None:
        """Start following ``session``'s notifications, replacing any previous user."""

        if self._session == session and self.is_subscribed:
            return
        await self.sign_out()
        self._session = session
        await self._open_subscription()

    async def sign_out(self) -> None:
        """Tear the subscription down and forget the loaded window."""

        await self._close_subscription()
        self._session = None
        self._window = []
        self._pending.clear()
        self._hidden.clear()
        self._deleting.clear()
        self.is_loading = False
        self._recompute()

    async def reload(self) -> None:
        """Open a fresh subscription, e.g. after the previous one failed."""

        if self._session is None:
            return
        await self._close_subscription()
        await self._open_subscription()

    async def close(self) -> None:
        await self.sign_out()

    async def _open_subscription(self) -> None:
        if self._session is None:
            return
        subscription = self._store.watch(self._session.user_id, limit=self._window_size)
        self._subscription = subscription
        self.is_loading = True
        self._recompute()

        try:
            snapshot = await anext(subscription)
        except StopAsyncIteration:
            return
        except Exception:
            logger.exception(
                "Error loading notifications for %s; view will not update",
                subscription.recipient_id,
            )
            subscription.close()
            if self._subscription is subscription:
                self.is_loading = False
                self._recompute()
            return

        if self._subscription is not subscription:
            return
        self._apply_snapshot(snapshot)
        logger.info(
            "Loaded %s notifications for %s", len(snapshot.records), subscription.recipient_id
        )
        self._task = asyncio.create_task(self._consume(subscription))

    async def _consume(self, subscription: NotificationSubscription) -> None:
        try:
            async for snapshot in subscription:
                if self._subscription is not subscription:
                    break
                self._apply_snapshot(snapshot)
        except Exception:
            logger.exception(
                "Notification subscription for %s failed; view will stop updating",
                subscription.recipient_id,
            )
        finally:
            subscription.close()

    async def _close_subscription(self) -> None:
        subscription, task = self._subscription, self._task
        self._subscription = None
        self._task = None
        if subscription is not None:
            subscription.close()
        if task is not None and task is not asyncio.current_task():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

    # Read-state actions

    async def mark_as_read(self, notification_id: str) -> None:
        """Show ``notification_id`` as read now and persist it in the background."""

        session = self._session
        record = self._find(notification_id)
        if session is None or record is None or record.is_read:
            return

        change = self._begin(notification_id, is_read=True)
        try:
            saved = await self._store.update_read_state(
                session.user_id, notification_id, is_read=True
            )
        except Exception:
            logger.warning(
                "Error marking notification %s as read; reverting", notification_id, exc_info=True
            )
        else:
            self._remember_durable(saved)
        finally:
            self._settle(change)
            self._recompute()

    async def mark_all_as_read(self) -> None:
        """Mark every unread record currently shown as read in one atomic batch.

        Records that arrive after the unread ids are collected are not
        affected.
        """

        session = self._session
        if session is None:
            return
        target_ids = [record.id for record in self._notifications if not record.is_read]
        if not target_ids:
            return

        changes = [
            self._begin(notification_id, is_read=True, notify=False)
            for notification_id in target_ids
        ]
        self._recompute()
        try:
            await self._store.mark_many_as_read(session.user_id, target_ids)
        except Exception:
            logger.warning(
                "Error marking %s notifications as read; reverting all of them",
                len(target_ids),
                exc_info=True,
            )
        else:
            confirmed = set(target_ids)
            self._window = [
                replace(record, is_read=True) if record.id in confirmed else record
                for record in self._window
            ]
        finally:
            for change in changes:
                self._settle(change)
            self._recompute()

    async def delete(self, notification_id: str) -> None:
        """Remove ``notification_id`` from the view and delete it durably.

        When the durable delete fails the record is shown again.
        """

        session = self._session
        if session is None or self._find(notification_id) is None:
            return

        self._hidden.add(notification_id)
        self._deleting.add(notification_id)
        self._recompute()
        try:
            await self._store.delete(session.user_id, notification_id)
        except NotificationNotFoundError:
            logger.info("Notification %s was already deleted", notification_id)
        except Exception:
            logger.warning(
                "Error deleting notification %s; restoring it", notification_id, exc_info=True
            )
            self._hidden.discard(notification_id)
        finally:
            self._deleting.discard(notification_id)
            if all(record.id != notification_id for record in self._window):
                self._hidden.discard(notification_id)
            self._recompute()

    # View bookkeeping

    def _apply_snapshot(self, snapshot: NotificationSnapshot) -> None:
        self._window = list(snapshot.records)
        present = {record.id for record in self._window}
        self._hidden = {
            notification_id
            for notification_id in self._hidden
            if notification_id in present or notification_id in self._deleting
        }
        self.is_loading = False
        self._recompute()

    def _begin(
        self, notification_id: str, *, is_read: bool, notify: bool = True
    ) -> _PendingReadChange:
        change = _PendingReadChange(notification_id=notification_id, is_read=is_read)
        self._pending.setdefault(notification_id, []).append(change)
        if notify:
            self._recompute()
        return change

    def _settle(self, change: _PendingReadChange) -> None:
        changes = self._pending.get(change.notification_id)
        if not changes:
            return
        if change in changes:
            changes.remove(change)
        if not changes:
            self._pending.pop(change.notification_id, None)

    def _remember_durable(self, saved: NotificationRecord) -> None:
        self._window = [saved if record.id == saved.id else record for record in self._window]

    def _find(self, notification_id: str) -> NotificationRecord | None:
        for record in self._notifications:
            if record.id == notification_id:
                return record
        return None

    def _visible_records(self) -> list[NotificationRecord]:
        visible: list[NotificationRecord] = []
        for record in self._window:
            if record.id in self._hidden:
                continue
            changes = self._pending.get(record.id)
            if changes and changes[-1].is_read != record.is_read:
                record = replace(record, is_read=changes[-1].is_read)
            visible.append(record)
        return visible

    def _recompute(self) -> None:
        self._notifications = tuple(self._visible_records())
        self._unread_count = sum(1 for record in self._notifications if not record.is_read)
        state = self.view_state()
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Notification view listener failed")


__all__ = ["NotificationCenter", "NotificationViewState"]
