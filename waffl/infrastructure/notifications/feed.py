"""Change signals for recipients whose notifications were modified."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import defaultdict
from typing import DefaultDict, Set

logger = logging.getLogger(__name__)


class FeedListener:
    """Wake-up handle owned by one live subscription.

    Signals raised while the owner is busy are coalesced: the owner is woken
    once and reloads the full window, so no individual change needs to be
    queued.
    """

    def __init__(self, recipient_id: str, loop: asyncio.AbstractEventLoop) -> None:
        self.recipient_id = recipient_id
        self._loop = loop
        self._event = asyncio.Event()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def notify(self) -> bool:
        """Wake the owner from any thread. Return ``False`` if its loop is gone."""

        try:
            self._loop.call_soon_threadsafe(self._event.set)
        except RuntimeError:
            return False
        return True

    async def wait(self) -> bool:
        """Block until the next signal; return ``False`` once closed."""

        if self._closed:
            return False
        await self._event.wait()
        self._event.clear()
        return not self._closed

    def close(self) -> None:
        self._closed = True
        self.notify()


class NotificationChangeFeed:
    """Fan change signals out to the listeners registered for a recipient."""

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, Set[FeedListener]] = defaultdict(set)
        self._lock = threading.Lock()

    def listen(self, recipient_id: str) -> FeedListener:
        """Register a listener bound to the running event loop."""

        listener = FeedListener(recipient_id, asyncio.get_running_loop())
        with self._lock:
            self._listeners[recipient_id].add(listener)
        return listener

    def unlisten(self, listener: FeedListener) -> None:
        with self._lock:
            listeners = self._listeners.get(listener.recipient_id)
            if listeners is None:
                return
            listeners.discard(listener)
            if not listeners:
                self._listeners.pop(listener.recipient_id, None)

    def publish(self, recipient_id: str) -> None:
        """Signal every listener of ``recipient_id``; safe to call from any thread."""

        with self._lock:
            listeners = list(self._listeners.get(recipient_id, set()))
        for listener in listeners:
            if not listener.notify():
                logger.debug("Dropping listener of %s bound to a closed loop", recipient_id)
                self.unlisten(listener)

    def listener_count(self, recipient_id: str) -> int:
        with self._lock:
            return len(self._listeners.get(recipient_id, set()))


notification_feed = NotificationChangeFeed()


__all__ = ["FeedListener", "NotificationChangeFeed", "notification_feed"]
