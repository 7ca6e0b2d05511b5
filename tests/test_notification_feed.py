"""Tests for change signalling and live store subscriptions."""

from __future__ import annotations

import threading
from datetime import datetime, timezone

import anyio
import pytest

from waffl.domain.entities import NotificationRecord, NotificationType
from waffl.infrastructure.notifications import NotificationStore

pytestmark = pytest.mark.anyio


def _follow(notification_id: str, recipient_id: str = "alice") -> NotificationRecord:
    return NotificationRecord(
        id=notification_id,
        recipient_id=recipient_id,
        sender_id="bob",
        sender_name="Bob",
        type=NotificationType.FOLLOW,
        created_at=datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc),
    )


async def test_publish_from_another_thread_wakes_the_listener(feed):
    listener = feed.listen("alice")

    thread = threading.Thread(target=feed.publish, args=("alice",))
    thread.start()
    thread.join()

    with anyio.fail_after(2):
        assert await listener.wait() is True

    feed.unlisten(listener)
    listener.close()
    assert await listener.wait() is False
    assert feed.listener_count("alice") == 0


async def test_signals_for_other_recipients_are_ignored(feed):
    listener = feed.listen("alice")
    feed.publish("bob")

    with anyio.move_on_after(0.1) as scope:
        await listener.wait()
    assert scope.cancelled_caught
    feed.unlisten(listener)


async def test_subscription_yields_initial_and_updated_snapshots(session_factory, feed):
    store = NotificationStore(session_factory, feed=feed)
    await store.create(_follow("n-1"))

    async with store.watch("alice") as subscription:
        with anyio.fail_after(2):
            first = await subscription.__anext__()
            assert [r.id for r in first.records] == ["n-1"]
            assert first.unread_count == 1

            await store.update_read_state("alice", "n-1", is_read=True)
            await store.create(_follow("other", recipient_id="carol"))
            second = await subscription.__anext__()

        assert second.unread_count == 0
        assert [r.id for r in second.records] == ["n-1"]

    assert subscription.closed
    assert feed.listener_count("alice") == 0
    with pytest.raises(StopAsyncIteration):
        await subscription.__anext__()
