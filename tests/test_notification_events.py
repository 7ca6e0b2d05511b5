"""Tests for the interaction notification writers and the push dispatcher."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from waffl.application.use_cases.notifications import (
    build_push_content,
    notify_comment,
    notify_follow,
    notify_like,
)
from waffl.application.use_cases.push import PushDispatcher, register_device_token
from waffl.domain.entities import PUSH_ERROR_INTERNAL, NotificationType, PushEndpointError
from waffl.infrastructure.repositories import NotificationRepository


@pytest.fixture
def dispatcher(session_factory, endpoint):
    return PushDispatcher(session_factory, endpoint)


def test_like_creates_one_record_and_one_push(
    db_session, dispatcher, endpoint, feed, scheduler, alice, bob
):
    register_device_token(db_session, user_id="alice", token="alice-device-token")

    record = notify_like(
        db_session,
        sender=bob,
        recipient_id="alice",
        video_id="v-1",
        video_thumbnail_url="https://img/v-1.png",
        dispatcher=dispatcher,
        feed=feed,
        schedule=scheduler,
    )

    assert record is not None
    stored = NotificationRepository(db_session).list_for_recipient("alice")
    assert [r.id for r in stored] == [record.id]
    assert stored[0].type is NotificationType.LIKE
    assert stored[0].sender_name == "Bob"
    assert stored[0].is_read is False

    assert len(scheduler.calls) == 1
    assert scheduler.calls[0][0] == dispatcher.dispatch
    assert len(endpoint.requests) == 1
    request = endpoint.requests[0]
    assert request.to == "alice-device-token"
    assert request.notification.title == "New Like"
    assert request.notification.body == "Bob liked your video"
    assert request.data_payload == {"type": "like", "senderId": "bob", "videoId": "v-1"}


def test_records_are_unread_and_ordered_by_creation(db_session, dispatcher, feed, scheduler, bob):
    created = [
        notify_like(
            db_session, sender=bob, recipient_id="alice", video_id="v-1",
            dispatcher=dispatcher, feed=feed, schedule=scheduler,
        ),
        notify_comment(
            db_session, sender=bob, recipient_id="alice", video_id="v-1", comment_text="Nice",
            dispatcher=dispatcher, feed=feed, schedule=scheduler,
        ),
        notify_follow(
            db_session, sender=bob, recipient_id="alice",
            dispatcher=dispatcher, feed=feed, schedule=scheduler,
        ),
        notify_like(
            db_session, sender=bob, recipient_id="alice", video_id="v-2",
            dispatcher=dispatcher, feed=feed, schedule=scheduler,
        ),
    ]

    stamps = [record.created_at for record in created]
    assert stamps == sorted(stamps)
    assert all(record.is_read is False for record in created)

    stored = NotificationRepository(db_session).list_for_recipient("alice")
    assert len(stored) == 4
    assert all(record.is_read is False for record in stored)
    assert [r.created_at for r in stored] == sorted(stamps, reverse=True)


def test_self_interactions_write_nothing(db_session, dispatcher, endpoint, feed, scheduler, bob):
    assert notify_like(
        db_session, sender=bob, recipient_id="bob", video_id="v",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    ) is None
    assert notify_comment(
        db_session,
        sender=bob,
        recipient_id="bob",
        video_id="v",
        comment_text="me",
        dispatcher=dispatcher,
        feed=feed,
        schedule=scheduler,
    ) is None
    assert notify_follow(
        db_session, sender=bob, recipient_id="bob",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    ) is None

    assert NotificationRepository(db_session).list_for_recipient("bob") == []
    assert scheduler.calls == []
    assert endpoint.requests == []


def test_follow_has_no_video_and_comment_keeps_text(db_session, dispatcher, feed, scheduler, alice):
    follow = notify_follow(
        db_session, sender=alice, recipient_id="bob",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    )
    comment = notify_comment(
        db_session,
        sender=alice,
        recipient_id="bob",
        video_id="v-9",
        comment_text="Great video!",
        dispatcher=dispatcher,
        feed=feed,
        schedule=scheduler,
    )

    assert follow.video_id is None and follow.video_thumbnail_url is None
    assert follow.sender_profile_image_url == "https://img/alice.png"
    assert comment.comment_text == "Great video!"
    assert build_push_content(comment) == (
        "New Comment",
        "Alice: Great video!",
        {"type": "comment", "senderId": "alice", "commentText": "Great video!", "videoId": "v-9"},
    )
    assert build_push_content(follow) == (
        "New Follower",
        "Alice started following you",
        {"type": "follow", "senderId": "alice"},
    )


def test_missing_device_token_skips_push_but_keeps_record(
    db_session, dispatcher, endpoint, feed, scheduler, bob
):
    record = notify_follow(
        db_session, sender=bob, recipient_id="alice",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    )

    assert record is not None
    assert NotificationRepository(db_session).get(record.id) is not None
    assert len(scheduler.calls) == 1
    assert endpoint.requests == []


def test_dispatch_runs_inline_without_a_scheduler(db_session, dispatcher, endpoint, feed, bob):
    register_device_token(db_session, user_id="alice", token="token-a")

    notify_follow(db_session, sender=bob, recipient_id="alice", dispatcher=dispatcher, feed=feed)

    assert len(endpoint.requests) == 1


def test_endpoint_failure_is_swallowed(session_factory, make_endpoint, db_session):
    failing = make_endpoint(
        error=PushEndpointError(PUSH_ERROR_INTERNAL, "Failed to send push notification")
    )
    dispatcher = PushDispatcher(session_factory, failing)
    register_device_token(db_session, user_id="alice", token="token-a")

    assert dispatcher.dispatch("alice", title="New Like", body="Bob liked your video") is None
    assert len(failing.requests) == 1

    crashing = make_endpoint(error=RuntimeError("boom"))
    dispatcher = PushDispatcher(session_factory, crashing)
    assert dispatcher.dispatch("alice", title="t", body="b") is None
    assert len(crashing.requests) == 1


def test_dispatch_returns_the_endpoint_result(session_factory, endpoint, db_session):
    register_device_token(db_session, user_id="alice", token="token-a")
    dispatcher = PushDispatcher(session_factory, endpoint)

    result = dispatcher.dispatch("alice", title="New Like", body="Bob liked your video", data={"a": 1})

    assert result.success is True
    assert result.message_id == "msg-1"
    assert endpoint.requests[0].data_payload == {"a": 1}


def test_storage_failure_is_logged_and_nothing_is_sent(
    db_session, dispatcher, endpoint, feed, scheduler, bob, monkeypatch
):
    def broken_create(self, record):
        raise OperationalError("INSERT", {}, Exception("disk full"))

    monkeypatch.setattr(NotificationRepository, "create", broken_create)

    assert notify_like(
        db_session, sender=bob, recipient_id="alice", video_id="v",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    ) is None
    assert scheduler.calls == []
    assert endpoint.requests == []


def test_rejected_record_does_not_fail_the_interaction(
    db_session, dispatcher, endpoint, feed, scheduler, bob
):
    result = notify_comment(
        db_session,
        sender=bob,
        recipient_id="alice",
        video_id="v-1",
        comment_text="",
        dispatcher=dispatcher,
        feed=feed,
        schedule=scheduler,
    )

    assert result is None
    assert NotificationRepository(db_session).list_for_recipient("alice") == []
    assert scheduler.calls == []
    assert endpoint.requests == []


def test_feed_failure_keeps_record_and_push(db_session, dispatcher, feed, scheduler, bob, monkeypatch):
    def broken_publish(recipient_id):
        raise RuntimeError("feed unavailable")

    monkeypatch.setattr(feed, "publish", broken_publish)

    record = notify_follow(
        db_session, sender=bob, recipient_id="alice",
        dispatcher=dispatcher, feed=feed, schedule=scheduler,
    )

    assert record is not None
    assert NotificationRepository(db_session).get(record.id) is not None
    assert len(scheduler.calls) == 1


def test_register_device_token_requires_a_value(db_session):
    with pytest.raises(ValueError):
        register_device_token(db_session, user_id="alice", token="")
