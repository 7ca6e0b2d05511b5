"""Unit tests for notification domain entities."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from waffl.domain.entities import (
    InvalidNotificationError,
    NotificationRecord,
    NotificationSnapshot,
    NotificationType,
    build_notification,
)

NOW = datetime(2024, 5, 20, 12, 0, tzinfo=timezone.utc)


def _record(**overrides) -> NotificationRecord:
    values = dict(
        id="n-1",
        recipient_id="alice",
        sender_id="bob",
        sender_name="Bob",
        type=NotificationType.LIKE,
        created_at=NOW,
        video_id="v-1",
    )
    values.update(overrides)
    return NotificationRecord(**values)


def test_build_notification_creates_unread_record_with_fresh_id():
    first = build_notification(
        NotificationType.LIKE, recipient_id="alice", sender_id="bob", sender_name="Bob", video_id="v"
    )
    second = build_notification(
        NotificationType.LIKE, recipient_id="alice", sender_id="bob", sender_name="Bob", video_id="v"
    )

    assert first.is_read is False
    assert first.id and second.id and first.id != second.id
    assert first.created_at.tzinfo is not None


def test_self_notification_is_rejected():
    with pytest.raises(InvalidNotificationError):
        build_notification(
            NotificationType.FOLLOW, recipient_id="bob", sender_id="bob", sender_name="Bob"
        )


@pytest.mark.parametrize(
    "overrides",
    [
        {"type": NotificationType.LIKE, "video_id": None},
        {"type": NotificationType.COMMENT, "comment_text": None},
        {"type": NotificationType.COMMENT, "comment_text": ""},
        {"type": NotificationType.FOLLOW, "video_id": "v-1"},
        {"type": NotificationType.FOLLOW, "video_id": None, "video_thumbnail_url": "t.png"},
        {"type": NotificationType.LIKE, "comment_text": "nice"},
    ],
)
def test_validate_rejects_records_not_matching_their_type(overrides):
    with pytest.raises(InvalidNotificationError):
        _record(**overrides).validate()


def test_comment_and_follow_records_are_valid():
    _record(type=NotificationType.COMMENT, comment_text="Great video!").validate()
    _record(type=NotificationType.FOLLOW, video_id=None).validate()


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(seconds=30), "just now"),
        (timedelta(minutes=5), "5m ago"),
        (timedelta(hours=3, minutes=59), "3h ago"),
        (timedelta(days=2), "2d ago"),
    ],
)
def test_time_ago_uses_compact_units(age, expected):
    assert _record(created_at=NOW - age).time_ago(now=NOW) == expected


def test_time_ago_falls_back_to_a_short_date_after_a_week():
    record = _record(created_at=datetime(2024, 3, 7, 9, 0, tzinfo=timezone.utc))

    assert record.time_ago(now=NOW) == "3/7/24"


def test_naive_timestamps_are_treated_as_utc():
    record = _record(created_at=datetime(2024, 5, 20, 11, 0))

    assert record.time_ago(now=NOW) == "1h ago"


def test_navigation_target_depends_on_type():
    assert _record().navigation_target() == ("video", "v-1")
    assert _record(type=NotificationType.FOLLOW, video_id=None).navigation_target() == (
        "profile",
        "bob",
    )


def test_type_texts_and_unknown_values():
    assert NotificationType.LIKE.action_text == "liked your video"
    assert NotificationType.COMMENT.push_title == "New Comment"
    assert NotificationType.FOLLOW.push_title == "New Follower"
    assert NotificationType.parse("repost") is NotificationType.LIKE
    assert NotificationType.parse("follow") is NotificationType.FOLLOW


def test_snapshot_unread_count_is_derived_from_records():
    snapshot = NotificationSnapshot(
        recipient_id="alice",
        records=(
            _record(id="a"),
            _record(id="b", is_read=True),
            _record(id="c"),
        ),
    )

    assert snapshot.unread_count == 2
