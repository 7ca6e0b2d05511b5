"""Helpers for working with timezone-aware UTC datetimes."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(tz=timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Normalize ``value`` so it is expressed in UTC.

    Naive values are assumed to already be UTC, which is how they are stored
    in the database.
    """

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def ensure_naive_utc(value: datetime | None) -> datetime | None:
    """Return ``value`` converted to UTC without attaching ``tzinfo``.

    SQLite drops timezone information on ``DATETIME`` columns, so rows are
    written as naive UTC and re-localized by :func:`ensure_utc` when read.
    """

    localized = ensure_utc(value)
    if localized is None:
        return None
    return localized.replace(tzinfo=None)
