"""Mapping publish timestamps onto (day-of-week, hour) buckets."""

from __future__ import annotations

from datetime import datetime, tzinfo

from dateutil import tz

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


def get_zone(name: str = "UTC") -> tzinfo:
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


def slot_for(published_at: datetime, zone: tzinfo) -> tuple[int, int]:
    """Return ``(day_of_week, hour)`` with 0 = Sunday, in ``zone``.

    Naive timestamps are taken to be UTC; the API always reports UTC.
    """
    if published_at.tzinfo is None:
        published_at = published_at.replace(tzinfo=tz.UTC)
    local = published_at.astimezone(zone)
    # isoweekday(): Monday=1 .. Sunday=7
    return local.isoweekday() % 7, local.hour


def all_slots():
    """Every (day, hour) pair, day-major."""
    for day in range(DAYS_PER_WEEK):
        for hour in range(HOURS_PER_DAY):
            yield day, hour
