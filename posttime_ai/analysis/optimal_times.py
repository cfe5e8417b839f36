from __future__ import annotations

import logging

from ..models import OptimalSlot, TimeSlot, VideoRecord
from .engagement import round1, round_int
from .time_slots import get_zone, slot_for

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3
MIN_SAMPLE_SIZE = 2


def bucket_videos(videos, timezone: str = "UTC") -> dict[tuple[int, int], TimeSlot]:
    """Group videos into TimeSlots keyed by (day, hour).

    The dict preserves the order in which each bucket first received a video.
    """
    zone = get_zone(timezone)
    buckets: dict[tuple[int, int], TimeSlot] = {}
    for video in videos:
        key = slot_for(video.published_at, zone)
        if key not in buckets:
            buckets[key] = TimeSlot(day_of_week=key[0], hour=key[1])
        buckets[key].add(video)
    return buckets


def analyze_optimal_times(
    videos: list[VideoRecord],
    timezone: str = "UTC",
    top_n: int = DEFAULT_TOP_N,
    min_sample_size: int = MIN_SAMPLE_SIZE,
) -> list[OptimalSlot]:
    """Rank publish slots by average views and return the best ``top_n``.

    Slots with fewer than ``min_sample_size`` videos are dropped: one upload
    says nothing about a recurring time. Ties on average views keep bucket
    discovery order (``sorted`` is stable). An empty result means there is
    not enough history yet; it is never an error.
    """
    buckets = bucket_videos(videos, timezone)

    candidates = [
        (
            slot,
            round_int(slot.sum_views / slot.count),
            round1(slot.sum_engagement / slot.count),
        )
        for slot in buckets.values()
        if slot.count >= min_sample_size
    ]
    candidates = sorted(candidates, key=lambda c: c[1], reverse=True)[:top_n]

    results = [
        OptimalSlot(
            day_of_week=slot.day_of_week,
            hour=slot.hour,
            average_views=avg_views,
            average_engagement=avg_engagement,
            sample_size=slot.count,
            rank=rank,
        )
        for rank, (slot, avg_views, avg_engagement) in enumerate(candidates, start=1)
    ]

    logger.debug(
        f"{len(buckets)} occupied slots, {len(results)} ranked "
        f"(min sample {min_sample_size}, tz {timezone})"
    )
    return results
