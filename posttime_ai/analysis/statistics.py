"""Channel-level rollups and the display series built from a video corpus."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Optional

from dateutil import tz

from ..models import VideoRecord
from .engagement import round1, round_int

ONE_WEEK = timedelta(days=7)

# First match wins, so order matters
CONTENT_TYPE_RULES = [
    ("tutorial", re.compile(r"tutorial|how to|guide|explained|解説|使い方", re.IGNORECASE)),
    ("review", re.compile(r"review|unboxing|レビュー", re.IGNORECASE)),
    ("vlog", re.compile(r"vlog|day in|日常", re.IGNORECASE)),
    ("gaming", re.compile(r"game|gaming|gameplay|let'?s play|ゲーム|実況", re.IGNORECASE)),
]
OTHER_CONTENT_TYPE = "other"


def _mean(values: list) -> float:
    return sum(values) / len(values) if values else 0.0


def growth_rate(current: float, previous: float) -> float:
    """Percentage change from ``previous`` to ``current``.

    No prior signal (``previous <= 0``) reads as 0 rather than infinity.
    """
    if previous <= 0:
        return 0.0
    return round1((current - previous) / previous * 100)


def channel_totals(videos: list[VideoRecord]) -> dict:
    """Sums and per-video averages across the whole corpus."""
    return {
        "total_views": sum(v.view_count for v in videos),
        "total_likes": sum(v.like_count for v in videos),
        "total_comments": sum(v.comment_count for v in videos),
        "average_views": round_int(_mean([v.view_count for v in videos])),
        "average_engagement": round1(_mean([v.engagement_rate for v in videos])),
        "video_count": len(videos),
    }


def _aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo else moment.replace(tzinfo=tz.UTC)


def weekly_stats(videos: list[VideoRecord], now: Optional[datetime] = None) -> dict:
    """This week's averages and their change against the week before.

    This week is the 7 days up to ``now``; last week the 7 days before that.
    """
    now = _aware(now or datetime.now(tz.UTC))
    week_start = now - ONE_WEEK
    previous_start = now - 2 * ONE_WEEK

    this_week = [v for v in videos if _aware(v.published_at) >= week_start]
    last_week = [
        v for v in videos if previous_start <= _aware(v.published_at) < week_start
    ]

    average_views = round_int(_mean([v.view_count for v in this_week]))
    average_engagement = round1(_mean([v.engagement_rate for v in this_week]))
    previous_views = _mean([v.view_count for v in last_week])
    previous_engagement = _mean([v.engagement_rate for v in last_week])

    return {
        "average_views": average_views,
        "average_engagement": average_engagement,
        "total_likes": sum(v.like_count for v in this_week),
        "total_comments": sum(v.comment_count for v in this_week),
        "views_growth": growth_rate(average_views, previous_views),
        "engagement_growth": growth_rate(average_engagement, previous_engagement),
        "videos_this_week": len(this_week),
        "videos_last_week": len(last_week),
    }


def engagement_trend(videos: list[VideoRecord], limit: int = 30) -> list[dict]:
    """Latest ``limit`` videos, oldest first, as chart points (views in thousands)."""
    ordered = sorted(videos, key=lambda v: _aware(v.published_at))[-limit:]
    return [
        {
            "date": _aware(v.published_at).date().isoformat(),
            "engagement": v.engagement_rate,
            "views_k": round_int(v.view_count / 1000),
        }
        for v in ordered
    ]


def top_videos(videos: list[VideoRecord], limit: int = 10, title_length: int = 30) -> list[dict]:
    ranked = sorted(videos, key=lambda v: v.view_count, reverse=True)[:limit]
    return [
        {
            "id": v.id,
            "title": v.title if len(v.title) <= title_length else v.title[:title_length] + "...",
            "views": v.view_count,
            "engagement": v.engagement_rate,
        }
        for v in ranked
    ]


def classify_title(title: str) -> str:
    for name, pattern in CONTENT_TYPE_RULES:
        if pattern.search(title or ""):
            return name
    return OTHER_CONTENT_TYPE


def content_type_distribution(videos: list[VideoRecord]) -> list[dict]:
    """Video counts per title-keyword content type; empty types are left out."""
    counts = {name: 0 for name, _ in CONTENT_TYPE_RULES}
    counts[OTHER_CONTENT_TYPE] = 0
    for video in videos:
        counts[classify_title(video.title)] += 1
    return [{"name": name, "value": count} for name, count in counts.items() if count > 0]
