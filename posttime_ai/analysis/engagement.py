"""Engagement rate and the rounding rules shared by every analysis.

All engagement numbers in the project come from ``engagement_rate`` so the
per-video figure, the trend series and the slot averages never disagree.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero on the exact binary value of ``value``.

    Python's ``round`` uses banker's rounding (``round(2.5) == 2``); the
    dashboard figures round 2.5 to 3.
    """
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def round1(value: float) -> float:
    return round_half_up(value, 1)


def round_int(value: float) -> int:
    return int(round_half_up(value, 0))


def as_count(value) -> int:
    """Coerce an API counter to a non-negative int; missing or junk becomes 0."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(count, 0)


def engagement_rate(likes, comments, views) -> float:
    """(likes + comments) / views as a percentage with one decimal.

    Zero views yields 0.0 whatever the other counters say. The result is not
    capped: a video with more reactions than views scores above 100.
    """
    views = as_count(views)
    if views <= 0:
        return 0.0
    return round1((as_count(likes) + as_count(comments)) / views * 100)
