"""Day-by-hour view heatmap.

Each cell is the summed views of videos published in that slot, scaled so
the busiest slot is 100. Scaling is against the maximum, so one viral video
pushes every other cell toward 0; that is how the surface is meant to read.
Engagement plays no part here.
"""

from __future__ import annotations

from ..models import HeatmapCell, VideoRecord
from .engagement import round_int
from .time_slots import all_slots, get_zone, slot_for


def build_heatmap(videos: list[VideoRecord], timezone: str = "UTC") -> list[HeatmapCell]:
    """Return all 168 cells, Sunday 0:00 first, zeros included."""
    zone = get_zone(timezone)
    views = {slot: 0 for slot in all_slots()}

    for video in videos:
        views[slot_for(video.published_at, zone)] += video.view_count

    max_views = max(views.values())
    return [
        HeatmapCell(
            day=day,
            hour=hour,
            value=round_int(total / max_views * 100) if max_views > 0 else 0,
        )
        for (day, hour), total in views.items()
    ]
