from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional

from .analysis.engagement import engagement_rate

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


@dataclass(frozen=True)
class VideoRecord:
    id: str
    published_at: datetime
    view_count: int = 0
    like_count: int = 0
    comment_count: int = 0
    title: str = ""
    description: str = ""
    thumbnail_url: Optional[str] = None
    duration: str = "0:00"
    tags: tuple = ()

    @property
    def engagement_rate(self) -> float:
        return engagement_rate(self.like_count, self.comment_count, self.view_count)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["published_at"] = self.published_at.isoformat()
        data["tags"] = list(self.tags)
        data["engagement_rate"] = self.engagement_rate
        return data


@dataclass(frozen=True)
class ChannelSummary:
    channel_id: str
    title: str = ""
    description: str = ""
    thumbnail_url: Optional[str] = None


@dataclass(frozen=True)
class ChannelMetadata:
    channel_id: str
    name: str
    subscriber_count: int = 0
    total_views: int = 0
    video_count: int = 0
    description: str = ""
    custom_url: str = ""
    thumbnail_url: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ChannelCorpus:
    """Snapshot of one channel fetch. Every analysis runs on the same instance."""

    channel: ChannelMetadata
    videos: tuple
    fetched_at: datetime


@dataclass
class TimeSlot:
    day_of_week: int
    hour: int
    sum_views: int = 0
    sum_engagement: float = 0.0
    count: int = 0

    def add(self, video: VideoRecord):
        self.sum_views += video.view_count
        self.sum_engagement += video.engagement_rate
        self.count += 1


@dataclass(frozen=True)
class OptimalSlot:
    day_of_week: int
    hour: int
    average_views: int
    average_engagement: float
    sample_size: int
    rank: int = 0

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def to_dict(self) -> dict:
        data = asdict(self)
        data["day_name"] = self.day_name
        return data


@dataclass(frozen=True)
class HeatmapCell:
    day: int
    hour: int
    value: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ChannelReport:
    """Everything one analysis run produces for a channel."""

    channel: ChannelMetadata
    video_count: int
    timezone: str
    optimal_times: list = field(default_factory=list)
    heatmap: list = field(default_factory=list)
    totals: dict = field(default_factory=dict)
    weekly: dict = field(default_factory=dict)
    trend: list = field(default_factory=list)
    top_videos: list = field(default_factory=list)
    content_types: list = field(default_factory=list)

    @property
    def has_enough_data(self) -> bool:
        return bool(self.optimal_times)

    def to_dict(self) -> dict:
        return {
            "channel": self.channel.to_dict(),
            "video_count": self.video_count,
            "timezone": self.timezone,
            "optimal_times": [slot.to_dict() for slot in self.optimal_times],
            "heatmap": [cell.to_dict() for cell in self.heatmap],
            "totals": self.totals,
            "weekly": self.weekly,
            "trend": self.trend,
            "top_videos": self.top_videos,
            "content_types": self.content_types,
        }
