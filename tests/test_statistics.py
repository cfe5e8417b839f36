"""Tests for channel rollups, weekly growth and display series."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from posttime_ai.analysis.statistics import (
    channel_totals,
    classify_title,
    content_type_distribution,
    engagement_trend,
    growth_rate,
    top_videos,
    weekly_stats,
)

from conftest import make_video

NOW = datetime(2024, 6, 20, 12, tzinfo=timezone.utc)


def _days_ago(days, **kwargs):
    return make_video(kwargs.pop("vid", f"d{days}"), NOW - timedelta(days=days), **kwargs)


class TestGrowthRate:
    def test_positive_growth(self):
        assert growth_rate(150, 100) == 50.0

    def test_negative_growth(self):
        assert growth_rate(75, 100) == -25.0

    def test_zero_previous_is_zero(self):
        assert growth_rate(1000, 0) == 0.0

    def test_negative_previous_is_zero(self):
        assert growth_rate(10, -5) == 0.0


class TestChannelTotals:
    def test_totals(self, scenario_videos):
        totals = channel_totals(scenario_videos)
        assert totals["total_views"] == 98000
        assert totals["total_likes"] == 1300
        assert totals["total_comments"] == 170
        assert totals["video_count"] == 6
        assert totals["average_views"] == 16333

    def test_average_engagement_is_mean_of_rates(self):
        videos = [
            make_video("a", (2024, 1, 1, 0), views=100, likes=10),   # 10.0
            make_video("b", (2024, 1, 2, 0), views=1000, likes=20),  # 2.0
        ]
        assert channel_totals(videos)["average_engagement"] == 6.0

    def test_empty(self):
        totals = channel_totals([])
        assert totals["total_views"] == 0
        assert totals["average_views"] == 0
        assert totals["average_engagement"] == 0.0


class TestWeeklyStats:
    def test_week_over_week(self):
        videos = [
            _days_ago(1, views=3000, likes=300),    # this week, 10.0%
            _days_ago(3, views=1000, likes=100),    # this week, 10.0%
            _days_ago(9, views=1000, likes=50),     # last week, 5.0%
            _days_ago(30, views=999999),            # outside both windows
        ]
        stats = weekly_stats(videos, now=NOW)
        assert stats["average_views"] == 2000
        assert stats["average_engagement"] == 10.0
        assert stats["total_likes"] == 400
        assert stats["views_growth"] == 100.0
        assert stats["engagement_growth"] == 100.0
        assert stats["videos_this_week"] == 2
        assert stats["videos_last_week"] == 1

    def test_no_previous_week_means_no_growth(self):
        stats = weekly_stats([_days_ago(2, views=5000, likes=10)], now=NOW)
        assert stats["views_growth"] == 0.0
        assert stats["engagement_growth"] == 0.0

    def test_empty_corpus(self):
        stats = weekly_stats([], now=NOW)
        assert stats["average_views"] == 0
        assert stats["views_growth"] == 0.0


class TestEngagementTrend:
    def test_oldest_first_and_limited(self):
        videos = [_days_ago(d, views=1000 * d) for d in range(1, 6)]
        trend = engagement_trend(videos, limit=3)
        assert len(trend) == 3
        assert [p["views_k"] for p in trend] == [3, 2, 1]
        assert trend[-1]["date"] == "2024-06-19"

    def test_views_in_thousands_rounded(self):
        trend = engagement_trend([_days_ago(1, views=1500, likes=15)])
        assert trend[0]["views_k"] == 2
        assert trend[0]["engagement"] == 1.0


class TestTopVideos:
    def test_sorted_by_views_and_truncated(self):
        videos = [
            make_video("a", (2024, 1, 1, 0), views=10, title="short"),
            make_video("b", (2024, 1, 1, 0), views=30, title="x" * 40),
            make_video("c", (2024, 1, 1, 0), views=20, title="middle"),
        ]
        top = top_videos(videos, limit=2)
        assert [v["id"] for v in top] == ["b", "c"]
        assert top[0]["title"] == "x" * 30 + "..."
        assert top[1]["title"] == "middle"


class TestContentTypes:
    def test_classify_title(self):
        assert classify_title("Python Tutorial for beginners") == "tutorial"
        assert classify_title("iPhone 15 REVIEW") == "review"
        assert classify_title("My weekend vlog") == "vlog"
        assert classify_title("Elden Ring gameplay part 3") == "gaming"
        assert classify_title("Random thoughts") == "other"

    def test_first_rule_wins(self):
        assert classify_title("Game review: how to win") == "tutorial"

    def test_distribution_omits_empty_types(self):
        videos = [
            make_video("a", (2024, 1, 1, 0), title="Tutorial one"),
            make_video("b", (2024, 1, 1, 0), title="Tutorial two"),
            make_video("c", (2024, 1, 1, 0), title="Just chatting"),
        ]
        assert content_type_distribution(videos) == [
            {"name": "tutorial", "value": 2},
            {"name": "other", "value": 1},
        ]
