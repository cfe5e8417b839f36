"""Tests for ranking publish slots by average views."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from posttime_ai.analysis.optimal_times import analyze_optimal_times, bucket_videos

from conftest import make_video

SATURDAY, SUNDAY, FRIDAY = 6, 0, 5


class TestScenario:
    def test_ranks_saturday_then_sunday(self, scenario_videos):
        results = analyze_optimal_times(scenario_videos)
        assert [(r.day_of_week, r.hour) for r in results] == [(SATURDAY, 18), (SUNDAY, 20)]

        saturday, sunday = results
        assert saturday.average_views == 2000
        assert saturday.sample_size == 3
        assert saturday.rank == 1
        assert saturday.day_name == "Saturday"
        assert sunday.average_views == 1000
        assert sunday.sample_size == 2
        assert sunday.rank == 2

    def test_lone_friday_is_dropped(self, scenario_videos):
        results = analyze_optimal_times(scenario_videos)
        assert all(r.day_of_week != FRIDAY for r in results)

    def test_average_engagement(self, scenario_videos):
        saturday = analyze_optimal_times(scenario_videos)[0]
        # Each Saturday video is at 6.0%
        assert saturday.average_engagement == 6.0
        sunday = analyze_optimal_times(scenario_videos)[1]
        # 9.0% and 5.0% -> 7.0
        assert sunday.average_engagement == 7.0


class TestProperties:
    def test_empty_input(self):
        assert analyze_optimal_times([]) == []

    def test_idempotent(self, scenario_videos):
        assert analyze_optimal_times(scenario_videos) == analyze_optimal_times(scenario_videos)

    def test_never_more_than_three(self):
        start = datetime(2024, 1, 7, tzinfo=timezone.utc)  # a Sunday
        videos = []
        for hour in range(6):
            for week in range(3):
                when = start + timedelta(weeks=week, hours=hour)
                videos.append(make_video(f"v{hour}-{week}", when, views=100 * (hour + 1)))
        results = analyze_optimal_times(videos)
        assert len(results) == 3
        assert [r.hour for r in results] == [5, 4, 3]

    def test_no_single_sample_slots(self):
        videos = [make_video(f"v{h}", (2024, 1, 1, h), views=1000 * h) for h in range(24)]
        assert analyze_optimal_times(videos) == []

    def test_fewer_than_three_not_padded(self, scenario_videos):
        assert len(analyze_optimal_times(scenario_videos)) == 2

    def test_ties_keep_discovery_order(self):
        videos = [
            make_video("a1", (2024, 1, 1, 10), views=100),
            make_video("b1", (2024, 1, 2, 11), views=100),
            make_video("a2", (2024, 1, 8, 10), views=100),
            make_video("b2", (2024, 1, 9, 11), views=100),
        ]
        results = analyze_optimal_times(videos)
        assert [(r.day_of_week, r.hour) for r in results] == [(1, 10), (2, 11)]

    def test_configurable_top_n_and_sample_size(self, scenario_videos):
        results = analyze_optimal_times(scenario_videos, top_n=1)
        assert len(results) == 1
        results = analyze_optimal_times(scenario_videos, min_sample_size=1)
        assert results[0].day_of_week == FRIDAY


class TestTimezone:
    def test_bucketing_follows_configured_zone(self):
        # Saturday 18:00 UTC is Sunday 03:00 in Tokyo
        videos = [
            make_video("a", (2024, 6, 1, 18), views=10),
            make_video("b", (2024, 6, 8, 18), views=20),
        ]
        utc = analyze_optimal_times(videos, timezone="UTC")[0]
        tokyo = analyze_optimal_times(videos, timezone="Asia/Tokyo")[0]
        assert (utc.day_of_week, utc.hour) == (SATURDAY, 18)
        assert (tokyo.day_of_week, tokyo.hour) == (SUNDAY, 3)

    def test_naive_timestamps_are_utc(self):
        naive = make_video("n", datetime(2024, 6, 1, 18), views=10)
        aware = make_video("a", (2024, 6, 8, 18), views=30)
        buckets = bucket_videos([naive, aware])
        assert list(buckets) == [(SATURDAY, 18)]
        assert buckets[(SATURDAY, 18)].count == 2
