from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from ..errors import NotFoundError
from ..models import ChannelCorpus, ChannelReport
from ..analysis.heatmap import build_heatmap
from ..analysis.optimal_times import analyze_optimal_times
from ..analysis import statistics
from .fetcher import ChannelFetcher
from .resolver import ChannelResolver

logger = logging.getLogger(__name__)


class AnalysisPipeline:
    """Orchestrates one run: channel input -> canonical ID -> corpus -> report.

    ``channel_cache`` is optional; when given, an empty input falls back to
    the last channel analyzed and every successful run updates it.
    """

    def __init__(
        self,
        resolver: ChannelResolver,
        fetcher: ChannelFetcher,
        channel_cache=None,
        timezone: str = "UTC",
        top_n: int = 3,
        min_sample_size: int = 2,
        trend_limit: int = 30,
        top_videos_limit: int = 10,
    ):
        self.resolver = resolver
        self.fetcher = fetcher
        self.channel_cache = channel_cache
        self.timezone = timezone
        self.top_n = top_n
        self.min_sample_size = min_sample_size
        self.trend_limit = trend_limit
        self.top_videos_limit = top_videos_limit

    def resolve(self, channel_input: Optional[str]) -> str:
        """Canonical ID for the input, or for the cached last channel if input is empty."""
        text = (channel_input or "").strip()
        if not text and self.channel_cache is not None:
            text = self.channel_cache.read() or ""
            if text:
                logger.info(f"No channel given, using last channel {text}")
        if not text:
            raise NotFoundError(channel_input or "")
        return self.resolver.resolve(text)

    def analyze(self, channel_input: Optional[str] = None, limit: Optional[int] = None):
        """Run the full flow. Yields progress event dicts for the CLI.

        Events:
            {"event": "resolved", "channel_id": str}
            {"event": "fetched", "channel": str, "videos": int}
            {"event": "complete", "report": ChannelReport}

        Resolver and gateway errors propagate to the caller unchanged.
        """
        channel_id = self.resolve(channel_input)
        yield {"event": "resolved", "channel_id": channel_id}

        corpus = self.fetcher.fetch(channel_id, limit)
        yield {
            "event": "fetched",
            "channel": corpus.channel.name,
            "videos": len(corpus.videos),
        }

        report = self.build_report(corpus)

        if self.channel_cache is not None:
            self.channel_cache.write(channel_id)

        yield {"event": "complete", "report": report}

    def run(self, channel_input: Optional[str] = None, limit: Optional[int] = None) -> ChannelReport:
        report = None
        for event in self.analyze(channel_input, limit):
            if event["event"] == "complete":
                report = event["report"]
        return report

    def build_report(self, corpus: ChannelCorpus) -> ChannelReport:
        """Compute every analysis off the same snapshot, side by side."""
        videos = list(corpus.videos)

        with ThreadPoolExecutor(max_workers=4, thread_name_prefix="analysis") as pool:
            optimal = pool.submit(
                analyze_optimal_times,
                videos,
                self.timezone,
                self.top_n,
                self.min_sample_size,
            )
            heatmap = pool.submit(build_heatmap, videos, self.timezone)
            totals = pool.submit(statistics.channel_totals, videos)
            weekly = pool.submit(statistics.weekly_stats, videos)
            trend = pool.submit(statistics.engagement_trend, videos, self.trend_limit)
            top = pool.submit(statistics.top_videos, videos, self.top_videos_limit)
            content = pool.submit(statistics.content_type_distribution, videos)

        report = ChannelReport(
            channel=corpus.channel,
            video_count=len(videos),
            timezone=self.timezone,
            optimal_times=optimal.result(),
            heatmap=heatmap.result(),
            totals=totals.result(),
            weekly=weekly.result(),
            trend=trend.result(),
            top_videos=top.result(),
            content_types=content.result(),
        )

        if not report.has_enough_data:
            logger.info(
                f"Not enough repeat posting slots in {len(videos)} videos "
                f"to rank times for '{corpus.channel.name}'"
            )
        return report
