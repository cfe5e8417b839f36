from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from datetime import datetime

from dateutil import tz

from ..errors import GatewayError
from ..models import ChannelCorpus
from .gateway import VideoPlatformGateway

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_LIMIT = 50


class ChannelFetcher:
    """Fetches a channel's metadata and recent videos as one snapshot.

    Both calls run side by side and must both succeed within ``timeout``
    seconds; otherwise GatewayError is raised and nothing is returned.
    """

    def __init__(
        self,
        gateway: VideoPlatformGateway,
        video_limit: int = DEFAULT_VIDEO_LIMIT,
        timeout: float = 60.0,
    ):
        self.gateway = gateway
        self.video_limit = video_limit
        self.timeout = timeout

    def fetch(self, channel_id: str, limit: int = None) -> ChannelCorpus:
        if limit is None:
            limit = self.video_limit
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="fetch")
        try:
            metadata_future = executor.submit(self.gateway.get_channel_metadata, channel_id)
            videos_future = executor.submit(
                self.gateway.list_channel_videos, channel_id, limit
            )
            done, pending = wait(
                [metadata_future, videos_future],
                timeout=self.timeout,
                return_when=FIRST_EXCEPTION,
            )
            # A failure in either call wins over a timeout in the other
            for future in done:
                if future.exception() is not None:
                    raise future.exception()
            if pending:
                raise GatewayError(
                    f"Timed out after {self.timeout:.0f}s fetching channel {channel_id}",
                    transient=True,
                )
            channel = metadata_future.result()
            videos = videos_future.result()
        finally:
            # Abandon whatever is still queued; in-flight requests end on their own timeout
            executor.shutdown(wait=False, cancel_futures=True)

        logger.info(f"Fetched '{channel.name}': {len(videos)} videos (limit {limit})")
        return ChannelCorpus(
            channel=channel,
            videos=tuple(videos),
            fetched_at=datetime.now(tz.UTC),
        )
