from __future__ import annotations

import re
import logging

import requests
from dateutil import parser as dateparser

from ..errors import GatewayError
from ..models import ChannelMetadata, ChannelSummary, VideoRecord
from ..analysis.engagement import as_count
from ..utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.googleapis.com/youtube/v3"
MAX_PAGE_SIZE = 50  # Data API ceiling for maxResults and ids per videos.list call
SEARCH_CANDIDATES = 5

DURATION_RE = re.compile(r"^PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?$")


def parse_duration(duration: str) -> str:
    """Turn an ISO 8601 duration like ``PT1H2M3S`` into ``1:02:03``."""
    match = DURATION_RE.match(duration or "")
    if not match:
        return "0:00"

    hours, minutes, seconds = (int(g or 0) for g in match.groups())
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


class VideoPlatformGateway:
    """What the resolver and fetcher need from a video platform.

    Implementations raise GatewayError for any failure and return empty lists
    (not errors) when a lookup simply has no match.
    """

    def search_channels_by_handle(self, handle: str) -> list[ChannelSummary]:
        raise NotImplementedError

    def search_channels_by_username(self, username: str) -> list[ChannelSummary]:
        raise NotImplementedError

    def search_channels_by_query(self, text: str) -> list[ChannelSummary]:
        raise NotImplementedError

    def get_channel_metadata(self, channel_id: str) -> ChannelMetadata:
        raise NotImplementedError

    def list_channel_videos(self, channel_id: str, limit: int) -> list[VideoRecord]:
        raise NotImplementedError


class YouTubeGateway(VideoPlatformGateway):
    """YouTube Data API v3 over plain HTTPS with an API key."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 15.0,
        max_retries: int = 3,
        retry_base_delay: float = 2.0,
        session: requests.Session = None,
    ):
        if not api_key:
            raise GatewayError("YOUTUBE_API_KEY is not configured")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json"})

    @retry_with_backoff()
    def _get(self, endpoint: str, params: dict) -> dict:
        """GET one API endpoint and return the decoded JSON body."""
        url = f"{self.base_url}/{endpoint}"
        logger.debug(f"GET {endpoint} {params}")

        try:
            resp = self.session.get(
                url, params={**params, "key": self.api_key}, timeout=self.timeout
            )
        except (requests.ConnectionError, requests.Timeout) as e:
            raise GatewayError(
                f"YouTube API unreachable ({type(e).__name__}): {e}", transient=True
            ) from e
        except requests.RequestException as e:
            raise GatewayError(f"YouTube API request failed: {e}") from e

        if not resp.ok:
            raise GatewayError(
                f"YouTube API error {resp.status_code} on {endpoint}: {self._error_message(resp)}",
                status_code=resp.status_code,
                retry_after=resp.headers.get("retry-after"),
            )

        try:
            return resp.json()
        except ValueError as e:
            raise GatewayError(f"YouTube API returned invalid JSON on {endpoint}") from e

    @staticmethod
    def _error_message(resp) -> str:
        try:
            return resp.json().get("error", {}).get("message") or resp.reason
        except ValueError:
            return resp.reason or "unknown error"

    # ------------------------------------------------------------------
    # Channel lookups
    # ------------------------------------------------------------------

    def search_channels_by_handle(self, handle: str) -> list[ChannelSummary]:
        data = self._get("channels", {"part": "snippet", "forHandle": handle})
        return [self._channel_summary(item["id"], item) for item in data.get("items", [])]

    def search_channels_by_username(self, username: str) -> list[ChannelSummary]:
        data = self._get("channels", {"part": "snippet", "forUsername": username})
        return [self._channel_summary(item["id"], item) for item in data.get("items", [])]

    def search_channels_by_query(self, text: str) -> list[ChannelSummary]:
        data = self._get(
            "search",
            {"part": "snippet", "q": text, "type": "channel", "maxResults": SEARCH_CANDIDATES},
        )
        return [
            self._channel_summary(item["snippet"]["channelId"], item)
            for item in data.get("items", [])
        ]

    @staticmethod
    def _channel_summary(channel_id: str, item: dict) -> ChannelSummary:
        snippet = item.get("snippet", {})
        return ChannelSummary(
            channel_id=channel_id,
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            thumbnail_url=_best_thumbnail(snippet.get("thumbnails", {})),
        )

    def get_channel_metadata(self, channel_id: str) -> ChannelMetadata:
        data = self._get("channels", {"part": "snippet,statistics", "id": channel_id})
        items = data.get("items") or []
        if not items:
            raise GatewayError(f"No channel metadata returned for {channel_id}")

        channel = items[0]
        snippet = channel.get("snippet", {})
        stats = channel.get("statistics", {})
        return ChannelMetadata(
            channel_id=channel["id"],
            name=snippet.get("title", "Unknown"),
            subscriber_count=as_count(stats.get("subscriberCount")),
            total_views=as_count(stats.get("viewCount")),
            video_count=as_count(stats.get("videoCount")),
            description=snippet.get("description", ""),
            custom_url=snippet.get("customUrl", ""),
            thumbnail_url=_best_thumbnail(snippet.get("thumbnails", {})),
        )

    # ------------------------------------------------------------------
    # Videos
    # ------------------------------------------------------------------

    def list_channel_videos(self, channel_id: str, limit: int = 50) -> list[VideoRecord]:
        """Newest ``limit`` uploads with statistics, newest first."""
        video_ids = self._recent_video_ids(channel_id, limit)
        if not video_ids:
            return []

        by_id = {}
        for start in range(0, len(video_ids), MAX_PAGE_SIZE):
            batch = video_ids[start:start + MAX_PAGE_SIZE]
            data = self._get(
                "videos",
                {"part": "snippet,statistics,contentDetails", "id": ",".join(batch)},
            )
            for item in data.get("items", []):
                video = self._video_record(item)
                by_id[video.id] = video

        # videos.list does not promise to keep the requested order
        videos = [by_id[vid] for vid in video_ids if vid in by_id]
        logger.info(f"Fetched {len(videos)} videos for channel {channel_id}")
        return videos

    def _recent_video_ids(self, channel_id: str, limit: int) -> list[str]:
        video_ids: list[str] = []
        page_token = None

        while len(video_ids) < limit:
            params = {
                "part": "id",
                "channelId": channel_id,
                "order": "date",
                "type": "video",
                "maxResults": min(MAX_PAGE_SIZE, limit - len(video_ids)),
            }
            if page_token:
                params["pageToken"] = page_token

            data = self._get("search", params)
            for item in data.get("items", []):
                vid = item.get("id", {}).get("videoId")
                if vid and vid not in video_ids:
                    video_ids.append(vid)

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return video_ids[:limit]

    @staticmethod
    def _video_record(item: dict) -> VideoRecord:
        try:
            video_id = item["id"]
            snippet = item["snippet"]
            published_at = dateparser.isoparse(snippet["publishedAt"])
        except (KeyError, ValueError) as e:
            raise GatewayError(f"Malformed video payload: {e}") from e

        stats = item.get("statistics", {})
        return VideoRecord(
            id=video_id,
            published_at=published_at,
            view_count=as_count(stats.get("viewCount")),
            like_count=as_count(stats.get("likeCount")),
            comment_count=as_count(stats.get("commentCount")),
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            thumbnail_url=_best_thumbnail(snippet.get("thumbnails", {})),
            duration=parse_duration(item.get("contentDetails", {}).get("duration", "")),
            tags=tuple(snippet.get("tags", [])),
        )


def _best_thumbnail(thumbnails: dict):
    for size in ("high", "medium", "default"):
        url = thumbnails.get(size, {}).get("url")
        if url:
            return url
    return None
