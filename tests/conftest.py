"""Shared test fixtures for PostTime-AI tests."""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from posttime_ai.ingestion.gateway import VideoPlatformGateway
from posttime_ai.models import ChannelMetadata, ChannelSummary, VideoRecord

CHANNEL_ID = "UCabcdefghijklmnopqrstuv"


def make_video(vid, when, views=0, likes=0, comments=0, title=""):
    """Build a VideoRecord; ``when`` is a (y, m, d, h) tuple in UTC or a datetime."""
    if not isinstance(when, datetime):
        when = datetime(*when, tzinfo=timezone.utc)
    return VideoRecord(
        id=vid,
        published_at=when,
        view_count=views,
        like_count=likes,
        comment_count=comments,
        title=title or f"Video {vid}",
    )


class FakeGateway(VideoPlatformGateway):
    """In-memory gateway that records every call it receives."""

    def __init__(self, handles=None, usernames=None, queries=None, videos=None, metadata=None):
        self.handles = handles or {}
        self.usernames = usernames or {}
        self.queries = queries or {}
        self.videos = videos or []
        self.metadata = metadata
        self.calls = []

    def _lookup(self, table, key):
        return [ChannelSummary(channel_id=cid, title=key) for cid in table.get(key, [])]

    def search_channels_by_handle(self, handle):
        self.calls.append(("handle", handle))
        return self._lookup(self.handles, handle)

    def search_channels_by_username(self, username):
        self.calls.append(("username", username))
        return self._lookup(self.usernames, username)

    def search_channels_by_query(self, text):
        self.calls.append(("query", text))
        return self._lookup(self.queries, text)

    def get_channel_metadata(self, channel_id):
        self.calls.append(("metadata", channel_id))
        return self.metadata or ChannelMetadata(
            channel_id=channel_id,
            name="Test Creator",
            subscriber_count=12000,
            total_views=3400000,
            video_count=len(self.videos),
        )

    def list_channel_videos(self, channel_id, limit):
        self.calls.append(("videos", channel_id, limit))
        return self.videos[:limit]


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def scenario_videos():
    """Three Saturday 18:00 uploads, two Sunday 20:00 uploads, one lone Friday 09:00."""
    return [
        make_video("sat1", (2024, 6, 1, 18), views=1000, likes=50, comments=10),
        make_video("sat2", (2024, 6, 8, 18), views=2000, likes=100, comments=20),
        make_video("sat3", (2024, 6, 15, 18), views=3000, likes=150, comments=30),
        make_video("sun1", (2024, 6, 2, 20), views=500, likes=40, comments=5),
        make_video("sun2", (2024, 6, 9, 20), views=1500, likes=60, comments=15),
        make_video("fri1", (2024, 5, 31, 9), views=90000, likes=900, comments=90),
    ]
