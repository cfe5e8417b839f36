import os
import logging
from pathlib import Path

import yaml
from dateutil import tz
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_API_BASE = "https://www.googleapis.com/youtube/v3"


def load_config() -> dict:
    """Load configuration from .env and config.yaml. Env vars take precedence."""
    load_dotenv(PROJECT_ROOT / ".env")

    config_path = Path(os.getenv("POSTTIME_CONFIG", PROJECT_ROOT / "config.yaml"))
    if config_path.exists():
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
    else:
        config = {}

    # Last-used channel lives next to the project unless overridden
    cache_rel = config.get("cache", {}).get("path", "data/last_channel.json")
    config["cache_path"] = str(PROJECT_ROOT / cache_rel)

    log_rel = config.get("logging", {}).get("file")
    if log_rel:
        config["log_file"] = str(PROJECT_ROOT / log_rel)
    else:
        config["log_file"] = None

    config["log_level"] = os.getenv(
        "POSTTIME_LOG_LEVEL", config.get("logging", {}).get("level", "INFO")
    )

    return config


def get_youtube_config(config: dict) -> dict:
    """Extract YouTube Data API settings with defaults."""
    yt = config.get("youtube", {})
    return {
        "api_key": os.getenv("YOUTUBE_API_KEY") or yt.get("api_key", ""),
        "base_url": yt.get("base_url", DEFAULT_API_BASE),
        "timeout": float(yt.get("timeout", 15.0)),
        "video_limit": int(yt.get("video_limit", 50)),
        "max_retries": int(yt.get("max_retries", 3)),
        "retry_base_delay": float(yt.get("retry_base_delay", 2.0)),
    }


def get_analysis_config(config: dict) -> dict:
    """Extract posting-time analysis settings with defaults.

    The timezone name is validated here so a typo fails at startup rather
    than silently bucketing videos in the wrong zone.
    """
    analysis = config.get("analysis", {})
    timezone = analysis.get("timezone", "UTC")
    if tz.gettz(timezone) is None:
        raise ValueError(f"Unknown analysis timezone: {timezone}")

    return {
        "timezone": timezone,
        "top_n": int(analysis.get("top_n", 3)),
        "min_sample_size": int(analysis.get("min_sample_size", 2)),
        "trend_limit": int(analysis.get("trend_limit", 30)),
        "top_videos_limit": int(analysis.get("top_videos_limit", 10)),
    }
