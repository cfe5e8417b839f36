from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


class LastChannelCache:
    """Remembers the last channel that was analyzed, in a small JSON file.

    The pipeline only calls ``read()`` and ``write()``; pass any object with
    those two methods to keep the value somewhere else.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def read(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Ignoring unreadable channel cache {self.path}: {e}")
            return None
        return data.get("channel_id") or None

    def write(self, channel_id: str):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "channel_id": channel_id,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        logger.debug(f"Saved last channel {channel_id} to {self.path}")

    def clear(self):
        if self.path.exists():
            self.path.unlink()
