"""Turns whatever the user typed into a canonical ``UC...`` channel ID.

Rules are tried top to bottom and the first pattern that matches decides
the strategy:

    canonical    UCxxxxxxxxxxxxxxxxxxxxxx        returned as is, no API call
    channel_url  .../channel/UCxxxx...           ID cut out of the URL, no API call
    handle_url   .../@name                       handle lookup
    legacy_url   .../c/name, .../user/name       username lookup, then handle lookup
    handle       @name                           handle lookup

Anything else is tried as a legacy username, then as a handle, then as a
free-text channel search. Searches take the first hit; the gateway returns
all candidates, so a stricter caller could offer a choice instead.
"""

from __future__ import annotations

import re
import logging
from dataclasses import dataclass
from urllib.parse import unquote

from ..errors import NotFoundError
from .gateway import VideoPlatformGateway

logger = logging.getLogger(__name__)

CHANNEL_ID_PATTERN = r"UC[A-Za-z0-9_-]{22}"
CHANNEL_ID_RE = re.compile(rf"^{CHANNEL_ID_PATTERN}$")


@dataclass(frozen=True)
class ResolutionRule:
    name: str
    pattern: re.Pattern
    strategy: str  # "direct", "handle" or "legacy"


RULES = [
    ResolutionRule("canonical", re.compile(rf"^({CHANNEL_ID_PATTERN})$"), "direct"),
    ResolutionRule(
        "channel_url",
        re.compile(rf"(?:^|/)channel/({CHANNEL_ID_PATTERN})(?=$|[/?#])"),
        "direct",
    ),
    ResolutionRule("handle_url", re.compile(r"/@([^/?#\s]+)"), "handle"),
    ResolutionRule("legacy_url", re.compile(r"/(?:c|user)/([^/?#\s]+)"), "legacy"),
    ResolutionRule("handle", re.compile(r"^@([^/?#\s]+)"), "handle"),
]


def is_channel_id(text: str) -> bool:
    return bool(CHANNEL_ID_RE.match((text or "").strip()))


def match_rule(text: str):
    """Return ``(rule, captured value)`` for the first matching rule, or ``(None, None)``."""
    for rule in RULES:
        match = rule.pattern.search(text)
        if match:
            # Browsers copy non-ASCII handles and slugs percent-encoded
            return rule, unquote(match.group(1))
    return None, None


class ChannelResolver:
    """Resolves channel references through a VideoPlatformGateway."""

    def __init__(self, gateway: VideoPlatformGateway):
        self.gateway = gateway
        self._strategies = {
            "direct": lambda value: value,
            "handle": self._by_handle,
            "legacy": self._by_legacy_slug,
        }

    def resolve(self, text: str) -> str:
        """Return the canonical channel ID for ``text``.

        Raises NotFoundError when nothing matches. GatewayError from the
        lookups propagates untouched.
        """
        trimmed = (text or "").strip()
        if not trimmed:
            raise NotFoundError(text or "")

        rule, value = match_rule(trimmed)
        if rule is not None:
            logger.debug(f"'{trimmed}' matched rule {rule.name}")
            channel_id = self._strategies[rule.strategy](value)
        else:
            logger.debug(f"'{trimmed}' matched no rule, trying username/handle/search")
            channel_id = self._by_free_text(trimmed)

        if not channel_id:
            raise NotFoundError(trimmed)

        logger.info(f"Resolved '{trimmed}' to {channel_id}")
        return channel_id

    def _by_handle(self, handle: str):
        return _first_id(self.gateway.search_channels_by_handle(handle))

    def _by_username(self, username: str):
        return _first_id(self.gateway.search_channels_by_username(username))

    def _by_legacy_slug(self, slug: str):
        return self._by_username(slug) or self._by_handle(slug)

    def _by_free_text(self, text: str):
        return (
            self._by_username(text)
            or self._by_handle(text)
            or _first_id(self.gateway.search_channels_by_query(text))
        )


def _first_id(summaries):
    return summaries[0].channel_id if summaries else None
