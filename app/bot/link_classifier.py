"""Link detection and classification for media source links.

Scans message text with one pattern per supported link category and picks
the single link the dispatcher acts on. All four patterns are always
evaluated; which match wins is decided by an explicit precedence constant.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final

from ..models import ClassifiedLink, LinkKind, ReelLink, SpotifyLink, TikTokLink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkPattern:
    """One recognisable link category."""

    name: str
    kind: LinkKind
    pattern: re.Pattern[str]
    is_short: bool = False

    def build(self, url: str) -> ClassifiedLink:
        if self.kind is LinkKind.TIKTOK:
            return TikTokLink(url=url, is_short=self.is_short)
        if self.kind is LinkKind.REEL:
            return ReelLink(url=url)
        return SpotifyLink(url=url)


TIKTOK_SHORT = LinkPattern(
    "tiktok_short", LinkKind.TIKTOK, re.compile(r"https://vm\.tiktok\.com/[A-Za-z0-9]+"), True
)
TIKTOK_LONG = LinkPattern(
    "tiktok_long", LinkKind.TIKTOK, re.compile(r"https://www\.tiktok\.com/@[^/]+/video/[0-9]+")
)
INSTAGRAM_REEL = LinkPattern(
    "instagram_reel", LinkKind.REEL, re.compile(r"https://www\.instagram\.com/reel/[A-Za-z0-9\-_]+")
)
SPOTIFY_TRACK = LinkPattern(
    "spotify_track",
    LinkKind.SPOTIFY,
    re.compile(r"https://open\.spotify\.com/track/[A-Za-z0-9]+(?:\?si=[A-Za-z0-9]+)?"),
)

# Order in which categories are checked against the text
CHECK_ORDER: Final[tuple[LinkPattern, ...]] = (
    TIKTOK_SHORT,
    TIKTOK_LONG,
    INSTAGRAM_REEL,
    SPOTIFY_TRACK,
)

# Historical precedence: the category checked last overrides earlier matches
LAST_MATCH_WINS_PRIORITY: Final[tuple[LinkPattern, ...]] = tuple(reversed(CHECK_ORDER))


class LinkClassifier:
    """Finds the one link in a message that should be acted upon."""

    def __init__(self, first_match_wins: bool = False) -> None:
        """Initialize classifier.

        Args:
            first_match_wins: Prefer the earliest category in CHECK_ORDER
                instead of the historical last-match-wins precedence.
        """
        self.first_match_wins = first_match_wins
        self.priority = CHECK_ORDER if first_match_wins else LAST_MATCH_WINS_PRIORITY

    def classify_all(self, text: str | None) -> list[ClassifiedLink]:
        """Return the first link of every matching category, in check order."""
        if not text:
            return []

        links: list[ClassifiedLink] = []
        for link_pattern in CHECK_ORDER:
            match = link_pattern.pattern.search(text)
            if match:
                links.append(link_pattern.build(match.group()))
        return links

    def classify(self, text: str | None) -> ClassifiedLink | None:
        """Pick the link to act on.

        Args:
            text: Raw message text.

        Returns:
            The highest priority link found, None if the text has none.
        """
        if not text:
            return None

        for link_pattern in self.priority:
            match = link_pattern.pattern.search(text)
            if match:
                link = link_pattern.build(match.group())
                logger.debug("Classified %s as %s", link.url, link_pattern.name)
                return link

        return None
