"""Expansion of vm.tiktok.com short links to canonical video URLs.

Short links answer with a redirect chain ending at
https://www.tiktok.com/@user/video/<id>?<tracking params>. The resolver
follows the chain and strips the query string.
"""

from __future__ import annotations

import asyncio
import logging
from urllib.parse import urlparse, urlunparse

import aiohttp

from ..exceptions import ResolutionError
from ..services.http import create_session

logger = logging.getLogger(__name__)

_TIKTOK_DOMAIN = "tiktok.com"


class LinkResolver:
    """Resolves short TikTok links by following their redirects."""

    def __init__(self, timeout: int = 20) -> None:
        self.timeout = timeout

    async def expand(self, short_url: str) -> str:
        """Expand a short link.

        Args:
            short_url: vm.tiktok.com link.

        Returns:
            Canonical TikTok URL without query string.

        Raises:
            ResolutionError: On network failure, error status or a redirect
                that leaves TikTok.
        """
        try:
            async with create_session(self.timeout) as session:
                async with session.get(short_url, allow_redirects=True) as response:
                    if response.status >= 400:
                        raise ResolutionError(
                            f"Short link {short_url} answered HTTP {response.status}"
                        )
                    final_url = str(response.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ResolutionError(f"Failed to resolve short URL {short_url}: {e}") from e

        expanded = _strip_query(final_url)
        if _TIKTOK_DOMAIN not in urlparse(expanded).netloc.lower():
            raise ResolutionError(f"Short link {short_url} redirected off TikTok: {expanded}")

        logger.debug("Resolved short link %s → %s", short_url, expanded)
        return expanded


def _strip_query(url: str) -> str:
    parsed = urlparse(url)
    return urlunparse(parsed._replace(query="", fragment=""))
