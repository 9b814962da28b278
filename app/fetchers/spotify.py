"""Spotify track fetcher implementing the MediaFetcherProtocol interface.

Spotify does not serve audio files directly. The fetcher reads the public
track page, takes the title and artist from its meta tags and downloads the
best matching audio through a yt-dlp search, extracting it to mp3.
"""

import asyncio
import re
from pathlib import Path

import aiohttp
from bs4 import BeautifulSoup

from ..exceptions import FetchFailure
from ..models import MediaFileHandle, MediaKind
from ..services.http import create_session
from .base import BaseFetcher

YEAR_RE = re.compile(r"^\d{4}$")
LISTEN_PREFIX_RE = re.compile(r"^Listen to .+? on Spotify\.\s*", re.IGNORECASE)


def parse_track_query(html: str) -> str:
    """Build a search query ("Artist - Title") from a Spotify track page.

    Args:
        html: Track page markup.

    Returns:
        Search query for the audio download.

    Raises:
        FetchFailure: If the page carries no track title.
    """
    soup = BeautifulSoup(html, "lxml")

    og_title = soup.find("meta", property="og:title")
    title = og_title.get("content", "").strip() if og_title else ""
    if not title:
        raise FetchFailure("Spotify page has no og:title")

    artist = ""
    musician = soup.find("meta", attrs={"name": "music:musician_description"})
    if musician and musician.get("content"):
        artist = musician["content"].strip()
    else:
        og_description = soup.find("meta", property="og:description")
        description = og_description.get("content", "") if og_description else ""
        description = LISTEN_PREFIX_RE.sub("", description)
        # "Song · Artist · 2021" style description
        for part in (p.strip(" .") for p in description.split("·")):
            if part and part != title and not YEAR_RE.match(part):
                artist = part
                break

    return f"{artist} - {title}" if artist else title


class SpotifyFetcher(BaseFetcher):
    """Spotify track fetcher.

    Features:
    - Track metadata from the public page (no API credentials needed)
    - Audio search and mp3 extraction through yt-dlp
    """

    media_kind = MediaKind.AUDIO

    def __init__(
        self,
        download_dir: Path,
        audio_format: str,
        audio_codec: str,
        audio_quality: str,
        search_prefix: str,
        timeout: int = 20,
        socket_timeout: int = 30,
    ) -> None:
        super().__init__("spotify", download_dir, socket_timeout)
        self.audio_format = audio_format
        self.audio_codec = audio_codec
        self.audio_quality = audio_quality
        self.search_prefix = search_prefix
        self.timeout = timeout

    async def _fetch(self, url: str) -> MediaFileHandle:
        query = await self._lookup_track(url)
        self.logger.info(f"Searching audio for Spotify track: {query}")
        return await self._download_with_ytdlp(
            f"{self.search_prefix}{query}",
            {
                "format": self.audio_format,
                "postprocessors": [
                    {
                        "key": "FFmpegExtractAudio",
                        "preferredcodec": self.audio_codec,
                        "preferredquality": self.audio_quality,
                    }
                ],
            },
        )

    async def _lookup_track(self, url: str) -> str:
        try:
            async with create_session(self.timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise FetchFailure(f"Spotify page returned HTTP {response.status}")
                    html = await response.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchFailure(f"Spotify page request failed: {e}") from e
        return parse_track_query(html)
