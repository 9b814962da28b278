"""Instagram Reel fetcher implementing the MediaFetcherProtocol interface."""

from pathlib import Path

from ..models import MediaFileHandle, MediaKind
from .base import BaseFetcher


class ReelFetcher(BaseFetcher):
    """Instagram Reel video fetcher backed by yt-dlp."""

    media_kind = MediaKind.VIDEO

    def __init__(self, download_dir: Path, video_format: str, socket_timeout: int = 30) -> None:
        super().__init__("reel", download_dir, socket_timeout)
        self.video_format = video_format

    async def _fetch(self, url: str) -> MediaFileHandle:
        return await self._download_with_ytdlp(
            url, {"format": self.video_format, "merge_output_format": "mp4"}
        )
