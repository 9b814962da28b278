"""TikTok fetcher implementing the MediaFetcherProtocol interface.

Validates canonical TikTok video links by extracting the numeric video id
and downloads the video with yt-dlp.
"""

import re
from pathlib import Path

from ..exceptions import ExtractionError
from ..models import MediaFileHandle, MediaKind
from .base import BaseFetcher

VIDEO_ID_RE = re.compile(r"tiktok\.com/@[^/]+/video/(\d+)")


class TikTokFetcher(BaseFetcher):
    """TikTok video fetcher.

    Features:
    - Video id extraction used as a validity check before downloading
    - mp4 download through yt-dlp
    """

    media_kind = MediaKind.VIDEO

    def __init__(self, download_dir: Path, video_format: str, socket_timeout: int = 30) -> None:
        super().__init__("tiktok", download_dir, socket_timeout)
        self.video_format = video_format

    def extract_video_id(self, url: str) -> str:
        """Extract the numeric video id from a canonical TikTok URL.

        Args:
            url: TikTok link, expected in www.tiktok.com/@user/video/<id> form.

        Returns:
            Video id as a string of digits.

        Raises:
            ExtractionError: If the link carries no video id.
        """
        match = VIDEO_ID_RE.search(url)
        if not match:
            raise ExtractionError(f"No video id in TikTok link: {url}")
        return match.group(1)

    async def _fetch(self, url: str) -> MediaFileHandle:
        return await self._download_with_ytdlp(
            url, {"format": self.video_format, "merge_output_format": "mp4"}
        )
