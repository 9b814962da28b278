"""Base fetcher protocol and abstractions for media downloads.

Defines the unified interface that all media fetchers must implement so the
dispatcher can be exercised with stub fetchers, plus the shared yt-dlp
download routine the concrete fetchers build on.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Protocol

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from ..exceptions import FetchFailure
from ..models import MediaFileHandle, MediaKind
from ..services.staging import (
    ensure_staging_dir,
    remove_partial_downloads,
    remove_staged_file,
    unique_stem,
)

logger = logging.getLogger(__name__)


class MediaFetcherProtocol(Protocol):
    """Protocol defining the interface for all media fetchers.

    Methods:
        fetch: Download the media behind a link into the staging area.
        cleanup: Delete a file previously returned by fetch.
        get_platform_name: Get platform identifier.
    """

    async def fetch(self, url: str) -> MediaFileHandle:
        """Download media for a link.

        Args:
            url: Link to the media page.

        Returns:
            Handle of the staged file.

        Raises:
            FetchFailure: If nothing could be downloaded.
        """
        ...

    async def cleanup(self, handle: MediaFileHandle) -> None:
        """Delete a staged file.

        Args:
            handle: Handle returned by fetch.

        Raises:
            CleanupError: If the file could not be deleted.
        """
        ...

    def get_platform_name(self) -> str:
        """Get the platform name identifier."""
        ...


class BaseFetcher:
    """Base class providing common functionality for all fetchers.

    Subclasses implement ``_fetch``; ``fetch`` wraps it with logging.
    """

    media_kind: MediaKind = MediaKind.VIDEO

    def __init__(
        self,
        platform_name: str,
        download_dir: Path,
        socket_timeout: int = 30,
    ):
        """Initialize base fetcher.

        Args:
            platform_name: Name of the platform (e.g., 'tiktok', 'reel').
            download_dir: Staging directory for downloaded files.
            socket_timeout: Socket timeout handed to yt-dlp.
        """
        self.platform_name = platform_name
        self.download_dir = Path(download_dir)
        self.socket_timeout = socket_timeout
        self.logger = logging.getLogger(f"{__name__}.{platform_name}")

    def get_platform_name(self) -> str:
        """Get the platform name identifier."""
        return self.platform_name

    async def fetch(self, url: str) -> MediaFileHandle:
        self._log_fetch_start(url)
        try:
            handle = await self._fetch(url)
        except FetchFailure as e:
            self._log_fetch_error(url, e)
            raise
        self._log_fetch_success(url, handle)
        return handle

    async def _fetch(self, url: str) -> MediaFileHandle:
        raise NotImplementedError

    async def cleanup(self, handle: MediaFileHandle) -> None:
        remove_staged_file(handle)
        self.logger.info(f"Deleted {self.platform_name} file: {handle.name}")

    async def _download_with_ytdlp(
        self, target: str, options: dict[str, Any] | None = None
    ) -> MediaFileHandle:
        """Download a single media item with yt-dlp in a worker thread.

        Args:
            target: URL or yt-dlp search expression.
            options: Extra yt-dlp options merged over the defaults.

        Returns:
            Handle of the downloaded file.

        Raises:
            FetchFailure: If yt-dlp fails or produces no file.
        """
        try:
            path = await asyncio.to_thread(self._run_ytdlp, target, options or {})
        except DownloadError as e:
            raise FetchFailure(f"yt-dlp could not download {target}: {e}") from e
        return MediaFileHandle(path=path, kind=self.media_kind)

    def _run_ytdlp(self, target: str, options: dict[str, Any]) -> Path:
        ensure_staging_dir(self.download_dir)
        stem = unique_stem(self.platform_name)
        ydl_opts: dict[str, Any] = {
            "outtmpl": str(self.download_dir / f"{stem}.%(ext)s"),
            "quiet": True,
            "no_warnings": True,
            "noplaylist": True,
            "socket_timeout": self.socket_timeout,
        }
        ydl_opts.update(options)

        try:
            return self._download_to_stem(target, ydl_opts)
        except (DownloadError, FetchFailure):
            remove_partial_downloads(self.download_dir, stem)
            raise

    def _download_to_stem(self, target: str, ydl_opts: dict[str, Any]) -> Path:
        with YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(target, download=True)
            if not info:
                raise FetchFailure(f"yt-dlp returned no info for {target}")

            # Search results come back as a playlist with a single entry
            if "entries" in info:
                entries = [entry for entry in info["entries"] or [] if entry]
                if not entries:
                    raise FetchFailure(f"No results for {target}")
                info = entries[0]

            downloads = info.get("requested_downloads") or []
            if downloads and downloads[0].get("filepath"):
                path = Path(downloads[0]["filepath"])
            else:
                path = Path(ydl.prepare_filename(info))

        if not path.exists():
            raise FetchFailure(f"Downloaded file is missing: {path}")
        return path

    def _log_fetch_start(self, url: str) -> None:
        self.logger.info(f"Starting {self.platform_name} download: {url}")

    def _log_fetch_success(self, url: str, handle: MediaFileHandle) -> None:
        self.logger.info(f"Downloaded {self.platform_name} media from {url} to {handle.name}")

    def _log_fetch_error(self, url: str, error: Exception) -> None:
        self.logger.error(f"Failed to download {self.platform_name} media ({url}): {error}")
