"""Media fetchers package.

Contains platform-specific fetchers that turn a recognised link into a
locally staged media file. All fetchers share one interface:

- MediaFetcherProtocol: fetch(url) and cleanup(handle)
- TikTokFetcher: TikTok videos, with video id extraction
- ReelFetcher: Instagram Reel videos
- SpotifyFetcher: Spotify tracks as mp3 audio
"""

from .base import BaseFetcher, MediaFetcherProtocol
from .reels import ReelFetcher
from .spotify import SpotifyFetcher
from .tiktok import TikTokFetcher

__all__ = [
    "BaseFetcher",
    "MediaFetcherProtocol",
    "ReelFetcher",
    "SpotifyFetcher",
    "TikTokFetcher",
]
