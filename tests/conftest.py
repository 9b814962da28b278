"""Global test configuration and fixtures.

Provides shared fixtures for all test levels: environment setup, a
recording fake gateway, staged file factories and a dispatcher wired with
stubbed fetchers. No test touches the network, yt-dlp or ffmpeg.
"""

import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

# Test constants
TEST_BOT_TOKEN = os.getenv("TEST_BOT_TOKEN", "123456:test_bot_token_placeholder")
TEST_BOT_USERNAME = "test_sender_bot"
TEST_CHAT_ID = 4242

# app.config builds its global instance at import time
os.environ.setdefault("BOT_TOKEN", TEST_BOT_TOKEN)
os.environ.setdefault("BOT_USERNAME", TEST_BOT_USERNAME)

from PIL import Image  # noqa: E402

from app.bot.dispatcher import MediaDispatcher  # noqa: E402
from app.bot.link_classifier import LinkClassifier  # noqa: E402
from app.exceptions import GatewaySendError  # noqa: E402
from app.fetchers import ReelFetcher, SpotifyFetcher, TikTokFetcher  # noqa: E402
from app.models import MediaFileHandle, MediaKind  # noqa: E402
from app.services.image_converter import ImageToAnimationConverter  # noqa: E402


class FakeGateway:
    """MessageGateway that records every outbound call."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, int, object]] = []
        self.downloaded: list[str] = []
        self.image: Image.Image | None = Image.new("RGB", (4, 4), "red")
        self.fail_sends = False
        self.files_present_at_send: list[bool] = []

    def _record(self, kind: str, chat_id: int, payload: object) -> None:
        if isinstance(payload, MediaFileHandle):
            self.files_present_at_send.append(payload.path.exists())
        self.sent.append((kind, chat_id, payload))
        if self.fail_sends:
            raise GatewaySendError(f"{kind} delivery failed")

    async def send_text(self, chat_id: int, text: str) -> None:
        self._record("text", chat_id, text)

    async def send_video(self, chat_id: int, handle: MediaFileHandle) -> None:
        self._record("video", chat_id, handle)

    async def send_audio(self, chat_id: int, handle: MediaFileHandle) -> None:
        self._record("audio", chat_id, handle)

    async def send_animation(self, chat_id: int, handle: MediaFileHandle) -> None:
        self._record("animation", chat_id, handle)

    async def download_image(self, file_id: str) -> Image.Image | None:
        self.downloaded.append(file_id)
        return self.image

    @property
    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.sent]


@pytest.fixture(autouse=True)
def test_environment(monkeypatch):
    """Setup test environment variables for all tests."""
    monkeypatch.setenv("BOT_TOKEN", TEST_BOT_TOKEN)
    monkeypatch.setenv("BOT_USERNAME", TEST_BOT_USERNAME)
    monkeypatch.delenv("LINK_FIRST_MATCH_WINS", raising=False)
    monkeypatch.delenv("DOWNLOAD_DIR", raising=False)


@pytest.fixture
def staged_file(tmp_path: Path):
    """Factory creating a real file in the staging dir and its handle."""

    def _make(name: str, kind: MediaKind = MediaKind.VIDEO) -> MediaFileHandle:
        path = tmp_path / name
        path.write_bytes(b"media")
        return MediaFileHandle(path=path, kind=kind)

    return _make


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def bot_parts(tmp_path: Path, fake_gateway: FakeGateway, staged_file):
    """Dispatcher collaborators with downloads stubbed out.

    Fetchers and the converter are real objects so that cleanup really
    deletes the staged files; only the network/encoding steps are mocked.
    """
    tiktok = TikTokFetcher(tmp_path, "mp4")
    reel = ReelFetcher(tmp_path, "mp4")
    spotify = SpotifyFetcher(tmp_path, "bestaudio", "mp3", "192", "ytsearch1:")
    converter = ImageToAnimationConverter(tmp_path)

    tiktok._fetch = AsyncMock(return_value=staged_file("tiktok_1.mp4"))
    reel._fetch = AsyncMock(return_value=staged_file("reel_1.mp4"))
    spotify._fetch = AsyncMock(return_value=staged_file("spotify_1.mp3", MediaKind.AUDIO))
    converter.convert = AsyncMock(return_value=staged_file("gif_1.mp4", MediaKind.ANIMATION))

    resolver = MagicMock()
    resolver.expand = AsyncMock(return_value="https://www.tiktok.com/@someone/video/7300000000000000001")

    return SimpleNamespace(
        gateway=fake_gateway,
        classifier=LinkClassifier(),
        resolver=resolver,
        tiktok=tiktok,
        reel=reel,
        spotify=spotify,
        converter=converter,
    )


@pytest.fixture
def dispatcher(bot_parts) -> MediaDispatcher:
    return MediaDispatcher(
        gateway=bot_parts.gateway,
        classifier=bot_parts.classifier,
        resolver=bot_parts.resolver,
        tiktok_fetcher=bot_parts.tiktok,
        reel_fetcher=bot_parts.reel,
        spotify_fetcher=bot_parts.spotify,
        converter=bot_parts.converter,
    )


@pytest.fixture
def test_urls():
    """Collection of sample links per category."""
    return {
        "tiktok_short": "https://vm.tiktok.com/ZMabCd12",
        "tiktok_long": "https://www.tiktok.com/@user/video/123456",
        "reel": "https://www.instagram.com/reel/C1a-B_2xYz",
        "spotify": "https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC?si=abc123",
    }


@pytest.fixture
def mock_http_session():
    """Factory for a mocked aiohttp session usable as `async with`."""

    def _make(response: MagicMock) -> MagicMock:
        session = MagicMock()
        session.__aenter__.return_value = session
        session.get.return_value.__aenter__.return_value = response
        return session

    return _make
