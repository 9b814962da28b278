"""Telegram delivery gateway.

``MessageGateway`` is the narrow capability the dispatcher needs: send a
text, a video, an audio or an animation to a chat, and fetch a photo that
was sent to the bot. ``TelegramGateway`` implements it on top of
python-telegram-bot; tests use a recording fake instead.
"""

from __future__ import annotations

import asyncio
import io
import logging
from typing import Protocol

import aiohttp
from PIL import Image, UnidentifiedImageError
from telegram import Bot
from telegram.error import TelegramError

from ..exceptions import DownloadDecodeError, GatewaySendError
from ..models import MediaFileHandle
from ..services.http import create_session

logger = logging.getLogger(__name__)


class MessageGateway(Protocol):
    """Outbound chat operations used by the dispatcher."""

    async def send_text(self, chat_id: int, text: str) -> None: ...

    async def send_video(self, chat_id: int, handle: MediaFileHandle) -> None: ...

    async def send_audio(self, chat_id: int, handle: MediaFileHandle) -> None: ...

    async def send_animation(self, chat_id: int, handle: MediaFileHandle) -> None: ...

    async def download_image(self, file_id: str) -> Image.Image | None: ...


def decode_image(data: bytes) -> Image.Image:
    """Decode raw bytes into a fully loaded Pillow image.

    Raises:
        DownloadDecodeError: If the bytes are not a readable image.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise DownloadDecodeError(f"Cannot decode image ({len(data)} bytes): {e}") from e
    return image


class TelegramGateway:
    """MessageGateway backed by a python-telegram-bot ``Bot``."""

    def __init__(
        self,
        bot: Bot,
        token: str,
        file_url: str = "https://api.telegram.org/file/bot",
        timeout: int = 20,
    ) -> None:
        """Initialize gateway.

        Args:
            bot: Bot instance of the running application.
            token: Bot API token, used to build file download URLs.
            file_url: Base URL for file downloads, token and path are appended.
            timeout: HTTP timeout for photo downloads in seconds.
        """
        self.bot = bot
        self.token = token
        self.file_url = file_url
        self.timeout = timeout

    async def send_text(self, chat_id: int, text: str) -> None:
        try:
            await self.bot.send_message(chat_id=chat_id, text=text)
        except TelegramError as e:
            raise GatewaySendError(f"Error while sending message: {e}") from e

    async def send_video(self, chat_id: int, handle: MediaFileHandle) -> None:
        try:
            with open(handle.path, "rb") as f:
                await self.bot.send_video(
                    chat_id=chat_id, video=f, filename=handle.name, supports_streaming=True
                )
        except (TelegramError, OSError) as e:
            raise GatewaySendError(f"Error while sending video {handle.name}: {e}") from e

    async def send_audio(self, chat_id: int, handle: MediaFileHandle) -> None:
        try:
            with open(handle.path, "rb") as f:
                await self.bot.send_audio(chat_id=chat_id, audio=f, filename=handle.name)
        except (TelegramError, OSError) as e:
            raise GatewaySendError(f"Error while sending audio {handle.name}: {e}") from e

    async def send_animation(self, chat_id: int, handle: MediaFileHandle) -> None:
        try:
            with open(handle.path, "rb") as f:
                await self.bot.send_animation(chat_id=chat_id, animation=f, filename=handle.name)
        except (TelegramError, OSError) as e:
            raise GatewaySendError(f"Error while sending GIF {handle.name}: {e}") from e

    async def download_image(self, file_id: str) -> Image.Image | None:
        """Download a photo sent to the bot and decode it.

        Args:
            file_id: Telegram file id of the photo size.

        Returns:
            Decoded image, None if retrieval or decoding failed.
        """
        try:
            telegram_file = await self.bot.get_file(file_id)
            url = self.build_file_url(telegram_file.file_path or "")

            async with create_session(self.timeout) as session:
                async with session.get(url) as response:
                    response.raise_for_status()
                    data = await response.read()

            return decode_image(data)
        except (TelegramError, aiohttp.ClientError, asyncio.TimeoutError, DownloadDecodeError) as e:
            logger.error("Failed to download image from Telegram: %s", e)
            return None

    def build_file_url(self, file_path: str) -> str:
        """Direct download URL for a file path returned by getFile."""
        # Recent library versions already return an absolute URL
        if file_path.startswith(("http://", "https://")):
            return file_path
        return f"{self.file_url}{self.token}/{file_path}"
