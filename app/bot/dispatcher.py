"""Message dispatch: classification, fetching, delivery and cleanup.

One ``MediaDispatcher.handle`` call processes one incoming message to
completion. Every failure is caught at the step that caused it and logged;
the dispatcher never lets an error escape to the polling loop and the user
sees nothing except the /gif usage hint.

Fetched and converted files are treated as scoped resources: the staged
file is deleted when the send attempt ends, whether the send succeeded or
not.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol

from ..exceptions import (
    CleanupError,
    ConversionError,
    ExtractionError,
    FetchFailure,
    GatewaySendError,
    ResolutionError,
)
from ..fetchers.base import MediaFetcherProtocol
from ..fetchers.tiktok import TikTokFetcher
from ..models import (
    IncomingMessage,
    MediaFileHandle,
    MediaKind,
    ReelLink,
    SpotifyLink,
    TikTokLink,
)
from ..services.image_converter import ImageToAnimationConverter
from .gateway import MessageGateway
from .link_classifier import LinkClassifier
from .link_resolver import LinkResolver
from .messages import GIF_COMMAND, GIF_USAGE_MESSAGE

logger = logging.getLogger(__name__)


class StagedFileOwner(Protocol):
    """Anything that created a staged file and knows how to delete it."""

    async def cleanup(self, handle: MediaFileHandle) -> None: ...


class MediaDispatcher:
    """Routes each incoming message to the /gif flow or link processing.

    Responsibilities:
    - Detect the /gif command and convert the replied photo
    - Classify links and expand short TikTok links
    - Fetch media through the matching fetcher
    - Send the staged file with the message type matching its kind
    - Delete the staged file on every exit path of the send attempt
    """

    def __init__(
        self,
        gateway: MessageGateway,
        classifier: LinkClassifier,
        resolver: LinkResolver,
        tiktok_fetcher: TikTokFetcher,
        reel_fetcher: MediaFetcherProtocol,
        spotify_fetcher: MediaFetcherProtocol,
        converter: ImageToAnimationConverter,
    ) -> None:
        self.gateway = gateway
        self.classifier = classifier
        self.resolver = resolver
        self.tiktok_fetcher = tiktok_fetcher
        self.reel_fetcher = reel_fetcher
        self.spotify_fetcher = spotify_fetcher
        self.converter = converter

    async def handle(self, message: IncomingMessage) -> None:
        """Process one incoming message.

        Args:
            message: Message converted from the Telegram update.
        """
        logger.info("Received message: %s", message.text)
        logger.info("From: %s", message.chat_id)

        if message.text == GIF_COMMAND:
            await self.handle_gif_command(message)
        else:
            await self.process_links(message)

    async def handle_gif_command(self, message: IncomingMessage) -> None:
        """Turn the photo of the replied message into an animation.

        Replies with the usage hint when the command is not a reply to a
        photo message.
        """
        replied = message.reply_to_message
        if not message.is_reply or not replied.has_photo:
            await self._send_text(message.chat_id, GIF_USAGE_MESSAGE)
            return

        photo = replied.largest_photo
        image = await self.gateway.download_image(photo.file_id)
        if image is None:
            logger.error("Aborting /gif: photo %s could not be downloaded", photo.file_id)
            return

        try:
            handle = await self.converter.convert(image)
        except ConversionError as e:
            logger.error("Failed to convert photo %s to animation: %s", photo.file_id, e)
            return

        await self._deliver(message.chat_id, handle, self.converter)

    async def process_links(self, message: IncomingMessage) -> None:
        """Classify the message text and relay the media behind its link."""
        if not message.text:
            return

        link = self.classifier.classify(message.text)
        if link is None:
            logger.warning("No valid TikTok, Instagram or Spotify URL found in message: %s", message.text)
            return

        candidates = self.classifier.classify_all(message.text)
        if len(candidates) > 1:
            logger.debug(
                "Message has %d link categories (%s), acting on %s",
                len(candidates),
                ", ".join(candidate.url for candidate in candidates),
                link.url,
            )

        if isinstance(link, TikTokLink):
            await self._process_tiktok(message.chat_id, link)
        elif isinstance(link, ReelLink):
            await self._fetch_and_deliver(message.chat_id, link.url, self.reel_fetcher)
        elif isinstance(link, SpotifyLink):
            # No identifier pre-check for Spotify links
            await self._fetch_and_deliver(message.chat_id, link.url, self.spotify_fetcher)

    async def _process_tiktok(self, chat_id: int, link: TikTokLink) -> None:
        url = link.url
        if link.is_short:
            try:
                url = await self.resolver.expand(url)
            except ResolutionError as e:
                logger.error("Failed to resolve short URL %s: %s", url, e)

        try:
            video_id = self.tiktok_fetcher.extract_video_id(url)
        except ExtractionError as e:
            logger.error("Failed to extract video ID from link %s: %s", url, e)
            return

        logger.info("Fetching TikTok video %s", video_id)
        await self._fetch_and_deliver(chat_id, url, self.tiktok_fetcher)

    async def _fetch_and_deliver(
        self, chat_id: int, url: str, fetcher: MediaFetcherProtocol
    ) -> None:
        try:
            handle = await fetcher.fetch(url)
        except FetchFailure as e:
            logger.error(
                "Failed to download %s media from link %s: %s", fetcher.get_platform_name(), url, e
            )
            return

        await self._deliver(chat_id, handle, fetcher)

    async def _deliver(self, chat_id: int, handle: MediaFileHandle, owner: StagedFileOwner) -> None:
        async with self._staged(handle, owner):
            await self._send_media(chat_id, handle)

    async def _send_media(self, chat_id: int, handle: MediaFileHandle) -> None:
        senders = {
            MediaKind.VIDEO: self.gateway.send_video,
            MediaKind.AUDIO: self.gateway.send_audio,
            MediaKind.ANIMATION: self.gateway.send_animation,
        }
        try:
            await senders[handle.kind](chat_id, handle)
        except GatewaySendError as e:
            logger.error("Error while sending %s %s: %s", handle.kind.value, handle.name, e)

    async def _send_text(self, chat_id: int, text: str) -> None:
        try:
            await self.gateway.send_text(chat_id, text)
        except GatewaySendError as e:
            logger.error("Error while sending message: %s", e)

    @asynccontextmanager
    async def _staged(
        self, handle: MediaFileHandle, owner: StagedFileOwner
    ) -> AsyncIterator[MediaFileHandle]:
        try:
            yield handle
        finally:
            logger.info("Deleting media file: %s", handle.name)
            try:
                await owner.cleanup(handle)
            except CleanupError as e:
                logger.error("Error while deleting media file %s: %s", handle.name, e)
