"""Data models for the media relay bot.

Defines Pydantic models for incoming chat messages, classified links and
locally staged media files. Messages are converted from Telegram objects at
the handler boundary so that the dispatcher never depends on the transport.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class LinkKind(str, Enum):
    """Media source category a link belongs to."""

    TIKTOK = "tiktok"
    REEL = "reel"
    SPOTIFY = "spotify"


class MediaKind(str, Enum):
    """Telegram message type used to deliver a staged file."""

    VIDEO = "video"
    AUDIO = "audio"
    ANIMATION = "animation"


class PhotoSize(BaseModel):
    """One resolution of a photo attached to a message."""

    model_config = ConfigDict(frozen=True)

    file_id: str
    width: int = 0
    height: int = 0


class IncomingMessage(BaseModel):
    """Chat message as seen by the dispatcher.

    Attributes:
        chat_id: Chat the message was posted in.
        text: Message text, None for media-only messages.
        reply_to_message: Message this one replies to, if any.
        photo: Attached photo sizes ordered from smallest to largest.
    """

    model_config = ConfigDict(frozen=True)

    chat_id: int
    text: str | None = None
    reply_to_message: IncomingMessage | None = None
    photo: tuple[PhotoSize, ...] = ()

    @property
    def is_reply(self) -> bool:
        return self.reply_to_message is not None

    @property
    def has_photo(self) -> bool:
        return bool(self.photo)

    @property
    def largest_photo(self) -> PhotoSize | None:
        """Highest resolution photo size, which Telegram always sends last."""
        return self.photo[-1] if self.photo else None


class _Link(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str


class TikTokLink(_Link):
    """TikTok video link, either vm.tiktok.com short form or canonical."""

    kind: Literal[LinkKind.TIKTOK] = LinkKind.TIKTOK
    is_short: bool = False


class ReelLink(_Link):
    """Instagram Reel link."""

    kind: Literal[LinkKind.REEL] = LinkKind.REEL


class SpotifyLink(_Link):
    """Spotify track link, optionally carrying the ?si= share token."""

    kind: Literal[LinkKind.SPOTIFY] = LinkKind.SPOTIFY


ClassifiedLink = Annotated[TikTokLink | ReelLink | SpotifyLink, Field(discriminator="kind")]


class MediaFileHandle(BaseModel):
    """Locally staged media file waiting to be sent once and deleted.

    Attributes:
        path: Location of the staged file.
        kind: Message type the file should be delivered as.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    kind: MediaKind

    @property
    def name(self) -> str:
        return self.path.name
