"""Configuration management for the media relay bot.

Handles all application configuration including environment variables, the
optional YAML media config file and default settings. Provides structured
configuration classes for the bot itself, the media fetchers and the
image-to-animation converter.
"""

import tempfile
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings


class BotConfig(BaseSettings):
    """Main Telegram bot configuration.

    Attributes:
        bot_username: Telegram bot username from environment.
        bot_token: Telegram bot API token from environment.
        log_level: Root logging level name.
        timeout: HTTP request timeout in seconds.
        file_url: Base URL for downloading files sent to the bot.
        first_match_wins: Select the first matching link category instead of
            the last one when a message contains several links.
    """

    bot_username: str = Field(..., validation_alias="BOT_USERNAME")
    bot_token: str = Field(..., validation_alias="BOT_TOKEN")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    timeout: int = Field(default=20, validation_alias="HTTP_TIMEOUT")
    file_url: str = Field(
        default="https://api.telegram.org/file/bot", validation_alias="TELEGRAM_FILE_URL"
    )
    first_match_wins: bool = Field(default=False, validation_alias="LINK_FIRST_MATCH_WINS")


class FetcherConfig(BaseSettings):
    """Media download settings shared by all fetchers.

    Attributes:
        download_dir: Staging directory for downloaded files.
        video_format: yt-dlp format selector for TikTok and Reel videos.
        audio_format: yt-dlp format selector for Spotify audio.
        audio_codec: Codec the audio is extracted to.
        audio_quality: Target audio bitrate passed to ffmpeg.
        search_prefix: yt-dlp search prefix used to find Spotify tracks.
        socket_timeout: Socket timeout for yt-dlp in seconds.
    """

    download_dir: Path = Field(
        default=Path(tempfile.gettempdir()) / "tiktok-sender-bot",
        validation_alias="DOWNLOAD_DIR",
    )
    video_format: str = "mp4/bestvideo*+bestaudio/best"
    audio_format: str = "bestaudio/best"
    audio_codec: str = "mp3"
    audio_quality: str = "192"
    search_prefix: str = "ytsearch1:"
    socket_timeout: int = 30


class AnimationConfig(BaseSettings):
    """Still image to animation conversion parameters.

    Attributes:
        duration_seconds: Length of the generated clip.
        fps: Frame rate of the generated clip.
    """

    duration_seconds: float = 3.0
    fps: int = 25


class Config:
    """Application configuration manager.

    Centralizes loading of environment variables, the YAML media file and
    default values. Provides typed access to configuration sections for the
    different application components.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory, defaults to app/config.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent / "config"

        self.config_dir = Path(config_dir)

        self.bot = BotConfig()

        media_data = self._load_media_config()
        fetcher_data = media_data.get("fetcher", {})
        animation_data = media_data.get("animation", {})

        self.fetcher = FetcherConfig(**fetcher_data)
        self.animation = AnimationConfig(**animation_data)

    def _load_media_config(self) -> dict[str, Any]:
        """Load media settings from YAML configuration.

        Returns:
            Parsed YAML mapping, empty if the file is missing or empty.
        """
        media_path = self.config_dir / "media.yml"
        if not media_path.exists():
            return {}

        with open(media_path) as f:
            data = yaml.safe_load(f)

        return data or {}

    def as_dict(self) -> dict[str, Any]:
        """Plain mapping of all sections, used to feed the DI container."""
        return {
            "bot": self.bot.model_dump(),
            "fetcher": self.fetcher.model_dump(),
            "animation": self.animation.model_dump(),
        }


# Global configuration instance
config = Config()
