"""Dependency-injection container.

This module defines a dependency-injection (DI) container that wires together
the application's components. The Telegram gateway and the dispatcher are
factories because they need the ``Bot`` of the running application, which
only exists once the application has been built.
"""

from dependency_injector import containers, providers

from app.bot.dispatcher import MediaDispatcher
from app.bot.gateway import TelegramGateway
from app.bot.link_classifier import LinkClassifier
from app.bot.link_resolver import LinkResolver
from app.fetchers import ReelFetcher, SpotifyFetcher, TikTokFetcher
from app.services.image_converter import ImageToAnimationConverter


class Container(containers.DeclarativeContainer):
    """DI container for the application.

    This container holds the wiring for all the application's components.
    """

    config = providers.Configuration()

    # Fetchers and services
    tiktok_fetcher = providers.Singleton(
        TikTokFetcher,
        download_dir=config.fetcher.download_dir,
        video_format=config.fetcher.video_format,
        socket_timeout=config.fetcher.socket_timeout,
    )
    reel_fetcher = providers.Singleton(
        ReelFetcher,
        download_dir=config.fetcher.download_dir,
        video_format=config.fetcher.video_format,
        socket_timeout=config.fetcher.socket_timeout,
    )
    spotify_fetcher = providers.Singleton(
        SpotifyFetcher,
        download_dir=config.fetcher.download_dir,
        audio_format=config.fetcher.audio_format,
        audio_codec=config.fetcher.audio_codec,
        audio_quality=config.fetcher.audio_quality,
        search_prefix=config.fetcher.search_prefix,
        timeout=config.bot.timeout,
        socket_timeout=config.fetcher.socket_timeout,
    )
    image_converter = providers.Singleton(
        ImageToAnimationConverter,
        output_dir=config.fetcher.download_dir,
        duration_seconds=config.animation.duration_seconds,
        fps=config.animation.fps,
    )

    # Bot components
    link_classifier = providers.Singleton(
        LinkClassifier, first_match_wins=config.bot.first_match_wins
    )
    link_resolver = providers.Singleton(LinkResolver, timeout=config.bot.timeout)
    gateway = providers.Factory(
        TelegramGateway,
        token=config.bot.bot_token,
        file_url=config.bot.file_url,
        timeout=config.bot.timeout,
    )
    dispatcher = providers.Factory(
        MediaDispatcher,
        classifier=link_classifier,
        resolver=link_resolver,
        tiktok_fetcher=tiktok_fetcher,
        reel_fetcher=reel_fetcher,
        spotify_fetcher=spotify_fetcher,
        converter=image_converter,
    )
