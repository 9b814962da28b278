"""Application entry point.

Main module that initializes and runs the Telegram bot application in
long-polling mode. Configures logging, wires the dispatcher through the DI
container and registers the single message handler.
"""

import logging

from telegram.ext import Application, MessageHandler, filters

from .bot.handlers import DISPATCHER_KEY, handle_message
from .config import config
from .core.container import Container

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Configure root logging for the bot process."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
    )
    # Every getUpdates poll is logged by httpx at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_application() -> Application:
    """Build the Telegram application with the dispatcher wired in.

    Updates are processed strictly one at a time, in delivery order.

    Raises:
        RuntimeError: If BOT_TOKEN environment variable is not set.
    """
    if not config.bot.bot_token:
        raise RuntimeError("Set BOT_TOKEN environment variable")

    container = Container()
    container.config.from_dict(config.as_dict())

    app = Application.builder().token(config.bot.bot_token).concurrent_updates(False).build()

    gateway = container.gateway(bot=app.bot)
    app.bot_data[DISPATCHER_KEY] = container.dispatcher(gateway=gateway)

    app.add_handler(MessageHandler(filters.TEXT, handle_message))
    return app


def main() -> None:
    """Main application entry point."""
    configure_logging(config.bot.log_level)

    app = build_application()

    logger.info(f"Starting @{config.bot.bot_username} in long-polling mode")
    app.run_polling()


if __name__ == "__main__":
    main()
