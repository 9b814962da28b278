"""Telegram bot handlers.

Converts python-telegram-bot updates into transport-independent
``IncomingMessage`` objects and hands them to the dispatcher stored in
``bot_data`` by the application entry point.
"""

import logging

from telegram import Message, Update
from telegram.ext import ContextTypes

from ..models import IncomingMessage, PhotoSize
from .dispatcher import MediaDispatcher

logger = logging.getLogger(__name__)

DISPATCHER_KEY = "dispatcher"


def to_incoming_message(message: Message) -> IncomingMessage:
    """Convert a Telegram message, including the message it replies to."""
    reply = message.reply_to_message
    return IncomingMessage(
        chat_id=message.chat_id,
        text=message.text,
        reply_to_message=to_incoming_message(reply) if reply is not None else None,
        photo=tuple(
            PhotoSize(file_id=size.file_id, width=size.width, height=size.height)
            for size in message.photo or ()
        ),
    )


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle every text message, including the /gif command.

    Args:
        update: Telegram update object containing message data.
        context: Bot context carrying the dispatcher in bot_data.
    """
    if not update.message:
        return

    dispatcher: MediaDispatcher = context.bot_data[DISPATCHER_KEY]

    try:
        await dispatcher.handle(to_incoming_message(update.message))
    except Exception as e:
        logger.exception(f"Unexpected error while processing message: {e}")
