"""Telegram bot message templates and constants.

The bot is silent on failures; the only text it ever replies with is the
/gif usage hint.
"""

GIF_COMMAND = "/gif"

GIF_USAGE_MESSAGE = "/gif command should be used with a photo reply only"
