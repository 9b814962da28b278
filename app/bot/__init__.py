"""Telegram bot implementation package.

Contains link classification, short link resolution, the Telegram gateway
and the dispatcher that ties them together. Handles the /gif command and
general link processing for incoming chat messages.
"""
