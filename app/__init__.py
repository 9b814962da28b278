"""TikTok Sender Bot Application Package.

A Telegram bot that watches chat messages for TikTok, Instagram Reel and
Spotify track links, downloads the media behind them and relays it back to
the chat. Also turns a replied-to photo into a looping animation on /gif.

The application follows a modular architecture with separate concerns for:
- Bot handlers, link classification and message dispatch
- Platform-specific media fetchers
- Image conversion and temporary file staging
"""
