"""Exceptions raised along the fetch, convert and delivery pipeline.

None of these are fatal: the dispatcher catches each one at the step that
raised it, logs it and ends the turn (or, for resolution failures, carries
on with the original link).
"""


class MediaBotError(Exception):
    """Base class for all bot pipeline errors."""


class ResolutionError(MediaBotError):
    """Short link could not be expanded to a canonical URL."""


class ExtractionError(MediaBotError):
    """No stable media identifier could be derived from a link."""


class FetchFailure(MediaBotError):
    """External fetcher produced no media file."""


class ConversionError(MediaBotError):
    """Still image could not be turned into an animation."""


class GatewaySendError(MediaBotError):
    """Message or file delivery to the chat failed."""


class DownloadDecodeError(MediaBotError):
    """Photo bytes could not be retrieved or decoded."""


class CleanupError(MediaBotError):
    """Staged file could not be deleted."""
