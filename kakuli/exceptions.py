"""
Custom exceptions for the bot, providing a structured error hierarchy.

Every handler converts these into a single short reply for the user, so the
message of each exception is written to be shown verbatim.
"""
from typing import Optional


class BotBaseException(Exception):
    """Base exception for all custom exceptions in this bot."""

    pass


class ConfigurationError(BotBaseException):
    """Raised for errors in bot configuration, like missing keys or invalid values."""

    pass


class InputValidationError(BotBaseException):
    """Raised when a command argument is missing, oversized or invalid."""

    pass


class MediaDownloadError(BotBaseException):
    """Raised when an attachment cannot be fetched from the transport."""

    pass


class ConversionError(BotBaseException):
    """Raised when the encoder or transcoder fails to produce output."""

    pass


class VideoTooLongError(ConversionError):
    """Raised when a source video exceeds the sticker duration policy."""

    def __init__(self, duration: float, limit: float):
        self.duration = duration
        self.limit = limit
        super().__init__(
            f"Video too long! Please send a video under {limit:g} seconds."
        )


class SynthesisEmptyResult(BotBaseException):
    """Raised when no chunk of a speech request returned usable audio."""

    pass


class RemoteServiceError(BotBaseException):
    """Raised for non-success responses or network failures from an external API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmptyGenerationError(RemoteServiceError):
    """Raised when a generative call succeeds but yields nothing usable."""

    pass
