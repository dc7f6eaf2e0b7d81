"""
Parses inbound message content to identify commands and locate media.

Text extraction unwraps disappearing-message envelopes recursively; media
lookup only follows a single quoted-message hop.
"""
import logging
from typing import Optional, Tuple

from .types import (
    Command,
    Ephemeral,
    ExtendedText,
    ImageAttachment,
    MediaKind,
    MediaRef,
    MessageContent,
    ParsedCommand,
    PlainText,
    VideoAttachment,
)

logger = logging.getLogger(__name__)

COMMAND_PREFIX = "!"

# Maximum number of nested envelopes unwrapped before giving up
MAX_ENVELOPE_DEPTH = 8

# Maps the command word (without prefix) to the Command enum
COMMAND_MAP = {
    "help": Command.HELP,
    "menu": Command.HELP,
    "sticker": Command.STICKER,
    "textsticker": Command.TEXT_STICKER,
    "chat": Command.CHAT,
    "weather": Command.WEATHER,
    "wiki": Command.WIKI,
    "ytsearch": Command.YTSEARCH,
    "kakuli": Command.KAKULI,
    "voice": Command.VOICE,
    "image": Command.IMAGE,
}


def _unwrap(content: Optional[MessageContent]) -> Optional[MessageContent]:
    """Strip disappearing-message envelopes, bounded by MAX_ENVELOPE_DEPTH."""
    depth = 0
    while isinstance(content, Ephemeral):
        if depth >= MAX_ENVELOPE_DEPTH:
            logger.debug(
                "Envelope nesting exceeds limit, treating as empty",
                extra={"subsys": "parser", "event": "envelope.too_deep"},
            )
            return None
        content = content.inner
        depth += 1
    return content


def extract_text(content: Optional[MessageContent], _depth: int = 0) -> str:
    """Return the innermost text payload, or "" when none is extractable."""
    if content is None:
        return ""
    if isinstance(content, Ephemeral):
        if _depth >= MAX_ENVELOPE_DEPTH:
            return ""
        return extract_text(content.inner, _depth + 1)
    if isinstance(content, (PlainText, ExtendedText)):
        return content.text or ""
    if isinstance(content, (ImageAttachment, VideoAttachment)):
        return content.caption or ""
    return ""


def parse_command(
    content: Optional[MessageContent], prefix: str = COMMAND_PREFIX
) -> Optional[ParsedCommand]:
    """
    Parses message content to determine if it's an explicit command.

    Args:
        content: The inbound message content, possibly wrapped in envelopes.
        prefix: Reserved command prefix.

    Returns:
        A ParsedCommand if a known command is found, otherwise None. Text
        without the prefix and unknown command words are both ignored.
    """
    body = extract_text(content).strip()
    if not body.startswith(prefix):
        return None

    parts = body.split()
    token = parts[0]
    command = COMMAND_MAP.get(token[len(prefix):])

    if command is None:
        logger.debug(
            f"Ignoring unknown command: {token}",
            extra={"subsys": "parser", "event": "command.unknown"},
        )
        return None

    logger.debug(
        f"Parsed command: {command.name} with {len(parts) - 1} args",
        extra={"subsys": "parser", "event": "command.found"},
    )
    return ParsedCommand(command=command, token=token, args=tuple(parts[1:]))


def _direct_media(
    content: Optional[MessageContent],
) -> Optional[Tuple[MediaRef, MediaKind]]:
    if isinstance(content, ImageAttachment):
        return content.media, MediaKind.IMAGE
    if isinstance(content, VideoAttachment):
        return content.media, MediaKind.VIDEO
    return None


def find_media(
    content: Optional[MessageContent],
) -> Optional[Tuple[MediaRef, MediaKind]]:
    """
    Locate the attachment a sticker command refers to.

    Looks at the message itself, then at most one quoted message. A quote of
    a quote is not followed.
    """
    content = _unwrap(content)
    found = _direct_media(content)
    if found is not None:
        return found
    if isinstance(content, ExtendedText) and content.quoted is not None:
        return _direct_media(_unwrap(content.quoted))
    return None
