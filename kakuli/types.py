"""
Message model shared by the parser, dispatcher, handlers and transports.

Inbound content is a tagged union so the parser can unwrap envelopes with a
plain recursive descent. Outbound payloads are the only shapes a transport
has to know how to send.
"""
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Optional, Tuple, Union


class Command(Enum):
    """Enumeration of all supported bot commands."""

    HELP = auto()  # Show the menu (!help, !menu)
    STICKER = auto()  # Image/video -> sticker
    TEXT_STICKER = auto()  # Image + caption text -> sticker
    CHAT = auto()  # Generative text reply
    WEATHER = auto()  # Current weather for a city
    WIKI = auto()  # Encyclopedia summary
    YTSEARCH = auto()  # Top video search result
    KAKULI = auto()  # Generative image
    VOICE = auto()  # Text -> speech audio
    IMAGE = auto()  # Photo search


@dataclass(frozen=True)
class ParsedCommand:
    """Represents a parsed command with its type and argument tokens."""

    command: Command
    token: str
    args: Tuple[str, ...] = ()

    @property
    def text(self) -> str:
        """Arguments rejoined with single spaces, for free-form prompts."""
        return " ".join(self.args)


class MediaKind(Enum):
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class MediaRef:
    """Opaque attachment descriptor; the transport knows how to stream it."""

    url: str
    mimetype: Optional[str] = None
    size: Optional[int] = None
    filename: Optional[str] = None


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class ExtendedText:
    text: str
    quoted: Optional["MessageContent"] = None


@dataclass(frozen=True)
class ImageAttachment:
    media: MediaRef
    caption: str = ""


@dataclass(frozen=True)
class VideoAttachment:
    media: MediaRef
    caption: str = ""


@dataclass(frozen=True)
class Ephemeral:
    """Disappearing-message envelope around another content value."""

    inner: "MessageContent"


@dataclass(frozen=True)
class Unknown:
    pass


MessageContent = Union[
    PlainText, ExtendedText, ImageAttachment, VideoAttachment, Ephemeral, Unknown
]


@dataclass(frozen=True)
class InboundMessage:
    """One inbound event. Lives for a single dispatch cycle."""

    id: str
    chat_id: str
    sender_id: str
    content: MessageContent


@dataclass
class MediaBuffer:
    """Raw attachment bytes plus declared kind, owned by the fetching handler."""

    data: bytes
    kind: MediaKind

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class TextPayload:
    text: str


@dataclass(frozen=True)
class ImagePayload:
    data: bytes
    caption: str = ""
    filename: str = "image.png"


@dataclass(frozen=True)
class StickerPayload:
    data: bytes
    caption: str = ""
    filename: str = "sticker.webp"


@dataclass(frozen=True)
class AudioPayload:
    path: Path
    mimetype: str = "audio/mpeg"


OutboundPayload = Union[TextPayload, ImagePayload, StickerPayload, AudioPayload]


class ConnectionState(Enum):
    OPEN = auto()
    CLOSE = auto()


@dataclass(frozen=True)
class ConnectionEvent:
    """Connection-state change reported by a transport."""

    state: ConnectionState
    reconnect: bool = True
    reason: Optional[str] = field(default=None)


__all__ = [
    "Command",
    "ParsedCommand",
    "MediaKind",
    "MediaRef",
    "PlainText",
    "ExtendedText",
    "ImageAttachment",
    "VideoAttachment",
    "Ephemeral",
    "Unknown",
    "MessageContent",
    "InboundMessage",
    "MediaBuffer",
    "TextPayload",
    "ImagePayload",
    "StickerPayload",
    "AudioPayload",
    "OutboundPayload",
    "ConnectionState",
    "ConnectionEvent",
]
