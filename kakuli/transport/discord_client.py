"""
Discord implementation of the transport protocol.

Maps ``discord.Message`` objects into the transport-neutral message model
and delivers outbound payloads as channel messages and file uploads.
"""
from __future__ import annotations

import asyncio
import io
from typing import AsyncIterator, Awaitable, Callable, Optional

import discord

from ..http_client import SharedHttpClient
from ..types import (
    AudioPayload,
    ConnectionEvent,
    ConnectionState,
    Ephemeral,
    ExtendedText,
    ImageAttachment,
    ImagePayload,
    InboundMessage,
    MediaKind,
    MediaRef,
    MessageContent,
    OutboundPayload,
    PlainText,
    StickerPayload,
    TextPayload,
    Unknown,
    VideoAttachment,
)
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Discord rejects message bodies longer than this
MAX_MESSAGE_LENGTH = 2000

InboundHandler = Callable[[InboundMessage], Awaitable[object]]
ConnectionListener = Callable[[ConnectionEvent], None]


def create_intents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.message_content = True
    return intents


def _attachment_content(attachment: discord.Attachment, caption: str) -> Optional[MessageContent]:
    content_type = (attachment.content_type or "").lower()
    ref = MediaRef(
        url=attachment.url,
        mimetype=attachment.content_type,
        size=attachment.size,
        filename=attachment.filename,
    )
    if content_type.startswith("image/"):
        return ImageAttachment(media=ref, caption=caption)
    if content_type.startswith("video/"):
        return VideoAttachment(media=ref, caption=caption)
    return None


def message_content(
    message: discord.Message, quoted: Optional[discord.Message] = None
) -> MessageContent:
    """Build the content union for ``message``; ``quoted`` is the message it replies to."""
    text = message.content or ""
    content: Optional[MessageContent] = None

    for attachment in message.attachments:
        content = _attachment_content(attachment, text)
        if content is not None:
            break

    if content is None and quoted is not None:
        content = ExtendedText(text=text, quoted=message_content(quoted))
    if content is None:
        content = PlainText(text=text) if text else Unknown()

    if message.flags.ephemeral:
        content = Ephemeral(inner=content)
    return content


def split_message(text: str, limit: int = MAX_MESSAGE_LENGTH):
    return [text[i : i + limit] for i in range(0, len(text), limit)] or [""]


class DiscordTransport(discord.Client):
    """discord.py client that feeds the dispatcher and sends its replies."""

    def __init__(
        self,
        media_http: SharedHttpClient,
        *,
        on_inbound: Optional[InboundHandler] = None,
        connection_listener: Optional[ConnectionListener] = None,
        **options,
    ):
        options.setdefault("intents", create_intents())
        super().__init__(**options)
        self.media_http = media_http
        self.on_inbound = on_inbound
        self.connection_listener = connection_listener

    def _emit(self, event: ConnectionEvent) -> None:
        if self.connection_listener is not None:
            self.connection_listener(event)

    async def run_session(self, token: str, stop: Optional[asyncio.Event] = None) -> None:
        """Log in and hold the gateway connection until the client is closed.

        A client closed after ``stop`` was set stays closed.
        """
        if stop is not None and stop.is_set():
            return
        if self.is_closed():
            self.clear()
        try:
            await self.start(token)
        except Exception:
            if not self.is_closed():
                await self.close()
            raise

    async def on_ready(self) -> None:
        logger.info(
            f"✅ Logged in as {self.user} ({len(self.guilds)} guilds)",
            extra={"subsys": "discord", "event": "ready"},
        )
        self._emit(ConnectionEvent(state=ConnectionState.OPEN))

    async def on_resumed(self) -> None:
        self._emit(ConnectionEvent(state=ConnectionState.OPEN))

    async def on_disconnect(self) -> None:
        self._emit(ConnectionEvent(state=ConnectionState.CLOSE, reason="gateway disconnect"))

    async def _resolve_quoted(self, message: discord.Message) -> Optional[discord.Message]:
        reference = message.reference
        if reference is None:
            return None
        if isinstance(reference.resolved, discord.Message):
            return reference.resolved
        if reference.message_id is None:
            return None
        try:
            return await message.channel.fetch_message(reference.message_id)
        except discord.HTTPException as e:
            logger.debug(
                f"Could not resolve replied-to message: {e}",
                extra={"subsys": "discord", "event": "reference.unresolved", "msg_id": str(message.id)},
            )
            return None

    async def to_inbound(self, message: discord.Message) -> InboundMessage:
        quoted = await self._resolve_quoted(message)
        return InboundMessage(
            id=str(message.id),
            chat_id=str(message.channel.id),
            sender_id=str(message.author.id),
            content=message_content(message, quoted),
        )

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot or self.on_inbound is None:
            return
        inbound = await self.to_inbound(message)
        await self.on_inbound(inbound)

    async def _channel(self, target: str) -> discord.abc.Messageable:
        channel_id = int(target)
        return self.get_channel(channel_id) or await self.fetch_channel(channel_id)

    async def send_message(self, target: str, payload: OutboundPayload) -> None:
        channel = await self._channel(target)

        if isinstance(payload, TextPayload):
            for part in split_message(payload.text):
                await channel.send(part)
        elif isinstance(payload, (ImagePayload, StickerPayload)):
            file = discord.File(io.BytesIO(payload.data), filename=payload.filename)
            await channel.send(content=payload.caption or None, file=file)
        elif isinstance(payload, AudioPayload):
            file = discord.File(str(payload.path), filename=payload.path.name)
            await channel.send(file=file)
        else:
            raise TypeError(f"Unsupported payload type: {type(payload).__name__}")

    async def iter_media(self, ref: MediaRef, kind: MediaKind) -> AsyncIterator[bytes]:
        async for chunk in self.media_http.stream_bytes(ref.url):
            yield chunk
