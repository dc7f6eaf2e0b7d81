"""
Outbound sender: the only place handlers hand payloads to the transport.
"""
from __future__ import annotations

from pathlib import Path

from .transport.base import Transport
from .types import AudioPayload, ImagePayload, OutboundPayload, StickerPayload, TextPayload
from .utils.logging import get_logger

logger = get_logger(__name__)


class OutboundSender:
    """Thin typed facade over ``Transport.send_message``."""

    def __init__(self, transport: Transport):
        self.transport = transport

    async def send(self, chat_id: str, payload: OutboundPayload) -> None:
        logger.debug(
            f"📤 Sending {type(payload).__name__}",
            extra={"subsys": "sender", "event": "send", "chat_id": chat_id},
        )
        await self.transport.send_message(chat_id, payload)

    async def text(self, chat_id: str, text: str) -> None:
        await self.send(chat_id, TextPayload(text=text))

    async def image(
        self, chat_id: str, data: bytes, caption: str = "", filename: str = "image.png"
    ) -> None:
        await self.send(chat_id, ImagePayload(data=data, caption=caption, filename=filename))

    async def sticker(self, chat_id: str, data: bytes, caption: str = "") -> None:
        await self.send(chat_id, StickerPayload(data=data, caption=caption))

    async def audio(self, chat_id: str, path: Path, mimetype: str = "audio/mpeg") -> None:
        await self.send(chat_id, AudioPayload(path=Path(path), mimetype=mimetype))
