"""
!sticker and !textsticker: turn an attached or quoted image/video into a
sticker.

Each message id is processed at most once at a time; a duplicate delivery
of the same event is dropped while the first one is still running.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..command_parser import find_media
from ..exceptions import BotBaseException, InputValidationError
from ..media.fetcher import fetch_media
from ..media.image_sticker import MAX_OVERLAY_CHARS
from ..types import InboundMessage, MediaKind, ParsedCommand
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..context import BotContext

logger = get_logger(__name__)

VIDEO_CAPTION = "✅ Sticker created from first 10 seconds of video!"
TEXT_CAPTION = "✅ Text sticker created!"
GENERIC_FAILURE = "Failed to create sticker. Please try again."


async def _build_sticker(
    ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand, with_text: bool
) -> None:
    text = parsed.text.strip() if with_text else None
    if with_text:
        if not text:
            raise InputValidationError(
                f"Please provide text after the command. Example: {parsed.token} Hello World"
            )
        if len(text) > MAX_OVERLAY_CHARS:
            raise InputValidationError(
                f"Text too long! Please keep it under {MAX_OVERLAY_CHARS} characters for stickers."
            )

    found = find_media(message.content)
    if found is None:
        raise InputValidationError(f"Please send or reply to an image/video with {parsed.token}")
    ref, kind = found

    if with_text and kind is MediaKind.VIDEO:
        raise InputValidationError("Text stickers can only be created from images, not videos.")

    media = await fetch_media(ctx.transport, ref, kind, max_bytes=ctx.config.max_media_bytes)

    if kind is MediaKind.VIDEO:
        sticker = await ctx.video_stickers.convert(media.data, message.id)
        caption = VIDEO_CAPTION
    else:
        sticker = await ctx.image_stickers.convert(media.data, text)
        caption = TEXT_CAPTION if with_text else ""

    await ctx.sender.sticker(message.chat_id, sticker, caption)
    logger.info(
        f"✅ {kind.value} sticker sent ({len(sticker)} bytes)",
        extra={
            "subsys": "sticker",
            "event": "sticker.sent",
            "msg_id": message.id,
            "chat_id": message.chat_id,
        },
    )


async def _sticker_job(
    ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand, with_text: bool
) -> None:
    with ctx.guard.hold(message.id) as acquired:
        if not acquired:
            return
        try:
            await _build_sticker(ctx, message, parsed, with_text)
        except BotBaseException as e:
            logger.info(
                f"Sticker request rejected: {e}",
                extra={"subsys": "sticker", "event": "sticker.rejected", "msg_id": message.id},
            )
            await ctx.sender.text(message.chat_id, f"❌ {e}")
        except Exception as e:
            logger.error(
                f"❌ Sticker error: {e}",
                exc_info=True,
                extra={"subsys": "sticker", "event": "sticker.failed", "msg_id": message.id},
            )
            await ctx.sender.text(message.chat_id, f"❌ {GENERIC_FAILURE}")


async def handle_sticker(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    await _sticker_job(ctx, message, parsed, with_text=False)


async def handle_text_sticker(
    ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand
) -> None:
    await _sticker_job(ctx, message, parsed, with_text=True)
