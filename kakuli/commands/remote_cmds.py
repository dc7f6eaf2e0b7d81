"""
Commands backed by a single remote API call: !chat, !weather, !wiki,
!ytsearch, !kakuli and !image.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..exceptions import EmptyGenerationError, RemoteServiceError
from ..types import InboundMessage, ParsedCommand
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from ..context import BotContext

logger = get_logger(__name__)

KAKULI_CAPTION = "Your loving girl Kakuli's AI-crafted image ❤️"

_IMAGE_EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}


def _log_failure(command: str, message: InboundMessage, error: Exception) -> None:
    logger.warning(
        f"⚠️ {command} failed: {error}",
        extra={"subsys": "commands", "event": f"{command}.failed", "msg_id": message.id},
    )


async def _usage(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand, hint: str) -> None:
    await ctx.sender.text(message.chat_id, f"❌ Usage: {parsed.token} {hint}")


async def handle_chat(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    prompt = parsed.text
    if not prompt:
        return await _usage(ctx, message, parsed, "<prompt>")
    try:
        reply = await ctx.gemini.generate_text(prompt)
    except RemoteServiceError as e:
        _log_failure("chat", message, e)
        return await ctx.sender.text(message.chat_id, "❌ Error with Gemini API.")
    await ctx.sender.text(message.chat_id, f"🤖 *AI Response:*\n\n{reply or '🤖 No response.'}")


async def handle_weather(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    city = parsed.text
    if not city:
        return await _usage(ctx, message, parsed, "<city>")
    try:
        report = await ctx.weather.current(city)
    except RemoteServiceError as e:
        _log_failure("weather", message, e)
        return await ctx.sender.text(message.chat_id, "❌ City not found!")
    await ctx.sender.text(message.chat_id, report.render())


async def handle_wiki(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    query = parsed.text
    if not query:
        return await _usage(ctx, message, parsed, "<query>")
    try:
        summary = await ctx.wikipedia.summary(query)
    except RemoteServiceError as e:
        _log_failure("wiki", message, e)
        return await ctx.sender.text(message.chat_id, "❌ No results found!")
    await ctx.sender.text(message.chat_id, summary.render(query))


async def handle_ytsearch(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    query = parsed.text
    if not query:
        return await _usage(ctx, message, parsed, "<query>")
    try:
        video = await ctx.youtube.top_video(query)
    except RemoteServiceError as e:
        _log_failure("ytsearch", message, e)
        return await ctx.sender.text(message.chat_id, "❌ YouTube search failed.")
    await ctx.sender.text(message.chat_id, video.render(query))


async def handle_kakuli(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    prompt = parsed.text
    if not prompt:
        return await ctx.sender.text(
            message.chat_id, "❌ Please provide a description after !kakuli command."
        )
    try:
        image = await ctx.gemini.generate_image(prompt)
    except EmptyGenerationError as e:
        _log_failure("kakuli", message, e)
        return await ctx.sender.text(
            message.chat_id, "❌ No image could be generated. Try a different prompt."
        )
    except RemoteServiceError as e:
        _log_failure("kakuli", message, e)
        return await ctx.sender.text(message.chat_id, "❌ Kakuli Failed.")

    ext = _IMAGE_EXTENSIONS.get(image.mimetype, "png")
    await ctx.sender.image(message.chat_id, image.data, KAKULI_CAPTION, filename=f"kakuli.{ext}")


async def handle_image(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    query = parsed.text
    if not query:
        return await _usage(ctx, message, parsed, "<query>")
    try:
        photo = await ctx.unsplash.first_photo(query)
        data = await ctx.unsplash.download(photo)
    except RemoteServiceError as e:
        _log_failure("image", message, e)
        return await ctx.sender.text(message.chat_id, "❌ No photos found!")
    await ctx.sender.image(message.chat_id, data, photo.caption(query), filename="unsplash.jpg")
