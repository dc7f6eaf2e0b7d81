"""!help / !menu"""
from __future__ import annotations

from typing import TYPE_CHECKING

from ..types import InboundMessage, ParsedCommand

if TYPE_CHECKING:
    from ..context import BotContext

HELP_MENU = (
    "📌 *Bot Menu* 📌\n\n"
    "!help - Show help\n"
    "!weather <city>\n"
    "!wiki <query>\n"
    "!ytsearch <query>\n"
    "!chat <prompt>\n"
    "!kakuli <prompt>\n"
    "!image <query> - Photo from Unsplash\n"
    "!voice <text>,<Voice> - Speak text with a voice\n"
    "!sticker - Create sticker from image/video\n"
    "!textsticker - Create sticker with text (max 30 chars, images only)"
)


async def handle_help(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    await ctx.sender.text(message.chat_id, HELP_MENU)
