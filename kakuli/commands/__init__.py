"""Command handlers, keyed by the command they serve."""
from ..types import Command
from .help import handle_help
from .remote_cmds import (
    handle_chat,
    handle_image,
    handle_kakuli,
    handle_weather,
    handle_wiki,
    handle_ytsearch,
)
from .sticker_cmds import handle_sticker, handle_text_sticker
from .voice_cmds import handle_voice

HANDLERS = {
    Command.HELP: handle_help,
    Command.STICKER: handle_sticker,
    Command.TEXT_STICKER: handle_text_sticker,
    Command.CHAT: handle_chat,
    Command.WEATHER: handle_weather,
    Command.WIKI: handle_wiki,
    Command.YTSEARCH: handle_ytsearch,
    Command.KAKULI: handle_kakuli,
    Command.VOICE: handle_voice,
    Command.IMAGE: handle_image,
}

__all__ = ["HANDLERS"]
