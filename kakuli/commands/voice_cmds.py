"""!voice <text>,<Voice>"""
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Tuple

from ..exceptions import BotBaseException, InputValidationError
from ..types import InboundMessage, ParsedCommand
from ..utils.logging import get_logger

if TYPE_CHECKING:
    from pathlib import Path

    from ..context import BotContext

logger = get_logger(__name__)

USAGE = "❌ Usage: !voice Your text here,VoiceName\nExample: !voice Hello,Orus"
FAILURE = "❌ Failed to generate voice."


def split_voice_args(raw: str) -> Optional[Tuple[str, str]]:
    """Split on the last comma so the spoken text may itself contain commas."""
    text, sep, voice = raw.rpartition(",")
    text, voice = text.strip(), voice.strip()
    if not sep or not text or not voice:
        return None
    return text, voice


async def handle_voice(ctx: "BotContext", message: InboundMessage, parsed: ParsedCommand) -> None:
    args = split_voice_args(parsed.text)
    if args is None:
        await ctx.sender.text(message.chat_id, USAGE)
        return
    text, voice = args

    output: Optional["Path"] = None
    try:
        output = await ctx.synthesizer.synthesize(text, voice, message.id)
        await ctx.sender.audio(message.chat_id, output, "audio/mpeg")
        logger.info(
            f"🔊 Voice note sent ({voice})",
            extra={"subsys": "tts", "event": "voice.sent", "msg_id": message.id},
        )
    except InputValidationError as e:
        await ctx.sender.text(message.chat_id, f"❌ {e}")
    except BotBaseException as e:
        logger.error(
            f"❌ Voice generation failed: {e}",
            extra={"subsys": "tts", "event": "voice.failed", "msg_id": message.id},
        )
        await ctx.sender.text(message.chat_id, FAILURE)
    finally:
        if output is not None:
            ctx.workdir.discard(output)
