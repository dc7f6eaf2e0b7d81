"""
Routes one inbound message to exactly one command handler. [REH]

The dispatcher is the final error net: nothing raised by a handler, or by
sending the error reply, propagates to the transport's event loop.
"""
from __future__ import annotations

from typing import Awaitable, Callable, Mapping, Optional

from .command_parser import parse_command
from .commands import HANDLERS
from .context import BotContext
from .exceptions import BotBaseException, ConfigurationError
from .types import Command, InboundMessage, ParsedCommand
from .utils.logging import get_logger

logger = get_logger(__name__)

Handler = Callable[[BotContext, InboundMessage, ParsedCommand], Awaitable[None]]

GENERIC_FAILURE = "❌ Something went wrong. Please try again."


class Dispatcher:
    """Maps every Command to its handler and runs it for inbound messages."""

    def __init__(self, ctx: BotContext, handlers: Optional[Mapping[Command, Handler]] = None):
        self.ctx = ctx
        self.handlers = dict(HANDLERS if handlers is None else handlers)
        missing = [c.name for c in Command if c not in self.handlers]
        if missing:
            raise ConfigurationError(f"No handler registered for: {', '.join(missing)}")

    async def dispatch(self, message: InboundMessage) -> Optional[Command]:
        """Handle ``message``; return the command that ran, or None if it was ignored."""
        try:
            parsed = parse_command(message.content, self.ctx.config.command_prefix)
        except Exception as e:
            logger.error(
                f"❌ Failed to parse message: {e}",
                exc_info=True,
                extra={"subsys": "dispatch", "event": "parse.failed", "msg_id": message.id},
            )
            return None
        if parsed is None:
            return None

        logger.info(
            f"⚙️ {parsed.token} from {message.sender_id}",
            extra={
                "subsys": "dispatch",
                "event": "command.start",
                "msg_id": message.id,
                "chat_id": message.chat_id,
                "user_id": message.sender_id,
            },
        )
        try:
            await self.handlers[parsed.command](self.ctx, message, parsed)
        except BotBaseException as e:
            logger.warning(
                f"⚠️ {parsed.command.name} failed: {e}",
                extra={"subsys": "dispatch", "event": "command.failed", "msg_id": message.id},
            )
            await self._reply_error(message, f"❌ {e}")
        except Exception as e:
            logger.error(
                f"❌ Unhandled error in {parsed.command.name}: {e}",
                exc_info=True,
                extra={"subsys": "dispatch", "event": "command.crashed", "msg_id": message.id},
            )
            await self._reply_error(message, GENERIC_FAILURE)
        return parsed.command

    async def _reply_error(self, message: InboundMessage, text: str) -> None:
        try:
            await self.ctx.sender.text(message.chat_id, text)
        except Exception as e:
            logger.error(
                f"❌ Could not deliver error reply: {e}",
                extra={"subsys": "dispatch", "event": "reply.failed", "msg_id": message.id},
            )
