from unittest.mock import AsyncMock

import pytest

from kakuli.commands import HANDLERS
from kakuli.dispatcher import GENERIC_FAILURE, Dispatcher
from kakuli.exceptions import ConfigurationError, InputValidationError
from kakuli.types import Command, Unknown


def test_default_table_covers_every_command(bot_ctx):
    dispatcher = Dispatcher(bot_ctx)
    assert set(dispatcher.handlers) == set(Command)
    assert set(HANDLERS) == set(Command)


def test_incomplete_table_is_rejected(bot_ctx):
    partial = {c: h for c, h in HANDLERS.items() if c is not Command.VOICE}
    with pytest.raises(ConfigurationError, match="VOICE"):
        Dispatcher(bot_ctx, partial)


def _table(**overrides):
    table = {c: AsyncMock() for c in Command}
    for name, handler in overrides.items():
        table[Command[name]] = handler
    return table


@pytest.mark.asyncio
async def test_routes_to_exactly_one_handler(bot_ctx, make_message):
    table = _table()
    dispatcher = Dispatcher(bot_ctx, table)

    result = await dispatcher.dispatch(make_message("!wiki Alan Turing"))

    assert result is Command.WIKI
    table[Command.WIKI].assert_awaited_once()
    _, _, parsed = table[Command.WIKI].await_args.args
    assert parsed.text == "Alan Turing"
    assert sum(h.await_count for h in table.values()) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("text", ["hello", "!unknown thing", ""])
async def test_non_commands_are_ignored(bot_ctx, transport, make_message, text):
    table = _table()
    assert await Dispatcher(bot_ctx, table).dispatch(make_message(text)) is None
    assert all(h.await_count == 0 for h in table.values())
    assert transport.sent == []


@pytest.mark.asyncio
async def test_unknown_content_is_ignored(bot_ctx, make_message):
    assert await Dispatcher(bot_ctx, _table()).dispatch(make_message(Unknown())) is None


@pytest.mark.asyncio
async def test_bot_error_becomes_reply(bot_ctx, transport, make_message):
    table = _table(CHAT=AsyncMock(side_effect=InputValidationError("Bad input.")))
    await Dispatcher(bot_ctx, table).dispatch(make_message("!chat hi"))
    assert transport.texts == ["❌ Bad input."]


@pytest.mark.asyncio
async def test_unexpected_error_never_escapes(bot_ctx, transport, make_message):
    table = _table(HELP=AsyncMock(side_effect=ZeroDivisionError()))
    assert await Dispatcher(bot_ctx, table).dispatch(make_message("!help")) is Command.HELP
    assert transport.texts == [GENERIC_FAILURE]


@pytest.mark.asyncio
async def test_failed_error_reply_is_contained(bot_ctx, transport, make_message):
    transport.send_message = AsyncMock(side_effect=ConnectionError("gone"))
    table = _table(HELP=AsyncMock(side_effect=RuntimeError("boom")))
    await Dispatcher(bot_ctx, table).dispatch(make_message("!help"))
    transport.send_message.assert_awaited_once()
