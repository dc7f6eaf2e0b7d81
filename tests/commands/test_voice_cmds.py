from unittest.mock import AsyncMock

import pytest

import kakuli.tts.synthesizer as synthesizer
from kakuli.command_parser import parse_command
from kakuli.commands.voice_cmds import USAGE, handle_voice, split_voice_args
from kakuli.exceptions import RemoteServiceError
from kakuli.types import AudioPayload


@pytest.fixture
def fake_encoder(monkeypatch):
    async def encode(pcm, output_path, **kwargs):
        output_path.write_bytes(b"ID3" + pcm)
        return output_path

    monkeypatch.setattr(synthesizer, "pcm_to_mp3", encode)


async def _voice(ctx, message):
    await handle_voice(ctx, message, parse_command(message.content))


def test_split_on_last_comma():
    assert split_voice_args("Hello, world,Orus") == ("Hello, world", "Orus")
    assert split_voice_args("Hello world") is None
    assert split_voice_args(",Orus") is None
    assert split_voice_args("Hello,") is None


@pytest.mark.asyncio
async def test_voice_sends_mp3_and_deletes_it(bot_ctx, transport, make_message, fake_encoder):
    bot_ctx.gemini.synthesize_speech = AsyncMock(return_value=b"\x00\x01")

    await _voice(bot_ctx, make_message("!voice Hello,Orus"))

    (payload,) = transport.payloads
    assert isinstance(payload, AudioPayload)
    assert payload.mimetype == "audio/mpeg"
    assert transport.audio_existed == [True]
    assert not payload.path.exists()
    bot_ctx.gemini.synthesize_speech.assert_awaited_once_with("Hello", "Orus")


@pytest.mark.asyncio
async def test_voice_usage(bot_ctx, transport, make_message):
    await _voice(bot_ctx, make_message("!voice Hello"))
    assert transport.texts == [USAGE]


@pytest.mark.asyncio
async def test_invalid_voice_lists_voices_without_calling_api(bot_ctx, transport, make_message):
    await _voice(bot_ctx, make_message("!voice Hello,Robot"))

    (text,) = transport.texts
    assert text.startswith("❌ No voice available with that name.\nAvailable voices: Achernar")
    assert "Zephyr" in text
    bot_ctx.gemini.synthesize_speech.assert_not_called()


@pytest.mark.asyncio
async def test_remote_failure_gives_failure_reply(bot_ctx, transport, make_message, fake_encoder):
    bot_ctx.gemini.synthesize_speech = AsyncMock(side_effect=RemoteServiceError("boom", 500))

    await _voice(bot_ctx, make_message("!voice Hello,Kore"))

    assert transport.texts == ["❌ Failed to generate voice."]
    assert not bot_ctx.workdir.root.exists() or not any(bot_ctx.workdir.root.iterdir())


@pytest.mark.asyncio
async def test_length_is_checked_before_voice_name(bot_ctx, transport, make_message):
    await _voice(bot_ctx, make_message("!voice " + "x" * 501 + ",Robot"))

    assert transport.texts == ["❌ Text exceeds 500 character limit."]
    bot_ctx.gemini.synthesize_speech.assert_not_called()
