"""
Shared fixtures: an in-memory transport and a bot context wired with real
converters and mocked remote services.
"""
import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from kakuli.config import BotConfig
from kakuli.context import BotContext
from kakuli.http_client import SharedHttpClient
from kakuli.inflight import InFlightGuard
from kakuli.media.image_sticker import ImageStickerConverter
from kakuli.media.video_sticker import VideoStickerConverter
from kakuli.media.workdir import ArtifactDir
from kakuli.sender import OutboundSender
from kakuli.services import GeminiClient, UnsplashClient, WeatherClient, WikipediaClient, YouTubeClient
from kakuli.tts import VoiceSynthesizer
from kakuli.types import AudioPayload, InboundMessage, PlainText


class FakeTransport:
    """Records outbound payloads and serves attachment bytes from a dict."""

    def __init__(self):
        self.sent = []
        self.media = {}
        self.audio_existed = []

    async def send_message(self, target, payload):
        if isinstance(payload, AudioPayload):
            self.audio_existed.append(payload.path.exists())
        self.sent.append((target, payload))

    async def iter_media(self, ref, kind):
        chunks = self.media.get(ref.url, [])
        if isinstance(chunks, Exception):
            raise chunks
        for chunk in chunks:
            yield chunk

    @property
    def payloads(self):
        return [payload for _, payload in self.sent]

    @property
    def texts(self):
        return [p.text for p in self.payloads if hasattr(p, "text")]


def _make_message(content, msg_id="m1", chat_id="c1", sender_id="u1"):
    if isinstance(content, str):
        content = PlainText(content)
    return InboundMessage(id=msg_id, chat_id=chat_id, sender_id=sender_id, content=content)


def _png_bytes(size=(64, 32), color=(255, 0, 0, 255)):
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def make_message():
    return _make_message


@pytest.fixture
def png_bytes():
    return _png_bytes


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def workdir(tmp_path):
    return ArtifactDir(tmp_path / "work")


@pytest.fixture
def bot_ctx(transport, workdir):
    config = BotConfig(
        discord_token="token",
        gemini_api_key="gemini-key",
        temp_dir=workdir.root,
    )
    gemini = MagicMock(spec=GeminiClient)
    return BotContext(
        config=config,
        transport=transport,
        sender=OutboundSender(transport),
        http=MagicMock(spec=SharedHttpClient),
        guard=InFlightGuard(),
        workdir=workdir,
        gemini=gemini,
        weather=MagicMock(spec=WeatherClient),
        wikipedia=MagicMock(spec=WikipediaClient),
        youtube=MagicMock(spec=YouTubeClient),
        unsplash=MagicMock(spec=UnsplashClient),
        image_stickers=ImageStickerConverter(),
        video_stickers=VideoStickerConverter(workdir),
        synthesizer=VoiceSynthesizer(gemini, workdir),
    )
