"""
Everything a command handler may touch, built once at startup.
"""
from __future__ import annotations

from dataclasses import dataclass

from .config import BotConfig
from .http_client import SharedHttpClient
from .inflight import InFlightGuard
from .media.image_sticker import ImageStickerConverter
from .media.video_sticker import VideoStickerConverter
from .media.workdir import ArtifactDir
from .sender import OutboundSender
from .services import GeminiClient, UnsplashClient, WeatherClient, WikipediaClient, YouTubeClient
from .transport.base import Transport
from .tts import VoiceSynthesizer


@dataclass
class BotContext:
    config: BotConfig
    transport: Transport
    sender: OutboundSender
    http: SharedHttpClient
    guard: InFlightGuard
    workdir: ArtifactDir
    gemini: GeminiClient
    weather: WeatherClient
    wikipedia: WikipediaClient
    youtube: YouTubeClient
    unsplash: UnsplashClient
    image_stickers: ImageStickerConverter
    video_stickers: VideoStickerConverter
    synthesizer: VoiceSynthesizer

    @classmethod
    def build(
        cls, config: BotConfig, transport: Transport, http: SharedHttpClient
    ) -> "BotContext":
        """Wire services and converters from ``config``."""
        workdir = ArtifactDir(config.temp_dir)
        gemini = GeminiClient(
            http,
            config.gemini_api_key,
            image_api_key=config.image_key,
            tts_api_key=config.tts_key,
        )
        return cls(
            config=config,
            transport=transport,
            sender=OutboundSender(transport),
            http=http,
            guard=InFlightGuard(),
            workdir=workdir,
            gemini=gemini,
            weather=WeatherClient(http, config.weather_api_key),
            wikipedia=WikipediaClient(http, None),
            youtube=YouTubeClient(http, config.youtube_api_key),
            unsplash=UnsplashClient(http, config.unsplash_access_key),
            image_stickers=ImageStickerConverter(config.sticker_font_path),
            video_stickers=VideoStickerConverter(
                workdir,
                ffmpeg_bin=config.ffmpeg_bin,
                ffprobe_bin=config.ffprobe_bin,
                timeout_s=config.ffmpeg_timeout_s,
            ),
            synthesizer=VoiceSynthesizer(
                gemini,
                workdir,
                ffmpeg_bin=config.ffmpeg_bin,
                timeout_s=config.ffmpeg_timeout_s,
            ),
        )
