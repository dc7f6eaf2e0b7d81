"""Configuration loading and environment setup."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .utils.env import get_float, get_int, get_str
from .utils.logging import get_logger

logger = get_logger(__name__)

# Load environment variables from .env file with explicit path
load_dotenv(dotenv_path=Path.cwd() / ".env", verbose=False)

# Also try loading from the project root in case we're running from a subdirectory
load_dotenv(dotenv_path=Path(__file__).parent.parent / ".env", verbose=False)

REQUIRED_VARS = ("DISCORD_TOKEN",)

# Keys whose absence disables a single command rather than the whole bot
OPTIONAL_KEYS = (
    "GEMINI_API_KEY",
    "WEATHER_API_KEY",
    "YT_API_KEY",
    "UNSPLASH_ACCESS_KEY",
)


@dataclass(frozen=True)
class BotConfig:
    """Runtime settings and credentials handed to the dispatcher at construction."""

    discord_token: Optional[str] = None
    gemini_api_key: Optional[str] = None
    gemini_image_api_key: Optional[str] = None
    gemini_tts_api_key: Optional[str] = None
    weather_api_key: Optional[str] = None
    youtube_api_key: Optional[str] = None
    unsplash_access_key: Optional[str] = None

    command_prefix: str = "!"
    temp_dir: Path = field(default_factory=lambda: Path("temp_stickers"))
    ffmpeg_bin: str = "ffmpeg"
    ffprobe_bin: str = "ffprobe"
    ffmpeg_timeout_s: float = 120.0
    http_timeout_s: float = 30.0
    max_media_bytes: int = 64 * 1024 * 1024
    sticker_font_path: Optional[str] = None

    reconnect_max_attempts: int = 5
    reconnect_base_delay_s: float = 5.0

    @property
    def image_key(self) -> Optional[str]:
        return self.gemini_image_api_key or self.gemini_api_key

    @property
    def tts_key(self) -> Optional[str]:
        return self.gemini_tts_api_key or self.gemini_api_key

    def redacted(self) -> dict:
        """Config summary safe for logging: credentials masked."""
        summary = {}
        for name, value in self.__dict__.items():
            if value and ("key" in name or "token" in name):
                value = "********"
            summary[name] = value
        return summary


def validate_required_env() -> None:
    """Validate that all required environment variables are present."""
    missing_vars = [var for var in REQUIRED_VARS if not os.getenv(var)]
    if missing_vars:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing_vars)}"
        )

    for var in OPTIONAL_KEYS:
        if not os.getenv(var):
            logger.warning(
                f"⚠️ {var} is not set; commands that depend on it will fail",
                extra={"subsys": "config", "event": "config.optional_missing"},
            )


def load_config() -> BotConfig:
    """Load configuration from environment variables."""
    return BotConfig(
        discord_token=get_str("DISCORD_TOKEN"),
        gemini_api_key=get_str("GEMINI_API_KEY"),
        gemini_image_api_key=get_str("GEMINI_IMAGE_API_KEY"),
        gemini_tts_api_key=get_str("GEMINI_TTS_API_KEY"),
        weather_api_key=get_str("WEATHER_API_KEY"),
        youtube_api_key=get_str("YT_API_KEY"),
        unsplash_access_key=get_str("UNSPLASH_ACCESS_KEY"),
        command_prefix=get_str("COMMAND_PREFIX", "!"),
        temp_dir=Path(get_str("TEMP_DIR", "temp_stickers")),
        ffmpeg_bin=get_str("FFMPEG_BIN", "ffmpeg"),
        ffprobe_bin=get_str("FFPROBE_BIN", "ffprobe"),
        ffmpeg_timeout_s=get_float("FFMPEG_TIMEOUT_S", 120.0),
        http_timeout_s=get_float("HTTP_TIMEOUT_S", 30.0),
        max_media_bytes=get_int("MAX_MEDIA_BYTES", 64 * 1024 * 1024),
        sticker_font_path=get_str("STICKER_FONT_PATH"),
        reconnect_max_attempts=get_int("RECONNECT_MAX_ATTEMPTS", 5),
        reconnect_base_delay_s=get_float("RECONNECT_BASE_DELAY_S", 5.0),
    )
