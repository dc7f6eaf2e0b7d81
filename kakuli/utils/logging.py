"""
Dual-sink logging: a Rich console for people and a JSONL file for tools.

Both sinks pass through ``SensitiveDataFilter`` so API keys never reach
either output.
"""
import json
import logging
import os
import re
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, NoReturn

from rich.logging import RichHandler

LEVEL_ICONS = ((logging.ERROR, "✖"), (logging.WARNING, "⚠"), (logging.INFO, "✔"))

THIRD_PARTY_LOGGERS = ("discord", "httpx", "httpcore", "aiohttp", "PIL")


class LevelIconFilter(logging.Filter):
    """Sets ``record.level_icon`` for the console format string."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.level_icon = next((icon for level, icon in LEVEL_ICONS if record.levelno >= level), "ℹ")
        return True


class JsonlFormatter(logging.Formatter):
    """One JSON object per line; keys in ``KEYS`` order, unset keys omitted."""

    KEYS = ("ts", "level", "name", "subsys", "chat_id", "user_id", "msg_id", "event", "detail")

    def format(self, record: logging.LogRecord) -> str:
        fields: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created).isoformat(sep=" ", timespec="milliseconds"),
            "level": record.levelname,
            "name": record.name,
            "detail": getattr(record, "detail", None) or record.getMessage(),
        }
        obj = {k: fields[k] if k in fields else getattr(record, k, None) for k in self.KEYS}
        obj = {k: v for k, v in obj.items() if v is not None}
        if record.exc_info:
            obj["exc"] = self.formatException(record.exc_info)
        return json.dumps(obj, ensure_ascii=False, default=str)


class SensitiveDataFilter(logging.Filter):
    """Redacts credentials. [SFT]

    Dict-valued extras are scrubbed by key name. Rendered messages are
    scrubbed for ``key=``, ``appid=`` and ``client_id=`` query parameters,
    which is how the weather, YouTube and Unsplash APIs take their keys.
    """

    SECRET_KEYS = {
        "DISCORD_TOKEN",
        "GEMINI_API_KEY",
        "GEMINI_IMAGE_API_KEY",
        "GEMINI_TTS_API_KEY",
        "WEATHER_API_KEY",
        "YT_API_KEY",
        "UNSPLASH_ACCESS_KEY",
        "Authorization",
        "x-goog-api-key",
        "api_key",
        "appid",
        "key",
        "token",
    }

    QUERY_SECRET = re.compile(r"(?i)\b(key|appid|client_id)=([^&\s\"']+)")

    def filter(self, record: logging.LogRecord) -> bool:
        for value in record.__dict__.values():
            if isinstance(value, dict):
                self._redact(value)
        record.msg = self.scrub_text(record.getMessage())
        record.args = None
        return True

    @classmethod
    def scrub_text(cls, text: str) -> str:
        return cls.QUERY_SECRET.sub(lambda m: f"{m.group(1)}=[REDACTED]", text)

    def _redact(self, obj: Dict[str, Any]) -> None:
        for k, v in obj.items():
            if isinstance(v, dict):
                self._redact(v)
            elif isinstance(v, str) and k in self.SECRET_KEYS:
                obj[k] = "[REDACTED]"


def init_logging() -> None:
    """Install the console and JSONL sinks on the root logger.

    ``LOG_LEVEL``, ``LOG_JSONL_PATH`` and ``THIRD_PARTY_LOG_LEVEL`` come from
    the environment.
    """
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    jsonl_path = Path(os.getenv("LOG_JSONL_PATH", "logs/bot.jsonl"))
    jsonl_path.parent.mkdir(parents=True, exist_ok=True)

    console = RichHandler(rich_tracebacks=True, show_path=False, enable_link_path=False)
    console.set_name("pretty_handler")
    console.addFilter(LevelIconFilter())
    console.setFormatter(logging.Formatter(fmt="%(level_icon)s %(message)s"))

    jsonl = logging.FileHandler(str(jsonl_path), encoding="utf-8")
    jsonl.set_name("jsonl_handler")
    jsonl.setFormatter(JsonlFormatter())

    for handler in (console, jsonl):
        handler.addFilter(SensitiveDataFilter())
    logging.basicConfig(handlers=[console, jsonl], level=level, force=True)

    third_party_level = os.getenv("THIRD_PARTY_LOG_LEVEL", "WARNING").upper()
    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(third_party_level)

    logging.getLogger(__name__).info(
        f"✔ Logging initialized (level={level}, jsonl={jsonl_path})", extra={"subsys": "logging"}
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def shutdown_logging_and_exit(exit_code: int) -> NoReturn:
    """Flush both sinks and exit the process."""
    logging.getLogger(__name__).info("Shutting down", extra={"subsys": "logging"})
    logging.shutdown()
    sys.exit(exit_code)
