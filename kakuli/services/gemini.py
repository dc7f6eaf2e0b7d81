"""
Generative text, image and speech via the Gemini ``generateContent`` API.
"""
from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from ..exceptions import EmptyGenerationError, RemoteServiceError
from ..http_client import SharedHttpClient
from ..utils.logging import get_logger
from .base import RemoteService, dig

logger = get_logger(__name__)

API_BASE = "https://generativelanguage.googleapis.com/v1beta/models"
TEXT_MODEL = "gemini-2.0-flash"
IMAGE_MODEL = "gemini-2.0-flash-preview-image-generation"
TTS_MODEL = "gemini-2.5-flash-preview-tts"


@dataclass(frozen=True)
class GeneratedImage:
    data: bytes
    mimetype: str = "image/png"


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _iter_parts(response: Dict[str, Any]) -> Iterator[Dict[str, Any]]:
    for candidate in _as_list(dig(response, "candidates")):
        for part in _as_list(dig(candidate, "content", "parts")):
            if isinstance(part, dict):
                yield part


def _inline_data(response: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for part in _iter_parts(response):
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data"):
            return inline
    return None


def _decode(data: str) -> bytes:
    try:
        return base64.b64decode(data, validate=False)
    except (binascii.Error, ValueError) as e:
        raise RemoteServiceError("Gemini returned a malformed inline payload") from e


class GeminiClient(RemoteService):
    """One client, three credentials: text, image generation and speech."""

    name = "Gemini"

    def __init__(
        self,
        http: SharedHttpClient,
        api_key: Optional[str],
        image_api_key: Optional[str] = None,
        tts_api_key: Optional[str] = None,
    ):
        super().__init__(http, api_key)
        self.image_api_key = image_api_key or api_key
        self.tts_api_key = tts_api_key or api_key

    async def _generate(self, model: str, key: Optional[str], payload: Dict[str, Any]) -> Dict[str, Any]:
        if not key:
            raise RemoteServiceError("Gemini API key is not configured")
        return await self.http.post_json(
            f"{API_BASE}/{model}:generateContent",
            payload,
            headers={"x-goog-api-key": key},
        )

    async def generate_text(self, prompt: str) -> str:
        """Return the first text part of the reply, or "" when there is none."""
        response = await self._generate(
            TEXT_MODEL,
            self.api_key,
            {"contents": [{"parts": [{"text": prompt}]}]},
        )
        for part in _iter_parts(response):
            if part.get("text"):
                return part["text"]
        return ""

    async def generate_image(self, prompt: str) -> GeneratedImage:
        """Return the first inline image of the reply."""
        response = await self._generate(
            IMAGE_MODEL,
            self.image_api_key,
            {
                "contents": [{"parts": [{"text": prompt}]}],
                "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
            },
        )
        inline = _inline_data(response)
        if inline is None:
            raise EmptyGenerationError("Gemini returned no image for this prompt")
        return GeneratedImage(
            data=_decode(inline["data"]),
            mimetype=inline.get("mimeType") or inline.get("mime_type") or "image/png",
        )

    async def synthesize_speech(self, text: str, voice: str) -> Optional[bytes]:
        """Return raw PCM (s16le, mono, 24 kHz) for ``text``, or None if no audio came back."""
        response = await self._generate(
            TTS_MODEL,
            self.tts_api_key,
            {
                "contents": [{"role": "user", "parts": [{"text": text}]}],
                "generationConfig": {
                    "responseModalities": ["AUDIO"],
                    "speechConfig": {
                        "voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}}
                    },
                },
            },
        )
        inline = _inline_data(response)
        if inline is None:
            return None
        return _decode(inline["data"])
