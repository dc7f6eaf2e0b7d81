"""
Raster image -> static 512x512 WEBP sticker, with optional caption overlay.

Order matters: resize, then composite the text layer, then encode.
"""
from __future__ import annotations

import asyncio
import io
from typing import Optional

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from ..exceptions import ConversionError, InputValidationError
from ..utils.logging import get_logger

logger = get_logger(__name__)

STICKER_SIZE = 512
WEBP_QUALITY = 90
MAX_OVERLAY_CHARS = 30
FONT_SIZE = 48
STROKE_WIDTH = 2
DEFAULT_FONT = "DejaVuSans-Bold.ttf"


class ImageStickerConverter:
    """Converts still images into padded, transparent-background stickers."""

    def __init__(self, font_path: Optional[str] = None):
        self.font_path = font_path
        self._font: Optional[ImageFont.FreeTypeFont] = None

    def _load_font(self):
        if self._font is not None:
            return self._font
        for candidate in filter(None, (self.font_path, DEFAULT_FONT)):
            try:
                self._font = ImageFont.truetype(candidate, FONT_SIZE)
                return self._font
            except OSError:
                logger.debug(
                    f"Font {candidate} unavailable",
                    extra={"subsys": "sticker", "event": "font.missing"},
                )
        self._font = ImageFont.load_default(size=FONT_SIZE)
        return self._font

    def render(self, data: bytes, text: Optional[str] = None) -> bytes:
        """Synchronous conversion; see ``convert`` for the async entry point."""
        if text is not None and len(text) > MAX_OVERLAY_CHARS:
            raise InputValidationError(
                f"Text too long! Please keep it under {MAX_OVERLAY_CHARS} characters for stickers."
            )

        try:
            with Image.open(io.BytesIO(data)) as src:
                src = ImageOps.exif_transpose(src)
                image = src.convert("RGBA")
        except (UnidentifiedImageError, OSError) as e:
            raise ConversionError("Could not read the image.") from e

        image = ImageOps.contain(image, (STICKER_SIZE, STICKER_SIZE), Image.LANCZOS)
        canvas = Image.new("RGBA", (STICKER_SIZE, STICKER_SIZE), (0, 0, 0, 0))
        offset = (
            (STICKER_SIZE - image.width) // 2,
            (STICKER_SIZE - image.height) // 2,
        )
        canvas.paste(image, offset, image)

        if text:
            layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            draw = ImageDraw.Draw(layer)
            draw.text(
                (STICKER_SIZE / 2, STICKER_SIZE / 2),
                text,
                font=self._load_font(),
                fill="white",
                anchor="mm",
                stroke_width=STROKE_WIDTH,
                stroke_fill="black",
            )
            canvas = Image.alpha_composite(canvas, layer)

        out = io.BytesIO()
        canvas.save(out, format="WEBP", quality=WEBP_QUALITY)
        return out.getvalue()

    async def convert(self, data: bytes, text: Optional[str] = None) -> bytes:
        """Decode, fit, overlay and encode off the event loop."""
        result = await asyncio.to_thread(self.render, data, text)
        logger.debug(
            f"🖼️ Image sticker encoded ({len(result)} bytes)",
            extra={"subsys": "sticker", "event": "image.encoded"},
        )
        return result
