"""Retrieve an attachment referenced by a message into memory."""
from __future__ import annotations

from typing import Optional

from ..exceptions import MediaDownloadError
from ..transport.base import Transport
from ..types import MediaBuffer, MediaKind, MediaRef
from ..utils.logging import get_logger

logger = get_logger(__name__)


async def fetch_media(
    transport: Transport,
    ref: MediaRef,
    kind: MediaKind,
    *,
    max_bytes: Optional[int] = None,
) -> MediaBuffer:
    """
    Concatenate the transport's chunk stream for ``ref`` into one buffer.

    Raises:
        MediaDownloadError: if the stream errors, ends with zero bytes, or
            grows past ``max_bytes``.
    """
    chunks = []
    total = 0
    try:
        async for chunk in transport.iter_media(ref, kind):
            chunks.append(chunk)
            total += len(chunk)
            if max_bytes is not None and total > max_bytes:
                raise MediaDownloadError(
                    f"Attachment is too large (limit {max_bytes // (1024 * 1024)} MB)."
                )
    except MediaDownloadError:
        raise
    except Exception as e:
        logger.warning(
            f"⚠️ Media download failed for {ref.filename or ref.url}: {e}",
            extra={"subsys": "media", "event": "download.failed"},
        )
        raise MediaDownloadError("Failed to download the media. Please try again.") from e

    if total == 0:
        raise MediaDownloadError("The media could not be downloaded (empty file).")

    logger.debug(
        f"📥 Downloaded {kind.value} ({total} bytes)",
        extra={"subsys": "media", "event": "download.ok"},
    )
    return MediaBuffer(data=b"".join(chunks), kind=kind)
