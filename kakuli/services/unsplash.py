"""
Photo search via the Unsplash API.

Unsplash requires every download to be reported to the photo's
``download_location`` endpoint.
"""
from __future__ import annotations

from dataclasses import dataclass

from ..utils.logging import get_logger
from .base import RemoteService, dig, require

logger = get_logger(__name__)

API_URL = "https://api.unsplash.com/search/photos"


@dataclass(frozen=True)
class PhotoResult:
    image_url: str
    download_location: str
    photographer: str
    description: str = ""

    def caption(self, query: str) -> str:
        return f"📷 *{query}*\nPhoto by {self.photographer} on Unsplash"


class UnsplashClient(RemoteService):
    name = "Unsplash"

    def _auth(self) -> dict:
        return {"Authorization": f"Client-ID {self.require_key()}", "Accept-Version": "v1"}

    async def first_photo(self, query: str) -> PhotoResult:
        data = await self.http.get_json(
            API_URL, params={"query": query, "per_page": 1}, headers=self._auth()
        )
        return PhotoResult(
            image_url=require(data, "results", 0, "urls", "regular", service=self.name),
            download_location=require(
                data, "results", 0, "links", "download_location", service=self.name
            ),
            photographer=dig(data, "results", 0, "user", "name") or "unknown",
            description=dig(data, "results", 0, "alt_description") or "",
        )

    async def download(self, photo: PhotoResult) -> bytes:
        """Fetch the image bytes and report the download to Unsplash."""
        data = await self.http.get_bytes(photo.image_url)
        await self.http.get_json(photo.download_location, headers=self._auth())
        logger.debug(
            "Unsplash download tracked",
            extra={"subsys": "unsplash", "event": "download.tracked"},
        )
        return data
