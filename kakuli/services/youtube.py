"""Top video search via the YouTube Data API v3."""
from __future__ import annotations

from dataclasses import dataclass

from .base import RemoteService, require

API_URL = "https://www.googleapis.com/youtube/v3/search"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
DESCRIPTION_PREVIEW = 100


@dataclass(frozen=True)
class VideoResult:
    video_id: str
    title: str
    description: str

    @property
    def url(self) -> str:
        return WATCH_URL.format(video_id=self.video_id)

    def render(self, query: str) -> str:
        return (
            f"🎥 *Top Result for \"{query}\"*\n\n"
            f"*{self.title}*\n"
            f"{self.description[:DESCRIPTION_PREVIEW]}...\n"
            f"🔗 {self.url}"
        )


class YouTubeClient(RemoteService):
    name = "YouTube"

    async def top_video(self, query: str) -> VideoResult:
        data = await self.http.get_json(
            API_URL,
            params={
                "part": "snippet",
                "q": query,
                "type": "video",
                "maxResults": 1,
                "key": self.require_key(),
            },
        )
        return VideoResult(
            video_id=require(data, "items", 0, "id", "videoId", service=self.name),
            title=require(data, "items", 0, "snippet", "title", service=self.name),
            description=require(data, "items", 0, "snippet", "description", service=self.name),
        )
