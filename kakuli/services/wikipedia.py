"""Encyclopedia lookup via the Wikipedia REST page-summary endpoint."""
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from ..exceptions import RemoteServiceError
from .base import RemoteService, dig

API_URL = "https://en.wikipedia.org/api/rest_v1/page/summary/{title}"


@dataclass(frozen=True)
class WikiSummary:
    title: str
    extract: str

    def render(self, query: str) -> str:
        return f"📖 *Wikipedia: {query}*\n\n{self.extract}"


class WikipediaClient(RemoteService):
    """Keyless API; ``api_key`` is accepted for a uniform constructor."""

    name = "Wikipedia"

    async def summary(self, query: str) -> WikiSummary:
        title = quote(query.strip().replace(" ", "_"), safe="")
        data = await self.http.get_json(API_URL.format(title=title))
        if dig(data, "type") == "disambiguation":
            raise RemoteServiceError(f"'{query}' is ambiguous on Wikipedia")
        extract = dig(data, "extract")
        if not isinstance(extract, str) or not extract.strip():
            raise RemoteServiceError(f"Wikipedia has no summary for '{query}'")
        page_title = dig(data, "title")
        return WikiSummary(title=page_title if isinstance(page_title, str) else query, extract=extract)
