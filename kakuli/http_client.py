"""
Shared async HTTP client for every remote service adapter. [PA][RM]

- One pooled ``httpx.AsyncClient`` for the whole process
- Transient failures (timeouts, 429, 5xx) retried with backoff
- Every non-success outcome surfaces as ``RemoteServiceError``
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Optional

import httpx

from .exceptions import RemoteServiceError
from .retry_utils import API_RETRY_CONFIG, RetryConfig, retry_async
from .utils.logging import SensitiveDataFilter, get_logger

logger = get_logger(__name__)

USER_AGENT = "kakuli-bot/1.0"


class SharedHttpClient:
    """Shared async HTTP client with pooled connections and retries. [PA][RM]"""

    def __init__(
        self,
        timeout_s: float = 30.0,
        retry_config: RetryConfig = API_RETRY_CONFIG,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout_s = timeout_s
        self.retry_config = retry_config
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.stop()

    async def start(self) -> None:
        if self.client is not None:
            return  # Already started

        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout_s, connect=10.0),
            limits=httpx.Limits(max_connections=32, max_keepalive_connections=16),
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            transport=self._transport,
        )
        logger.info("🌐 SharedHttpClient started", extra={"subsys": "http"})

    async def stop(self) -> None:
        if self.client is None:
            return
        await self.client.aclose()
        self.client = None
        logger.info("SharedHttpClient closed", extra={"subsys": "http"})

    def _require_client(self) -> httpx.AsyncClient:
        if self.client is None:
            raise RuntimeError("SharedHttpClient.start() must be awaited before use")
        return self.client

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request with retries; raise RemoteServiceError on failure."""
        client = self._require_client()

        async def _do() -> httpx.Response:
            response = await client.request(method, url, **kwargs)
            if response.status_code >= 400:
                raise RemoteServiceError(
                    f"{method} {response.url.host} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            return response

        try:
            return await retry_async(_do, self.retry_config)
        except RemoteServiceError:
            raise
        except httpx.HTTPError as e:
            logger.warning(
                SensitiveDataFilter.scrub_text(f"⚠️ {method} {url} failed: {e}"),
                extra={"subsys": "http", "event": "request.failed"},
            )
            raise RemoteServiceError(f"Network error talking to {httpx.URL(url).host}") from e

    async def get_json(self, url: str, params: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Any:
        response = await self.request("GET", url, params=params, **kwargs)
        return _decode_json(response)

    async def post_json(self, url: str, payload: Dict[str, Any], **kwargs: Any) -> Any:
        response = await self.request("POST", url, json=payload, **kwargs)
        return _decode_json(response)

    async def get_bytes(self, url: str, **kwargs: Any) -> bytes:
        response = await self.request("GET", url, **kwargs)
        return response.content

    async def stream_bytes(self, url: str, chunk_size: int = 64 * 1024) -> AsyncIterator[bytes]:
        """Yield the body of ``url`` in chunks. No retries: a partial stream is not resumable."""
        client = self._require_client()
        async with client.stream("GET", url) as response:
            if response.status_code >= 400:
                raise RemoteServiceError(
                    f"GET {response.url.host} returned HTTP {response.status_code}",
                    status_code=response.status_code,
                )
            async for chunk in response.aiter_bytes(chunk_size):
                yield chunk


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise RemoteServiceError(f"Invalid JSON from {response.url.host}") from e
