"""
Graceful shutdown: close the gateway session, the shared HTTP client and
remove the media working directory.
"""
from __future__ import annotations

import asyncio
import signal
from typing import Optional

import discord

from .connection import ReconnectLoop
from .http_client import SharedHttpClient
from .media.workdir import ArtifactDir
from .utils.logging import get_logger

logger = get_logger(__name__)


class GracefulShutdown:
    """Handles graceful shutdown of the bot."""

    def __init__(
        self,
        client: discord.Client,
        http: SharedHttpClient,
        workdir: ArtifactDir,
        timeout: float = 30.0,
        reconnect: Optional[ReconnectLoop] = None,
    ):
        self.client = client
        self.http = http
        self.workdir = workdir
        self.timeout = timeout
        self.reconnect = reconnect
        self.shutdown_in_progress = False
        self._task: Optional[asyncio.Task] = None

    def install(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        """Route SIGINT and SIGTERM to ``request_shutdown``."""
        loop = loop or asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown, sig)
            except NotImplementedError:
                # Event loops without signal support (Windows)
                signal.signal(sig, lambda s, _frame: loop.call_soon_threadsafe(self.request_shutdown, s))
        logger.info("Signal handlers configured for graceful shutdown", extra={"subsys": "shutdown"})

    def request_shutdown(self, signal_num: Optional[int] = None) -> None:
        if self._task is None:
            self._task = asyncio.ensure_future(self.execute_shutdown(signal_num))

    async def execute_shutdown(self, signal_num: Optional[int] = None) -> None:
        """Stop reconnecting and close the client; ``cleanup`` runs once the session loop returns."""
        if self.shutdown_in_progress:
            logger.warning("Shutdown already in progress", extra={"subsys": "shutdown"})
            return
        self.shutdown_in_progress = True

        if signal_num:
            logger.info(
                f"🔄 Received signal {signal_num}, initiating graceful shutdown...",
                extra={"subsys": "shutdown", "event": "shutdown.signal"},
            )
        if self.reconnect is not None:
            self.reconnect.stop()
        try:
            if not self.client.is_closed():
                await asyncio.wait_for(self.client.close(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(
                f"❌ Client close timed out after {self.timeout}s",
                extra={"subsys": "shutdown", "event": "shutdown.timeout"},
            )

    async def cleanup(self) -> None:
        """Release process-wide resources. Safe to call more than once."""
        if not self.client.is_closed():
            await self.client.close()
        await self.http.stop()
        try:
            self.workdir.remove()
        except OSError as e:
            logger.error(
                f"❌ Cleanup error: {e}",
                extra={"subsys": "shutdown", "event": "workdir.remove_failed"},
            )
        logger.info("✅ Shutdown complete", extra={"subsys": "shutdown", "event": "shutdown.done"})
