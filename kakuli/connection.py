"""
Reconnect loop around a long-running transport session. [REH]

A session that returns normally ends the loop. A failed session is retried
with exponential backoff until ``max_attempts`` consecutive failures; an
authentication failure is never retried. Reaching the open state resets the
failure count. After ``stop()`` no further attempt is made and a pending
backoff ends early.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

import aiohttp
import discord

from .retry_utils import RetryConfig, calculate_delay
from .types import ConnectionEvent, ConnectionState
from .utils.logging import get_logger

logger = get_logger(__name__)

# Gateway close codes that mean the credentials or intents are wrong
FATAL_CLOSE_CODES = {4004, 4010, 4011, 4012, 4013, 4014}


def is_reconnect_eligible(error: BaseException) -> bool:
    """True for network-level failures, False for login or configuration failures."""
    if isinstance(error, (discord.LoginFailure, discord.PrivilegedIntentsRequired)):
        return False
    if isinstance(error, discord.ConnectionClosed):
        return error.code not in FATAL_CLOSE_CODES
    return isinstance(
        error,
        (
            discord.HTTPException,
            discord.GatewayNotFound,
            aiohttp.ClientError,
            asyncio.TimeoutError,
            OSError,
        ),
    )


class ReconnectLoop:
    """Runs ``connect`` until it returns cleanly, fails for good, or is stopped."""

    def __init__(
        self,
        max_attempts: int = 5,
        base_delay: float = 5.0,
        *,
        max_delay: float = 300.0,
        is_eligible: Callable[[BaseException], bool] = is_reconnect_eligible,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ):
        self.retry_config = RetryConfig(
            max_attempts=max_attempts,
            base_delay=base_delay,
            max_delay=max_delay,
            exponential_base=2.0,
            jitter=True,
        )
        self.is_eligible = is_eligible
        self._sleep = sleep
        self._stopped: Optional[asyncio.Event] = None
        self.failures = 0

    @property
    def stopped(self) -> asyncio.Event:
        """Set once shutdown begins; no further connection attempts are made."""
        if self._stopped is None:
            self._stopped = asyncio.Event()
        return self._stopped

    def stop(self) -> None:
        self.stopped.set()

    def mark_open(self) -> None:
        if self.failures:
            logger.info(
                f"✅ Connection restored after {self.failures} failure(s)",
                extra={"subsys": "connection", "event": "connection.restored"},
            )
        self.failures = 0

    def on_event(self, event: ConnectionEvent) -> None:
        """Listener for transport connection events."""
        if event.state is ConnectionState.OPEN:
            logger.info("✅ Connected", extra={"subsys": "connection", "event": "connection.open"})
            self.mark_open()
        else:
            logger.warning(
                f"⚠️ Connection closed (reconnect={event.reconnect}, reason={event.reason})",
                extra={"subsys": "connection", "event": "connection.close"},
            )

    async def _wait(self, delay: float) -> None:
        """Back off for ``delay`` seconds, waking early when stopped."""
        if self._sleep is not None:
            await self._sleep(delay)
            return
        try:
            await asyncio.wait_for(self.stopped.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass

    def _stop_requested(self) -> bool:
        if self.stopped.is_set():
            logger.info(
                "Stop requested, not reconnecting",
                extra={"subsys": "connection", "event": "connection.stopped"},
            )
            return True
        return False

    async def run(self, connect: Callable[[], Awaitable[None]]) -> None:
        max_attempts = self.retry_config.max_attempts
        while not self._stop_requested():
            try:
                logger.info(
                    f"Connecting... (attempt {self.failures + 1}/{max_attempts})",
                    extra={"subsys": "connection", "event": "connection.attempt"},
                )
                await connect()
                logger.info(
                    "Session ended", extra={"subsys": "connection", "event": "connection.ended"}
                )
                return
            except Exception as e:
                if self._stop_requested():
                    return
                if not self.is_eligible(e):
                    logger.error(
                        f"❌ Not reconnecting: {type(e).__name__}: {e}",
                        extra={"subsys": "connection", "event": "connection.fatal"},
                    )
                    raise

                self.failures += 1
                if self.failures >= max_attempts:
                    logger.error(
                        f"❌ Giving up after {self.failures} consecutive connection failures",
                        extra={"subsys": "connection", "event": "connection.exhausted"},
                    )
                    raise

                delay = calculate_delay(self.failures - 1, self.retry_config)
                logger.warning(
                    f"⚠️ Connection failed ({type(e).__name__}: {e}), retrying in {delay:.1f}s...",
                    extra={"subsys": "connection", "event": "connection.retry"},
                )
                await self._wait(delay)
