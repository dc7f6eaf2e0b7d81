"""
Per-message in-flight guard. [RM]

A single inbound event must never start two overlapping media jobs. The
guard is plain synchronous state: under asyncio the check-and-insert in
``acquire`` cannot be interleaved because there is no await inside it.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Set

from .utils.logging import get_logger

logger = get_logger(__name__)


class InFlightGuard:
    """Set of message ids currently being processed."""

    def __init__(self) -> None:
        self._active: Set[str] = set()

    def acquire(self, message_id: str) -> bool:
        """Claim ``message_id``. Returns False (no-op) if already claimed."""
        if message_id in self._active:
            logger.debug(
                f"Duplicate dispatch dropped for msg_id: {message_id}",
                extra={"subsys": "inflight", "event": "guard.duplicate", "msg_id": message_id},
            )
            return False
        self._active.add(message_id)
        return True

    def release(self, message_id: str) -> None:
        """Forget ``message_id``. Safe to call for ids that are not held."""
        self._active.discard(message_id)

    @contextmanager
    def hold(self, message_id: str) -> Iterator[bool]:
        """Yield whether the id was acquired; release it on every exit path."""
        acquired = self.acquire(message_id)
        try:
            yield acquired
        finally:
            if acquired:
                self.release(message_id)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._active

    def __len__(self) -> int:
        return len(self._active)
