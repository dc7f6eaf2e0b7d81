"""
Interface the core consumes from a messaging transport.
[CA][IV]
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from ..types import MediaKind, MediaRef, OutboundPayload


class Transport(Protocol):
    async def send_message(self, target: str, payload: OutboundPayload) -> None:
        """Deliver one payload to a conversation."""
        ...

    def iter_media(self, ref: MediaRef, kind: MediaKind) -> AsyncIterator[bytes]:
        """Stream the decrypted bytes of an attachment in chunks."""
        ...
