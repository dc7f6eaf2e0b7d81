"""
Base class and helpers for remote service adapters.
[CA][IV]
"""

from __future__ import annotations

from typing import Any, Optional

from ..exceptions import RemoteServiceError
from ..http_client import SharedHttpClient


class RemoteService:
    """Holds the shared HTTP client and the credential for one API."""

    name = "remote"

    def __init__(self, http: SharedHttpClient, api_key: Optional[str]):
        self.http = http
        self.api_key = api_key

    def require_key(self) -> str:
        if not self.api_key:
            raise RemoteServiceError(f"{self.name} API key is not configured")
        return self.api_key


def dig(data: Any, *path: Any) -> Any:
    """Follow ``path`` through nested dicts/lists; None if any step is missing."""
    current = data
    for step in path:
        try:
            current = current[step]
        except (KeyError, IndexError, TypeError):
            return None
    return current


def require(data: Any, *path: Any, service: str = "remote") -> Any:
    """Like ``dig`` but treats a missing field as a failed call."""
    value = dig(data, *path)
    if value is None:
        raise RemoteServiceError(
            f"{service} response is missing field {'.'.join(str(p) for p in path)}"
        )
    return value
