"""Messaging transports. The core only depends on the protocol in ``base``."""

from .base import Transport

__all__ = ["Transport"]
