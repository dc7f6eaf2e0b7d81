"""Kakuli: a chat bot for stickers, voice notes and web lookups."""

__version__ = "1.0.0"
