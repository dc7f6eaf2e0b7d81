"""Environment parsing helpers for consistent string/numeric handling. [IV]"""
from __future__ import annotations

import os
from typing import Optional


def clean_value(value: Optional[str]) -> Optional[str]:
    """Strip inline ``# comments`` and whitespace from a raw env value."""
    if not value:
        return value
    return value.split("#")[0].strip()


def get_str(name: str, default: Optional[str] = None) -> Optional[str]:
    raw = clean_value(os.getenv(name))
    if not raw:
        return default
    return raw


def get_int(name: str, default: int) -> int:
    raw = clean_value(os.getenv(name))
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def get_float(name: str, default: float) -> float:
    raw = clean_value(os.getenv(name))
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default
