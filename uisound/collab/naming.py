"""Artifact names for generated sounds."""

from __future__ import annotations

import time

SOUND_PREFIX = "UISound"


def now_ms() -> int:
    return int(time.time() * 1000)


def sound_name(key: str, timestamp_ms: int | None = None) -> str:
    """``UISound_<KEY>_<timestamp_ms>.wav``."""
    if timestamp_ms is None:
        timestamp_ms = now_ms()
    return f"{SOUND_PREFIX}_{key.upper()}_{timestamp_ms}.wav"


def transcript_name(name: str) -> str:
    return name.removesuffix(".wav") + "_config.txt"


def package_name(name: str) -> str:
    return name.removesuffix(".wav") + "_package.zip"
