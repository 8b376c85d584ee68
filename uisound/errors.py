"""Error taxonomy for sound synthesis."""

from __future__ import annotations


class UISoundError(Exception):
    """Base error for the UI sound engine."""


class InvalidDescriptor(UISoundError, ValueError):
    """Raised when a descriptor field is outside its closed set or range."""


class OutOfRange(UISoundError, ValueError):
    """Raised when a beat-local time falls outside ``[0, duration)``."""


class EmptyAudio(UISoundError):
    """Raised when a render or encode would produce zero samples."""


class EncodingError(UISoundError):
    """Raised when a sample or header value cannot be represented in the container."""


class LibraryError(UISoundError):
    """Raised when the saved-sound file exists but cannot be parsed."""
