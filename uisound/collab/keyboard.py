"""Keyboard progression — maps letter keys to a progression factor."""

from __future__ import annotations

# Left to right, top to bottom
KEYBOARD_PROGRESSION = list("qwertyuiop") + list("asdfghjkl") + list("zxcvbnm")


def key_index(key: str) -> int | None:
    """Position of ``key`` in the progression, or ``None`` for other keys."""
    try:
        return KEYBOARD_PROGRESSION.index(key.lower())
    except ValueError:
        return None


def progression_factor(key: str) -> float | None:
    """0.0 for Q up to 1.0 for M; ``None`` for keys outside the layout."""
    index = key_index(key)
    if index is None:
        return None
    return index / (len(KEYBOARD_PROGRESSION) - 1)
