"""Noise source — uniform white noise from an injectable generator."""

from __future__ import annotations

import numpy as np


def white_noise(n_frames: int, rng: np.random.Generator | None = None) -> np.ndarray:
    """Uniform noise in [-1, 1).

    Pass a seeded ``np.random.default_rng(seed)`` for reproducible output;
    ``None`` draws from fresh OS entropy.
    """
    if rng is None:
        rng = np.random.default_rng()
    return rng.uniform(-1.0, 1.0, n_frames)
