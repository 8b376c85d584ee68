"""Butterworth filters — per-beat post filter and noise-burst shaping."""

from __future__ import annotations

import numpy as np
from scipy.signal import butter, sosfilt

from .descriptor import NoiseShape

# Band-pass edges sit half an octave either side of the centre
_BAND_EDGE_RATIO = 2 ** 0.5


def lowpass(
    data: np.ndarray,
    cutoff: float,
    sample_rate: int,
    order: int = 2,
) -> np.ndarray:
    """Apply a causal Butterworth low-pass starting from zero state.

    Causal so a beat's filtered tail never leaks ahead of its onset.
    Cutoffs at or above Nyquist leave the signal unchanged.
    """
    nyq = sample_rate / 2
    if cutoff >= nyq or len(data) == 0:
        return np.asarray(data, dtype=np.float64).copy()
    sos = butter(order, cutoff / nyq, btype="low", output="sos")
    return sosfilt(sos, data)


def shape_noise(
    data: np.ndarray,
    shape: NoiseShape,
    center: float,
    sample_rate: int,
    order: int = 2,
) -> np.ndarray:
    """Colour white noise around ``center`` Hz.

    High-pass at ``center``, or a one-octave band-pass centred on it. Edges
    beyond Nyquist leave the signal unchanged. Output is clipped to [-1, 1].
    """
    data = np.asarray(data, dtype=np.float64)
    nyq = sample_rate / 2
    if len(data) == 0:
        return data.copy()

    if shape is NoiseShape.HIGHPASS:
        if center >= nyq:
            return data.copy()
        sos = butter(order, center / nyq, btype="high", output="sos")
    else:
        low = center / _BAND_EDGE_RATIO
        high = min(center * _BAND_EDGE_RATIO, 0.99 * nyq)
        if low >= high:
            return data.copy()
        sos = butter(order, [low / nyq, high / nyq], btype="band", output="sos")

    return np.clip(sosfilt(sos, data), -1.0, 1.0)
