"""Envelope shaping — attack/hold/release with stutter and pulse gates."""

from __future__ import annotations

import numpy as np

from ..errors import OutOfRange
from . import tables
from .descriptor import EnvelopeShape, Gate, ResolvedParameters


def _decay(shape: EnvelopeShape, progress: np.ndarray) -> np.ndarray:
    if shape is EnvelopeShape.LINEAR:
        return 1.0 - progress
    if shape is EnvelopeShape.EXPONENTIAL:
        return np.exp(-tables.EXPONENTIAL_DECAY_K * progress)
    # Cosine ease-out
    return 0.5 * (1.0 + np.cos(np.pi * progress))


def _gate(gate: Gate, t: np.ndarray) -> np.ndarray:
    if gate is Gate.STUTTER:
        on = (t * tables.STUTTER_RATE_HZ) % 1.0 < tables.STUTTER_DUTY
        return np.where(on, 1.0, tables.STUTTER_OFF_LEVEL)
    if gate is Gate.PULSE:
        rectified = np.abs(np.sin(np.pi * tables.PULSE_RATE_HZ * t))
        return np.maximum(rectified, tables.PULSE_FLOOR)
    return np.ones_like(t)


def envelope(params: ResolvedParameters, t: np.ndarray) -> np.ndarray:
    """Amplitude multipliers in [0, 1] for beat-local times ``t``.

    Vectorised form of :func:`amplitude_at`; times are assumed to lie in
    ``[0, single_beat_duration_sec)``.
    """
    t = np.asarray(t, dtype=np.float64)
    duration = params.single_beat_duration_sec
    release_start = params.fade_out_start_fraction * duration

    amp = np.ones_like(t)

    if params.fade_in_sec > 0:
        attack = t < params.fade_in_sec
        amp[attack] = t[attack] / params.fade_in_sec

    release_len = duration - release_start
    if release_len > 0:
        release = t >= release_start
        progress = np.clip((t[release] - release_start) / release_len, 0.0, 1.0)
        amp[release] = np.minimum(amp[release], _decay(params.envelope_shape, progress))

    amp *= _gate(params.gate, t)
    return np.clip(amp, 0.0, 1.0)


def amplitude_at(params: ResolvedParameters, local_time: float) -> float:
    """Envelope value at one beat-local time.

    Raises :class:`OutOfRange` unless ``0 <= local_time < duration``.
    """
    if not 0.0 <= local_time < params.single_beat_duration_sec:
        raise OutOfRange(
            f"local time {local_time} outside [0, {params.single_beat_duration_sec})"
        )
    return float(envelope(params, np.array([local_time]))[0])
