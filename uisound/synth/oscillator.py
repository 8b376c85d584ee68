"""Waveform synthesis — family oscillators, harmonic sums and noise blending."""

from __future__ import annotations

import numpy as np

from .descriptor import ResolvedParameters, WaveformFamily
from .filters import shape_noise
from .noise import white_noise


def instantaneous_frequency(params: ResolvedParameters, t: float | np.ndarray) -> float | np.ndarray:
    """Frequency in Hz at beat-local time ``t``.

    Constant unless the pitch bends, in which case it ramps linearly by
    ``pitch_bend`` (relative) across the beat.
    """
    ramp = params.pitch_bend * np.asarray(t) / params.single_beat_duration_sec
    freq = params.base_frequency_hz * (1.0 + ramp)
    return float(freq) if np.ndim(freq) == 0 else freq


def phase(params: ResolvedParameters, t: np.ndarray) -> np.ndarray:
    """Oscillator phase in radians, the integral of the instantaneous frequency."""
    t = np.asarray(t, dtype=np.float64)
    bend = params.pitch_bend / params.single_beat_duration_sec
    return 2.0 * np.pi * params.base_frequency_hz * (t + 0.5 * bend * t * t)


def needs_noise(params: ResolvedParameters) -> bool:
    return params.waveform_family is WaveformFamily.NOISE_BURST or params.noise_fraction > 0


def noise_source(
    params: ResolvedParameters,
    n_frames: int,
    sample_rate: int,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Noise for a whole buffer of ``n_frames`` samples.

    Noise-burst voices get it filtered around ``base_frequency_hz``; other
    voices blend in plain white noise.
    """
    noise = white_noise(n_frames, rng)
    if params.waveform_family is WaveformFamily.NOISE_BURST:
        noise = shape_noise(noise, params.noise_shape, params.base_frequency_hz, sample_rate)
    return noise


def _family(params: ResolvedParameters, phases: np.ndarray, noise: np.ndarray) -> np.ndarray:
    family = params.waveform_family
    if family is WaveformFamily.SINE:
        return np.sin(phases)
    if family is WaveformFamily.SQUARE:
        return np.sign(np.sin(phases))
    if family is WaveformFamily.TRIANGLE:
        return (2.0 / np.pi) * np.arcsin(np.sin(phases))
    if family is WaveformFamily.SAWTOOTH_LIKE:
        return 2.0 * (phases / (2.0 * np.pi) % 1.0) - 1.0
    return noise * params.noise_amplitude


def waveform(
    params: ResolvedParameters,
    t: np.ndarray,
    noise: np.ndarray | None = None,
) -> np.ndarray:
    """Raw samples in [-1, 1] for beat-local times ``t``.

    Args:
        params: Resolved synthesis parameters.
        t: Beat-local times in seconds.
        noise: Uniform noise aligned with ``t``. Only read when the voice
            needs noise; drawn from fresh entropy if omitted.
    """
    t = np.asarray(t, dtype=np.float64)
    if noise is None and needs_noise(params):
        noise = white_noise(len(t))

    phases = phase(params, t)
    weights = params.harmonic_weights

    if len(weights) > 1:
        total = sum(w for _, w in weights)
        tone = np.zeros_like(t)
        for h, w in weights:
            ratio = (h + 1) * (params.detune_ratio if h > 0 else 1.0)
            tone += w * np.sin(ratio * phases)
        if total > 0:
            tone /= total
    else:
        h, w = weights[0]
        tone = _family(params, (h + 1) * phases, noise) * w

    if params.noise_fraction > 0:
        tone = tone * (1.0 - params.noise_fraction) + noise * params.noise_fraction

    return tone


def sample_at(
    params: ResolvedParameters,
    local_time: float,
    rng: np.random.Generator | None = None,
) -> float:
    """Single raw sample at a beat-local time.

    Noise here is unfiltered white noise, since one sample has no filter history.
    """
    noise = white_noise(1, rng) if needs_noise(params) else None
    return float(waveform(params, np.array([local_time]), noise)[0])
