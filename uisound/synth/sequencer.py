"""Beat sequencer — tiles beats into one flat PCM buffer."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np

from ..errors import EmptyAudio, InvalidDescriptor
from .descriptor import ResolvedParameters
from .envelope import envelope
from .filters import lowpass
from .oscillator import needs_noise, noise_source, waveform

HEADROOM = 0.3
MAX_DURATION_SEC = 10.0

# Absorbs float error in sample_rate * duration before flooring
_FLOOR_EPSILON = 1e-9


@dataclass(frozen=True, eq=False)
class PCMBuffer:
    """Mono float PCM, samples in [-1, 1]. The sample array is read-only."""
    sample_rate: int
    samples: np.ndarray = field(repr=False)

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float64)
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration_sec(self) -> float:
        return len(self.samples) / self.sample_rate


def total_duration(params: ResolvedParameters, beat_count: int, beat_delay_sec: float) -> float:
    return beat_count * params.single_beat_duration_sec + (beat_count - 1) * beat_delay_sec


def sample_count(duration_sec: float, sample_rate: int) -> int:
    """``floor(sample_rate * duration_sec)``."""
    return int(math.floor(sample_rate * duration_sec + _FLOOR_EPSILON))


def _check_beats(beat_count: int, beat_delay_sec: float) -> None:
    if isinstance(beat_count, bool) or not isinstance(beat_count, int) or beat_count < 1:
        raise InvalidDescriptor(f"beat_count={beat_count!r} must be an integer >= 1")
    if not math.isfinite(beat_delay_sec) or beat_delay_sec < 0:
        raise InvalidDescriptor(f"beat_delay={beat_delay_sec!r} must be finite and >= 0")


def _check_rate(sample_rate: int) -> None:
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, int) or sample_rate <= 0:
        raise ValueError(f"sample_rate={sample_rate!r} must be a positive integer")


def _beat_layout(
    start: int,
    stop: int,
    sample_rate: int,
    period: float,
    duration: float,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Owning beat, beat-local time and active mask for sample indices [start, stop)."""
    t = np.arange(start, stop) / sample_rate
    beat = np.floor(t / period)
    local = np.maximum(t - beat * period, 0.0)
    active = local < duration
    return beat.astype(np.int64), local, active


def _render_range(
    params: ResolvedParameters,
    out: np.ndarray,
    noise: np.ndarray | None,
    start: int,
    stop: int,
    sample_rate: int,
    period: float,
    scale: float,
) -> None:
    _, local, active = _beat_layout(
        start, stop, sample_rate, period, params.single_beat_duration_sec
    )
    if not active.any():
        return
    t = local[active]
    beat_noise = noise[start:stop][active] if noise is not None else None

    values = waveform(params, t, beat_noise) * envelope(params, t) * scale
    segment = out[start:stop]
    segment[active] = values


def _split(n: int, parts: int) -> list[tuple[int, int]]:
    edges = np.linspace(0, n, parts + 1).astype(int)
    return [(int(a), int(b)) for a, b in zip(edges[:-1], edges[1:]) if b > a]


def render(
    params: ResolvedParameters,
    beat_count: int,
    beat_delay_sec: float,
    sample_rate: int,
    *,
    rng: np.random.Generator | None = None,
    headroom: float = HEADROOM,
    post_filter: bool = False,
    workers: int = 1,
    max_duration_sec: float = MAX_DURATION_SEC,
) -> PCMBuffer:
    """Render ``beat_count`` beats into one buffer.

    Beat ``k`` starts at ``k * (duration + beat_delay_sec)``; samples between
    beats are exactly zero. Noise is drawn once for the whole buffer, so the
    result is the same for any ``workers`` count.

    Raises:
        InvalidDescriptor: bad beat fields, or the sequence would exceed
            ``max_duration_sec``.
        EmptyAudio: the sequence rounds down to zero samples.
    """
    _check_beats(beat_count, beat_delay_sec)
    _check_rate(sample_rate)
    if workers < 1:
        raise ValueError(f"workers={workers} must be >= 1")

    duration = params.single_beat_duration_sec
    total = total_duration(params, beat_count, beat_delay_sec)
    if total > max_duration_sec:
        raise InvalidDescriptor(
            f"sequence of {total:.3f}s exceeds the {max_duration_sec}s limit"
        )

    n = sample_count(total, sample_rate)
    if n == 0:
        raise EmptyAudio(f"{total}s at {sample_rate} Hz is zero samples")

    noise = noise_source(params, n, sample_rate, rng) if needs_noise(params) else None
    out = np.zeros(n, dtype=np.float64)
    period = duration + beat_delay_sec
    scale = params.gain_multiplier * headroom

    ranges = _split(n, min(workers, n))
    if len(ranges) == 1:
        _render_range(params, out, noise, 0, n, sample_rate, period, scale)
    else:
        with ThreadPoolExecutor(max_workers=len(ranges)) as pool:
            futures = [
                pool.submit(_render_range, params, out, noise, a, b, sample_rate, period, scale)
                for a, b in ranges
            ]
            for future in futures:
                future.result()

    if post_filter:
        beat, _, active = _beat_layout(0, n, sample_rate, period, duration)
        for k in range(beat_count):
            idx = np.flatnonzero(active & (beat == k))
            out[idx] = lowpass(out[idx], params.filter_cutoff_hz, sample_rate)

    np.clip(out, -1.0, 1.0, out=out)
    return PCMBuffer(sample_rate, out)


def render_beat(
    params: ResolvedParameters,
    sample_rate: int,
    *,
    rng: np.random.Generator | None = None,
    headroom: float = HEADROOM,
    post_filter: bool = False,
) -> PCMBuffer:
    """Render a single beat without any sequencing.

    Matches ``render(params, 1, ...)`` sample for sample, post filter included.
    """
    _check_rate(sample_rate)
    n = sample_count(params.single_beat_duration_sec, sample_rate)
    if n == 0:
        raise EmptyAudio(f"{params.single_beat_duration_sec}s at {sample_rate} Hz is zero samples")

    t = np.arange(n) / sample_rate
    noise = noise_source(params, n, sample_rate, rng) if needs_noise(params) else None
    samples = waveform(params, t, noise) * envelope(params, t)
    samples *= params.gain_multiplier * headroom
    if post_filter:
        samples = lowpass(samples, params.filter_cutoff_hz, sample_rate)
    return PCMBuffer(sample_rate, np.clip(samples, -1.0, 1.0))
