"""Engine — wires descriptor → resolver → sequencer → encoder."""

from __future__ import annotations

import numpy as np

from ..config import UISoundConfig
from .descriptor import SoundDescriptor
from .encoder import EncodedAudio, encode
from .resolver import resolve
from .sequencer import PCMBuffer, render


def render_descriptor(
    desc: SoundDescriptor,
    config: UISoundConfig | None = None,
    rng: np.random.Generator | None = None,
) -> PCMBuffer:
    """Resolve and render a descriptor without encoding it."""
    c = config or UISoundConfig()
    if rng is None:
        rng = np.random.default_rng(c.seed)

    params = resolve(desc)
    return render(
        params,
        desc.beat_count,
        desc.beat_delay,
        c.sample_rate,
        rng=rng,
        headroom=c.headroom,
        post_filter=c.post_filter,
        workers=c.workers,
        max_duration_sec=c.max_duration_sec,
    )


def synthesize(
    desc: SoundDescriptor,
    config: UISoundConfig | None = None,
    rng: np.random.Generator | None = None,
) -> EncodedAudio:
    """Turn a descriptor into WAV bytes.

    Either fully succeeds or raises one of the ``uisound.errors`` types.
    With ``rng=None`` noise is seeded from ``config.seed`` (fresh entropy
    when that is ``None`` too).

    Usage::

        desc = SoundDescriptor("error", "dissonant", "medium", "hard", "falling")
        audio = synthesize(desc, UISoundConfig(seed=1))
        Path("error.wav").write_bytes(audio.data)
    """
    return encode(render_descriptor(desc, config, rng))
