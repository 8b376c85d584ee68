"""Descriptor resolution — semantic SoundDescriptor to numeric ResolvedParameters."""

from __future__ import annotations

from ..errors import InvalidDescriptor
from . import tables
from .descriptor import ResolvedParameters, SoundDescriptor, TonalQuality, WaveformFamily


def base_frequency(desc: SoundDescriptor) -> float:
    """Progression-scaled frequency with every multiplicative modifier applied.

    Order: pitch range, interaction type, emotion, timbre, tonal detune.
    """
    low, span = tables.PITCH_RANGES[desc.pitch]
    freq = low + desc.progression_factor * span

    freq *= tables.INTERACTION_FREQUENCY[desc.interaction_type]
    if desc.emotion is not None:
        freq *= tables.EMOTION_FREQUENCY[desc.emotion]
    freq *= tables.TIMBRE_FREQUENCY[desc.timbre]

    detune_base, detune_span = tables.TONAL_DETUNE[desc.tonal_quality]
    freq *= detune_base + desc.progression_factor * detune_span
    return freq


def gain_multiplier(desc: SoundDescriptor) -> float:
    gain = tables.INTERACTION_GAIN[desc.interaction_type]
    if desc.emotion is not None:
        gain *= tables.EMOTION_GAIN[desc.emotion]
    return gain * tables.TONAL_GAIN[desc.tonal_quality]


def beat_duration(desc: SoundDescriptor) -> float:
    timing = tables.ENVELOPES[desc.envelope]
    return timing.base_duration_sec * tables.INTERACTION_DURATION[desc.interaction_type]


def _harmonics(desc: SoundDescriptor) -> tuple[tuple[tuple[int, float], ...], float]:
    """Harmonic weights and detune ratio after the tonal-quality override."""
    tonal = desc.tonal_quality
    voice = tables.TIMBRES[desc.timbre]

    if tonal is TonalQuality.TONAL:
        return ((0, 1.0),), 1.0
    if tonal is TonalQuality.HARMONIC:
        return tables.HARMONIC_SERIES, 1.0
    if tonal is TonalQuality.DISSONANT:
        return tables.DISSONANT_SERIES, tables.DISSONANT_DETUNE_RATIO
    if tonal in (TonalQuality.ATONAL, TonalQuality.NOISE):
        weights = tuple(
            (h, w * tables.REDUCED_FUNDAMENTAL if h == 0 else w)
            for h, w in voice.harmonics
        )
        return weights, 1.0
    return voice.harmonics, 1.0


def resolve(desc: SoundDescriptor) -> ResolvedParameters:
    """Map a descriptor to synthesis parameters.

    Pure and total over valid descriptors. Raises :class:`InvalidDescriptor`
    when ``desc`` is not a SoundDescriptor.
    """
    if not isinstance(desc, SoundDescriptor):
        raise InvalidDescriptor(f"expected SoundDescriptor, got {type(desc).__name__}")

    voice = tables.TIMBRES[desc.timbre]
    timing = tables.ENVELOPES[desc.envelope]

    family = voice.family
    if desc.tonal_quality is TonalQuality.NOISE:
        family = WaveformFamily.NOISE_BURST

    weights, detune = _harmonics(desc)

    duration = beat_duration(desc)
    fade_out_start = timing.fade_out_start_fraction
    fade_in = min(timing.fade_in_sec, fade_out_start * duration)

    return ResolvedParameters(
        base_frequency_hz=base_frequency(desc),
        waveform_family=family,
        harmonic_weights=weights,
        noise_fraction=tables.NOISE_FRACTION[desc.tonal_quality],
        gain_multiplier=gain_multiplier(desc),
        filter_cutoff_hz=voice.filter_cutoff_hz,
        single_beat_duration_sec=duration,
        fade_in_sec=fade_in,
        fade_out_start_fraction=fade_out_start,
        envelope_shape=timing.shape,
        pitch_bend=tables.PITCH_BEND[desc.pitch],
        detune_ratio=detune,
        noise_amplitude=voice.noise_amplitude,
        gate=timing.gate,
        noise_shape=voice.noise_shape,
    )
