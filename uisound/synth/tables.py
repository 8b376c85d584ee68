"""Tuning tables for descriptor resolution.

Every table is keyed by enum and covers every member, so a valid
descriptor can never reach synthesis unmapped. Bump ``TABLE_VERSION``
whenever a constant changes.
"""

from __future__ import annotations

from dataclasses import dataclass

from .descriptor import (
    Emotion,
    Envelope,
    EnvelopeShape,
    Gate,
    InteractionType,
    NoiseShape,
    Pitch,
    Timbre,
    TonalQuality,
    WaveformFamily,
)

TABLE_VERSION = "1"

# --- Frequency --------------------------------------------------------------

# pitch -> (low Hz, span Hz); base = low + progression_factor * span
PITCH_RANGES: dict[Pitch, tuple[float, float]] = {
    Pitch.HIGH: (800.0, 1200.0),
    Pitch.MID: (400.0, 800.0),
    Pitch.LOW: (150.0, 350.0),
    Pitch.RISING: (300.0, 500.0),   # bent upward during playback
    Pitch.FALLING: (600.0, 400.0),  # bent downward during playback
}

# Relative frequency change from beat start to beat end
PITCH_BEND: dict[Pitch, float] = {
    Pitch.HIGH: 0.0,
    Pitch.MID: 0.0,
    Pitch.LOW: 0.0,
    Pitch.RISING: 0.8,
    Pitch.FALLING: -0.6,
}

INTERACTION_FREQUENCY: dict[InteractionType, float] = {
    InteractionType.CLICK: 1.0,
    InteractionType.TAP: 1.0,
    InteractionType.HOVER: 1.1,
    InteractionType.SELECT: 1.05,
    InteractionType.CONFIRM: 1.2,
    InteractionType.CANCEL: 0.9,
    InteractionType.ERROR: 0.7,
    InteractionType.POPUP: 1.1,
    InteractionType.NOTIFICATION: 1.15,
    InteractionType.TRANSITION: 1.0,
    InteractionType.BACK: 0.95,
    InteractionType.SCROLL: 1.0,
    InteractionType.DRAG_DROP: 0.95,
    InteractionType.TYPING: 1.0,
    InteractionType.LOADING: 1.0,
}

EMOTION_FREQUENCY: dict[Emotion, float] = {
    Emotion.POSITIVE: 1.1,
    Emotion.NEGATIVE: 0.9,
    Emotion.NEUTRAL: 1.0,
    Emotion.ATTENTION: 1.2,
    Emotion.SUBTLE: 0.95,
    Emotion.URGENT: 1.2,
    Emotion.INFORMATIVE: 1.05,
}

TIMBRE_FREQUENCY: dict[Timbre, float] = {t: 1.0 for t in Timbre}
TIMBRE_FREQUENCY[Timbre.COLD] = 1.1

# tonal quality -> (base, span) detune; factor = base + progression_factor * span
TONAL_DETUNE: dict[TonalQuality, tuple[float, float]] = {
    TonalQuality.TONAL: (1.0, 0.0),
    TonalQuality.ATONAL: (0.98, 0.04),
    TonalQuality.PITCHED: (1.0, 0.0),
    TonalQuality.NOISE: (1.0, 0.0),
    TonalQuality.HARMONIC: (1.0, 0.0),
    TonalQuality.DISSONANT: (0.95, 0.1),
}

# --- Gain -------------------------------------------------------------------

INTERACTION_GAIN: dict[InteractionType, float] = {
    InteractionType.CLICK: 1.1,
    InteractionType.TAP: 1.1,
    InteractionType.HOVER: 0.7,
    InteractionType.SELECT: 1.0,
    InteractionType.CONFIRM: 1.2,
    InteractionType.CANCEL: 0.9,
    InteractionType.ERROR: 1.3,
    InteractionType.POPUP: 1.0,
    InteractionType.NOTIFICATION: 1.1,
    InteractionType.TRANSITION: 1.0,
    InteractionType.BACK: 1.0,
    InteractionType.SCROLL: 0.8,
    InteractionType.DRAG_DROP: 1.0,
    InteractionType.TYPING: 0.6,
    InteractionType.LOADING: 0.8,
}

EMOTION_GAIN: dict[Emotion, float] = {
    Emotion.POSITIVE: 1.1,
    Emotion.NEGATIVE: 0.8,
    Emotion.NEUTRAL: 1.0,
    Emotion.ATTENTION: 1.2,
    Emotion.SUBTLE: 0.6,
    Emotion.URGENT: 1.2,
    Emotion.INFORMATIVE: 0.9,
}

TONAL_GAIN: dict[TonalQuality, float] = {
    TonalQuality.TONAL: 1.0,
    TonalQuality.ATONAL: 1.0,
    TonalQuality.PITCHED: 1.0,
    TonalQuality.NOISE: 1.0,
    TonalQuality.HARMONIC: 1.1,
    TonalQuality.DISSONANT: 0.9,
}

# --- Duration & envelope ----------------------------------------------------

INTERACTION_DURATION: dict[InteractionType, float] = {
    InteractionType.CLICK: 0.6,
    InteractionType.TAP: 0.8,
    InteractionType.HOVER: 1.0,
    InteractionType.SELECT: 1.0,
    InteractionType.CONFIRM: 1.0,
    InteractionType.CANCEL: 1.0,
    InteractionType.ERROR: 1.5,
    InteractionType.POPUP: 1.0,
    InteractionType.NOTIFICATION: 1.0,
    InteractionType.TRANSITION: 1.0,
    InteractionType.BACK: 1.0,
    InteractionType.SCROLL: 0.8,
    InteractionType.DRAG_DROP: 1.0,
    InteractionType.TYPING: 0.6,
    InteractionType.LOADING: 1.2,
}


@dataclass(frozen=True)
class EnvelopeTiming:
    base_duration_sec: float
    fade_in_sec: float
    fade_out_start_fraction: float
    shape: EnvelopeShape
    gate: Gate = Gate.NONE


ENVELOPES: dict[Envelope, EnvelopeTiming] = {
    Envelope.SHORT: EnvelopeTiming(0.15, 0.005, 0.3, EnvelopeShape.EXPONENTIAL),
    Envelope.MEDIUM: EnvelopeTiming(0.3, 0.01, 0.4, EnvelopeShape.EXPONENTIAL),
    Envelope.LONG: EnvelopeTiming(0.6, 0.02, 0.5, EnvelopeShape.SMOOTH),
    Envelope.SUSTAIN: EnvelopeTiming(1.2, 0.01, 0.7, EnvelopeShape.SMOOTH),
    Envelope.FADE: EnvelopeTiming(0.7, 0.01, 0.1, EnvelopeShape.LINEAR),
    Envelope.STUTTER: EnvelopeTiming(0.3, 0.005, 0.85, EnvelopeShape.LINEAR, Gate.STUTTER),
    Envelope.PULSE: EnvelopeTiming(0.4, 0.005, 0.85, EnvelopeShape.SMOOTH, Gate.PULSE),
}

EXPONENTIAL_DECAY_K = 5.0

STUTTER_RATE_HZ = 25.0
STUTTER_DUTY = 0.5
STUTTER_OFF_LEVEL = 0.2

PULSE_RATE_HZ = 8.0
PULSE_FLOOR = 0.15

# --- Timbre -----------------------------------------------------------------


@dataclass(frozen=True)
class TimbreVoice:
    family: WaveformFamily
    harmonics: tuple[tuple[int, float], ...]
    filter_cutoff_hz: float = 2000.0
    noise_amplitude: float = 0.5
    noise_shape: NoiseShape = NoiseShape.BANDPASS


# Harmonic index h sounds at (h + 1) x fundamental
TIMBRES: dict[Timbre, TimbreVoice] = {
    Timbre.SOFT: TimbreVoice(WaveformFamily.SINE, ((0, 1.0), (1, 0.25), (3, 0.08)), 1200.0),
    Timbre.WARM: TimbreVoice(WaveformFamily.SINE, ((0, 1.0), (1, 0.35), (3, 0.12)), 1200.0),
    Timbre.ORGANIC: TimbreVoice(WaveformFamily.SINE, ((0, 1.0), (1, 0.3), (3, 0.1))),
    Timbre.HARD: TimbreVoice(
        WaveformFamily.SQUARE, ((0, 1.0), (2, 0.33), (4, 0.2), (6, 0.14)), 4000.0
    ),
    Timbre.METALLIC: TimbreVoice(
        WaveformFamily.SQUARE, ((0, 1.0), (2, 0.3), (6, 0.25), (10, 0.2))
    ),
    Timbre.DIGITAL: TimbreVoice(WaveformFamily.SQUARE, ((0, 1.0), (2, 0.33), (4, 0.2))),
    Timbre.CRISP: TimbreVoice(
        WaveformFamily.TRIANGLE, ((0, 1.0), (2, 0.11), (5, 0.08)), 4000.0, 0.8
    ),
    Timbre.CLICKY: TimbreVoice(WaveformFamily.TRIANGLE, ((0, 1.0), (4, 0.1), (7, 0.08))),
    Timbre.GLASSY: TimbreVoice(WaveformFamily.TRIANGLE, ((0, 1.0), (3, 0.15), (7, 0.1))),
    Timbre.COLD: TimbreVoice(WaveformFamily.TRIANGLE, ((0, 1.0),)),
    Timbre.WOODEN: TimbreVoice(WaveformFamily.SAWTOOTH_LIKE, ((0, 1.0),)),
    Timbre.WHOOSH: TimbreVoice(
        WaveformFamily.NOISE_BURST, ((0, 1.0),), noise_amplitude=0.6,
        noise_shape=NoiseShape.HIGHPASS,
    ),
}

# --- Tonal quality ----------------------------------------------------------

HARMONIC_SERIES: tuple[tuple[int, float], ...] = ((0, 1.0), (1, 0.5), (2, 0.25), (3, 0.125))
DISSONANT_SERIES: tuple[tuple[int, float], ...] = ((0, 1.0), (1, 0.6), (2, 0.4))
DISSONANT_DETUNE_RATIO = 1.06

REDUCED_FUNDAMENTAL = 0.5
NOISE_FRACTION: dict[TonalQuality, float] = {
    TonalQuality.TONAL: 0.0,
    TonalQuality.ATONAL: 0.3,
    TonalQuality.PITCHED: 0.0,
    TonalQuality.NOISE: 0.6,
    TonalQuality.HARMONIC: 0.0,
    TonalQuality.DISSONANT: 0.0,
}
