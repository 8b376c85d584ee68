"""Sound descriptor enums, SoundDescriptor and the ResolvedParameters bridge dataclass."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..errors import InvalidDescriptor


class InteractionType(Enum):
    CLICK = "click"
    TAP = "tap"
    HOVER = "hover"
    SELECT = "select"
    CONFIRM = "confirm"
    CANCEL = "cancel"
    ERROR = "error"
    POPUP = "popup"
    NOTIFICATION = "notification"
    TRANSITION = "transition"
    BACK = "back"
    SCROLL = "scroll"
    DRAG_DROP = "drag-drop"
    TYPING = "typing"
    LOADING = "loading"


class TonalQuality(Enum):
    TONAL = "tonal"
    ATONAL = "atonal"
    PITCHED = "pitched"
    NOISE = "noise"
    HARMONIC = "harmonic"
    DISSONANT = "dissonant"


class Envelope(Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    SUSTAIN = "sustain"
    FADE = "fade"
    STUTTER = "stutter"
    PULSE = "pulse"


class NoiseShape(Enum):
    BANDPASS = "bandpass"
    HIGHPASS = "highpass"


class Timbre(Enum):
    SOFT = "soft"
    HARD = "hard"
    CRISP = "crisp"
    WARM = "warm"
    COLD = "cold"
    METALLIC = "metallic"
    WOODEN = "wooden"
    DIGITAL = "digital"
    ORGANIC = "organic"
    GLASSY = "glassy"
    CLICKY = "clicky"
    WHOOSH = "whoosh"


class Pitch(Enum):
    HIGH = "high"
    MID = "mid"
    LOW = "low"
    RISING = "rising"
    FALLING = "falling"


class Emotion(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    ATTENTION = "attention"
    SUBTLE = "subtle"
    URGENT = "urgent"
    INFORMATIVE = "informative"


class WaveformFamily(Enum):
    SINE = "sine"
    SQUARE = "square"
    TRIANGLE = "triangle"
    SAWTOOTH_LIKE = "sawtoothLike"
    NOISE_BURST = "noiseBurst"


class EnvelopeShape(Enum):
    LINEAR = "linear"
    EXPONENTIAL = "exponential"
    SMOOTH = "smooth"


class Gate(Enum):
    NONE = "none"
    STUTTER = "stutter"
    PULSE = "pulse"


class NoiseShape(Enum):
    BANDPASS = "bandpass"
    HIGHPASS = "highpass"


# Display labels accepted as input
_ALIASES = {
    Envelope: {"short / snappy": "short"},
}


def _coerce(enum_cls: type[Enum], value: Any, field_name: str) -> Enum:
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        key = value.strip().lower()
        key = _ALIASES.get(enum_cls, {}).get(key, key)
        try:
            return enum_cls(key)
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in enum_cls)
    raise InvalidDescriptor(f"{field_name}={value!r} is not one of: {allowed}")


def _finite(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidDescriptor(f"{field_name}={value!r} is not a number")
    value = float(value)
    if not math.isfinite(value):
        raise InvalidDescriptor(f"{field_name}={value!r} is not finite")
    return value


@dataclass(frozen=True)
class SoundDescriptor:
    """Semantic description of one UI sound, built once per trigger.

    String values are coerced to their enums; anything outside the closed
    sets or numeric ranges raises :class:`InvalidDescriptor`.

    Usage::

        desc = SoundDescriptor("click", "tonal", "short", "soft", "mid")
        params = resolve(desc)
    """
    interaction_type: InteractionType
    tonal_quality: TonalQuality
    envelope: Envelope
    timbre: Timbre
    pitch: Pitch
    emotion: Emotion | None = None
    progression_factor: float = 0.5
    beat_count: int = 1
    beat_delay: float = 0.2     # seconds of silence between beats

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "interaction_type",
             _coerce(InteractionType, self.interaction_type, "interaction_type"))
        set_(self, "tonal_quality", _coerce(TonalQuality, self.tonal_quality, "tonal_quality"))
        set_(self, "envelope", _coerce(Envelope, self.envelope, "envelope"))
        set_(self, "timbre", _coerce(Timbre, self.timbre, "timbre"))
        set_(self, "pitch", _coerce(Pitch, self.pitch, "pitch"))
        if self.emotion is None or self.emotion == "":
            set_(self, "emotion", None)
        else:
            set_(self, "emotion", _coerce(Emotion, self.emotion, "emotion"))

        progression = _finite(self.progression_factor, "progression_factor")
        if not 0.0 <= progression <= 1.0:
            raise InvalidDescriptor(f"progression_factor={progression} is outside [0, 1]")
        set_(self, "progression_factor", progression)

        if isinstance(self.beat_count, bool) or not isinstance(self.beat_count, int):
            raise InvalidDescriptor(f"beat_count={self.beat_count!r} is not an integer")
        if self.beat_count < 1:
            raise InvalidDescriptor(f"beat_count={self.beat_count} must be >= 1")

        delay = _finite(self.beat_delay, "beat_delay")
        if delay < 0:
            raise InvalidDescriptor(f"beat_delay={delay} must be >= 0")
        set_(self, "beat_delay", delay)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> SoundDescriptor:
        """Build a descriptor from a plain dict (as produced by :meth:`to_mapping`)."""
        try:
            return cls(**data)
        except TypeError as exc:
            raise InvalidDescriptor(str(exc)) from exc

    def to_mapping(self) -> dict[str, Any]:
        return {
            "interaction_type": self.interaction_type.value,
            "tonal_quality": self.tonal_quality.value,
            "envelope": self.envelope.value,
            "timbre": self.timbre.value,
            "pitch": self.pitch.value,
            "emotion": self.emotion.value if self.emotion else None,
            "progression_factor": self.progression_factor,
            "beat_count": self.beat_count,
            "beat_delay": self.beat_delay,
        }


@dataclass(frozen=True)
class ResolvedParameters:
    """Numeric synthesis configuration derived from a SoundDescriptor.

    Everything the envelope, oscillator and sequencer need lives here, so
    synthesis never looks back at the descriptor.
    """
    base_frequency_hz: float
    waveform_family: WaveformFamily
    harmonic_weights: tuple[tuple[int, float], ...]
    noise_fraction: float
    gain_multiplier: float
    filter_cutoff_hz: float
    single_beat_duration_sec: float
    fade_in_sec: float
    fade_out_start_fraction: float
    envelope_shape: EnvelopeShape

    pitch_bend: float = 0.0       # relative frequency change across a beat
    detune_ratio: float = 1.0     # applied to non-fundamental harmonics
    noise_amplitude: float = 1.0  # noise-burst scale
    gate: Gate = Gate.NONE
    noise_shape: NoiseShape = NoiseShape.BANDPASS  # filter around the base frequency
