"""Human-readable transcript of a sound descriptor."""

from __future__ import annotations

from .descriptor import SoundDescriptor


def describe(desc: SoundDescriptor) -> str:
    """Plain ``Key: value`` listing of every descriptor field, one per line."""
    emotion = desc.emotion.value if desc.emotion is not None else "(none)"
    lines = [
        f"Interaction Type: {desc.interaction_type.value}",
        f"Tonal Quality: {desc.tonal_quality.value}",
        f"Envelope: {desc.envelope.value}",
        f"Timbre/Texture: {desc.timbre.value}",
        f"Pitch: {desc.pitch.value}",
        f"Emotion: {emotion}",
        f"Progression Factor: {desc.progression_factor * 100:.1f}%",
        f"Beat Count: {desc.beat_count}",
        f"Beat Delay: {desc.beat_delay * 1000:g}ms",
    ]
    return "\n".join(lines) + "\n"
