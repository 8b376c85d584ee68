"""End-to-end tests: descriptor to WAV bytes, plus the transcript."""

import numpy as np
import pytest

from uisound.config import UISoundConfig
from uisound.errors import InvalidDescriptor
from uisound.synth.descriptor import SoundDescriptor
from uisound.synth.encoder import decode_header, decode_samples
from uisound.synth.engine import render_descriptor, synthesize
from uisound.synth.transcript import describe


def _click() -> SoundDescriptor:
    return SoundDescriptor(
        interaction_type="click",
        tonal_quality="tonal",
        envelope="short",
        timbre="soft",
        pitch="mid",
        emotion=None,
        progression_factor=0.5,
        beat_count=1,
        beat_delay=0.2,
    )


class TestSynthesize:
    def test_click_scenario(self):
        audio = synthesize(_click(), UISoundConfig(sample_rate=44100))
        assert audio.sample_count == 3969
        assert len(audio.data) == 7982
        header = decode_header(audio.data)
        assert header.data_size == 7938
        assert header.sample_rate == 44100
        assert audio.duration_sec == pytest.approx(0.09)

    def test_idempotent_with_seed(self):
        desc = SoundDescriptor("notification", "noise", "stutter", "whoosh", "rising",
                               "attention", 0.3, 3, 0.05)
        config = UISoundConfig(seed=42)
        assert synthesize(desc, config).data == synthesize(desc, config).data

    def test_explicit_rng(self):
        desc = SoundDescriptor("scroll", "atonal", "short", "clicky", "low")
        a = synthesize(desc, rng=np.random.default_rng(8))
        b = synthesize(desc, rng=np.random.default_rng(8))
        c = synthesize(desc, rng=np.random.default_rng(9))
        assert a.data == b.data
        assert a.data != c.data

    def test_tonal_sound_needs_no_seed(self):
        assert synthesize(_click()).data == synthesize(_click()).data

    def test_samples_bounded_after_encoding(self):
        desc = SoundDescriptor("error", "dissonant", "long", "metallic", "falling", "urgent")
        samples, _ = decode_samples(synthesize(desc, UISoundConfig(seed=0)).data)
        assert np.all(np.abs(samples) <= 1.0)
        assert np.max(np.abs(samples)) > 0.05

    def test_error_louder_than_hover(self):
        def peak(interaction):
            desc = SoundDescriptor(interaction, "tonal", "medium", "warm", "mid")
            return np.max(np.abs(render_descriptor(desc).samples))
        assert peak("error") > peak("hover")

    def test_beat_pattern_length(self):
        desc = SoundDescriptor("typing", "pitched", "short", "clicky", "high",
                               beat_count=3, beat_delay=0.1)
        buf = render_descriptor(desc, UISoundConfig(sample_rate=22050))
        # 0.15 * 0.6 per beat, two 0.1s gaps
        assert len(buf) == int(np.floor(22050 * (3 * 0.09 + 2 * 0.1) + 1e-9))

    def test_config_limits_duration(self):
        desc = SoundDescriptor("error", "tonal", "sustain", "soft", "low",
                               beat_count=10, beat_delay=1.0)
        with pytest.raises(InvalidDescriptor):
            synthesize(desc)

    def test_post_filter_and_workers(self):
        desc = SoundDescriptor("transition", "harmonic", "fade", "hard", "rising")
        config = UISoundConfig(seed=1, post_filter=True, workers=3)
        audio = synthesize(desc, config)
        samples, _ = decode_samples(audio.data)
        assert np.all(np.abs(samples) <= 1.0)


class TestDescribe:
    def test_lists_every_field(self):
        text = describe(_click())
        assert text.splitlines() == [
            "Interaction Type: click",
            "Tonal Quality: tonal",
            "Envelope: short",
            "Timbre/Texture: soft",
            "Pitch: mid",
            "Emotion: (none)",
            "Progression Factor: 50.0%",
            "Beat Count: 1",
            "Beat Delay: 200ms",
        ]

    def test_emotion_value(self):
        desc = SoundDescriptor("drag-drop", "tonal", "pulse", "glassy", "low", "informative")
        text = describe(desc)
        assert "Emotion: informative" in text
        assert "Interaction Type: drag-drop" in text

    def test_pure(self):
        assert describe(_click()) == describe(_click())
