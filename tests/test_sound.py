"""Unit tests for waveform synthesis and beat sequencing."""

from dataclasses import replace

import numpy as np
import pytest

from uisound.errors import EmptyAudio, InvalidDescriptor
from uisound.synth.descriptor import (
    EnvelopeShape,
    Gate,
    NoiseShape,
    Pitch,
    ResolvedParameters,
    SoundDescriptor,
    WaveformFamily,
)
from uisound.synth.filters import shape_noise
from uisound.synth.noise import white_noise
from uisound.synth.oscillator import instantaneous_frequency, noise_source, sample_at, waveform
from uisound.synth.resolver import resolve
from uisound.synth.sequencer import PCMBuffer, render, render_beat, sample_count

SR = 44100


def _tone(family=WaveformFamily.SINE, **overrides) -> ResolvedParameters:
    fields = dict(
        base_frequency_hz=1000.0,
        waveform_family=family,
        harmonic_weights=((0, 1.0),),
        noise_fraction=0.0,
        gain_multiplier=1.0,
        filter_cutoff_hz=2000.0,
        single_beat_duration_sec=1.0,
        fade_in_sec=0.005,
        fade_out_start_fraction=0.5,
        envelope_shape=EnvelopeShape.LINEAR,
    )
    fields.update(overrides)
    return ResolvedParameters(**fields)


class TestOscillator:
    def test_sine_peak_at_quarter_period(self):
        assert sample_at(_tone(), 0.00025) == pytest.approx(1.0)

    def test_square_values(self):
        t = np.arange(1000) / SR
        audio = waveform(_tone(WaveformFamily.SQUARE), t)
        assert set(np.unique(audio)).issubset({-1.0, 0.0, 1.0})
        assert np.sum(audio == 1.0) > 400

    def test_triangle_bounded(self):
        t = np.arange(SR) / SR
        audio = waveform(_tone(WaveformFamily.TRIANGLE), t)
        assert np.max(np.abs(audio)) <= 1.0 + 1e-12
        assert sample_at(_tone(WaveformFamily.TRIANGLE), 0.00025) == pytest.approx(1.0)

    def test_sawtooth_ramp(self):
        p = _tone(WaveformFamily.SAWTOOTH_LIKE)
        assert sample_at(p, 0.0) == pytest.approx(-1.0)
        assert sample_at(p, 0.0005) == pytest.approx(0.0, abs=1e-9)

    def test_single_weight_scales_family(self):
        p = _tone(harmonic_weights=((0, 0.5),))
        assert sample_at(p, 0.00025) == pytest.approx(0.5)

    def test_harmonic_sum_normalized(self):
        p = _tone(harmonic_weights=((0, 1.0), (1, 0.5), (2, 0.25), (3, 0.125)))
        audio = waveform(p, np.arange(SR) / SR)
        assert np.max(np.abs(audio)) <= 1.0
        assert np.max(np.abs(audio)) > 0.5

    def test_detune_changes_overtones_only(self):
        p = _tone(harmonic_weights=((0, 1.0), (1, 0.6)))
        t = np.arange(2000) / SR
        plain = waveform(p, t)
        detuned = waveform(replace(p, detune_ratio=1.06), t)
        assert not np.allclose(plain, detuned)

    def test_noise_burst_reproducible(self):
        p = _tone(WaveformFamily.NOISE_BURST, noise_amplitude=0.6)
        t = np.arange(500) / SR
        a = waveform(p, t, white_noise(500, np.random.default_rng(3)))
        b = waveform(p, t, white_noise(500, np.random.default_rng(3)))
        np.testing.assert_array_equal(a, b)
        assert np.max(np.abs(a)) <= 0.6

    def test_noise_fraction_blend(self):
        p = _tone(noise_fraction=1.0)
        t = np.arange(200) / SR
        noise = white_noise(200, np.random.default_rng(0))
        np.testing.assert_allclose(waveform(p, t, noise), noise)

    def test_sample_at_seeded(self):
        p = _tone(WaveformFamily.NOISE_BURST)
        a = sample_at(p, 0.1, np.random.default_rng(11))
        b = sample_at(p, 0.1, np.random.default_rng(11))
        assert a == b


class TestPitchContour:
    def test_constant_pitch(self):
        p = resolve(SoundDescriptor("click", "tonal", "short", "soft", "mid"))
        end = p.single_beat_duration_sec - 1e-6
        assert instantaneous_frequency(p, 0.0) == instantaneous_frequency(p, end)

    def test_rising(self):
        p = resolve(SoundDescriptor("click", "tonal", "medium", "soft", Pitch.RISING))
        end = p.single_beat_duration_sec - 1e-6
        assert instantaneous_frequency(p, 0.0) < instantaneous_frequency(p, end)
        assert instantaneous_frequency(p, 0.0) == pytest.approx(p.base_frequency_hz)

    def test_falling(self):
        p = resolve(SoundDescriptor("click", "tonal", "medium", "soft", Pitch.FALLING))
        end = p.single_beat_duration_sec - 1e-6
        assert instantaneous_frequency(p, 0.0) > instantaneous_frequency(p, end) > 0

    def test_bend_fraction(self):
        p = _tone(pitch_bend=0.8)
        assert instantaneous_frequency(p, 1.0) == pytest.approx(1800.0)
        assert instantaneous_frequency(p, 0.5) == pytest.approx(1400.0)

    def test_vectorised(self):
        p = _tone(pitch_bend=-0.6)
        freqs = instantaneous_frequency(p, np.linspace(0.0, 0.99, 10))
        assert np.all(np.diff(freqs) < 0)


class TestSequencer:
    @pytest.fixture
    def beat(self):
        """0.1s beats, harmonic voice, no noise."""
        p = resolve(SoundDescriptor("confirm", "harmonic", "short", "warm", "mid"))
        return replace(p, single_beat_duration_sec=0.1, fade_in_sec=0.005)

    def test_length_formula(self, beat):
        buf = render(beat, 3, 0.2, SR)
        assert len(buf) == 30870
        assert buf.sample_rate == SR
        assert buf.duration_sec == pytest.approx(0.7)

    @pytest.mark.parametrize("count,delay", [(1, 0.0), (2, 0.05), (4, 0.013), (5, 0.0)])
    def test_length_matches_floor(self, beat, count, delay):
        total = count * 0.1 + (count - 1) * delay
        assert len(render(beat, count, delay, SR)) == sample_count(total, SR)
        assert sample_count(total, SR) == int(np.floor(SR * total + 1e-9))

    def test_gap_is_silent(self, beat):
        buf = render(beat, 3, 0.2, SR)
        assert buf.samples[int(0.25 * SR)] == 0.0
        assert np.all(buf.samples[4500:13000] == 0.0)
        assert np.all(buf.samples[17800:26000] == 0.0)

    def test_beats_are_audible(self, beat):
        buf = render(beat, 3, 0.2, SR)
        for start in (0.0, 0.3, 0.6):
            window = buf.samples[int((start + 0.01) * SR):int((start + 0.03) * SR)]
            assert np.max(np.abs(window)) > 0.01

    def test_beats_repeat(self, beat):
        buf = render(beat, 2, 0.2, SR)
        first = buf.samples[:4000]
        second = buf.samples[13230:17230]
        np.testing.assert_allclose(first, second, atol=1e-3)

    def test_output_clamped(self, beat):
        buf = render(beat, 2, 0.05, SR, headroom=100.0)
        assert np.max(buf.samples) == 1.0
        assert np.min(buf.samples) == -1.0

    def test_bounded_for_every_timbre(self):
        for timbre in ("soft", "hard", "metallic", "whoosh", "glassy", "wooden"):
            for tonal in ("tonal", "noise", "harmonic", "dissonant", "atonal"):
                desc = SoundDescriptor("error", tonal, "short", timbre, "rising", "urgent")
                buf = render(resolve(desc), 2, 0.05, SR, rng=np.random.default_rng(0))
                assert np.all(np.abs(buf.samples) <= 1.0)

    def test_single_beat_matches_unsequenced(self):
        desc = SoundDescriptor("tap", "atonal", "short", "crisp", "high")
        p = resolve(desc)
        seq = render(p, 1, 0.75, SR, rng=np.random.default_rng(5))
        single = render_beat(p, SR, rng=np.random.default_rng(5))
        assert len(seq) == len(single)
        np.testing.assert_array_equal(seq.samples, single.samples)

    @pytest.mark.parametrize("timbre", ["crisp", "whoosh"])
    def test_single_beat_matches_unsequenced_with_post_filter(self, timbre):
        p = resolve(SoundDescriptor("tap", "atonal", "short", timbre, "high"))
        seq = render(p, 1, 0.75, SR, rng=np.random.default_rng(5), post_filter=True)
        single = render_beat(p, SR, rng=np.random.default_rng(5), post_filter=True)
        np.testing.assert_array_equal(seq.samples, single.samples)
        dry = render_beat(p, SR, rng=np.random.default_rng(5))
        assert not np.array_equal(dry.samples, single.samples)

    def test_worker_count_does_not_change_output(self):
        p = resolve(SoundDescriptor("loading", "noise", "pulse", "whoosh", "low"))
        one = render(p, 3, 0.1, SR, rng=np.random.default_rng(9), workers=1)
        many = render(p, 3, 0.1, SR, rng=np.random.default_rng(9), workers=4)
        np.testing.assert_allclose(one.samples, many.samples, rtol=0, atol=1e-12)

    def test_seeded_render_deterministic(self):
        p = resolve(SoundDescriptor("popup", "noise", "medium", "whoosh", "mid"))
        a = render(p, 2, 0.1, SR, rng=np.random.default_rng(1))
        b = render(p, 2, 0.1, SR, rng=np.random.default_rng(1))
        np.testing.assert_array_equal(a.samples, b.samples)

    def test_post_filter_keeps_gaps_silent(self, beat):
        dry = render(beat, 3, 0.2, SR)
        wet = render(beat, 3, 0.2, SR, post_filter=True)
        assert not np.allclose(dry.samples, wet.samples)
        assert np.all(wet.samples[4500:13000] == 0.0)
        assert np.all(np.abs(wet.samples) <= 1.0)

    def test_rejects_too_long(self, beat):
        with pytest.raises(InvalidDescriptor):
            render(beat, 50, 1.0, SR)

    def test_custom_duration_limit(self, beat):
        with pytest.raises(InvalidDescriptor):
            render(beat, 3, 0.2, SR, max_duration_sec=0.5)

    @pytest.mark.parametrize("count,delay", [(0, 0.1), (-2, 0.1), (2, -0.1), (2, float("nan"))])
    def test_rejects_bad_beats(self, beat, count, delay):
        with pytest.raises(InvalidDescriptor):
            render(beat, count, delay, SR)

    def test_rejects_bad_sample_rate(self, beat):
        with pytest.raises(ValueError):
            render(beat, 1, 0.0, 0)

    def test_empty_audio(self, beat):
        tiny = replace(beat, single_beat_duration_sec=1e-6, fade_in_sec=0.0)
        with pytest.raises(EmptyAudio):
            render(tiny, 1, 0.0, SR)
        with pytest.raises(EmptyAudio):
            render_beat(tiny, SR)


def _centroid(samples: np.ndarray, sample_rate: int) -> float:
    power = np.abs(np.fft.rfft(samples)) ** 2
    freqs = np.fft.rfftfreq(len(samples), 1.0 / sample_rate)
    return float(np.sum(freqs * power) / np.sum(power))


class TestNoiseShaping:
    def test_whoosh_follows_pitch(self):
        low = resolve(SoundDescriptor("click", "tonal", "medium", "whoosh", "low", progression_factor=0.0))
        high = resolve(SoundDescriptor("click", "tonal", "medium", "whoosh", "high", progression_factor=1.0))
        a = render_beat(low, SR, rng=np.random.default_rng(4))
        b = render_beat(high, SR, rng=np.random.default_rng(4))
        assert not np.array_equal(a.samples, b.samples)
        assert _centroid(b.samples, SR) > _centroid(a.samples, SR)

    def test_noise_quality_band_follows_pitch(self):
        low = resolve(SoundDescriptor("click", "noise", "medium", "soft", "low", progression_factor=0.0))
        high = resolve(SoundDescriptor("click", "noise", "medium", "soft", "high", progression_factor=1.0))
        a = render_beat(low, SR, rng=np.random.default_rng(4))
        b = render_beat(high, SR, rng=np.random.default_rng(4))
        assert _centroid(b.samples, SR) > 2 * _centroid(a.samples, SR)

    def test_highpass_removes_low_band(self):
        white = white_noise(SR, np.random.default_rng(0))
        shaped = shape_noise(white, NoiseShape.HIGHPASS, 2000.0, SR)
        freqs = np.fft.rfftfreq(SR, 1.0 / SR)
        low_band = freqs < 200
        before = np.sum(np.abs(np.fft.rfft(white))[low_band] ** 2)
        after = np.sum(np.abs(np.fft.rfft(shaped))[low_band] ** 2)
        assert after < before / 100

    def test_bandpass_centred(self):
        white = white_noise(SR, np.random.default_rng(0))
        shaped = shape_noise(white, NoiseShape.BANDPASS, 1000.0, SR)
        assert 500 < _centroid(shaped, SR) < 2500
        assert np.all(np.abs(shaped) <= 1.0)

    def test_edges_above_nyquist_pass_through(self):
        white = white_noise(100, np.random.default_rng(0))
        np.testing.assert_array_equal(shape_noise(white, NoiseShape.HIGHPASS, 30000.0, SR), white)
        np.testing.assert_array_equal(shape_noise(white, NoiseShape.BANDPASS, 40000.0, SR), white)

    def test_plain_voices_keep_white_noise(self):
        p = _tone(noise_fraction=0.3)
        a = noise_source(p, 500, SR, np.random.default_rng(2))
        np.testing.assert_array_equal(a, white_noise(500, np.random.default_rng(2)))


class TestPCMBuffer:
    def test_read_only(self):
        buf = PCMBuffer(SR, np.zeros(10))
        with pytest.raises(ValueError):
            buf.samples[0] = 1.0

    def test_copies_input(self):
        data = np.zeros(10)
        buf = PCMBuffer(SR, data)
        data[0] = 1.0
        assert buf.samples[0] == 0.0
