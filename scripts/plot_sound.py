#!/usr/bin/env python3
"""Plot a rendered UI sound: waveform, envelope and instantaneous frequency.

Usage:
    python scripts/plot_sound.py                                  # mid click
    python scripts/plot_sound.py --interaction error --envelope stutter --beats 3
"""

import argparse
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from uisound.config import UISoundConfig
from uisound.synth.descriptor import SoundDescriptor
from uisound.synth.engine import render_descriptor
from uisound.synth.envelope import envelope
from uisound.synth.oscillator import instantaneous_frequency
from uisound.synth.resolver import resolve


def plot(desc: SoundDescriptor, config: UISoundConfig, path: str) -> None:
    params = resolve(desc)
    buffer = render_descriptor(desc, config)
    t = np.arange(len(buffer)) / buffer.sample_rate

    beat_t = np.arange(
        int(params.single_beat_duration_sec * buffer.sample_rate)
    ) / buffer.sample_rate

    fig, axes = plt.subplots(3, 1, figsize=(12, 8))
    fig.suptitle(
        f"{desc.interaction_type.value} / {desc.timbre.value} / {desc.envelope.value} "
        f"- {params.base_frequency_hz:.0f} Hz",
        fontsize=14, fontweight="bold",
    )

    axes[0].plot(t, buffer.samples, color="#1f77b4", linewidth=0.5)
    axes[0].set_ylabel("Sample")
    axes[0].set_xlabel("Time (s)")
    axes[0].set_ylim(-1.0, 1.0)
    axes[0].grid(True, alpha=0.3)

    axes[1].plot(beat_t, envelope(params, beat_t), color="#2ca02c", linewidth=1.5)
    axes[1].set_ylabel("Envelope")
    axes[1].set_xlabel("Beat time (s)")
    axes[1].grid(True, alpha=0.3)

    axes[2].plot(beat_t, instantaneous_frequency(params, beat_t), color="#d62728", linewidth=1.5)
    axes[2].set_ylabel("Frequency (Hz)")
    axes[2].set_xlabel("Beat time (s)")
    axes[2].grid(True, alpha=0.3)

    plt.tight_layout()
    plt.savefig(path, dpi=150)
    print(f"Saved {path}")
    plt.close()


def main():
    parser = argparse.ArgumentParser(description="Plot a rendered UI sound")
    parser.add_argument("--interaction", default="click")
    parser.add_argument("--tonal", default="tonal")
    parser.add_argument("--envelope", default="short")
    parser.add_argument("--timbre", default="soft")
    parser.add_argument("--pitch", default="mid")
    parser.add_argument("--emotion", default=None)
    parser.add_argument("--progression", type=float, default=0.5)
    parser.add_argument("--beats", type=int, default=1)
    parser.add_argument("--delay-ms", type=float, default=200.0)
    parser.add_argument("--out", default="output/sound.png")
    args = parser.parse_args()

    desc = SoundDescriptor(
        args.interaction, args.tonal, args.envelope, args.timbre, args.pitch,
        emotion=args.emotion,
        progression_factor=args.progression,
        beat_count=args.beats,
        beat_delay=args.delay_ms / 1000.0,
    )
    os.makedirs(os.path.dirname(args.out) or ".", exist_ok=True)
    plot(desc, UISoundConfig(seed=0), args.out)


if __name__ == "__main__":
    main()
