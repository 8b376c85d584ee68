"""UI sound configuration — dataclass-based config with sensible defaults."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class UISoundConfig:
    # Synthesis
    sample_rate: int = 44100
    headroom: float = 0.3               # fixed attenuation before clamping
    max_duration_sec: float = 10.0      # upper bound on a rendered sequence
    workers: int = 1                    # sequencer threads
    post_filter: bool = False           # per-beat low-pass at filter_cutoff_hz
    seed: int | None = None             # None = fresh entropy per sound

    # Playback
    block_size: int = 2205              # ~50ms at 44100 Hz
    audio_channels: int = 1

    # Output
    output_dir: str = "output"
    library_path: str = "output/sounds.json"
