#!/usr/bin/env python3
"""Generate a UI sound for a keyboard key and write it as WAV / zip package.

Usage:
    python scripts/generate_sound.py q                                # click, defaults
    python scripts/generate_sound.py m --interaction error --timbre hard --pitch falling
    python scripts/generate_sound.py t --beats 3 --delay-ms 120 --package --save --play
"""

import argparse
import logging
import sys
from pathlib import Path

from uisound.collab.keyboard import KEYBOARD_PROGRESSION, progression_factor
from uisound.collab.library import SoundLibrary
from uisound.collab.naming import now_ms, sound_name
from uisound.collab.packaging import write_package
from uisound.config import UISoundConfig
from uisound.errors import LibraryError, UISoundError
from uisound.synth.descriptor import (
    Emotion,
    Envelope,
    InteractionType,
    Pitch,
    SoundDescriptor,
    Timbre,
    TonalQuality,
)
from uisound.synth.engine import synthesize
from uisound.synth.transcript import describe


def _choices(enum_cls):
    return [m.value for m in enum_cls]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("key", help="letter key Q..M, sets the progression factor")
    parser.add_argument("--interaction", default="click", choices=_choices(InteractionType))
    parser.add_argument("--tonal", default="tonal", choices=_choices(TonalQuality))
    parser.add_argument("--envelope", default="short", choices=_choices(Envelope))
    parser.add_argument("--timbre", default="soft", choices=_choices(Timbre))
    parser.add_argument("--pitch", default="mid", choices=_choices(Pitch))
    parser.add_argument("--emotion", default=None, choices=_choices(Emotion))
    parser.add_argument("--beats", type=int, default=1)
    parser.add_argument("--delay-ms", type=float, default=200.0)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--sample-rate", type=int, default=44100)
    parser.add_argument("--post-filter", action="store_true", help="low-pass each beat")
    parser.add_argument("--out", default="output", help="output directory")
    parser.add_argument("--package", action="store_true", help="also write a zip package")
    parser.add_argument("--save", action="store_true", help="add to the saved-sound library")
    parser.add_argument("--play", action="store_true", help="play through the sound card")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    factor = progression_factor(args.key)
    if factor is None:
        print(f"Key {args.key!r} is not in the layout ({''.join(KEYBOARD_PROGRESSION).upper()})")
        return 2

    config = UISoundConfig(
        sample_rate=args.sample_rate,
        post_filter=args.post_filter,
        seed=args.seed,
        output_dir=args.out,
        library_path=str(Path(args.out) / "sounds.json"),
    )

    try:
        desc = SoundDescriptor(
            interaction_type=args.interaction,
            tonal_quality=args.tonal,
            envelope=args.envelope,
            timbre=args.timbre,
            pitch=args.pitch,
            emotion=args.emotion,
            progression_factor=factor,
            beat_count=args.beats,
            beat_delay=args.delay_ms / 1000.0,
        )
        audio = synthesize(desc, config)
    except UISoundError as e:
        print(f"Could not generate sound: {e}")
        return 1

    timestamp = now_ms()
    name = sound_name(args.key, timestamp)
    out_dir = Path(config.output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    wav_path = out_dir / name
    wav_path.write_bytes(audio.data)

    print(describe(desc), end="")
    print(f"Saved {wav_path} ({audio.duration_sec * 1000:.0f} ms, {len(audio)} bytes)")

    if args.package:
        zip_path = write_package(out_dir, name, audio, desc, timestamp, key=args.key)
        print(f"Saved {zip_path}")

    if args.save:
        library = SoundLibrary(config.library_path)
        try:
            if library.save(name, audio, desc, timestamp, key=args.key.upper()):
                print(f"Added to library {config.library_path}")
        except LibraryError as e:
            print(f"Library not updated: {e}")

    if args.play:
        from uisound.collab.output import AudioOutput

        output = AudioOutput(config.sample_rate, config.block_size, config.audio_channels)
        try:
            output.play(audio)
        finally:
            output.stop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
