"""Download packaging — zip of a generated sound plus its settings transcript."""

from __future__ import annotations

import io
import zipfile
from datetime import datetime, timezone
from pathlib import Path

from ..synth.descriptor import SoundDescriptor
from ..synth.encoder import EncodedAudio
from ..synth.transcript import describe
from .keyboard import KEYBOARD_PROGRESSION, key_index
from .naming import package_name, transcript_name


def package_transcript(
    name: str,
    descriptor: SoundDescriptor,
    timestamp_ms: int,
    key: str | None = None,
) -> str:
    """Transcript bundled next to the audio: header, settings, recreate steps."""
    generated = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    lines = [
        "UI Sound Generator Configuration",
        "================================",
        "",
        f"Audio File: {name}",
        f"Generated: {generated.isoformat()}",
    ]
    index = key_index(key) if key else None
    if index is not None:
        lines.append(f"Key Pressed: {key.upper()}")
        lines.append(f"Key Position: {index + 1} of {len(KEYBOARD_PROGRESSION)}")
    lines += [
        "",
        "Sound Settings:",
        "---------------",
        describe(descriptor).rstrip("\n"),
        "",
        "Technical Details:",
        "------------------",
        "Audio Format: WAV, mono, 16-bit PCM",
    ]
    if index is not None:
        lines += [
            "",
            "Instructions to Recreate:",
            "-------------------------",
            "1. Set the sound parameters as listed above",
            f"2. Press the '{key.upper()}' key to generate the same sound",
        ]
    lines += ["", f"Timestamp: {timestamp_ms}", ""]
    return "\n".join(lines)


def build_package(
    name: str,
    audio: EncodedAudio,
    descriptor: SoundDescriptor,
    timestamp_ms: int,
    key: str | None = None,
) -> bytes:
    """Zip archive bytes holding ``name`` and its ``_config.txt`` transcript."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.writestr(name, audio.data)
        zf.writestr(
            transcript_name(name),
            package_transcript(name, descriptor, timestamp_ms, key),
        )
    return buf.getvalue()


def write_package(
    directory: str | Path,
    name: str,
    audio: EncodedAudio,
    descriptor: SoundDescriptor,
    timestamp_ms: int,
    key: str | None = None,
) -> Path:
    """Write the zip package into ``directory`` and return its path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / package_name(name)
    path.write_bytes(build_package(name, audio, descriptor, timestamp_ms, key))
    return path
