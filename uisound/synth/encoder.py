"""PCM encoder — canonical mono 16-bit WAV container."""

from __future__ import annotations

import struct
from dataclasses import dataclass

import numpy as np

from ..errors import EmptyAudio, EncodingError
from .sequencer import PCMBuffer

WAV_MIME_TYPE = "audio/wav"
HEADER_SIZE = 44
NUM_CHANNELS = 1
BITS_PER_SAMPLE = 16
BLOCK_ALIGN = NUM_CHANNELS * BITS_PER_SAMPLE // 8

# RIFF header, 16-byte PCM fmt chunk, data chunk header
_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


@dataclass(frozen=True)
class EncodedAudio:
    data: bytes
    sample_rate: int
    sample_count: int
    mime_type: str = WAV_MIME_TYPE

    @property
    def duration_sec(self) -> float:
        return self.sample_count / self.sample_rate

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class WavHeader:
    sample_rate: int
    num_channels: int
    bits_per_sample: int
    byte_rate: int
    block_align: int
    data_size: int
    riff_size: int


def _pack_header(sample_rate: int, n_samples: int) -> bytes:
    data_size = n_samples * BLOCK_ALIGN
    return _HEADER.pack(
        b"RIFF",
        HEADER_SIZE - 8 + data_size,
        b"WAVE",
        b"fmt ",
        16,                         # fmt chunk size
        1,                          # PCM
        NUM_CHANNELS,
        sample_rate,
        sample_rate * BLOCK_ALIGN,  # byte rate
        BLOCK_ALIGN,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )


def to_int16(samples: np.ndarray) -> np.ndarray:
    """``round(clamp(s, -1, 1) * 32767)`` as little-endian int16."""
    return np.rint(np.clip(samples, -1.0, 1.0) * 32767).astype("<i2")


def encode(buffer: PCMBuffer) -> EncodedAudio:
    """Encode a PCM buffer as a WAV file.

    Raises:
        EmptyAudio: the buffer has no samples.
        EncodingError: a sample is NaN/inf or the sample rate cannot be
            stored in the header.
    """
    samples = np.asarray(buffer.samples, dtype=np.float64)
    if len(samples) == 0:
        raise EmptyAudio("cannot encode an empty buffer")
    if not np.all(np.isfinite(samples)):
        bad = int(np.flatnonzero(~np.isfinite(samples))[0])
        raise EncodingError(f"non-finite sample at index {bad}")

    rate = buffer.sample_rate
    if not 0 < rate <= 0xFFFFFFFF // BLOCK_ALIGN:
        raise EncodingError(f"sample rate {rate} cannot be stored in a WAV header")
    if HEADER_SIZE - 8 + len(samples) * BLOCK_ALIGN > 0xFFFFFFFF:
        raise EncodingError(f"{len(samples)} samples exceed the WAV size limit")

    payload = to_int16(samples).tobytes()
    return EncodedAudio(
        data=_pack_header(rate, len(samples)) + payload,
        sample_rate=rate,
        sample_count=len(samples),
    )


def decode_header(data: bytes) -> WavHeader:
    """Parse the canonical 44-byte header written by :func:`encode`."""
    if len(data) < HEADER_SIZE:
        raise EncodingError(f"{len(data)} bytes is shorter than a WAV header")
    (riff, riff_size, wave, fmt, fmt_size, audio_format, channels, rate,
     byte_rate, block_align, bits, data_id, data_size) = _HEADER.unpack_from(data)
    if riff != b"RIFF" or wave != b"WAVE" or fmt != b"fmt " or data_id != b"data":
        raise EncodingError("not a canonical RIFF/WAVE file")
    if fmt_size != 16 or audio_format != 1:
        raise EncodingError(f"unsupported format chunk (size={fmt_size}, format={audio_format})")
    return WavHeader(
        sample_rate=rate,
        num_channels=channels,
        bits_per_sample=bits,
        byte_rate=byte_rate,
        block_align=block_align,
        data_size=data_size,
        riff_size=riff_size,
    )


def decode_samples(data: bytes) -> tuple[np.ndarray, int]:
    """Float samples in [-1, 1] and sample rate from encoded WAV bytes."""
    header = decode_header(data)
    if header.num_channels != NUM_CHANNELS or header.bits_per_sample != BITS_PER_SAMPLE:
        raise EncodingError(
            f"expected mono 16-bit, got {header.num_channels}ch {header.bits_per_sample}-bit"
        )
    payload = data[HEADER_SIZE:HEADER_SIZE + header.data_size]
    pcm = np.frombuffer(payload, dtype="<i2")
    return pcm.astype(np.float64) / 32767.0, header.sample_rate
