"""AudioOutput — sounddevice OutputStream wrapper for playing encoded sounds."""

from __future__ import annotations

import logging
import threading
from collections import deque

import numpy as np
import sounddevice as sd

from ..synth.encoder import EncodedAudio, decode_samples

logger = logging.getLogger(__name__)


class AudioOutput:
    """Wraps a sounddevice OutputStream with a simple write()/play() interface.

    Uses a callback-based stream fed from a deque of blocks.

    Usage::

        out = AudioOutput(sample_rate=44100, block_size=2205)
        out.start()
        out.play(encoded_audio)   # blocks until the sound has been output
        out.stop()
    """

    def __init__(
        self,
        sample_rate: int = 44100,
        block_size: int = 2205,
        channels: int = 1,
    ):
        self.sample_rate = sample_rate
        self.block_size = block_size
        self.channels = channels
        self._buffer: deque[np.ndarray] = deque()
        self._drained = threading.Event()
        self._lock = threading.Lock()
        self._stream: sd.OutputStream | None = None

    def _callback(
        self,
        outdata: np.ndarray,
        frames: int,
        time_info: object,
        status: sd.CallbackFlags,
    ) -> None:
        if status:
            logger.warning("Output stream status: %s", status)
        with self._lock:
            block = self._buffer.popleft() if self._buffer else None
            if block is None:
                self._drained.set()
        if block is not None:
            n = min(len(block), frames)
            outdata[:n, 0] = block[:n]
            if n < frames:
                outdata[n:, 0] = 0.0
        else:
            outdata[:, 0] = 0.0

    def start(self) -> None:
        """Open and start the audio stream."""
        self._stream = sd.OutputStream(
            samplerate=self.sample_rate,
            blocksize=self.block_size,
            channels=self.channels,
            dtype="float32",
            callback=self._callback,
        )
        self._stream.start()

    def write(self, audio: np.ndarray) -> None:
        """Queue float samples for playback, split into stream-sized blocks."""
        audio = np.asarray(audio, dtype=np.float32)
        blocks = [
            audio[start:start + self.block_size]
            for start in range(0, len(audio), self.block_size)
        ]
        with self._lock:
            self._drained.clear()
            self._buffer.extend(blocks)

    def play(self, audio: EncodedAudio, timeout: float | None = None) -> None:
        """Decode a WAV sound and play it to the end."""
        samples, rate = decode_samples(audio.data)
        if rate != self.sample_rate:
            raise ValueError(
                f"sound is {rate} Hz but the output stream runs at {self.sample_rate} Hz"
            )
        if self._stream is None:
            self.start()
        self.write(samples)
        if timeout is None:
            timeout = audio.duration_sec + 1.0
        self._drained.wait(timeout)

    def stop(self) -> None:
        """Stop and close the audio stream."""
        if self._stream is not None:
            self._stream.stop()
            self._stream.close()
            self._stream = None
        self._buffer.clear()
