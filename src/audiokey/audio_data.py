# src/audiokey/audio_data.py

from __future__ import annotations

from typing import Iterable

import numpy as np


_MIN_CAPACITY = 1024


class AudioBuffer:
    """
    Interleaved PCM samples (float32, nominally in [-1, 1]) plus frame-rate and
    channel metadata.

    Samples are interleaved by channel: frame 0 channel 0, frame 0 channel 1, ...
    A new buffer is empty with frame_rate and channel_count unset (0).

    None of the mutating operations raise. Inconsistent metadata (e.g. samples
    with channel_count == 0) is allowed here; KeyClassifier refuses to analyze it.
    """

    def __init__(self) -> None:
        self._data = np.zeros(0, dtype=np.float32)
        self._size = 0
        self._frame_rate = 0
        self._channel_count = 0

    @classmethod
    def from_samples(
        cls,
        samples: Iterable[float] | np.ndarray,
        frame_rate: int = 0,
        channel_count: int = 0,
    ) -> "AudioBuffer":
        buf = cls()
        buf.set_frame_rate(frame_rate)
        buf.set_channel_count(channel_count)
        buf.append(samples)
        return buf

    # ----------------------------
    # Metadata
    # ----------------------------
    @property
    def frame_rate(self) -> int:
        return self._frame_rate

    @frame_rate.setter
    def frame_rate(self, rate: int) -> None:
        self._frame_rate = int(rate)

    def set_frame_rate(self, rate: int) -> None:
        self.frame_rate = rate

    @property
    def channel_count(self) -> int:
        return self._channel_count

    @channel_count.setter
    def channel_count(self, n: int) -> None:
        self._channel_count = int(n)

    def set_channel_count(self, n: int) -> None:
        self.channel_count = n

    # ----------------------------
    # Queries
    # ----------------------------
    @property
    def sample_count(self) -> int:
        return self._size

    @property
    def frame_count(self) -> int:
        """sample_count / channel_count, or 0 while channels are unconfigured."""
        if self._channel_count <= 0:
            return 0
        return self._size // self._channel_count

    @property
    def duration(self) -> float:
        """Length in seconds (0.0 without a frame rate)."""
        if self._frame_rate <= 0:
            return 0.0
        return self.frame_count / float(self._frame_rate)

    @property
    def samples(self) -> np.ndarray:
        """Read-only view of the live samples. Invalidated by the next mutation."""
        view = self._data[: self._size]
        view.flags.writeable = False
        return view

    def sample_at_frame(self, frame: int, channel: int = 0) -> float:
        if not (0 <= channel < self._channel_count):
            raise IndexError(f"channel {channel} out of range (0..{self._channel_count - 1})")
        if not (0 <= frame < self.frame_count):
            raise IndexError(f"frame {frame} out of range (0..{self.frame_count - 1})")
        return float(self._data[frame * self._channel_count + channel])

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return (
            f"AudioBuffer(frame_rate={self._frame_rate}, channel_count={self._channel_count}, "
            f"sample_count={self._size})"
        )

    def copy(self) -> "AudioBuffer":
        return AudioBuffer.from_samples(self.samples, self._frame_rate, self._channel_count)

    # ----------------------------
    # Mutation
    # ----------------------------
    def _reserve(self, needed: int) -> None:
        capacity = self._data.shape[0]
        if needed <= capacity:
            return
        new_capacity = max(_MIN_CAPACITY, capacity)
        while new_capacity < needed:
            new_capacity *= 2
        grown = np.empty(new_capacity, dtype=np.float32)
        grown[: self._size] = self._data[: self._size]
        self._data = grown

    def _replace(self, samples: np.ndarray) -> None:
        self._data = np.ascontiguousarray(samples, dtype=np.float32).copy()
        self._size = int(self._data.shape[0])

    def append(self, samples: Iterable[float] | np.ndarray) -> None:
        """Append samples (already interleaved) to the end of the buffer."""
        if isinstance(samples, np.ndarray):
            block = samples.astype(np.float32, copy=False).ravel()
        else:
            block = np.fromiter(samples, dtype=np.float32)

        n = int(block.shape[0])
        if n == 0:
            return

        self._reserve(self._size + n)
        self._data[self._size : self._size + n] = block
        self._size += n

    extend = append

    def reduce_to_mono(self) -> None:
        """
        Replace each frame with the mean of its channels and set channel_count = 1.

        No-op for mono, unconfigured or empty buffers. A trailing partial frame is dropped.
        """
        c = self._channel_count
        if c <= 1 or self._size == 0:
            return

        n_frames = self._size // c
        frames = self._data[: n_frames * c].reshape(n_frames, c)
        # float64 accumulator, channels summed in order
        acc = np.zeros(n_frames, dtype=np.float64)
        for ch in range(c):
            acc += frames[:, ch]
        self._replace((acc / c).astype(np.float32))
        self._channel_count = 1

    def downsample(self, factor: int) -> None:
        """
        Keep every `factor`-th frame (no anti-alias filter) and divide frame_rate by `factor`.

        factor 0 and 1 are no-ops. Frames are kept whole; a trailing partial frame is dropped.
        """
        factor = int(factor)
        c = self._channel_count
        if factor <= 1 or c <= 0:
            return

        n_frames = self._size // c
        frames = self._data[: n_frames * c].reshape(n_frames, c)
        self._replace(frames[::factor].ravel())
        self._frame_rate //= factor

    def clear(self) -> None:
        """Drop all samples; metadata is kept."""
        self._data = np.zeros(0, dtype=np.float32)
        self._size = 0


def as_frames(samples: np.ndarray, channel_count: int) -> np.ndarray:
    """View interleaved samples as a (frames, channels) array."""
    c = int(channel_count)
    n = samples.shape[0] // c
    return np.asarray(samples[: n * c], dtype=np.float32).reshape(n, c)
