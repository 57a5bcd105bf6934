# src/audiokey/pcm_io.py

from __future__ import annotations

from pathlib import Path
from typing import Dict, Literal

import numpy as np

from .audio_data import AudioBuffer


SampleFormat = Literal["f32le", "s16le"]

# numpy dtype + scale into [-1, 1] for each raw (headerless) PCM layout
_FORMATS: Dict[str, tuple[str, float]] = {
    "f32le": ("<f4", 1.0),
    "s16le": ("<i2", 1.0 / 32768.0),
}


def list_formats() -> list[str]:
    return sorted(_FORMATS)


def decode_pcm_bytes(data: bytes, sample_format: SampleFormat = "f32le") -> np.ndarray:
    """
    Raw little-endian PCM bytes -> float32 samples.

    Trailing bytes that don't make up a whole sample are ignored.
    """
    if sample_format not in _FORMATS:
        raise ValueError(f"Unknown sample format {sample_format!r}. Options: {', '.join(list_formats())}")

    dtype, scale = _FORMATS[sample_format]
    width = np.dtype(dtype).itemsize
    usable = len(data) - (len(data) % width)
    raw = np.frombuffer(data[:usable], dtype=dtype)

    if scale == 1.0:
        return raw.astype(np.float32)
    return (raw.astype(np.float32) * np.float32(scale)).astype(np.float32)


def load_pcm(
    path: str | Path,
    frame_rate: int,
    channel_count: int,
    sample_format: SampleFormat = "f32le",
) -> AudioBuffer:
    """
    Read a headerless PCM file into a new AudioBuffer.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"PCM file not found: {p}")
    if not p.is_file():
        raise ValueError(f"Expected a file, got: {p}")

    samples = decode_pcm_bytes(p.read_bytes(), sample_format)
    return AudioBuffer.from_samples(samples, frame_rate=frame_rate, channel_count=channel_count)
