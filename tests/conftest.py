"""Shared fixtures: synthetic PCM signals."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import numpy as np
import pytest

from audiokey.audio_data import AudioBuffer
from audiokey.key_detect import _MAJOR_PROFILE, _MINOR_PROFILE


@pytest.fixture
def sample_rate() -> int:
    return 22050


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent


@pytest.fixture
def key_tone() -> Callable[[int, str, int, float], np.ndarray]:
    """Builds a mono signal whose pitch-class energy follows a key profile.

    One sine per pitch class in octave 4, amplitude chosen so power is
    proportional to the Krumhansl-Kessler weight of that class in the key.
    """

    def _make(tonic_pc: int, mode: str, sr: int, seconds: float = 2.0) -> np.ndarray:
        profile = (_MAJOR_PROFILE if mode == "major" else _MINOR_PROFILE).astype(np.float64)
        weights = np.roll(profile, tonic_pc) / profile.max()
        t = np.arange(int(sr * seconds)) / float(sr)
        y = np.zeros_like(t)
        for pc in range(12):
            freq = 440.0 * 2.0 ** ((60 + pc - 69) / 12.0)
            y += 0.05 * np.sqrt(weights[pc]) * np.sin(2 * np.pi * freq * t)
        return y.astype(np.float32)

    return _make


@pytest.fixture
def silent_buffer() -> AudioBuffer:
    """1 second of digital silence, 44.1 kHz mono."""
    return AudioBuffer.from_samples(np.zeros(44100, dtype=np.float32), frame_rate=44100, channel_count=1)
