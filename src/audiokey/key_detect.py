# src/audiokey/key_detect.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

import librosa
import numpy as np

from .audio_data import as_frames
from .types import SILENCE_CODE, Key, Mode


logger = logging.getLogger(__name__)


# Krumhansl-Kessler key profiles (major/minor), index 0 = tonic.
# These are "how important each pitch class tends to be" in that key.
_MAJOR_PROFILE = np.array([6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88], dtype=np.float32)
_MINOR_PROFILE = np.array([6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17], dtype=np.float32)


@dataclass(frozen=True)
class KeyDetectConfig:
    """
    silence_threshold:
      Peak absolute amplitude (after mono mix) below which the input is
      reported as silence without any spectral analysis.

    n_fft / hop_length:
      STFT window and hop, in frames, for the chromagram.

    tuning:
      Tuning offset in fractions of a bin passed to librosa. Fixed at 0.0 (A440)
      so the same audio always yields the same chroma.

    min_chroma_energy:
      If the time-averaged chroma sums below this, there is no tonal content.
    """
    silence_threshold: float = 1e-4
    n_fft: int = 4096
    hop_length: int = 1024
    tuning: float = 0.0
    min_chroma_energy: float = 1e-6


def _rotate_profile(profile: np.ndarray, tonic_pc: int) -> np.ndarray:
    """
    Rotate a profile so index 0 corresponds to tonic_pc.
    Example: tonic_pc=2 (D) means we compare the chroma against "D major profile".
    """
    tonic_pc = int(tonic_pc) % 12
    return np.roll(profile, tonic_pc)


def _pearson_corr(a: np.ndarray, b: np.ndarray) -> float:
    """
    Pearson correlation between two 12-D vectors.
    Returns a value in roughly [-1, 1].
    """
    a = a.astype(np.float64)
    b = b.astype(np.float64)
    a = a - a.mean()
    b = b - b.mean()
    denom = (np.linalg.norm(a) * np.linalg.norm(b)) + 1e-9
    return float(np.dot(a, b) / denom)


def mono_mix(samples: np.ndarray, channel_count: int) -> np.ndarray:
    """Average interleaved channels into one float32 signal with non-finite values zeroed."""
    frames = as_frames(np.asarray(samples, dtype=np.float32), channel_count)
    mono = frames.mean(axis=1, dtype=np.float64)
    return np.nan_to_num(mono, nan=0.0, posinf=0.0, neginf=0.0).astype(np.float32)


def mean_chroma(y: np.ndarray, frame_rate: int, config: KeyDetectConfig = KeyDetectConfig()) -> np.ndarray:
    """
    Time-averaged 12-bin chroma (C=0 .. B=11) of a mono signal.
    """
    if y.shape[0] < config.n_fft:
        y = np.pad(y, (0, config.n_fft - y.shape[0]))

    chroma = librosa.feature.chroma_stft(
        y=y,
        sr=int(frame_rate),
        n_fft=int(config.n_fft),
        hop_length=int(config.hop_length),
        tuning=float(config.tuning),
    )
    return np.mean(chroma, axis=1).astype(np.float32)


def score_keys(chroma: np.ndarray) -> List[Tuple[float, int, Mode]]:
    """
    Correlate a 12-bin chroma vector with all 24 keys (12 major + 12 minor).

    Returns (score, tonic_pc, mode) sorted best first.
    """
    candidates: List[Tuple[float, int, Mode]] = []

    for tonic in range(12):
        maj_score = _pearson_corr(chroma, _rotate_profile(_MAJOR_PROFILE, tonic))
        min_score = _pearson_corr(chroma, _rotate_profile(_MINOR_PROFILE, tonic))

        candidates.append((maj_score, tonic, "major"))
        candidates.append((min_score, tonic, "minor"))

    # stable sort: on exact ties the lower tonic, major first, wins
    candidates.sort(key=lambda x: x[0], reverse=True)
    return candidates


def estimate_key_code(
    samples: np.ndarray,
    frame_rate: int,
    channel_count: int,
    config: KeyDetectConfig = KeyDetectConfig(),
) -> int:
    """
    Classify interleaved PCM audio into one of 25 integer codes.

    0..23 are keys (see `audiokey.types.Key`), 24 means no detectable tonal energy.
    Expects frame_rate > 0, channel_count > 0 and whole frames.
    """
    y = mono_mix(samples, channel_count)
    if y.shape[0] == 0:
        return SILENCE_CODE

    peak = float(np.max(np.abs(y)))
    if peak < config.silence_threshold:
        logger.debug(f"Peak amplitude {peak:.2e} below silence threshold")
        return SILENCE_CODE

    chroma = mean_chroma(y, frame_rate, config)
    energy = float(chroma.sum())
    if energy < config.min_chroma_energy:
        logger.debug(f"Chroma energy {energy:.2e} below threshold")
        return SILENCE_CODE

    best_score, best_tonic, best_mode = score_keys(chroma)[0]
    key = Key.from_tonic(best_tonic, best_mode)
    logger.debug(f"Best key {key.label} (r={best_score:.3f}) over {y.shape[0]} frames at {frame_rate} Hz")
    return int(key)
