# src/audiokey/classifier.py

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Optional

import numpy as np

from .audio_data import AudioBuffer
from .key_detect import KeyDetectConfig, estimate_key_code
from .types import Key, key_from_code


logger = logging.getLogger(__name__)

# (samples, frame_rate, channel_count) -> engine code
KeyEngine = Callable[[np.ndarray, int, int], int]


def _malformed_reason(buffer: AudioBuffer) -> Optional[str]:
    if buffer.frame_rate <= 0:
        return f"frame_rate must be > 0, got {buffer.frame_rate}"
    if buffer.channel_count <= 0:
        return f"channel_count must be > 0, got {buffer.channel_count}"
    if buffer.sample_count == 0:
        return "buffer has no samples"
    if buffer.sample_count % buffer.channel_count != 0:
        return (
            f"sample_count {buffer.sample_count} is not a multiple of "
            f"channel_count {buffer.channel_count}"
        )
    return None


class KeyClassifier:
    """
    Stateless façade over the key analysis engine.

    Nothing is kept between `classify` calls; the buffer is only read.
    A malformed buffer (no frame rate, no channels, no samples or a partial
    frame) is never handed to the engine and classifies as silence.
    """

    def __init__(
        self,
        config: KeyDetectConfig = KeyDetectConfig(),
        engine: Optional[KeyEngine] = None,
    ) -> None:
        self.config = config
        self._engine: KeyEngine = engine if engine is not None else partial(estimate_key_code, config=config)

    def classify(self, buffer: AudioBuffer) -> Key:
        reason = _malformed_reason(buffer)
        if reason is not None:
            logger.warning(f"Refusing to analyze malformed audio ({reason}); reporting silence")
            return Key.SILENCE

        code = self._engine(buffer.samples, int(buffer.frame_rate), int(buffer.channel_count))
        key = key_from_code(code)
        logger.info(
            f"Classified {buffer.frame_count} frames ({buffer.channel_count} ch @ {buffer.frame_rate} Hz) as {key.label}"
        )
        return key


def classify_key(buffer: AudioBuffer, config: KeyDetectConfig = KeyDetectConfig()) -> Key:
    """One-shot classification with a fresh classifier."""
    return KeyClassifier(config=config).classify(buffer)
