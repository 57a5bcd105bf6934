# src/audiokey/types.py

from __future__ import annotations

import logging
import numbers
from enum import IntEnum
from typing import Literal, Optional

import pretty_midi

logger = logging.getLogger(__name__)

PitchClass = int
Mode = Literal["major", "minor"]

# Pitch class names for nice debug printing (C=0, C#=1, ..., B=11)
PC_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Engine codes walk the circle of semitones starting at A, major/minor interleaved.
_CODE_ORIGIN_PC = 9
SILENCE_CODE = 24


class Key(IntEnum):
    """
    Classification result: 12 major keys, 12 minor keys, or silence.

    Member values are the analysis engine's native codes, so `Key(code)` is the
    identity mapping for 0..24. Use `key_from_code` for untrusted codes.
    """
    A_MAJOR = 0
    A_MINOR = 1
    B_FLAT_MAJOR = 2
    B_FLAT_MINOR = 3
    B_MAJOR = 4
    B_MINOR = 5
    C_MAJOR = 6
    C_MINOR = 7
    D_FLAT_MAJOR = 8
    D_FLAT_MINOR = 9
    D_MAJOR = 10
    D_MINOR = 11
    E_FLAT_MAJOR = 12
    E_FLAT_MINOR = 13
    E_MAJOR = 14
    E_MINOR = 15
    F_MAJOR = 16
    F_MINOR = 17
    G_FLAT_MAJOR = 18
    G_FLAT_MINOR = 19
    G_MAJOR = 20
    G_MINOR = 21
    A_FLAT_MAJOR = 22
    A_FLAT_MINOR = 23
    SILENCE = 24

    @property
    def is_silence(self) -> bool:
        return self is Key.SILENCE

    @property
    def tonic_pc(self) -> Optional[PitchClass]:
        """Tonic pitch class (C=0 .. B=11), None for silence."""
        if self.is_silence:
            return None
        return (_CODE_ORIGIN_PC + int(self) // 2) % 12

    @property
    def mode(self) -> Optional[Mode]:
        if self.is_silence:
            return None
        return "minor" if int(self) % 2 else "major"

    @property
    def key_number(self) -> Optional[int]:
        """
        pretty_midi key number: 0..11 = C..B major, 12..23 = C..B minor.
        """
        if self.is_silence:
            return None
        return int(self.tonic_pc) + (12 if self.mode == "minor" else 0)

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'D minor'."""
        if self.is_silence:
            return "Silence"
        return pretty_midi.key_number_to_key_name(int(self.key_number))

    @classmethod
    def from_tonic(cls, tonic_pc: PitchClass, mode: Mode) -> "Key":
        if mode not in ("major", "minor"):
            raise ValueError(f"mode must be 'major' or 'minor', got {mode!r}")
        offset = (int(tonic_pc) - _CODE_ORIGIN_PC) % 12
        return cls(offset * 2 + (1 if mode == "minor" else 0))


def key_from_code(code: object) -> Key:
    """
    Map an engine result code onto `Key`.

    Total: 0..23 map by identity, 24 is silence, and anything else degrades to
    silence with a warning (usually an engine version mismatch).
    """
    if isinstance(code, numbers.Integral) and not isinstance(code, bool) and 0 <= code <= SILENCE_CODE:
        return Key(int(code))

    logger.warning(f"Unrecognized key code from analysis engine: {code!r}; reporting silence")
    return Key.SILENCE
