"""Tests for the Key enumeration and engine code mapping."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from audiokey.types import Key, key_from_code


class TestKey:
    def test_has_25_members(self) -> None:
        assert len(Key) == 25
        assert [int(k) for k in Key] == list(range(25))

    def test_engine_code_layout(self) -> None:
        assert Key(0) is Key.A_MAJOR
        assert Key(1) is Key.A_MINOR
        assert Key(6) is Key.C_MAJOR
        assert Key(11) is Key.D_MINOR
        assert Key(23) is Key.A_FLAT_MINOR
        assert Key(24) is Key.SILENCE

    def test_tonic_and_mode(self) -> None:
        assert Key.C_MAJOR.tonic_pc == 0
        assert Key.C_MAJOR.mode == "major"
        assert Key.D_MINOR.tonic_pc == 2
        assert Key.D_MINOR.mode == "minor"
        assert Key.B_FLAT_MINOR.tonic_pc == 10
        assert Key.A_FLAT_MAJOR.tonic_pc == 8

    def test_silence_has_no_tonic(self) -> None:
        assert Key.SILENCE.is_silence
        assert Key.SILENCE.tonic_pc is None
        assert Key.SILENCE.mode is None
        assert Key.SILENCE.key_number is None
        assert Key.SILENCE.label == "Silence"

    def test_key_numbers_follow_pretty_midi(self) -> None:
        assert Key.C_MAJOR.key_number == 0
        assert Key.B_MAJOR.key_number == 11
        assert Key.C_MINOR.key_number == 12
        assert Key.D_MINOR.key_number == 14
        assert sorted(k.key_number for k in Key if not k.is_silence) == list(range(24))

    def test_labels(self) -> None:
        assert Key.D_MINOR.label.lower() == "d minor"
        assert Key.G_MAJOR.label.lower() == "g major"

    def test_from_tonic_round_trips(self) -> None:
        for key in Key:
            if key.is_silence:
                continue
            assert Key.from_tonic(key.tonic_pc, key.mode) is key

    def test_from_tonic_rejects_bad_mode(self) -> None:
        with pytest.raises(ValueError):
            Key.from_tonic(0, "dorian")


class TestKeyFromCode:
    @pytest.mark.parametrize("code", range(25))
    def test_identity_for_known_codes(self, code: int) -> None:
        assert key_from_code(code) is Key(code)

    def test_numpy_integers(self) -> None:
        assert key_from_code(np.int64(5)) is Key.B_MINOR
        assert key_from_code(np.uint32(11)) is Key.D_MINOR

    @pytest.mark.parametrize("code", [25, 255, -1, 3.0, "3", None, True])
    def test_unknown_codes_degrade_to_silence(self, code: object, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="audiokey.types"):
            assert key_from_code(code) is Key.SILENCE

        assert "Unrecognized key code" in caplog.text
