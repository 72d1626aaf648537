"""Unit tests for the circle-of-fifths speller."""

import pytest

from panlayout.pitch_classes import InvalidPitchClass
from panlayout.speller import (
    MODE_OFFSETS,
    normalize_mode,
    should_use_flats,
    spelling_for,
    tonality_chip_notation,
)


def test_g_sharp_aeolian_uses_sharps() -> None:
    # G# aeolian: 5 sharps vs Ab aeolian: 7 flats
    assert should_use_flats("G#3", "aeolian") is False


def test_g_sharp_mixolydian_uses_flats() -> None:
    # G# mixolydian: 7 sharps vs Ab mixolydian: 5 flats
    assert should_use_flats("G#3", "mixolydian") is True


@pytest.mark.parametrize("root", ["A#", "D#", "Bb3", "Eb"])
@pytest.mark.parametrize("mode", sorted(MODE_OFFSETS))
def test_always_flat_roots(root: str, mode: str) -> None:
    assert should_use_flats(root, mode) is True


def test_natural_roots_follow_effective_key_sign() -> None:
    assert should_use_flats("D3", "aeolian") is True  # D minor: 1 flat
    assert should_use_flats("D3", "dorian") is False  # no accidentals
    assert should_use_flats("E3", "aeolian") is False  # E minor: 1 sharp
    assert should_use_flats("F3", "ionian") is True
    assert should_use_flats("C3", "mixolydian") is True  # C mixolydian: 1 flat
    assert should_use_flats("C3", "lydian") is False


def test_f_sharp_aeolian_prefers_sharps() -> None:
    # F# minor: 3 sharps vs Gb minor: 9 flats
    assert should_use_flats("F#3", "aeolian") is False


def test_c_sharp_ionian_prefers_flats() -> None:
    # C# major: 7 sharps vs Db major: 5 flats
    assert should_use_flats("C#", "ionian") is True


def test_flat_spelled_root_is_accepted() -> None:
    assert should_use_flats("Ab3", "mixolydian") == should_use_flats("G#3", "mixolydian")


def test_speller_is_deterministic() -> None:
    for root in ["C", "C#", "D", "F#", "G#", "A", "B"]:
        for mode in MODE_OFFSETS:
            assert should_use_flats(root, mode) == should_use_flats(root, mode)


def test_mode_names_are_normalized() -> None:
    assert normalize_mode("Phrygian-Dominant") == "phrygian_dominant"
    assert normalize_mode(" AEOLIAN ") == "aeolian"


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported mode"):
        should_use_flats("D", "blues")


def test_unknown_root_raises() -> None:
    with pytest.raises(InvalidPitchClass):
        should_use_flats("Z3", "aeolian")


def test_spelling_for_carries_notation() -> None:
    spelling = spelling_for("D", "aeolian", "french")
    assert spelling.use_flats is True
    assert spelling.label("A#", 3) == "Sib3"


def test_spelling_for_rejects_unknown_notation() -> None:
    with pytest.raises(ValueError, match="Unsupported notation"):
        spelling_for("D", "aeolian", "german")


def test_tonality_chip_notation() -> None:
    assert tonality_chip_notation("A#3", "aeolian") == "Bb3"
    assert tonality_chip_notation("G#3", "aeolian") == "G#3"
    assert tonality_chip_notation("G#3", "mixolydian") == "Ab3"
    assert tonality_chip_notation("D3", "aeolian") == "D3"
    assert tonality_chip_notation("not a note", "aeolian") == "not a note"


@pytest.mark.parametrize(
    ("root", "mode"),
    [("F#3", "ionian"), ("C#3", "mixolydian"), ("G#3", "dorian")],
)
def test_six_sharps_versus_six_flats_tie_keeps_sharps(root: str, mode: str) -> None:
    # Both spellings need six accidentals; neither lies outside the practical range
    assert should_use_flats(root, mode) is False
