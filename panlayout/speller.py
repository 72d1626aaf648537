"""Circle-of-fifths speller: decides whether a layout is labelled with sharps or flats."""

from typing import Final

from panlayout.layout_models import SpellingPreference
from panlayout.pitch_classes import (
    SHARPS_TO_FLATS,
    SUPPORTED_NOTATIONS,
    InvalidPitchClass,
    parse_note_name,
)

# ── Key-signature tables ──────────────────────────────────────────────────────
# Position on the circle of fifths = number of sharps (+) or flats (-) in the
# major key. Enharmonic roots have an entry in both tables.

CIRCLE_SHARP: Final[dict[str, int]] = {
    "C": 0, "G": 1, "D": 2, "A": 3, "E": 4, "B": 5,
    "F#": 6, "C#": 7, "G#": 8, "D#": 9, "A#": 10,
    "F": -1,
}

CIRCLE_FLAT: Final[dict[str, int]] = {
    "C": 0, "G": 1, "D": 2, "A": 3, "E": 4, "B": 5,
    "F": -1, "Bb": -2, "Eb": -3, "Ab": -4, "Db": -5, "Gb": -6,
}

#: Key-signature shift of each mode relative to Ionian.
MODE_OFFSETS: Final[dict[str, int]] = {
    "lydian": 1,
    "ionian": 0,
    "mixolydian": -1,
    "dorian": -2,
    "aeolian": -3,
    "phrygian": -4,
    "phrygian_dominant": -4,
    "locrian": -5,
}

#: Their sharp major keys need double sharps, so they are always spelled Bb / Eb.
ALWAYS_FLAT_ROOTS: Final[tuple[str, ...]] = ("A#", "D#")

DEFAULT_MODE = "aeolian"
PRACTICAL_RANGE = 6


def normalize_mode(mode: str) -> str:
    """
    Canonical mode name: lower case, '-' and spaces folded to '_'.

    Raises:
        ValueError: If the mode is not one of the supported modes.
    """
    normalized = mode.strip().lower().replace("-", "_").replace(" ", "_")
    if normalized not in MODE_OFFSETS:
        supported = ", ".join(sorted(MODE_OFFSETS))
        raise ValueError(f"Unsupported mode '{mode}'. Use one of: {supported}.")
    return normalized


def _effective_keys(sharp_root: str, offset: int) -> tuple[int, int]:
    flat_root = SHARPS_TO_FLATS[sharp_root]
    return CIRCLE_SHARP[sharp_root] + offset, CIRCLE_FLAT[flat_root] + offset


def should_use_flats(root: str, mode: str = DEFAULT_MODE) -> bool:
    """
    Decide whether a layout rooted on *root* in *mode* reads better with flats.

    Worked examples::

        G# aeolian:    G#(+8) - 3 = 5 sharps  vs  Ab(-4) - 3 = 7 flats  → sharps
        G# mixolydian: G#(+8) - 1 = 7 sharps  vs  Ab(-4) - 1 = 5 flats  → flats
        D dorian:      D(+2)  - 2 = 0                                    → sharps

    Args:
        root: Root note, optionally with octave ("G#3", "Ab", "Sol#").
        mode: One of MODE_OFFSETS (case-insensitive).

    Raises:
        InvalidPitchClass: If the root is not a pitch class.
        ValueError:        If the mode is unknown.
    """
    sharp_root, _ = parse_note_name(root)
    offset = MODE_OFFSETS[normalize_mode(mode)]

    if sharp_root in ALWAYS_FLAT_ROOTS:
        return True

    # Natural roots have a single spelling
    if sharp_root not in SHARPS_TO_FLATS:
        return CIRCLE_SHARP[sharp_root] + offset < 0

    sharp_effective, flat_effective = _effective_keys(sharp_root, offset)
    sharp_count = abs(sharp_effective)
    flat_count = abs(flat_effective)

    if flat_count < sharp_count:
        return True
    if sharp_count < flat_count:
        return False

    # Tie: keep whichever spelling stays inside the practical ±6 range
    if 0 <= sharp_effective <= PRACTICAL_RANGE and flat_effective < -PRACTICAL_RANGE:
        return False
    if -PRACTICAL_RANGE <= flat_effective <= 0 and sharp_effective > PRACTICAL_RANGE:
        return True
    return False


def spelling_for(root: str, mode: str = DEFAULT_MODE, notation: str = "american") -> SpellingPreference:
    """Build the SpellingPreference for a diagram rooted on *root*."""
    if notation not in SUPPORTED_NOTATIONS:
        supported = ", ".join(sorted(SUPPORTED_NOTATIONS))
        raise ValueError(f"Unsupported notation '{notation}'. Use one of: {supported}.")
    return SpellingPreference(use_flats=should_use_flats(root, mode), notation=notation)


def tonality_chip_notation(tonality: str, mode: str = DEFAULT_MODE) -> str:
    """
    Spell a root-with-octave chip ("A#3" → "Bb3") for a given mode.

    Natural roots are returned unchanged; tokens that are not a note with an
    octave are returned as given.
    """
    try:
        sharp_root, octave = parse_note_name(tonality)
    except InvalidPitchClass:
        return tonality
    if octave is None or sharp_root not in SHARPS_TO_FLATS:
        return tonality
    if should_use_flats(tonality, mode):
        return f"{SHARPS_TO_FLATS[sharp_root]}{octave}"
    return f"{sharp_root}{octave}"
