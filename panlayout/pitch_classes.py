"""Pitch-class lookup tables and note-name conversions."""

import re
from typing import Final

# Chromatic pitch class names (index 0 = C)
NOTE_NAMES: Final[list[str]] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

FLATS_TO_SHARPS: Final[dict[str, str]] = {
    "Db": "C#", "Eb": "D#", "Fb": "E", "Gb": "F#",
    "Ab": "G#", "Bb": "A#", "Cb": "B",
}

SHARPS_TO_FLATS: Final[dict[str, str]] = {
    "C#": "Db", "D#": "Eb", "F#": "Gb", "G#": "Ab", "A#": "Bb",
}

AMERICAN_TO_FRENCH: Final[dict[str, str]] = {
    "C": "Do", "D": "Ré", "E": "Mi", "F": "Fa",
    "G": "Sol", "A": "La", "B": "Si",
}

# Unaccented "Re" is accepted on input; output always uses "Ré".
FRENCH_TO_AMERICAN: Final[dict[str, str]] = {
    **{french: letter for letter, french in AMERICAN_TO_FRENCH.items()},
    "Re": "D",
}

SUPPORTED_NOTATIONS: Final[set[str]] = {"american", "french"}

SEMITONES_PER_OCTAVE = 12

_NOTE_RE = re.compile(r"^([A-G]#?)(\d)?$")
_FRENCH_RE = re.compile(r"^(Do|Ré|Re|Mi|Fa|Sol|La|Si)([#b]?)(\d?)$")
_SPELLED_RE = re.compile(r"^([A-G])([#b]?)(\d?)$")


class InvalidPitchClass(ValueError):
    """Raised when a token does not name one of the 12 pitch classes."""

    def __init__(self, token: str) -> None:
        super().__init__(f"'{token}' is not a recognised pitch class.")
        self.token = token


def _from_french(text: str) -> str:
    match = _FRENCH_RE.match(text)
    if not match:
        return text
    return FRENCH_TO_AMERICAN[match.group(1)] + match.group(2) + match.group(3)


def _flats_to_sharps(text: str) -> str:
    for flat, sharp in FLATS_TO_SHARPS.items():
        if text.startswith(flat):
            return sharp + text[len(flat):]
    return text


def parse_note_name(text: str) -> tuple[str, int | None]:
    """
    Split a note token such as ``"Bb3"`` into ``("A#", 3)``.

    Flat and French spellings are normalised to the sharp pitch class. The
    octave is a single optional trailing digit; ``None`` when absent.

    Raises:
        InvalidPitchClass: If the token is not a pitch class with an optional octave.
    """
    normalized = _flats_to_sharps(_from_french(text.strip()))
    match = _NOTE_RE.match(normalized)
    # E# and B# match the pattern but are not pitch-class names
    if not match or match.group(1) not in NOTE_NAMES:
        raise InvalidPitchClass(text)
    octave = int(match.group(2)) if match.group(2) else None
    return match.group(1), octave


def to_sharp(name: str) -> str:
    """Return the canonical sharp pitch class for a sharp, flat or French name."""
    pitch_class, octave = parse_note_name(name)
    if octave is not None:
        raise InvalidPitchClass(name)
    return pitch_class


def pitch_class_index(pitch_class: str) -> int:
    """Chromatic index of a pitch class (0=C, 1=C#, ..., 11=B)."""
    return NOTE_NAMES.index(to_sharp(pitch_class))


def to_flat(pitch_class: str, prefer_flat: bool) -> str:
    """Spell a pitch class with a flat when preferred and one exists."""
    sharp = to_sharp(pitch_class)
    if prefer_flat:
        return SHARPS_TO_FLATS.get(sharp, sharp)
    return sharp


def to_french_solfege(name: str) -> str:
    """
    Convert an American note name to French solfège.

    ``"Bb"`` → ``"Sib"``, ``"C#4"`` → ``"Do#4"``, ``"D3"`` → ``"Ré3"``.
    The accidental and octave are kept as written.

    Raises:
        InvalidPitchClass: If the name is not a spelled note.
    """
    match = _SPELLED_RE.match(name.strip())
    if not match:
        raise InvalidPitchClass(name)
    letter, accidental, octave = match.groups()
    return AMERICAN_TO_FRENCH[letter] + accidental + octave


def display_name(
    pitch_class: str,
    octave: int | None,
    use_flats: bool = False,
    notation: str = "american",
) -> str:
    """Spell a note for display: sharp/flat first, then French if requested."""
    spelled = to_flat(pitch_class, use_flats) + ("" if octave is None else str(octave))
    if notation == "french":
        return to_french_solfege(spelled)
    return spelled


def note_to_filename(pitch_class: str, octave: int) -> str:
    """Audio sample name for a note: ``C#4`` → ``Cs4``, ``Bb3`` → ``As3``."""
    return f"{to_sharp(pitch_class).replace('#', 's')}{octave}"


def note_to_midi(pitch_class: str, octave: int) -> int:
    """
    Convert a pitch class and octave number to an absolute MIDI note.

    MIDI octave numbering: C-1 = 0, C0 = 12, C1 = 24, ... C4 (Middle C) = 60.
    """
    return (octave + 1) * SEMITONES_PER_OCTAVE + pitch_class_index(pitch_class)
