"""Data models shared by the parser, the layout engine and the renderers."""

from dataclasses import dataclass
from enum import Enum

from panlayout.pitch_classes import display_name, note_to_filename, note_to_midi


class NoteRole(str, Enum):
    """Physical role of a tone field on the instrument."""

    DING = "ding"
    TONAL = "tonal"
    MUTANT = "mutant"
    BOTTOM = "bottom"


class FailureKind(str, Enum):
    EMPTY_LAYOUT = "empty_layout"
    INVALID_PITCH_CLASS = "invalid_pitch_class"
    TOO_FEW_NOTES = "too_few_notes"


@dataclass(frozen=True)
class Note:
    """
    One tone field of a parsed layout.

    Attributes:
        pitch_class: Canonical sharp spelling, e.g. "A#".
        octave:      Scientific octave number (C4 = middle C).
        role:        Ding, tonal, mutant or bottom. Fixed at parse time.
    """

    pitch_class: str
    octave: int
    role: NoteRole

    @property
    def name(self) -> str:
        """Sharp name with octave, e.g. 'A#3'."""
        return f"{self.pitch_class}{self.octave}"

    @property
    def sample_name(self) -> str:
        """File-safe audio sample name, e.g. 'As3'."""
        return note_to_filename(self.pitch_class, self.octave)

    @property
    def midi_number(self) -> int:
        return note_to_midi(self.pitch_class, self.octave)

    def display_name(self, use_flats: bool = False, notation: str = "american") -> str:
        return display_name(self.pitch_class, self.octave, use_flats, notation)


@dataclass(frozen=True)
class PositionedNote:
    """
    A Note placed on the diagram.

    Coordinates have their origin at the shell centre with +y pointing up;
    renderers flip y for screen or page space. ``angle`` is in degrees
    (0 = east, counter-clockwise positive) and is None for the ding.
    """

    note: Note
    x: float
    y: float
    angle: float | None = None

    @property
    def pitch_class(self) -> str:
        return self.note.pitch_class

    @property
    def octave(self) -> int:
        return self.note.octave

    @property
    def role(self) -> NoteRole:
        return self.note.role


@dataclass(frozen=True)
class SpellingPreference:
    """How note labels are spelled for one diagram."""

    use_flats: bool = False
    notation: str = "american"

    def label(self, pitch_class: str, octave: int | None = None) -> str:
        return display_name(pitch_class, octave, self.use_flats, self.notation)


@dataclass(frozen=True)
class ParseFailure:
    """
    Explicit failure value returned by the parser instead of raising.

    Attributes:
        kind:    What went wrong.
        stage:   "input", "root" or "notes", the part of the layout that failed.
        token:   The offending token, when there is one.
        message: Human-readable summary for callers that want to show it.
    """

    kind: FailureKind
    stage: str
    token: str | None
    message: str
