"""panlayout: handpan notation parser and radial layout engine."""

from panlayout.layout_models import (
    FailureKind,
    Note,
    NoteRole,
    ParseFailure,
    PositionedNote,
    SpellingPreference,
)
from panlayout.layout_parser import LayoutParser, parse_layout
from panlayout.pitch_classes import InvalidPitchClass
from panlayout.radial_layout import RadialLayout, layout_notes
from panlayout.speller import should_use_flats, spelling_for

__version__ = "0.1.0"

__all__ = [
    "FailureKind",
    "InvalidPitchClass",
    "LayoutParser",
    "Note",
    "NoteRole",
    "ParseFailure",
    "PositionedNote",
    "RadialLayout",
    "SpellingPreference",
    "__version__",
    "layout_notes",
    "parse_layout",
    "should_use_flats",
    "spelling_for",
]
