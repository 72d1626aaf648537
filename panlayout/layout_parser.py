"""LayoutParser: turns a handpan layout string into an ordered list of typed notes."""

import logging
from dataclasses import dataclass

from panlayout.layout_models import FailureKind, Note, NoteRole, ParseFailure
from panlayout.pitch_classes import NOTE_NAMES, InvalidPitchClass, parse_note_name
from panlayout.tokenizer import (
    classify_token,
    clean_layout,
    split_root,
    tokenize_notes_part,
    tokenize_simple,
)

logger = logging.getLogger(__name__)

DEFAULT_OCTAVE = 3


@dataclass
class _OctaveCursors:
    """
    Running octave state for one left-to-right pass over a handpaner layout.

    Tonal and mutant notes share one cursor that climbs an octave whenever the
    pitch sequence wraps around the chromatic circle. Bottom notes have their
    own cursor, which only moves on an explicit octave digit.
    """

    tonal_octave: int
    bottom_octave: int
    last_tonal_index: int
    is_first_tonal: bool = True

    def resolve(self, role: NoteRole, pitch_index: int, explicit_octave: int | None) -> int:
        if role is NoteRole.BOTTOM:
            if explicit_octave is not None:
                self.bottom_octave = explicit_octave
            return self.bottom_octave

        if explicit_octave is not None:
            self.tonal_octave = explicit_octave
        elif not self.is_first_tonal and pitch_index <= self.last_tonal_index:
            # Wrapped around the chromatic circle
            self.tonal_octave += 1

        self.is_first_tonal = False
        self.last_tonal_index = pitch_index
        return self.tonal_octave


class LayoutParser:
    """
    Parse layout strings in either the simple or the handpaner notation.

    The parser never raises on bad input: failures come back as a
    ParseFailure value so that callers can fall back to showing the raw
    string.

    Octave inference (handpaner format)
    -----------------------------------
    The ding before ``/`` sets the root octave (default 3). The notes part
    is then read left to right:

    1. A token with an explicit octave digit sets its cursor to that value.
    2. A tonal or mutant token without one keeps the tonal cursor if it is
       the first such token, otherwise bumps it by one when its pitch index
       is <= the previous tonal/mutant pitch index (``G → A`` stays,
       ``A → C`` climbs).
    3. A bottom token without one takes the bottom cursor unchanged.

    Reordering tokens changes the result; layouts are hand-authored in
    ascending order around the instrument.
    """

    def __init__(self, default_octave: int = DEFAULT_OCTAVE, strict: bool = False) -> None:
        """
        Args:
            default_octave: Octave used when the ding (or a simple-format
                            token) has no octave digit.
            strict:         Report unparseable note tokens as a failure
                            instead of skipping them.
        """
        self.default_octave = default_octave
        self.strict = strict

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _invalid(self, stage: str, token: str) -> ParseFailure:
        return ParseFailure(
            kind=FailureKind.INVALID_PITCH_CLASS,
            stage=stage,
            token=token,
            message=f"'{token}' is not a recognised note.",
        )

    def _skip(self, token: str) -> None:
        logger.warning("Skipping unrecognised note token '%s'", token)

    def _parse_simple(self, cleaned: str) -> list[Note] | ParseFailure:
        tokens = tokenize_simple(cleaned)
        if not tokens:
            return ParseFailure(
                kind=FailureKind.EMPTY_LAYOUT,
                stage="input",
                token=None,
                message="The layout contains no notes.",
            )

        notes: list[Note] = []
        for position, token in enumerate(tokens):
            role, note_text = classify_token(token)
            if position == 0:
                role = NoteRole.DING
            try:
                pitch_class, octave = parse_note_name(note_text)
            except InvalidPitchClass:
                if role is NoteRole.DING:
                    return self._invalid("root", token)
                if self.strict:
                    return self._invalid("notes", token)
                self._skip(token)
                continue
            notes.append(
                Note(
                    pitch_class=pitch_class,
                    octave=octave if octave is not None else self.default_octave,
                    role=role,
                )
            )

        return notes

    def _parse_handpaner(self, root_part: str, notes_part: str) -> list[Note] | ParseFailure:
        try:
            root_pitch, root_octave = parse_note_name(root_part)
        except InvalidPitchClass:
            return self._invalid("root", root_part)

        if root_octave is None:
            root_octave = self.default_octave

        notes = [Note(pitch_class=root_pitch, octave=root_octave, role=NoteRole.DING)]
        cursors = _OctaveCursors(
            tonal_octave=root_octave,
            bottom_octave=root_octave,
            last_tonal_index=NOTE_NAMES.index(root_pitch),
        )

        for token in tokenize_notes_part(notes_part):
            role, note_text = classify_token(token)
            try:
                pitch_class, explicit_octave = parse_note_name(note_text)
            except InvalidPitchClass:
                if self.strict:
                    return self._invalid("notes", token)
                self._skip(token)
                continue

            octave = cursors.resolve(role, NOTE_NAMES.index(pitch_class), explicit_octave)
            logger.debug("%s → %s%d (%s)", token, pitch_class, octave, role.value)
            notes.append(Note(pitch_class=pitch_class, octave=octave, role=role))

        if len(notes) <= 1:
            return ParseFailure(
                kind=FailureKind.TOO_FEW_NOTES,
                stage="notes",
                token=None,
                message="A layout needs a ding plus at least one other note.",
            )
        return notes

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, layout: str | None) -> list[Note] | ParseFailure:
        """
        Parse a layout string.

        Args:
            layout: e.g. ``"D/-A-Bb-C-D-E-F-G-A_"`` or ``"D3 A3 Bb3 [C4] (F3)"``.

        Returns:
            Notes in layout order (ding first), or a ParseFailure.
        """
        if not isinstance(layout, str) or not layout.strip():
            return ParseFailure(
                kind=FailureKind.EMPTY_LAYOUT,
                stage="input",
                token=None,
                message="The layout is empty.",
            )

        cleaned = clean_layout(layout)
        parts = split_root(cleaned)
        if parts is None:
            return self._parse_simple(cleaned)
        return self._parse_handpaner(*parts)


def parse_layout(
    layout: str | None,
    *,
    strict: bool = False,
    default_octave: int = DEFAULT_OCTAVE,
) -> list[Note] | ParseFailure:
    """Parse *layout* with a default-configured LayoutParser."""
    return LayoutParser(default_octave=default_octave, strict=strict).parse(layout)
