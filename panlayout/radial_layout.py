"""RadialLayout: places parsed notes around a circular handpan shell."""

import math

import numpy as np

from panlayout.layout_models import Note, NoteRole, PositionedNote

# ── Compass angles (degrees, 0 = east, counter-clockwise positive) ──────────
NORTH = 90.0
SOUTH = 270.0


def tonal_angle(index: int, total: int) -> float:
    """
    Angle of tonal note *index* out of *total* on the main ring.

    The ring is not evenly spaced. The first tonal sits at the bottom, the
    last is pinned to the top, and the rest alternate right/left climbing
    up each side:

        total == 1        → 270
        total == 2        → 250, 290
        last index        → 90
        even, index 0     → 270
        even remainder    → right 315 + k·step (wraps at 360), left 225 - k·step,
                            step = 90 / (per_side - 1)
        odd remainder     → right 290 + k·step, left 250 - k·step,
                            step = 120 / (per_side - 1)
    """
    last_index = total - 1
    is_even_total = total % 2 == 0

    if total == 1:
        return SOUTH
    if total == 2:
        return 250.0 if index == 0 else 290.0
    if index == last_index:
        return NORTH
    if is_even_total and index == 0:
        return SOUTH

    if is_even_total:
        adjusted = index - 1
        is_right = adjusted % 2 == 1
        side_index = adjusted // 2
        notes_per_side = math.ceil((total - 2) / 2)
        arc, right_start, left_start = 90.0, 315.0, 225.0
    else:
        is_right = index % 2 == 0
        side_index = index // 2
        notes_per_side = math.ceil((total - 1) / 2)
        arc, right_start, left_start = 120.0, 290.0, 250.0

    step = arc / (notes_per_side - 1) if notes_per_side > 1 else 0.0
    if is_right:
        angle = right_start + side_index * step
        return angle - 360.0 if angle >= 360.0 else angle
    return left_start - side_index * step


def mutant_angle(index: int, total: int) -> float:
    """Angle on the inner arc above the ding, centred on north."""
    if total == 1:
        return NORTH
    spread = min(120.0, 40.0 + (total - 1) * 30.0)
    return NORTH + spread / 2 - index * (spread / (total - 1))


def bottom_angle(index: int, total: int) -> float:
    """Angle on the outer arc below the shell, centred on south."""
    if total == 1:
        return SOUTH
    spread = min(140.0, 40.0 + (total - 1) * 25.0)
    return SOUTH - spread / 2 + index * (spread / (total - 1))


_ANGLE_RULES = {
    NoteRole.TONAL: tonal_angle,
    NoteRole.MUTANT: mutant_angle,
    NoteRole.BOTTOM: bottom_angle,
}


class RadialLayout:
    """
    Compute diagram positions for a parsed layout.

    All radii are fractions of ``size``, the overall diagram size shared by
    every renderer, so an SVG drawn at 300 px and a PDF drawn at 80 mm have
    identical proportions.

    Ring geometry
    -------------
    - Ding:    at the shell centre.
    - Tonals:  main ring at 0.31 × size.
    - Mutants: inner arc at 0.18 × size, above the ding.
    - Bottoms: outer arc at 0.46 × size, past the 0.42 × size shell outline,
               because bottom notes sit underneath the instrument.
    """

    SHELL_RATIO = 0.42
    TONAL_RATIO = 0.31
    MUTANT_RATIO = 0.18
    BOTTOM_RATIO = 0.46

    DING_NOTE_RATIO = 0.09
    TONAL_NOTE_RATIO = 0.065
    SMALL_NOTE_FACTOR = 0.85  # mutants and bottoms are drawn smaller

    def __init__(self, size: float = 300.0) -> None:
        """
        Args:
            size: Overall diagram size in the caller's units (px, mm, ...).
        """
        if size <= 0:
            raise ValueError("size must be positive.")
        self.size = size

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------

    @property
    def shell_radius(self) -> float:
        return self.size * self.SHELL_RATIO

    def ring_radius(self, role: NoteRole) -> float:
        """Orbit radius of a role's ring (0 for the ding)."""
        ratios = {
            NoteRole.DING: 0.0,
            NoteRole.TONAL: self.TONAL_RATIO,
            NoteRole.MUTANT: self.MUTANT_RATIO,
            NoteRole.BOTTOM: self.BOTTOM_RATIO,
        }
        return self.size * ratios[role]

    def note_radius(self, role: NoteRole) -> float:
        """Drawn radius of a single note circle."""
        if role is NoteRole.DING:
            return self.size * self.DING_NOTE_RATIO
        if role is NoteRole.TONAL:
            return self.size * self.TONAL_NOTE_RATIO
        return self.size * self.TONAL_NOTE_RATIO * self.SMALL_NOTE_FACTOR

    def _ring_positions(self, role: NoteRole, total: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        angle_rule = _ANGLE_RULES[role]
        angles = np.array([angle_rule(i, total) for i in range(total)], dtype=float)
        radians = np.radians(angles)
        radius = self.ring_radius(role)
        return angles, radius * np.cos(radians), radius * np.sin(radians)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def layout(self, notes: list[Note]) -> list[PositionedNote]:
        """
        Position every note, preserving input order.

        Each role is laid out on its own ring using the note's index among
        notes of the same role. An empty input gives an empty list.
        """
        if not notes:
            return []

        by_role: dict[NoteRole, list[int]] = {}
        for position, note in enumerate(notes):
            by_role.setdefault(note.role, []).append(position)

        placed: dict[int, PositionedNote] = {}
        for role, positions in by_role.items():
            if role is NoteRole.DING:
                for position in positions:
                    placed[position] = PositionedNote(note=notes[position], x=0.0, y=0.0)
                continue

            angles, xs, ys = self._ring_positions(role, len(positions))
            for ring_index, position in enumerate(positions):
                placed[position] = PositionedNote(
                    note=notes[position],
                    x=float(xs[ring_index]),
                    y=float(ys[ring_index]),
                    angle=float(angles[ring_index]),
                )

        return [placed[position] for position in range(len(notes))]

    def extent(self, positioned: list[PositionedNote]) -> tuple[float, float, float, float]:
        """
        Bounding box (min_x, min_y, max_x, max_y) of the shell plus all note circles.

        Bottom notes protrude below the shell, so the box grows downward
        when there are any.
        """
        shell = self.shell_radius
        min_x, min_y, max_x, max_y = -shell, -shell, shell, shell
        for item in positioned:
            r = self.note_radius(item.role)
            min_x = min(min_x, item.x - r)
            min_y = min(min_y, item.y - r)
            max_x = max(max_x, item.x + r)
            max_y = max(max_y, item.y + r)
        return min_x, min_y, max_x, max_y


def layout_notes(notes: list[Note], size: float = 300.0) -> list[PositionedNote]:
    """Position *notes* on a diagram of the given size."""
    return RadialLayout(size).layout(notes)
