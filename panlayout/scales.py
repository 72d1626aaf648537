"""Catalog of handpan scales with their base notes and layout patterns per note count."""

from dataclasses import dataclass
from typing import Final

from panlayout.pitch_classes import display_name, parse_note_name
from panlayout.speller import should_use_flats


@dataclass(frozen=True)
class ScaleDefinition:
    """
    One scale of the catalog.

    Attributes:
        name:        Display name without the root, e.g. "Kurd".
        root:        Base root pitch class (sharp spelling).
        octave:      Base root octave.
        mode:        Mode that drives sharp/flat spelling.
        description: Short description.
        mood:        Mood keywords.
        base_notes:  Notes of the 9-note base instrument (sharp spelling).
        patterns:    Layout string per total note count, or None when the
                     scale is not offered in other sizes.
    """

    name: str
    root: str
    octave: int
    mode: str
    description: str
    mood: str
    base_notes: tuple[str, ...]
    patterns: dict[int, str] | None = None


SCALES: Final[dict[str, ScaleDefinition]] = {
    "kurd": ScaleDefinition(
        name="Kurd",
        root="D",
        octave=3,
        mode="aeolian",
        description="The most popular scale. Soft, meditative and accessible.",
        mood="Melancholic, introspective",
        base_notes=("D3", "A3", "A#3", "C4", "D4", "E4", "F4", "G4", "A4"),
        patterns={
            9: "D/-A-Bb-C-D-E-F-G-A_",
            10: "D/-A-Bb-C-D-E-F-G-A-C",
            11: "D/-A-Bb-C-D-E-F-G-A-C-[D]",
            12: "D/(F)-(G)-A-Bb-C-D-E-F-G-A-C",
            13: "D/(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]",
            14: "D/(E)-(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]",
            15: "D/(C3)-(E)-(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]",
            16: "D/(Bb2)-(C3)-(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]-(E)",
            17: "D/(C3)-(E3)-(F)-(G)-A-Bb-C-D-E-F-G-A-C-[D]-(E5)-(F5)",
        },
    ),
    "amara": ScaleDefinition(
        name="Amara",
        root="D",
        octave=3,
        mode="dorian",
        description="A gentler Celtic variant. Ideal for beginners.",
        mood="Soft, soothing",
        base_notes=("D3", "A3", "C4", "D4", "E4", "F4", "G4", "A4", "C5"),
        patterns={
            9: "D/-A-C-D-E-F-G-A-C_",
            10: "D/-A-C-D-E-F-G-A-C-D",
            11: "D/A-(Bb)-C-D-E-F-G-A-C-D",
            12: "D/(F)-(G)-A-C-D-E-F-G-A-C-D",
            13: "D/(E)-(F)-(G)-A-C-D-E-F-G-A-C-D",
            14: "D/(A2)-(C3)-(F)-(G)-A-C-D-E-F-G-A-C-D",
            15: "D/(C3)-(F)-(G)-A-(Bb)-C-D-E-F-G-A-C-D-[F]",
            16: "D/(C3)-(E)-(F)-(G)-A-C-D-E-F-G-A-C-D-(E)-(F)",
            17: "D/(A2)-(C3)-(F)-(G)-A-C-D-E-F-G-A-C-D-[E]-(F)-(G)",
        },
    ),
    "celtic": ScaleDefinition(
        name="Celtic Minor",
        root="D",
        octave=3,
        mode="dorian",
        description="Celtic and medieval colours. Very melodic.",
        mood="Mystical, nostalgic",
        base_notes=("D3", "A3", "C4", "D4", "E4", "F4", "G4", "A4", "C5"),
    ),
    "pygmy": ScaleDefinition(
        name="Pygmy",
        root="D",
        octave=3,
        mode="aeolian",
        description="African pentatonic scale. Joyful and driving.",
        mood="Joyful, tribal",
        base_notes=("D3", "A3", "A#3", "C4", "D4", "F4", "G4", "A4"),
    ),
    "lowpygmy": ScaleDefinition(
        name="Low Pygmy",
        root="F#",
        octave=3,
        mode="aeolian",
        description="The low version of Pygmy. Deep and hypnotic.",
        mood="Deep, tribal",
        base_notes=("F#3", "G#3", "A3", "C#4", "E4", "F#4", "G#4", "A4", "C#5"),
        patterns={
            9: "F#/-G#-A-C#-E-F#-G#-A-C#",
            10: "F#/-G#-A-C#-E-F#-G#-A-C#-E",
            11: "F#/-G#-A-C#-E-F#-G#-A-C#-E-[F#]",
            12: "F#/-G#-A-C#-E-F#-G#-A-C#-E-[F#]-[G#]",
            13: "F#/-G#-A-(B)-C#-E-F#-G#-A-C#-E-[F#]-[G#]",
            14: "F#/-G#-A-(B)-C#-(D)-E-F#-G#-A-C#-E-[F#]-[G#]",
            15: "F#/-G#-A-(B)-C#-(D)-E-F#-G#-A-(B)-C#-E-[F#]-[G#]",
            16: "F#/-G#-A-(B)-C#-(D)-E-F#-G#-A-(B)-C#-(D)-E-[F#]-[G#]",
            17: "F#/-(D3)-(E3)-G#3-A-(B4)-C#4-(D4)-E-F#-G#-A-(B)-C#-E-[F#]-[G#]",
        },
    ),
    "hijaz": ScaleDefinition(
        name="Hijaz",
        root="D",
        octave=3,
        mode="phrygian_dominant",
        description="Oriental colours. Mysterious and bewitching.",
        mood="Oriental, mystical",
        base_notes=("D3", "A3", "A#3", "C#4", "D4", "E4", "F4", "G4", "A4"),
        patterns={
            9: "D/-A-A#-C#-D-E-F-G-A",
            10: "D/-A-A#-C#-D-E-F-G-A-C#",
            11: "D/-A-A#-C#-D-E-F-G-A-C#-[D]",
            12: "D/-(E)-(F)-A-A#-C#-D-E-F-G-A-C#",
            13: "D/-(E)-(F)-A-A#-C#-D-E-F-G-A-C#-[D]",
            14: "D/-(E)-(F)-(G)-A-A#-C#-D-E-F-G-A-C#-[D]",
            15: "D/-(E)-(F)-A-A#-C#-D-E-F-G-A-C#-[D]-(E)-(F)",
            16: "D/-(E)-(F)-(G)-A-A#-C#-D-E-F-G-A-C#-[D]-(E)-(F)",
            17: "D/-(A#2)-(C#3)-(E)-(F)-A-A#-C#-D-E-F-G-A-C#-[D]-(E)-(F)",
        },
    ),
    "myxolydian": ScaleDefinition(
        name="Myxolydian",
        root="C",
        octave=3,
        mode="mixolydian",
        description="Bright Greek mode. Joyful and open.",
        mood="Bright, joyful",
        base_notes=("C3", "G3", "A3", "B3", "C4", "D4", "E4", "F4", "G4"),
        patterns={
            9: "C/-G-A-B-C-D-E-F-G",
            10: "C/-G-A-B-C-D-E-F-G-A",
            11: "C/-G-A-B-C-D-E-F-G-A-(C)",
            12: "C/-(E)-(F)-G-A-B-C-D-E-F-G-A",
            13: "C/-(E)-(F)-G-A-B-C-D-E-F-G-A-(C)",
            14: "C/-(E)-(F)-G-A-B-C-D-E-F-G-A-(B)-(C)",
            15: "C/-(D)-(E)-(F)-G-A-B-C-D-E-F-G-A-(B)-(C)",
            16: "C/-(E)-(F)-G-A-B-C-D-E-F-G-A-(B)-(C)-(D)-(E)",
            17: "C/-(D)-(E)-(F)-G-A-B-C-D-E-F-G-A-B-(C)-(D)-(E)",
        },
    ),
    "equinox": ScaleDefinition(
        name="Equinox",
        root="F",
        octave=3,
        mode="phrygian",
        description="Low and deep. Rich sonorities.",
        mood="Deep, meditative",
        base_notes=("F3", "G#3", "C4", "C#4", "D#4", "F4", "G4", "G#4", "C5"),
        patterns={
            9: "F/-G#3-C4-C#4-D#4-F4-G4-G#4-C5",
            10: "F/-G#3-C4-C#4-D#4-F4-G4-G#4-C5-D#",
            11: "F/-G#3-C4-C#4-D#4-F4-G4-G#4-C5-D#-[F]",
            12: "F/-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-D#-[F]",
            13: "F/-(C3)-(C#3)-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-[F]",
            14: "F/-(C3)-(C#3)-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-D#-[F]",
            15: "F/-(C3)-(C#3)-(G3)-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-D#-[F]",
            16: "F/-(C3)-(C#3)-(G3)-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-D#-[F]-[G]",
            17: "F/-(C3)-(C#3)-(G3)-G#3-C4-C#4-D#4-F4-G4-G#4-C5-C#-D#-[F]-[G]-[G#]",
        },
    ),
}


def get_scale(key: str) -> ScaleDefinition:
    """
    Look up a scale by key.

    Raises:
        KeyError: If the key is not in the catalog.
    """
    try:
        return SCALES[key]
    except KeyError:
        raise KeyError(f"Unknown scale '{key}'.") from None


def base_tonality(key: str) -> str:
    scale = get_scale(key)
    return f"{scale.root}{scale.octave}"


def scale_notes(key: str, force_flats: bool | None = None, notation: str = "american") -> list[str]:
    """Base notes of a scale spelled for display."""
    scale = get_scale(key)
    use_flats = force_flats if force_flats is not None else should_use_flats(base_tonality(key), scale.mode)
    notes = []
    for note in scale.base_notes:
        pitch_class, octave = parse_note_name(note)
        notes.append(display_name(pitch_class, octave, use_flats, notation))
    return notes


def scale_display_name(key: str, tonality: str | None = None, notation: str = "american") -> str:
    """Scale name with its root spelled for the mode, e.g. 'D Kurd' or 'Bb Kurd'."""
    scale = get_scale(key)
    root, octave = parse_note_name(tonality or base_tonality(key))
    use_flats = should_use_flats(f"{root}{octave if octave is not None else scale.octave}", scale.mode)
    return f"{display_name(root, None, use_flats, notation)} {scale.name}"


def has_configurator_support(key: str) -> bool:
    return get_scale(key).patterns is not None


def configurator_scales() -> list[str]:
    """Keys of scales that have layout patterns for several note counts."""
    return [key for key in SCALES if has_configurator_support(key)]


def all_scales() -> list[str]:
    return list(SCALES)


def pattern_for(key: str, note_count: int) -> str | None:
    """Layout string of a scale for a given total note count, if offered."""
    patterns = get_scale(key).patterns
    if patterns is None:
        return None
    return patterns.get(note_count)
