"""LayoutMidiExporter: writes a listening preview of a parsed layout as MIDI."""

from midiutil import MIDIFile

from panlayout.layout_models import Note

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
# Note data goes on track 1 so notation apps render it as a staff.
TRACK_CONDUCTOR = 0  # Tempo only; never receives notes
TRACK_NOTES = 1

CHANNEL = 0

STEEL_DRUMS_PROGRAM = 114  # General MIDI "Steel Drums" (0-based)

MIDI_PITCH_MIN = 0
MIDI_PITCH_MAX = 127  # G9


class LayoutMidiExporter:
    """
    Writes the layout preview played by the interactive player.

    Timing
    ------
    Every note is struck in layout order (ding first) at a fixed interval,
    then after a short pause the notes are played back down from the
    second-to-last to the ding, slightly faster:

        ascent   : one note every 0.30 s
        pause    : 0.50 s
        descent  : one note every 0.25 s

    Seconds are converted to beats with: beats = seconds × (tempo / 60).
    """

    DEFAULT_TEMPO = 120
    DEFAULT_VELOCITY = 90

    ASCENT_INTERVAL = 0.30
    DESCENT_PAUSE = 0.50
    DESCENT_INTERVAL = 0.25
    NOTE_DURATION = 1.5  # seconds; handpan notes ring well past the next strike

    def __init__(
        self,
        tempo: int = DEFAULT_TEMPO,
        velocity: int = DEFAULT_VELOCITY,
        program: int = STEEL_DRUMS_PROGRAM,
    ) -> None:
        """
        Args:
            tempo:    Tempo in beats per minute (only affects the beat grid).
            velocity: MIDI note-on velocity (0-127).
            program:  General MIDI program number for the note track.
        """
        self.tempo = tempo
        self.velocity = velocity
        self.program = program

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _seconds_to_beats(self, seconds: float) -> float:
        """Convert a time in seconds to beats at the current tempo."""
        return seconds * (self.tempo / 60.0)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def schedule(self, notes: list[Note]) -> list[tuple[float, Note]]:
        """
        Return (start_seconds, note) pairs for the preview, in play order.
        """
        events: list[tuple[float, Note]] = []
        t = 0.0
        for note in notes:
            t += self.ASCENT_INTERVAL
            events.append((t, note))

        t += self.DESCENT_PAUSE
        for note in reversed(notes[:-1]):
            t += self.DESCENT_INTERVAL
            events.append((t, note))
        return events

    def export(self, notes: list[Note], output_path: str) -> None:
        """
        Render the preview to a Standard MIDI File (SMF format 1).

        Args:
            notes:       Parsed layout, ding first.
            output_path: Destination file path (e.g. "kurd.mid").

        Raises:
            ValueError: If a note lies outside the MIDI pitch range (0-127).
            OSError:    If the output file cannot be opened for writing.
        """
        for note in notes:
            if not MIDI_PITCH_MIN <= note.midi_number <= MIDI_PITCH_MAX:
                raise ValueError(
                    f"Note {note.name} (MIDI {note.midi_number}) is outside the MIDI range "
                    f"{MIDI_PITCH_MIN}-{MIDI_PITCH_MAX}."
                )

        midi = MIDIFile(numTracks=2, removeDuplicates=False, deinterleave=False)

        midi.addTempo(TRACK_CONDUCTOR, 0, self.tempo)
        midi.addTrackName(TRACK_NOTES, 0, "Handpan")
        midi.addProgramChange(TRACK_NOTES, CHANNEL, 0, self.program)

        duration_beats = self._seconds_to_beats(self.NOTE_DURATION)
        for start, note in self.schedule(notes):
            midi.addNote(
                track=TRACK_NOTES,
                channel=CHANNEL,
                pitch=note.midi_number,
                time=self._seconds_to_beats(start),
                duration=duration_beats,
                volume=self.velocity,
            )

        with open(output_path, "wb") as f:
            midi.writeFile(f)
