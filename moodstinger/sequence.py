"""
Sequence module for moodstinger.

A NoteSequence groups notes under one instrument, channel and tempo. It is
the unit a mood generator emits per layer and the unit the writer turns into
one MIDI track. Also provides the General MIDI instrument name table and the
JSON input format for hand-written sequences.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field

from .errors import BadTempoError
from .note import Note, parse_pitch


# General MIDI instrument names mapped to program numbers
INSTRUMENT_MAP: tuple[tuple[str, int], ...] = (
    # Pianos
    ("piano", 0),
    ("acoustic_piano", 0),
    ("bright_piano", 1),
    ("electric_piano", 4),
    # Chromatic percussion
    ("celesta", 8),
    ("glockenspiel", 9),
    ("music_box", 10),
    ("vibraphone", 11),
    ("marimba", 12),
    ("xylophone", 13),
    ("tubular_bells", 14),
    # Organ
    ("organ", 19),
    # Guitar
    ("acoustic_guitar", 25),
    ("electric_guitar", 27),
    # Bass
    ("acoustic_bass", 32),
    ("bass", 33),
    ("electric_bass", 33),
    ("fretless_bass", 35),
    ("synth_bass", 38),
    # Strings
    ("violin", 40),
    ("viola", 41),
    ("cello", 42),
    ("contrabass", 43),
    ("tremolo_strings", 44),
    ("pizzicato_strings", 45),
    ("harp", 46),
    ("timpani", 47),
    ("strings", 48),
    ("slow_strings", 49),
    ("choir", 52),
    # Brass
    ("trumpet", 56),
    ("trombone", 57),
    ("tuba", 58),
    ("french_horn", 60),
    # Woodwinds
    ("oboe", 68),
    ("bassoon", 70),
    ("clarinet", 71),
    ("flute", 73),
    ("pan_flute", 75),
    # Synth
    ("synth_lead", 80),
    ("synth_pad", 88),
    ("pad_warm", 89),
    ("pad_polysynth", 90),
    ("pad_choir", 91),
    ("pad_halo", 94),
    ("pad_sweep", 95),
    # Synth effects
    ("soundtrack", 97),
    ("crystal", 98),
    ("atmosphere", 99),
)

DEFAULT_INSTRUMENT = "piano"
DEFAULT_TEMPO = 120

# Tempos a sequence can be written with; 4 BPM is the slowest a MIDI
# set_tempo event can hold
MIN_SEQUENCE_TEMPO = 4
MAX_SEQUENCE_TEMPO = 1000


def resolve_instrument(name: str) -> Optional[int]:
    """
    Resolve an instrument name or program number to a GM program.

    Args:
        name: Case-insensitive name like 'cello' or 'synth_pad', or a
            program number like '40'.

    Returns:
        Program number 0-127, or None if the name is unknown.
    """
    name = name.strip().lower()

    if name.isdecimal():
        program = int(name)
        return program if program <= 127 else None

    for instrument, program in INSTRUMENT_MAP:
        if instrument == name:
            return program
    return None


def instrument_name(program: int) -> str:
    """Return the first table name for a GM program, or 'unknown'."""
    for instrument, number in INSTRUMENT_MAP:
        if number == program:
            return instrument
    return "unknown"


def check_tempo(tempo: int) -> int:
    """
    Return ``tempo`` if a MIDI file can be written with it.

    Raises:
        BadTempoError: If it is outside MIN_SEQUENCE_TEMPO..MAX_SEQUENCE_TEMPO.
    """
    if not MIN_SEQUENCE_TEMPO <= tempo <= MAX_SEQUENCE_TEMPO:
        raise BadTempoError(tempo, MIN_SEQUENCE_TEMPO, MAX_SEQUENCE_TEMPO)
    return tempo


@dataclass
class NoteSequence:
    """
    A sequence of notes with instrument and tempo settings.

    Notes may be stored in any order; the writer sorts events by time.

    Attributes:
        notes: Notes in the sequence.
        instrument: GM program number (0-127).
        channel: MIDI channel (0-15; 9 is the GM percussion channel).
        tempo: Tempo in BPM.
    """

    notes: list[Note] = field(default_factory=list)
    instrument: int = 0
    channel: int = 0
    tempo: int = DEFAULT_TEMPO

    @classmethod
    def from_notes(cls, notes: list[Note]) -> "NoteSequence":
        """Create a piano sequence at the default tempo."""
        return cls(list(notes))

    def __len__(self) -> int:
        return len(self.notes)

    def duration_beats(self) -> float:
        """Return the beat at which the last note ends."""
        return max((n.offset + n.duration for n in self.notes), default=0.0)

    def duration_seconds(self) -> float:
        """Return the duration in seconds at this sequence's tempo."""
        return self.duration_beats() * 60.0 / self.tempo


# =========================================================================
# JSON INPUT
# =========================================================================

class NoteInput(BaseModel):
    pitch: str
    duration: float = Field(gt=0.0, allow_inf_nan=False)
    velocity: int = Field(ge=0, le=127)
    offset: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)

    def to_note(self) -> Note:
        return Note(parse_pitch(self.pitch), self.duration, self.velocity, self.offset)


class TrackInput(BaseModel):
    instrument: str = DEFAULT_INSTRUMENT
    channel: int = Field(default=0, ge=0, le=15)
    notes: List[NoteInput]


class SequenceInput(BaseModel):
    """
    JSON document describing one or more tracks of explicit notes.

    Either ``tracks`` or top-level ``notes`` is used; ``tracks`` wins when
    both are present. Unknown instrument names fall back to program 0.

    Example:
        {"tempo": 90, "tracks": [
            {"instrument": "piano", "notes": [{"pitch": "C4", "duration": 1, "velocity": 80}]},
            {"instrument": "bass", "notes": [{"pitch": "C2", "duration": 2, "velocity": 100}]}
        ]}
    """

    tempo: int = Field(default=DEFAULT_TEMPO, ge=MIN_SEQUENCE_TEMPO, le=MAX_SEQUENCE_TEMPO)
    instrument: str = DEFAULT_INSTRUMENT
    channel: int = Field(default=0, ge=0, le=15)
    notes: List[NoteInput] = Field(default_factory=list)
    tracks: List[TrackInput] = Field(default_factory=list)

    def to_sequences(self) -> list[NoteSequence]:
        """
        Convert to NoteSequences.

        Raises:
            BadPitchError: If any pitch name is invalid.
        """
        if self.tracks:
            return [
                self._build(track.notes, track.instrument, track.channel)
                for track in self.tracks
            ]
        if self.notes:
            return [self._build(self.notes, self.instrument, self.channel)]
        return []

    def _build(self, notes: List[NoteInput], instrument: str, channel: int) -> NoteSequence:
        program = resolve_instrument(instrument)
        return NoteSequence(
            notes=[n.to_note() for n in notes],
            instrument=program if program is not None else 0,
            channel=channel,
            tempo=self.tempo,
        )
