"""
Note module for moodstinger.

Represents single notes and parses them from the compact text format
``PITCH:DURATION:VELOCITY[@OFFSET]``:

    C4:1:80         Middle C, 1 beat, velocity 80
    F#3:0.5:100@2   F# below middle C, half a beat, velocity 100, at beat 2
"""

from dataclasses import dataclass

from .errors import (
    BadDurationError,
    BadFormatError,
    BadOffsetError,
    BadPitchError,
    BadVelocityError,
)


# Semitone offset of each natural note from C
NOTE_SEMITONES: dict[str, int] = {
    "C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11,
}

ACCIDENTALS: dict[str, int] = {"#": 1, "b": -1}

NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")


@dataclass(frozen=True)
class Note:
    """
    A single MIDI note with timing and expression.

    Attributes:
        pitch: MIDI note number (0-127, where 60 = C4 = middle C).
        duration: Duration in beats (1.0 = quarter note).
        velocity: MIDI velocity (0-127).
        offset: Start time in beats from the start of the sequence.
    """

    pitch: int
    duration: float
    velocity: int = 80
    offset: float = 0.0

    def __post_init__(self):
        # Generators do pitch arithmetic freely; keep every note playable.
        object.__setattr__(self, "pitch", max(0, min(127, int(self.pitch))))
        object.__setattr__(self, "velocity", max(0, min(127, int(self.velocity))))
        object.__setattr__(self, "offset", max(0.0, float(self.offset)))
        object.__setattr__(self, "duration", float(self.duration))

    @property
    def end(self) -> float:
        """Beat at which this note stops sounding."""
        return self.offset + self.duration

    def to_token(self) -> str:
        """Format this note back into ``PITCH:DURATION:VELOCITY@OFFSET``."""
        token = f"{pitch_name(self.pitch)}:{self.duration:g}:{self.velocity}"
        if self.offset:
            token += f"@{self.offset:g}"
        return token


def parse_pitch(text: str) -> int:
    """
    Convert a note name or bare MIDI number to a MIDI pitch.

    Args:
        text: Note name like 'C4', 'F#3', 'Bb5' (letter is case-insensitive),
            or a MIDI number like '60'.

    Returns:
        MIDI note number, ``(octave + 1) * 12 + semitone + accidental``.

    Raises:
        BadPitchError: If the name is malformed, the octave is outside 0-10,
            or the result is outside 0-127.
    """
    text = text.strip()
    if not text:
        raise BadPitchError(text)

    if text.isdecimal():
        pitch = int(text)
        if pitch > 127:
            raise BadPitchError(text)
        return pitch

    letter = text[0].upper()
    if letter not in NOTE_SEMITONES:
        raise BadPitchError(text)

    rest = text[1:]
    accidental = 0
    if rest[:1] in ACCIDENTALS:
        accidental = ACCIDENTALS[rest[0]]
        rest = rest[1:]

    if not rest.isdecimal():
        raise BadPitchError(text)
    octave = int(rest)
    if not 0 <= octave <= 10:
        raise BadPitchError(text)

    pitch = (octave + 1) * 12 + NOTE_SEMITONES[letter] + accidental
    if not 0 <= pitch <= 127:
        raise BadPitchError(text)
    return pitch


def pitch_name(pitch: int) -> str:
    """Name a MIDI pitch using sharps, e.g. 60 -> 'C4', 54 -> 'F#3'."""
    return f"{NOTE_NAMES[pitch % 12]}{pitch // 12 - 1}"


def parse_note(token: str) -> Note:
    """
    Parse a single note token.

    Args:
        token: Text in the form ``PITCH:DURATION:VELOCITY[@OFFSET]``.

    Returns:
        The parsed Note.

    Raises:
        NoteError: A subclass naming the field that failed.
    """
    token = token.strip()

    main_part, at, offset_text = token.partition("@")
    offset = 0.0
    if at:
        offset = _parse_float(offset_text, BadOffsetError)
        if offset < 0:
            raise BadOffsetError(offset_text)

    parts = main_part.split(":")
    if len(parts) != 3:
        raise BadFormatError(token)
    pitch_text, duration_text, velocity_text = parts

    pitch = parse_pitch(pitch_text)

    duration = _parse_float(duration_text, BadDurationError)
    if duration <= 0:
        raise BadDurationError(duration_text)

    velocity_text = velocity_text.strip()
    if not velocity_text.isdecimal():
        raise BadVelocityError(velocity_text)
    velocity = int(velocity_text)
    if velocity > 127:
        raise BadVelocityError(velocity_text)

    return Note(pitch, duration, velocity, offset)


def parse_notes(text: str) -> list[Note]:
    """
    Parse a comma-separated list of note tokens.

    The first malformed token fails the whole batch.
    """
    return [parse_note(token) for token in text.split(",")]


def _parse_float(text: str, error: type) -> float:
    """Parse a finite float or raise the given NoteError subclass."""
    try:
        value = float(text.strip())
    except ValueError:
        raise error(text) from None
    if value != value or value in (float("inf"), float("-inf")):
        raise error(text)
    return value
