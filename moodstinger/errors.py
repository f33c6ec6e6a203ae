"""
Error types for moodstinger.

Every error the library raises derives from StingerError so callers at the
CLI or API boundary can catch one type and turn it into a user message.
"""

from typing import Iterable, Optional


class StingerError(Exception):
    """Base error for the moodstinger library."""


# =========================================================================
# PARSE ERRORS
# =========================================================================

class NoteError(StingerError, ValueError):
    """
    Raised when a note token or pitch name cannot be parsed.

    Attributes:
        field: Which part of the token was bad ("format", "pitch",
            "duration", "velocity" or "offset").
        value: The offending substring.
    """

    field = "format"
    expected = "PITCH:DURATION:VELOCITY[@OFFSET]"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Bad {self.field}: {value!r}. Expected {self.expected}")


class BadFormatError(NoteError):
    """The token does not have the PITCH:DURATION:VELOCITY shape."""

    field = "format"


class BadPitchError(NoteError):
    """The pitch is not a note name with octave 0-10 or a MIDI number 0-127."""

    field = "pitch"
    expected = "note name (A-G) with optional accidental (#/b) and octave (0-10), or 0-127"


class BadDurationError(NoteError):
    """The duration is not a positive number."""

    field = "duration"
    expected = "positive number"


class BadVelocityError(NoteError):
    """The velocity is not an integer in 0-127."""

    field = "velocity"
    expected = "0-127"


class BadOffsetError(NoteError):
    """The offset is not a non-negative number."""

    field = "offset"
    expected = "non-negative number"


class BadTempoError(StingerError, ValueError):
    """Raised when a sequence tempo falls outside the writable range."""

    def __init__(self, tempo: int, low: int, high: int):
        self.tempo = tempo
        super().__init__(f"Bad tempo: {tempo}. Expected {low}-{high} BPM")


# =========================================================================
# LOOKUP ERRORS
# =========================================================================

class LookupFailure(StingerError, LookupError):
    """
    Raised when a name does not match any known choice.

    Attributes:
        name: The name that was looked up.
        choices: Valid names, for display by the caller.
    """

    kind = "name"

    def __init__(
        self,
        name: str,
        choices: Optional[Iterable[str]] = None,
        kind: Optional[str] = None,
    ):
        if kind is not None:
            self.kind = kind
        self.name = name
        self.choices = tuple(choices or ())
        message = f"Unknown {self.kind}: {name}"
        if self.choices:
            message += f". Available: {', '.join(self.choices)}"
        super().__init__(message)


class UnknownMoodError(LookupFailure):
    """No mood preset matches the given name."""

    kind = "mood"


class UnknownKeyError(LookupFailure):
    """No musical key matches the given name."""

    kind = "key"


class UnknownInstrumentError(LookupFailure):
    """No General MIDI instrument matches the given name."""

    kind = "instrument"


class PresetNotFoundError(LookupFailure):
    """No saved preset or melody has the given name."""

    kind = "preset"


# =========================================================================
# FILE AND RENDER ERRORS
# =========================================================================

class MidiWriteError(StingerError):
    """Raised when a MIDI file cannot be written."""


class EmptySequencesError(MidiWriteError):
    """Raised when asked to write a MIDI file with no sequences."""

    def __init__(self):
        super().__init__("No sequences provided")


class StoreError(StingerError):
    """Raised when the preset store file cannot be read or decoded."""


class RenderError(StingerError):
    """Raised when the external audio renderer fails."""


class ToolNotFoundError(RenderError):
    """Raised when an external tool or soundfont cannot be located."""
