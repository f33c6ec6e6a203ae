"""
moodstinger - Mood Stinger Generator

Procedurally composes short multi-layer musical pieces ("stingers") for video
intros and outros from a mood, a key, a tempo, a duration, an intensity and a
seed, and writes them as Standard MIDI Files. The same seed always produces
the same file; neighbouring seeds produce audibly different takes.
"""

__version__ = "0.1.0"
__author__ = "moodstinger Project"

from .errors import StingerError
from .harmony import Key
from .moods import Mood, PresetConfig, generate_mood
from .note import Note, parse_note, parse_notes
from .sequence import NoteSequence
from .variation import Variation
from .writer import midi_bytes, write_midi

__all__ = [
    "StingerError",
    "Key",
    "Mood",
    "PresetConfig",
    "generate_mood",
    "Note",
    "parse_note",
    "parse_notes",
    "NoteSequence",
    "Variation",
    "midi_bytes",
    "write_midi",
]
