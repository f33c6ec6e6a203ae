"""
Harmony module for moodstinger.

Provides the musical key enumeration along with the scale and chord interval
tables the mood generators voice their layers from.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import UnknownKeyError


class ScaleType(Enum):
    """Scale types used by the mood generators."""

    MAJOR = "major"
    NATURAL_MINOR = "natural_minor"
    DIMINISHED = "diminished"
    PENTATONIC_MAJOR = "pentatonic_major"
    PENTATONIC_MINOR = "pentatonic_minor"


# Interval patterns (semitones from root)
SCALE_INTERVALS: dict[ScaleType, tuple[int, ...]] = {
    ScaleType.MAJOR: (0, 2, 4, 5, 7, 9, 11),
    ScaleType.NATURAL_MINOR: (0, 2, 3, 5, 7, 8, 10),
    ScaleType.DIMINISHED: (0, 2, 3, 5, 6, 8, 9, 11),
    ScaleType.PENTATONIC_MAJOR: (0, 2, 4, 7, 9),
    ScaleType.PENTATONIC_MINOR: (0, 3, 5, 7, 10),
}


@dataclass
class Scale:
    """
    A musical scale rooted at a specific pitch.

    Attributes:
        root: MIDI note number of the scale root (0-127, where 60 = middle C).
        scale_type: The type of scale.
    """

    root: int
    scale_type: ScaleType = ScaleType.MAJOR

    @property
    def intervals(self) -> tuple[int, ...]:
        """Return the interval pattern for this scale type."""
        return SCALE_INTERVALS[self.scale_type]

    def get_notes_in_range(self, low: int = 36, high: int = 96) -> list[int]:
        """
        Get all scale notes within a MIDI note range.

        Args:
            low: Lowest MIDI note to include.
            high: Highest MIDI note to include.

        Returns:
            Sorted list of MIDI note numbers in the scale within the range.
        """
        notes = set()
        for octave in range(-6, 6):
            for interval in self.intervals:
                note = self.root + (octave * 12) + interval
                if low <= note <= high:
                    notes.add(note)
        return sorted(notes)


class ChordQuality(Enum):
    """Chord qualities for building chords."""

    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    AUGMENTED = "augmented"
    MAJOR_7 = "major_7"
    MINOR_7 = "minor_7"
    DIMINISHED_7 = "diminished_7"
    HALF_DIMINISHED_7 = "half_diminished_7"
    ADD_9 = "add_9"
    MINOR_ADD_9 = "minor_add_9"
    SUS_2 = "sus_2"
    CLUSTER = "cluster"
    TRITONE = "tritone"


# Chord intervals from root
CHORD_INTERVALS: dict[ChordQuality, tuple[int, ...]] = {
    ChordQuality.MAJOR: (0, 4, 7),
    ChordQuality.MINOR: (0, 3, 7),
    ChordQuality.DIMINISHED: (0, 3, 6),
    ChordQuality.AUGMENTED: (0, 4, 8),
    ChordQuality.MAJOR_7: (0, 4, 7, 11),
    ChordQuality.MINOR_7: (0, 3, 7, 10),
    ChordQuality.DIMINISHED_7: (0, 3, 6, 9),
    ChordQuality.HALF_DIMINISHED_7: (0, 3, 6, 10),
    ChordQuality.ADD_9: (0, 4, 7, 14),
    ChordQuality.MINOR_ADD_9: (0, 3, 7, 14),
    ChordQuality.SUS_2: (0, 2, 7),
    ChordQuality.CLUSTER: (0, 1, 2),
    ChordQuality.TRITONE: (0, 6),
}


@dataclass
class Chord:
    """
    A chord with a root and quality.

    Attributes:
        root: MIDI note number of the chord root.
        quality: The chord quality.
    """

    root: int
    quality: ChordQuality = ChordQuality.MAJOR

    @property
    def intervals(self) -> tuple[int, ...]:
        """Return the interval pattern for this chord quality."""
        return CHORD_INTERVALS[self.quality]

    def get_notes(self) -> list[int]:
        """Return the MIDI notes of this chord, lowest first."""
        notes = [self.root + interval for interval in self.intervals]
        return sorted(notes)

    def get_spread(self, octaves: tuple[int, ...]) -> list[int]:
        """
        Voice each chord tone in its own octave.

        Args:
            octaves: Octave shift for each chord tone, in chord order. Tones
                beyond the end of this tuple are dropped.

        Returns:
            MIDI notes of the spread voicing, in chord order.
        """
        return [
            self.root + interval + shift * 12
            for interval, shift in zip(self.intervals, octaves)
        ]


# =========================================================================
# KEYS
# =========================================================================

# Root pitch at octave 4 for each key letter
KEY_ROOTS: dict[str, int] = {
    "C": 60, "D": 62, "Eb": 63, "E": 64, "F": 65,
    "G": 67, "A": 69, "Bb": 70, "B": 71,
}

KEY_ALIASES: dict[str, str] = {"d#": "eb", "a#": "bb"}


class Key(Enum):
    """The eighteen keys a stinger can be composed in."""

    C = "C"
    Cm = "Cm"
    D = "D"
    Dm = "Dm"
    Eb = "Eb"
    Ebm = "Ebm"
    E = "E"
    Em = "Em"
    F = "F"
    Fm = "Fm"
    G = "G"
    Gm = "Gm"
    A = "A"
    Am = "Am"
    Bb = "Bb"
    Bbm = "Bbm"
    B = "B"
    Bm = "Bm"

    @classmethod
    def parse(cls, text: str) -> "Key":
        """
        Parse a key name case-insensitively.

        Accepts 'd#' and 'a#' (with or without 'm') as spellings of Eb and Bb.

        Raises:
            UnknownKeyError: If the name is not one of the eighteen keys.
        """
        name = text.strip().lower()
        for alias, canonical in KEY_ALIASES.items():
            if name.startswith(alias):
                name = canonical + name[len(alias):]

        for key in cls:
            if key.value.lower() == name:
                return key
        raise UnknownKeyError(text, [key.value for key in cls])

    @property
    def is_minor(self) -> bool:
        return self.value.endswith("m")

    @property
    def root(self) -> int:
        """Root MIDI pitch at octave 4 (C = 60)."""
        letter = self.value[:-1] if self.is_minor else self.value
        return KEY_ROOTS[letter]

    @property
    def scale_type(self) -> ScaleType:
        return ScaleType.NATURAL_MINOR if self.is_minor else ScaleType.MAJOR

    @property
    def scale_intervals(self) -> tuple[int, ...]:
        """Natural minor intervals for minor keys, major intervals otherwise."""
        return SCALE_INTERVALS[self.scale_type]

    @property
    def pentatonic(self) -> ScaleType:
        return ScaleType.PENTATONIC_MINOR if self.is_minor else ScaleType.PENTATONIC_MAJOR

    def scale(self, octave_shift: int = 0) -> Scale:
        """Return this key's scale rooted ``octave_shift`` octaves from octave 4."""
        return Scale(self.root + octave_shift * 12, self.scale_type)

    def chord_tones(self) -> tuple[int, int, int]:
        """Return the tonic triad (root, third, fifth)."""
        third = 3 if self.is_minor else 4
        return (self.root, self.root + third, self.root + 7)

    def triad(self) -> ChordQuality:
        return ChordQuality.MINOR if self.is_minor else ChordQuality.MAJOR
