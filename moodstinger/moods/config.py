"""
Mood selection and generation settings.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import UnknownMoodError
from ..harmony import Key


class Mood(Enum):
    """The six moods a stinger can be generated in."""

    SUSPENSE = "suspense"
    EERIE = "eerie"
    UPBEAT = "upbeat"
    CALM = "calm"
    AMBIENT = "ambient"
    JAZZ = "jazz"

    @classmethod
    def parse(cls, text: str) -> "Mood":
        """
        Parse a mood name or alias case-insensitively.

        Raises:
            UnknownMoodError: If no mood or alias matches.
        """
        name = text.strip().lower()
        for mood in cls:
            if name == mood.value or name in MOOD_ALIASES[mood]:
                return mood
        raise UnknownMoodError(text, [mood.value for mood in cls])

    @property
    def aliases(self) -> tuple[str, ...]:
        return MOOD_ALIASES[self]

    @property
    def default_key(self) -> Key:
        return DEFAULT_KEYS[self]

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self]


MOOD_ALIASES: dict[Mood, tuple[str, ...]] = {
    Mood.SUSPENSE: ("tense", "tension"),
    Mood.EERIE: ("creepy", "spooky"),
    Mood.UPBEAT: ("bright", "happy", "energetic"),
    Mood.CALM: ("peaceful", "serene"),
    Mood.AMBIENT: ("atmospheric", "drone"),
    Mood.JAZZ: ("jazzy", "swing"),
}

DEFAULT_KEYS: dict[Mood, Key] = {
    Mood.SUSPENSE: Key.Am,
    Mood.EERIE: Key.Dm,
    Mood.UPBEAT: Key.C,
    Mood.CALM: Key.G,
    Mood.AMBIENT: Key.Em,
    Mood.JAZZ: Key.F,
}

DESCRIPTIONS: dict[Mood, str] = {
    Mood.SUSPENSE: "Tense, anxious mood with low drones and tremolo strings",
    Mood.EERIE: "Creepy, unsettling mood with sparse tones and diminished harmony",
    Mood.UPBEAT: "Bright, energetic mood with rhythmic chords and a lively melody",
    Mood.CALM: "Peaceful, relaxing mood with soft pads and gentle arpeggios",
    Mood.AMBIENT: "Atmospheric soundscape with evolving drones and sparse tones",
    Mood.JAZZ: "Nightclub trio style with walking bass, piano comping, and brushed drums",
}


class PresetConfig(BaseModel):
    """
    Settings for one generation.

    Attributes:
        duration_secs: Target length in seconds.
        key: Musical key; strings are parsed with ``Key.parse``.
        intensity: 0-100; higher values bring in more optional layers.
        seed: Seed for the variation bundle and the generation RNG.
        tempo: Base tempo in BPM, before the seed's tempo drift.
    """

    model_config = ConfigDict(frozen=True)

    duration_secs: float = Field(default=5.0, ge=0.0, le=600.0)
    key: Key = Key.Am
    intensity: int = Field(default=50, ge=0, le=100)
    seed: int = Field(default=42, ge=0, lt=2**64)
    tempo: int = Field(default=90, ge=20, le=400)

    @field_validator("key", mode="before")
    @classmethod
    def _parse_key(cls, value):
        if isinstance(value, str):
            return Key.parse(value)
        return value
