"""
Preset store for moodstinger.

Named presets (a mood plus generation settings) and named melodies (explicit
notes and rests) persisted together in one JSON file, ``presets.json`` under
$MOODSTINGER_HOME (default ``~/.moodstinger``). Every change rewrites the
whole file.
"""

from datetime import datetime, timezone
import json
import logging
from pathlib import Path
import time
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from .errors import BadDurationError, BadFormatError, PresetNotFoundError, StoreError
from .harmony import Key
from .logging_utils import get_home_dir
from .moods import Mood, PresetConfig
from .note import Note, parse_note, parse_pitch, pitch_name
from .sequence import (
    DEFAULT_INSTRUMENT,
    MAX_SEQUENCE_TEMPO,
    MIN_SEQUENCE_TEMPO,
    NoteSequence,
    resolve_instrument,
)

_LOGGER = logging.getLogger("moodstinger.store")

STORE_FILE = "presets.json"
REST = "rest"


def time_seed() -> int:
    """A seed derived from the current time, for runs that ask for a fresh one."""
    return int(time.time() * 1000) & 0xFFFFFFFF


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SavedPreset(BaseModel):
    name: str
    mood: str
    duration: float = Field(default=5.0, ge=0.0)
    key: Optional[str] = None
    intensity: int = Field(default=50, ge=0, le=100)
    tempo: int = 90
    seed: int = 1
    created_at: str = Field(default_factory=_now)
    last_generated: Optional[str] = None

    def to_config(self) -> tuple[Mood, PresetConfig]:
        """
        Resolve this preset into a mood and generation settings.

        A missing key falls back to the mood's default key; a seed of zero or
        below is replaced by a time-derived one.

        Raises:
            UnknownMoodError: If the stored mood name is unknown.
            UnknownKeyError: If the stored key name is unknown.
        """
        mood = Mood.parse(self.mood)
        key = Key.parse(self.key) if self.key else mood.default_key
        seed = self.seed if self.seed > 0 else time_seed()
        config = PresetConfig(
            duration_secs=self.duration,
            key=key,
            intensity=self.intensity,
            seed=seed,
            tempo=self.tempo,
        )
        return mood, config


class MelodyNote(BaseModel):
    pitch: str
    duration: float = Field(gt=0.0, allow_inf_nan=False)
    velocity: int = Field(default=80, ge=0, le=127)

    @property
    def is_rest(self) -> bool:
        return self.pitch.strip().lower() == REST


def parse_melody_notes(text: str) -> list[MelodyNote]:
    """
    Parse comma-separated note tokens where ``rest:DURATION`` marks a rest.

    Other tokens use ``PITCH:DURATION:VELOCITY``; offsets are not allowed
    because melody notes are laid end to end.

    Raises:
        NoteError: A subclass naming the field that failed.
    """
    melody = []
    for token in text.split(","):
        token = token.strip()
        if token.lower().startswith(REST + ":"):
            duration_text = token.split(":")[1]
            try:
                duration = float(duration_text)
            except ValueError:
                raise BadDurationError(duration_text) from None
            if not 0 < duration < float("inf"):
                raise BadDurationError(duration_text)
            melody.append(MelodyNote(pitch=REST, duration=duration, velocity=0))
            continue
        if "@" in token:
            raise BadFormatError(token)
        note = parse_note(token)
        melody.append(MelodyNote(pitch=pitch_name(note.pitch), duration=note.duration, velocity=note.velocity))
    return melody


class SavedMelody(BaseModel):
    name: str
    instrument: str = DEFAULT_INSTRUMENT
    tempo: int = Field(default=120, ge=MIN_SEQUENCE_TEMPO, le=MAX_SEQUENCE_TEMPO)
    notes: List[MelodyNote] = Field(default_factory=list)
    created_at: str = Field(default_factory=_now)

    def to_sequence(self) -> NoteSequence:
        """
        Lay the notes end to end; a rest advances time without sounding.

        Raises:
            BadPitchError: If a pitch is neither a note name nor 'rest'.
            BadFormatError: If the melody has no playable notes.
        """
        notes = []
        offset = 0.0
        for entry in self.notes:
            if not entry.is_rest:
                notes.append(Note(parse_pitch(entry.pitch), entry.duration, entry.velocity, offset))
            offset += entry.duration

        if not notes:
            raise BadFormatError(self.name)

        program = resolve_instrument(self.instrument)
        return NoteSequence(notes, program if program is not None else 0, tempo=self.tempo)


class StoreData(BaseModel):
    presets: List[SavedPreset] = Field(default_factory=list)
    melodies: List[SavedMelody] = Field(default_factory=list)


def default_store_path() -> Path:
    return get_home_dir() / STORE_FILE


class PresetStore:
    """
    JSON file holding saved presets and melodies.

    Attributes:
        path: Location of the JSON file; created on first save.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else default_store_path()

    def _load(self) -> StoreData:
        """
        Raises:
            StoreError: If the file exists but cannot be decoded into a store.
        """
        if not self.path.exists():
            return StoreData()
        # ValidationError and JSONDecodeError are both ValueErrors
        try:
            with self.path.open("r", encoding="utf-8") as f:
                return StoreData.model_validate(json.load(f))
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read preset store {self.path}: {exc}") from exc

    def _save(self, data: StoreData):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(data.model_dump(), indent=2)
        self.path.write_text(text + "\n", encoding="utf-8")
        _LOGGER.debug(
            "Saved %d presets, %d melodies to %s",
            len(data.presets), len(data.melodies), self.path,
        )

    # -- presets -----------------------------------------------------------

    def list_presets(self) -> list[SavedPreset]:
        return sorted(self._load().presets, key=lambda p: p.name)

    def get_preset(self, name: str) -> SavedPreset:
        """
        Raises:
            PresetNotFoundError: If no preset has this name.
        """
        data = self._load()
        for preset in data.presets:
            if preset.name == name:
                return preset
        raise PresetNotFoundError(name, [p.name for p in data.presets])

    def save_preset(self, preset: SavedPreset) -> SavedPreset:
        """Create or replace a preset by name, keeping the original creation time."""
        data = self._load()
        for i, existing in enumerate(data.presets):
            if existing.name == preset.name:
                preset = preset.model_copy(update={"created_at": existing.created_at})
                data.presets[i] = preset
                break
        else:
            data.presets.append(preset)
        self._save(data)
        return preset

    def mark_generated(self, name: str) -> SavedPreset:
        """Stamp a preset's last generation time."""
        preset = self.get_preset(name)
        return self.save_preset(preset.model_copy(update={"last_generated": _now()}))

    def delete_preset(self, name: str):
        data = self._load()
        remaining = [p for p in data.presets if p.name != name]
        if len(remaining) == len(data.presets):
            raise PresetNotFoundError(name, [p.name for p in data.presets])
        data.presets = remaining
        self._save(data)

    # -- melodies ----------------------------------------------------------

    def list_melodies(self) -> list[SavedMelody]:
        return sorted(self._load().melodies, key=lambda m: m.name)

    def get_melody(self, name: str) -> SavedMelody:
        data = self._load()
        for melody in data.melodies:
            if melody.name == name:
                return melody
        raise PresetNotFoundError(name, [m.name for m in data.melodies], kind="melody")

    def save_melody(self, melody: SavedMelody) -> SavedMelody:
        data = self._load()
        for i, existing in enumerate(data.melodies):
            if existing.name == melody.name:
                melody = melody.model_copy(update={"created_at": existing.created_at})
                data.melodies[i] = melody
                break
        else:
            data.melodies.append(melody)
        self._save(data)
        return melody

    def delete_melody(self, name: str):
        data = self._load()
        remaining = [m for m in data.melodies if m.name != name]
        if len(remaining) == len(data.melodies):
            raise PresetNotFoundError(name, [m.name for m in data.melodies], kind="melody")
        data.melodies = remaining
        self._save(data)
