"""
Upbeat mood generator.

Characteristics: major key, rhythmic chord stabs over a simple progression,
a root/fifth bass and a bouncy scale melody developed from one phrase.
"""

import random

from ..harmony import CHORD_INTERVALS, ChordQuality
from ..melody import Phrase, choose_transforms, extend_phrase, walk_contour
from ..note import Note
from ..rhythm import get_beat_strength, seconds_to_beats
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


CHORD_INSTRUMENTS = (0, 4, 25, 1)  # piano, electric piano, acoustic guitar, bright piano
BASS_INSTRUMENTS = (33, 32, 38)  # electric, acoustic, synth bass
LEAD_INSTRUMENTS = (11, 12, 73, 80, 56)  # vibraphone, marimba, flute, synth lead, trumpet

OPEN_OCTAVE = (0, 7, 12)

MAJOR_VOICINGS = (
    CHORD_INTERVALS[ChordQuality.MAJOR_7],
    CHORD_INTERVALS[ChordQuality.SUS_2],
    CHORD_INTERVALS[ChordQuality.ADD_9],
    OPEN_OCTAVE,
)

MINOR_VOICINGS = (
    CHORD_INTERVALS[ChordQuality.MINOR_7],
    CHORD_INTERVALS[ChordQuality.SUS_2],
    CHORD_INTERVALS[ChordQuality.MINOR_ADD_9],
    OPEN_OCTAVE,
)

# Onsets within one 4/4 bar
CHORD_PATTERNS = (
    (0.0, 1.0, 2.0, 3.0),
    (0.0, 1.5, 2.0, 3.5),
    (0.0, 0.5, 1.5, 2.5, 3.0),
    (0.0, 2.0, 2.5, 3.5),
)

# Scale degree of each bar's chord root: I IV V I
PROGRESSION = (0, 3, 4, 0)

CHORD_LENGTH = 0.4
MELODY_NOTE_LENGTHS = (0.5, 0.25)


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    sequences = [_chords(config, variation, beats, tempo, rng)]
    if beats <= 0:
        return sequences

    if variation.layer_probs[1] > 0.25:
        sequences.append(_bass(config, variation, beats, tempo, rng))
    if variation.include_layer(2, config.intensity, 50):
        sequences.append(_melody(config, variation, contour, beats, tempo, rng))

    return sequences


def _bar_root_shift(config: PresetConfig, beat: float) -> int:
    """Semitones from the key root to the chord root of the bar at ``beat``."""
    degree = PROGRESSION[int(beat // 4) % len(PROGRESSION)]
    return config.key.scale_intervals[degree]


def _chords(config, variation, beats, tempo, rng) -> NoteSequence:
    voicings = MINOR_VOICINGS if config.key.is_minor else MAJOR_VOICINGS
    voicing = voicings[variation.pick_style(0, len(voicings))]
    pattern = CHORD_PATTERNS[variation.pick_style(3, len(CHORD_PATTERNS))]

    notes = []
    bar = 0.0
    while bar < beats:
        base = config.key.root + _bar_root_shift(config, bar)
        for onset in pattern:
            t = bar + onset
            if t >= beats:
                break
            accent = int(25 * get_beat_strength(t))
            velocity = variation.adjust_velocity(65 + accent + rng.randint(0, 7))
            for interval in voicing:
                notes.append(Note(base + interval, CHORD_LENGTH, velocity, t))
        bar += 4.0

    instrument = variation.pick_instrument(0, CHORD_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _bass(config, variation, beats, tempo, rng) -> NoteSequence:
    """Root on beats 1 and 3, fifth on beats 2 and 4."""
    notes = []
    t = 0.0
    while t < beats:
        pitch = config.key.root - 24 + _bar_root_shift(config, t)
        if int(t) % 2 == 1:
            pitch += 7
        velocity = variation.adjust_velocity(85 + rng.randint(0, 9))
        notes.append(Note(pitch, 0.9, velocity, t))
        t += 1.0

    instrument = variation.pick_instrument(1, BASS_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _melody(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """One contour phrase, then one or two developments of it."""
    root = config.key.root
    scale = config.key.scale().get_notes_in_range(root, root + 19)
    note_length = MELODY_NOTE_LENGTHS[variation.pick_style(2, len(MELODY_NOTE_LENGTHS))]

    pitches = walk_contour(
        scale, variation.scale_offset, contour, variation.phrase_length, variation.step_size
    )
    opening = []
    for i, pitch in enumerate(pitches):
        if variation.should_rest(rng):
            continue
        velocity = variation.adjust_velocity(75 + rng.randint(0, 14))
        opening.append(Note(pitch, note_length * 0.9, velocity, i * note_length))

    transforms = choose_transforms(rng, rng.randint(1, 2))
    line = extend_phrase(Phrase(opening), transforms, limit=beats)

    instrument = variation.pick_instrument(2, LEAD_INSTRUMENTS)
    return NoteSequence(line.notes, instrument, tempo=tempo)
