"""
Eerie mood generator.

Characteristics: sparse, wide intervals, diminished harmony, a chromatic
breathing texture and the occasional minor-second stab.
"""

import random

from ..harmony import Chord, ChordQuality, Scale, ScaleType, SCALE_INTERVALS
from ..melody import walk_contour
from ..note import Note
from ..rhythm import seconds_to_beats
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


PAD_INSTRUMENTS = (89, 91, 94, 52)  # warm pad, choir pad, halo pad, choir
BELL_INSTRUMENTS = (8, 9, 14, 10)  # celesta, glockenspiel, tubular bells, music box
BREATH_INSTRUMENTS = (99, 95, 75)  # atmosphere, sweep pad, pan flute
STAB_INSTRUMENTS = (45, 0, 11)  # pizzicato, piano, vibraphone

PAD_QUALITIES = (
    ChordQuality.DIMINISHED,
    ChordQuality.DIMINISHED_7,
    ChordQuality.HALF_DIMINISHED_7,
    ChordQuality.TRITONE,
)

# Octave shift of each chord tone in the spread pad voicing
PAD_SPREAD = (-1, 0, 1, 1)

BREATH_STEP = 0.5
BREATH_RANGE = 6


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    sequences = [_diminished_pad(config, variation, beats, tempo)]
    if beats <= 0:
        return sequences

    if variation.layer_probs[1] > 0.2:
        sequences.append(_bell_tones(config, variation, contour, beats, tempo, rng))
    if variation.include_layer(2, config.intensity, 40):
        sequences.append(_breath(config, variation, contour, beats, tempo, rng))
    if variation.include_layer(3, config.intensity, 70):
        sequences.append(_stabs(config, variation, beats, tempo, rng))

    return sequences


def _diminished_pad(config, variation, beats, tempo) -> NoteSequence:
    quality = PAD_QUALITIES[variation.pick_style(0, len(PAD_QUALITIES))]
    chord = Chord(config.key.root, quality)

    notes = []
    if beats > 0:
        for i, pitch in enumerate(chord.get_spread(PAD_SPREAD)):
            notes.append(Note(pitch, beats, variation.adjust_velocity(40 - i * 5), 0.0))

    instrument = variation.pick_instrument(0, PAD_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _bell_tones(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """Two to four sparse high tones walking the diminished scale."""
    root = config.key.root
    scale = Scale(root + 12, ScaleType.DIMINISHED).get_notes_in_range(root + 12, root + 36)

    count = variation.scaled_count(rng.randint(2, 4))
    pitches = walk_contour(scale, variation.scale_offset, contour, count, variation.step_size)

    notes = []
    for i, pitch in enumerate(pitches):
        if variation.should_rest(rng):
            continue
        position = i / count * beats * 0.8
        velocity = variation.adjust_velocity(30 + rng.randint(0, 19))
        duration = rng.uniform(1.0, 2.0)
        notes.append(Note(pitch, duration, velocity, position))

    instrument = variation.pick_instrument(1, BELL_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _breath(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """Very soft chromatic walk that never strays a tritone from the root."""
    root = config.key.root
    low, high = root - BREATH_RANGE, root + BREATH_RANGE

    notes = []
    pitch = root
    t = 0.0
    i = 0
    while t < beats:
        velocity = variation.adjust_velocity(15 + rng.randint(0, 9))
        notes.append(Note(pitch, BREATH_STEP, velocity, t))

        pitch = max(low, min(high, pitch + int(contour[i % len(contour)])))
        t += BREATH_STEP
        i += 1

    instrument = variation.pick_instrument(2, BREATH_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _stabs(config, variation, beats, tempo, rng) -> NoteSequence:
    """Occasional minor-second stabs on diminished scale tones."""
    root = config.key.root
    intervals = SCALE_INTERVALS[ScaleType.DIMINISHED]
    count = variation.scaled_count(rng.randint(1, 3))

    notes = []
    for _ in range(count):
        position = rng.uniform(0.0, beats)
        pitch = root + intervals[rng.randrange(len(intervals))]
        velocity = variation.adjust_velocity(55 + rng.randint(0, 20))
        notes.append(Note(pitch, 0.25, velocity, position))
        notes.append(Note(pitch + 1, 0.25, velocity, position))

    instrument = variation.pick_instrument(3, STAB_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)
