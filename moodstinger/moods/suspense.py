"""
Suspense mood generator.

Characteristics: minor key, low sustained chords, tremolo strings, dissonant
clusters and a timpani heartbeat.
"""

import random

from ..harmony import Chord, ChordQuality
from ..melody import walk_contour
from ..note import Note
from ..rhythm import seconds_to_beats
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


DRONE_INSTRUMENTS = (42, 43, 48)  # cello, contrabass, strings
TREMOLO_INSTRUMENTS = (44, 48, 49)  # tremolo strings, strings, slow strings
HIT_INSTRUMENTS = (0, 1, 45)  # piano, bright piano, pizzicato
PULSE_INSTRUMENTS = (47, 58)  # timpani, tuba

DRONE_QUALITIES = (
    ChordQuality.DIMINISHED,
    ChordQuality.MINOR,
    ChordQuality.CLUSTER,
    ChordQuality.AUGMENTED,
)

# Semitones above the tremolo base pitch, ordered low to high
TREMOLO_INTERVALS = (0, 1, 3, 6, 7, 8, 11, 12, 13)
TREMOLO_SPEEDS = (0.125, 0.25)  # 32nd or 16th notes

# Root, minor second, tritone
CLUSTER_INTERVALS = (0, 1, 6)


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    sequences = [_drone(config, variation, beats, tempo)]
    if beats <= 0:
        return sequences

    if variation.include_layer(1, config.intensity, 30):
        sequences.append(_tremolo(config, variation, contour, beats, tempo, rng))
    if variation.include_layer(2, config.intensity, 60):
        sequences.append(_cluster_hits(config, variation, beats, tempo, rng))
    if variation.include_layer(3, config.intensity, 75):
        sequences.append(_heartbeat(config, variation, beats, tempo, rng))

    return sequences


def _drone(config, variation, beats, tempo) -> NoteSequence:
    """Sustained low chord two octaves below the key root."""
    quality = DRONE_QUALITIES[variation.pick_style(0, len(DRONE_QUALITIES))]
    chord = Chord(config.key.root - 24, quality)

    notes = []
    if beats > 0:
        for i, pitch in enumerate(chord.get_notes()):
            velocity = variation.adjust_velocity(50 - i * 5)
            notes.append(Note(pitch, beats, velocity, 0.0))

    instrument = variation.pick_instrument(0, DRONE_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _tremolo(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """Fast repeated notes creeping through a dissonant interval table."""
    speed = TREMOLO_SPEEDS[variation.pick_style(1, len(TREMOLO_SPEEDS))]
    base = config.key.root + 12
    table = [base + interval for interval in TREMOLO_INTERVALS]

    count = int(beats / speed)
    pitches = walk_contour(table, variation.scale_offset, contour, count)
    velocity_base = 25 + config.intensity // 4

    notes = []
    for i, pitch in enumerate(pitches):
        velocity = variation.adjust_velocity(velocity_base + rng.randint(0, 9))
        notes.append(Note(pitch, speed, velocity, i * speed))

    instrument = variation.pick_instrument(1, TREMOLO_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _cluster_hits(config, variation, beats, tempo, rng) -> NoteSequence:
    """One to three short dissonant stabs at random positions."""
    root = config.key.root
    num_hits = min(3, variation.scaled_count(rng.randint(1, 3)))

    if beats > 1.0:
        low, high = 0.5, beats - 0.5
    else:
        low, high = 0.0, beats / 2
    positions = sorted(rng.uniform(low, high) for _ in range(num_hits))

    notes = []
    for position in positions:
        velocity = variation.adjust_velocity(60 + rng.randint(0, 29))
        for interval in CLUSTER_INTERVALS:
            notes.append(Note(root + interval, 0.5, velocity, position))

    instrument = variation.pick_instrument(2, HIT_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _heartbeat(config, variation, beats, tempo, rng) -> NoteSequence:
    """Lub-dub pulse on the low root, spaced by the density factor."""
    pitch = config.key.root - 24
    interval = max(0.5, round(1.5 / variation.density_factor * 4) / 4)

    notes = []
    t = 0.0
    while t < beats:
        notes.append(Note(pitch, 0.25, variation.adjust_velocity(70 + rng.randint(0, 9)), t))
        if t + 0.25 < beats:
            notes.append(Note(pitch, 0.25, variation.adjust_velocity(55 + rng.randint(0, 9)), t + 0.25))
        t += interval

    instrument = variation.pick_instrument(3, PULSE_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)
