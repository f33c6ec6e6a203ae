"""
Ambient mood generator.

Characteristics: two long drones, sparse pentatonic tones drifting between
octaves, and an irregular sub-bass rumble.
"""

import random

from ..harmony import SCALE_INTERVALS
from ..note import Note
from ..rhythm import seconds_to_beats
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


DRONE_INSTRUMENTS = (89, 99, 94, 95)  # warm pad, atmosphere, halo pad, sweep pad
TONE_INSTRUMENTS = (11, 8, 98, 46)  # vibraphone, celesta, crystal, harp
RUMBLE_INSTRUMENTS = (38, 43, 89)  # synth bass, contrabass, warm pad

# Interval between the two drones: fifth, fourth, octave, third
DRONE_INTERVALS = (7, 5, 12, 4)

MAX_TONE_OCTAVE = 2


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    sequences = _drones(config, variation, beats, tempo)
    if beats <= 0:
        return sequences

    if variation.layer_probs[1] > 0.2:
        sequences.append(_tones(config, variation, contour, beats, tempo, rng))
    if variation.include_layer(2, config.intensity, 55):
        sequences.append(_rumble(config, variation, beats, tempo, rng))

    return sequences


def _drones(config, variation, beats, tempo) -> list[NoteSequence]:
    """Two sustained notes a style-chosen interval apart, one sequence each."""
    interval = DRONE_INTERVALS[variation.pick_style(0, len(DRONE_INTERVALS))]
    if interval == 4 and config.key.is_minor:
        interval = 3

    low = config.key.root - 12
    drones = []
    for layer, (pitch, velocity) in enumerate(((low, 45), (low + interval, 38))):
        notes = [Note(pitch, beats, variation.adjust_velocity(velocity), 0.0)] if beats > 0 else []
        instrument = variation.pick_instrument(layer * 4, DRONE_INSTRUMENTS)
        drones.append(NoteSequence(notes, instrument, tempo=tempo))
    return drones


def _tones(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """Pentatonic tones; a change of contour direction moves them an octave."""
    intervals = SCALE_INTERVALS[config.key.pentatonic]
    degree = variation.scale_offset % len(intervals)
    octave = 1
    previous = None

    notes = []
    t = rng.uniform(0.0, 1.0)
    i = 0
    while t < beats:
        step = contour[i % len(contour)]
        if step is not ContourStep.HOLD:
            if previous is not None and step != previous:
                octave = max(0, min(MAX_TONE_OCTAVE, octave + int(step)))
            previous = step
        degree = (degree + int(step) * variation.step_size) % len(intervals)

        if not variation.should_rest(rng):
            pitch = config.key.root + intervals[degree] + 12 * octave
            duration = rng.uniform(2.0, 4.0)
            velocity = variation.adjust_velocity(40 + rng.randint(0, 14))
            notes.append(Note(pitch, duration, velocity, t))

        t += rng.uniform(1.5, 3.5) / variation.density_factor
        i += 1

    instrument = variation.pick_instrument(1, TONE_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _rumble(config, variation, beats, tempo, rng) -> NoteSequence:
    """Irregularly spaced long notes three octaves below the root."""
    pitch = config.key.root - 36

    notes = []
    t = 0.0
    while t < beats:
        duration = min(rng.uniform(3.0, 6.0), beats - t)
        velocity = variation.adjust_velocity(35 + rng.randint(0, 9))
        notes.append(Note(pitch, duration, velocity, t))
        t += duration + rng.uniform(0.5, 2.0)

    instrument = variation.pick_instrument(2, RUMBLE_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)
