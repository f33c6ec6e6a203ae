"""
Calm mood generator.

Characteristics: major key, soft sustained pad, a gentle chord-tone arpeggio
and sparse high sparkle notes.
"""

import random

from ..harmony import Chord, ChordQuality, CHORD_INTERVALS
from ..melody import Phrase, choose_transforms, extend_phrase, walk_contour
from ..note import Note
from ..rhythm import humanize, seconds_to_beats
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


PAD_INSTRUMENTS = (88, 89, 49, 48)  # new age pad, warm pad, slow strings, strings
ARP_INSTRUMENTS = (46, 0, 11, 25)  # harp, piano, vibraphone, acoustic guitar
SPARKLE_INSTRUMENTS = (8, 9, 98, 11)  # celesta, glockenspiel, crystal, vibraphone

MAJOR_PADS = (
    ChordQuality.MAJOR_7,
    ChordQuality.ADD_9,
    ChordQuality.SUS_2,
    ChordQuality.MAJOR,
)

MINOR_PADS = (
    ChordQuality.MINOR_7,
    ChordQuality.MINOR_ADD_9,
    ChordQuality.SUS_2,
    ChordQuality.MINOR,
)

ARP_STEP = 0.5


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    sequences = [_pad(config, variation, beats, tempo)]
    if beats <= 0:
        return sequences

    if variation.layer_probs[1] > 0.15:
        sequences.append(_arpeggio(config, variation, contour, beats, tempo, rng))
    if variation.include_layer(2, config.intensity, 65):
        sequences.append(_sparkle(config, variation, beats, tempo, rng))

    return sequences


def _pad(config, variation, beats, tempo) -> NoteSequence:
    qualities = MINOR_PADS if config.key.is_minor else MAJOR_PADS
    quality = qualities[variation.pick_style(0, len(qualities))]

    notes = []
    if beats > 0:
        for pitch in Chord(config.key.root - 12, quality).get_notes():
            notes.append(Note(pitch, beats, variation.adjust_velocity(45), 0.0))

    instrument = variation.pick_instrument(0, PAD_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)


def _arpeggio(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    beats: float,
    tempo: int,
    rng: random.Random,
) -> NoteSequence:
    """Tonic chord tones over two octaves, direction set by the contour."""
    root = config.key.root
    intervals = CHORD_INTERVALS[config.key.triad()]
    tones = sorted(root + interval + 12 * octave for octave in (0, 1) for interval in intervals)

    count = max(1, min(variation.phrase_length, int(beats / ARP_STEP)))
    pitches = walk_contour(tones, variation.scale_offset % len(tones), contour, count)

    opening = []
    for i, pitch in enumerate(pitches):
        velocity = variation.adjust_velocity(50 + rng.randint(0, 9))
        onset = humanize(i * ARP_STEP, rng)
        opening.append(Note(pitch, ARP_STEP * 1.5, velocity, onset))

    transforms = choose_transforms(rng, rng.randint(1, 2))
    line = extend_phrase(Phrase(opening), transforms, limit=beats)

    instrument = variation.pick_instrument(1, ARP_INSTRUMENTS)
    return NoteSequence(line.notes, instrument, tempo=tempo)


def _sparkle(config, variation, beats, tempo, rng) -> NoteSequence:
    """Sparse high scale tones at random positions, with rests."""
    root = config.key.root
    scale = config.key.scale(1).get_notes_in_range(root + 12, root + 31)
    count = variation.scaled_count(max(1, int(beats / 2)))

    notes = []
    for _ in range(count):
        if variation.should_rest(rng):
            continue
        position = rng.uniform(0.0, beats)
        pitch = scale[rng.randrange(len(scale))]
        velocity = variation.adjust_velocity(35 + rng.randint(0, 14))
        notes.append(Note(pitch, 1.0, velocity, position))

    instrument = variation.pick_instrument(2, SPARKLE_INSTRUMENTS)
    return NoteSequence(notes, instrument, tempo=tempo)
