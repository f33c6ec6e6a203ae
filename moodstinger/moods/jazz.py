"""
Jazz mood generator.

Nightclub trio: a walking bass on channel 1, piano comping on channel 0 and
brushed drums on the GM percussion channel. Swing comes from micro-timing
offsets rather than from a quantized grid.
"""

from enum import Enum
import random

from ..melody import step_in_scale
from ..note import Note
from ..rhythm import seconds_to_beats, swing_offset
from ..sequence import NoteSequence
from ..variation import ContourStep, Variation
from .config import PresetConfig


BASS_INSTRUMENTS = (32, 35)  # acoustic bass, fretless bass
KEYS_INSTRUMENTS = (0, 0, 0, 1, 4)  # weighted toward acoustic grand

BASS_CHANNEL = 1
KEYS_CHANNEL = 0
DRUM_CHANNEL = 9

# GM percussion keys
DRUM_RIDE_CYMBAL = 51
DRUM_RIDE_BELL = 53
DRUM_CLOSED_HIHAT = 42
DRUM_PEDAL_HIHAT = 44
DRUM_SNARE = 38
DRUM_SIDE_STICK = 37

LOWEST_BASS = 28  # E1
BASS_CEILING = 72


class BassStyle(Enum):
    WALKING = "walking"
    TWO_FEEL = "two_feel"
    SYNCOPATED = "syncopated"


class CompStyle(Enum):
    SPARSE = "sparse"
    MEDIUM = "medium"
    DENSE = "dense"


# Walking appears twice so it is picked half the time
BASS_STYLES = (BassStyle.WALKING, BassStyle.WALKING, BassStyle.TWO_FEEL, BassStyle.SYNCOPATED)
COMP_STYLES = (CompStyle.SPARSE, CompStyle.MEDIUM, CompStyle.MEDIUM, CompStyle.DENSE)

# (step in beats, note length in beats)
BASS_TIMING = {
    BassStyle.WALKING: (1.0, 0.95),
    BassStyle.TWO_FEEL: (2.0, 1.9),
    BassStyle.SYNCOPATED: (1.0, 0.8),
}

# (skip probability, step in beats)
COMP_TIMING = {
    CompStyle.SPARSE: (0.45, 2.0),
    CompStyle.MEDIUM: (0.25, 1.5),
    CompStyle.DENSE: (0.10, 1.0),
}

BASS_INTERVALS_MINOR = (0, 2, 3, 5, 7, 8, 10, 12)
BASS_INTERVALS_MAJOR = (0, 2, 4, 5, 7, 9, 11, 12)

# Seventh chord tones above the bass root
CHORD_TONES_MINOR = (0, 3, 7, 10)
CHORD_TONES_MAJOR = (0, 4, 7, 11)

# Piano voicings as semitones from the key root
VOICINGS_MINOR = (
    (3, 7, 10, 14),  # m9
    (3, 10, 14),  # m7 spread
    (10, 14, 17),  # m9 upper
    (-2, 3, 7, 10),  # m7 with seventh below
    (3, 7, 10),  # m7
    (7, 10, 14, 17),  # m11
)

VOICINGS_MAJOR = (
    (4, 7, 11, 14),  # maj9
    (4, 11, 14),  # maj7 spread
    (11, 14, 16),  # maj9 upper
    (-1, 4, 7, 11),  # maj7 with seventh below
    (4, 7, 11),  # maj7
    (7, 11, 14, 18),  # maj9#11
)

PIANO_LOW = 48
PIANO_HIGH = 84


def generate(
    config: PresetConfig,
    variation: Variation,
    rng: random.Random,
) -> list[NoteSequence]:
    tempo = variation.effective_tempo(config.tempo)
    beats = seconds_to_beats(config.duration_secs, tempo)
    contour = variation.get_contour(variation.phrase_length)

    bass_style = BASS_STYLES[variation.pick_style(0, len(BASS_STYLES))]
    comp_style = COMP_STYLES[variation.pick_style(1, len(COMP_STYLES))]
    bass_instrument = variation.pick_instrument(0, BASS_INSTRUMENTS)
    keys_instrument = variation.pick_instrument(1, KEYS_INSTRUMENTS)

    bass = _walking_bass(config, variation, contour, bass_style, beats, rng)
    sequences = [NoteSequence(bass, bass_instrument, BASS_CHANNEL, tempo)]
    if beats <= 0:
        return sequences

    if variation.layer_probs[1] > 0.05:
        comping = _piano_comping(config, variation, contour, comp_style, beats, rng)
        sequences.append(NoteSequence(comping, keys_instrument, KEYS_CHANNEL, tempo))
    if variation.layer_probs[2] > 0.1:
        sequences.append(NoteSequence(_brush_drums(beats, rng), 0, DRUM_CHANNEL, tempo))

    return sequences


# =========================================================================
# WALKING BASS
# =========================================================================

def _bass_scale(bass_root: int, minor: bool) -> list[int]:
    """Scale tones from E1 up to a ninth above the bass root."""
    intervals = BASS_INTERVALS_MINOR if minor else BASS_INTERVALS_MAJOR
    notes = {
        bass_root + shift + interval
        for shift in (-12, 0, 12)
        for interval in intervals
    }
    return sorted(n for n in notes if LOWEST_BASS <= n <= bass_root + 14)


def _walking_bass(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    style: BassStyle,
    beats: float,
    rng: random.Random,
) -> list[Note]:
    bass_root = max(LOWEST_BASS, config.key.root - 24)
    minor = config.key.is_minor
    scale_notes = _bass_scale(bass_root, minor)
    chord_tones = [bass_root + i for i in (CHORD_TONES_MINOR if minor else CHORD_TONES_MAJOR)]
    step, base_duration = BASS_TIMING[style]
    syncopated = style is BassStyle.SYNCOPATED
    vel_base = 95 + config.intensity // 10

    notes = []
    t = 0.0
    last_pitch = bass_root
    phrase_pos = 0

    while t < beats:
        if syncopated and variation.should_rest(rng):
            t += 0.5
            phrase_pos += 1
            continue

        direction = contour[phrase_pos % len(contour)]
        if t == 0.0:
            pitch = bass_root
        elif rng.random() < 0.55:
            if direction is ContourStep.HOLD:
                direction = ContourStep.UP if rng.random() < 0.5 else ContourStep.DOWN
            pitch = step_in_scale(scale_notes, last_pitch, int(direction))
        elif rng.random() < 0.5:
            pitch = chord_tones[rng.randrange(len(chord_tones))]
        else:
            # Chromatic approach from a half step away
            target = chord_tones[rng.randrange(len(chord_tones))]
            if rng.random() < 0.5:
                pitch = max(LOWEST_BASS, target - 1)
            else:
                pitch = min(bass_root + 12, target + 1)
        phrase_pos += 1

        # Beats 1 and 3 lean in, 2 and 4 sit back
        accent = 5 if int(t) % 2 == 0 else -3
        velocity = min(127, variation.adjust_velocity(vel_base + accent) + rng.randint(0, 7))

        onset = max(0.0, t + swing_offset(t, rng))
        duration = max(0.1, base_duration + rng.uniform(-0.05, 0.05))

        if rng.random() < 0.15 and onset > 0.1:
            grace = pitch - 1 if rng.random() < 0.5 else pitch + 1
            notes.append(Note(grace, 0.08, max(40, velocity - 20), onset - 0.08))

        notes.append(Note(pitch, duration, velocity, onset))
        last_pitch = pitch

        if syncopated and rng.random() < 0.25:
            ghost = chord_tones[rng.randrange(len(chord_tones))]
            ghost_time = t + 0.5 + rng.uniform(0.0, 0.05)
            if ghost_time < beats:
                notes.append(Note(ghost, 0.2, vel_base - 35, ghost_time))

        t += step

    return [n for n in notes if n.pitch < BASS_CEILING]


# =========================================================================
# PIANO COMPING
# =========================================================================

def _piano_comping(
    config: PresetConfig,
    variation: Variation,
    contour: tuple[ContourStep, ...],
    style: CompStyle,
    beats: float,
    rng: random.Random,
) -> list[Note]:
    root = config.key.root
    voicings = VOICINGS_MINOR if config.key.is_minor else VOICINGS_MAJOR
    skip_prob, base_step = COMP_TIMING[style]
    vel_base = variation.adjust_velocity(30 + config.intensity // 12)

    notes = []
    voicing_idx = variation.scale_offset % len(voicings)
    phrase_pos = 0
    t = 0.0

    while t < beats - 0.5:
        if variation.should_rest(rng) or rng.random() < skip_prob * 0.5:
            t += rng.uniform(0.5, 1.0)
            phrase_pos += 1
            continue

        voicing = voicings[voicing_idx]
        nudge = rng.uniform(0.1, 0.4) if rng.random() < 0.4 else 0.0
        chord_time = t + nudge
        if chord_time >= beats:
            break

        if rng.random() < 0.3:
            duration = 0.2
        elif rng.random() < 0.4:
            duration = 0.5
        else:
            duration = rng.uniform(0.8, 1.2)

        for i, interval in enumerate(voicing):
            pitch = max(PIANO_LOW, min(PIANO_HIGH, root + interval))
            velocity = min(110, vel_base + i * 2 + rng.randint(0, 9))
            notes.append(Note(pitch, duration, velocity, chord_time))

        if rng.random() < 0.15 and chord_time + 0.5 < beats:
            notes.extend(_flourish(config, chord_time, rng))

        voicing_idx = (voicing_idx + int(contour[phrase_pos % len(contour)])) % len(voicings)
        phrase_pos += 1

        t += base_step + rng.uniform(-0.3, 0.3)

    return notes


def _flourish(config: PresetConfig, start: float, rng: random.Random) -> list[Note]:
    """Short quiet scale run in the upper octave."""
    intervals = config.key.scale_intervals
    onset = start + rng.uniform(0.5, 0.8)
    degree = rng.randrange(len(intervals))
    direction = 1 if rng.random() < 0.5 else -1
    count = rng.randint(2, 4)

    notes = []
    for i in range(count):
        interval = intervals[(degree + direction * i) % len(intervals)]
        pitch = max(60, min(PIANO_HIGH, config.key.root + interval + 12))
        notes.append(Note(pitch, 0.15, 35 + rng.randint(0, 14), onset + i * 0.1))
    return notes


# =========================================================================
# BRUSH DRUMS
# =========================================================================

def _brush_drums(beats: float, rng: random.Random) -> list[Note]:
    swing_ratio = rng.uniform(0.62, 0.72)

    notes = []
    t = 0.0
    while t < beats:
        notes.append(Note(DRUM_RIDE_CYMBAL, 0.2, 65 + rng.randint(0, 19), t))

        # Swung "and" on the ride
        and_time = t + swing_ratio
        if and_time < beats and rng.random() < 0.85:
            sound = DRUM_RIDE_CYMBAL if rng.random() < 0.8 else DRUM_RIDE_BELL
            notes.append(Note(sound, 0.15, 55 + rng.randint(0, 14), and_time))

        backbeat = int(t) % 2 == 1
        if backbeat:
            notes.append(Note(DRUM_PEDAL_HIHAT, 0.1, 50 + rng.randint(0, 14), t))

        if rng.random() < 0.2 and t + 0.5 < beats:
            notes.append(Note(DRUM_CLOSED_HIHAT, 0.08, 45 + rng.randint(0, 9), t + 0.5))

        if backbeat and rng.random() < 0.7:
            sound = DRUM_SIDE_STICK if rng.random() < 0.6 else DRUM_SNARE
            notes.append(Note(sound, 0.15, 50 + rng.randint(0, 19), t))

        # Ghost swirl on the snare
        if rng.random() < 0.1:
            swirl_time = t + rng.uniform(0.2, 0.4)
            if swirl_time < beats:
                notes.append(Note(DRUM_SNARE, 0.3, 40 + rng.randint(0, 9), swirl_time))

        t += 1.0

    return notes
