"""
Rhythm module for moodstinger.

Timing helpers shared by the mood generators: tempo conversion, metric beat
strength, swing and humanization.
"""

import random

BEATS_PER_MEASURE = 4


def seconds_to_beats(seconds: float, bpm: float) -> float:
    """
    Convert seconds to beats at a tempo.

    Args:
        seconds: Duration in seconds.
        bpm: Tempo in beats per minute.

    Returns:
        Number of beats.
    """
    return seconds * bpm / 60.0


def is_offbeat(beat: float) -> bool:
    """True for positions in the second half of a beat."""
    return int(beat * 2) % 2 == 1


def get_beat_strength(beat: float, beats_per_measure: int = BEATS_PER_MEASURE) -> float:
    """
    Get the metric strength of a beat position in 4/4.

    Args:
        beat: Beat position.
        beats_per_measure: Beats in one measure.

    Returns:
        Strength value from 0.3 (off-beat) to 1.0 (downbeat).
    """
    beat_in_measure = beat % beats_per_measure

    # Downbeat is strongest
    if beat_in_measure < 0.1:
        return 1.0

    if abs(beat_in_measure - 2) < 0.1:
        return 0.8
    if abs(beat_in_measure - 1) < 0.1 or abs(beat_in_measure - 3) < 0.1:
        return 0.6

    # Off-beats are weak
    return 0.3


def swing_offset(
    beat: float,
    rng: random.Random,
    late: tuple[float, float] = (0.02, 0.08),
    jitter: float = 0.02,
) -> float:
    """
    Draw a micro-timing offset for a note at ``beat``.

    Off-beats are pushed late by an amount drawn from ``late``; on-beats get
    a small symmetric humanizing jitter. Always one draw from ``rng``.
    """
    if is_offbeat(beat):
        return rng.uniform(*late)
    return rng.uniform(-jitter, jitter)


def humanize(beat: float, rng: random.Random, amount: float = 0.3) -> float:
    """
    Add human-like timing variation.

    Args:
        beat: Original beat offset.
        rng: Generation RNG (one draw).
        amount: Amount of humanization (0-1).

    Returns:
        Humanized beat offset, never negative.
    """
    return max(0.0, beat + rng.gauss(0, 0.02 * amount))
