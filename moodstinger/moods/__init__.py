"""
Mood generators for moodstinger.

Each mood has one generator: a plain function taking the settings, the
seed's variation bundle and the generation RNG, and returning one
NoteSequence per layer. ``generate_mood`` builds the bundle and the RNG from
the settings' seed and dispatches on the mood.
"""

import logging
import random
from typing import Callable

from ..sequence import NoteSequence
from ..variation import Variation, create_rng
from . import ambient, calm, eerie, jazz, suspense, upbeat
from .config import DESCRIPTIONS, Mood, PresetConfig

_LOGGER = logging.getLogger("moodstinger.moods")

Generator = Callable[[PresetConfig, Variation, random.Random], list[NoteSequence]]

GENERATORS: dict[Mood, Generator] = {
    Mood.SUSPENSE: suspense.generate,
    Mood.EERIE: eerie.generate,
    Mood.UPBEAT: upbeat.generate,
    Mood.CALM: calm.generate,
    Mood.AMBIENT: ambient.generate,
    Mood.JAZZ: jazz.generate,
}


def generate_mood(mood: Mood, config: PresetConfig) -> list[NoteSequence]:
    """
    Compose a stinger.

    Args:
        mood: Which generator to run.
        config: Duration, key, intensity, seed and base tempo.

    Returns:
        One NoteSequence per layer; the first is always the foundation.
    """
    variation = Variation.from_seed(config.seed)
    rng = create_rng(config.seed)
    sequences = GENERATORS[mood](config, variation, rng)

    _LOGGER.debug(
        "%s seed=%d tempo=%d: %d layers, %d notes",
        mood.value,
        config.seed,
        variation.effective_tempo(config.tempo),
        len(sequences),
        sum(len(s) for s in sequences),
    )
    return sequences


__all__ = [
    "DESCRIPTIONS",
    "GENERATORS",
    "Mood",
    "PresetConfig",
    "generate_mood",
]
