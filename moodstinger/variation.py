"""
Variation module for moodstinger.

Derives a bundle of musical choices from a single seed: tempo drift, which
optional layers play, which instruments and styles each layer uses, dynamics,
density and a melodic contour. Two generations with the same seed make the
same choices; neighbouring seeds make audibly different ones.

The draws in ``Variation.from_seed`` happen in a fixed order. Adding, removing
or reordering a draw changes the output for every existing seed.
"""

from dataclasses import dataclass
from enum import IntEnum
import random


LAYER_COUNT = 6

# (low, high) of the uniform draw for each layer probability
LAYER_PROB_RANGES: tuple[tuple[float, float], ...] = (
    (0.3, 1.0),
    (0.3, 1.0),
    (0.2, 0.9),
    (0.2, 0.8),
    (0.1, 0.7),
    (0.1, 0.6),
)

MIN_TEMPO = 40
MAX_TEMPO = 200


class ContourStep(IntEnum):
    """Direction of one step of a melodic contour."""

    DOWN = -1
    HOLD = 0
    UP = 1


def create_rng(seed: int) -> random.Random:
    """Create the generation RNG for one ``generate`` call."""
    return random.Random(seed)


@dataclass(frozen=True)
class Variation:
    """
    Seed-derived choices shared by every layer of a generation.

    Attributes:
        tempo_factor: Multiplier applied to the base tempo (0.85-1.15).
        layer_probs: Per-layer inclusion probabilities.
        instrument_indices: Per-layer indices into instrument candidate lists.
        style_choices: Per-layer indices into style tables.
        density_factor: Note density multiplier (0.6-1.4).
        velocity_offset: Added to base velocities (-15 to 15).
        note_count_factor: Multiplier for note counts (0.7-1.4).
        phrase_length: Length of the melodic contour (4-8).
        scale_offset: Starting scale degree for melodic layers (0-6).
        rest_probability: Chance that a melodic slot is a rest (0.05-0.3).
        step_size: Typical melodic step in scale-index space (1-3).
        contour_seed: Seed for the private contour generator.
    """

    tempo_factor: float
    layer_probs: tuple[float, ...]
    instrument_indices: tuple[int, ...]
    style_choices: tuple[int, ...]
    density_factor: float
    velocity_offset: int
    note_count_factor: float
    phrase_length: int
    scale_offset: int
    rest_probability: float
    step_size: int
    contour_seed: int

    @classmethod
    def from_seed(cls, seed: int) -> "Variation":
        """Derive a variation bundle from a seed."""
        rng = random.Random(seed)
        return cls(
            tempo_factor=1.0 + rng.randint(-15, 15) / 100.0,
            layer_probs=tuple(rng.uniform(low, high) for low, high in LAYER_PROB_RANGES),
            instrument_indices=tuple(rng.randint(0, 255) for _ in range(LAYER_COUNT)),
            style_choices=tuple(rng.randint(0, 255) for _ in range(LAYER_COUNT)),
            density_factor=rng.uniform(0.6, 1.4),
            velocity_offset=rng.randint(-15, 15),
            note_count_factor=rng.uniform(0.7, 1.4),
            phrase_length=rng.randint(4, 8),
            scale_offset=rng.randint(0, 6),
            rest_probability=rng.uniform(0.05, 0.3),
            step_size=rng.randint(1, 3),
            contour_seed=rng.getrandbits(32),
        )

    def effective_tempo(self, base_tempo: int) -> int:
        """Scale the base tempo by the tempo factor, clamped to 40-200 BPM."""
        return max(MIN_TEMPO, min(MAX_TEMPO, int(base_tempo * self.tempo_factor)))

    def include_layer(self, layer: int, intensity: int, base_threshold: int) -> bool:
        """
        Decide whether an optional layer plays.

        A layer plays when its probability beats the headroom left by the
        intensity and the intensity clears the base threshold, which a high
        layer probability lowers by up to 30%.

        Args:
            layer: Layer index; indices outside the table use probability 0.5.
            intensity: Overall intensity, 0-100.
            base_threshold: Intensity (0-100) the layer normally needs.
        """
        prob = self.layer_probs[layer] if 0 <= layer < len(self.layer_probs) else 0.5
        level = intensity / 100.0
        threshold = base_threshold / 100.0
        return prob > 1.0 - level and level >= threshold * (1.0 - prob * 0.3)

    def pick_instrument(self, layer: int, candidates: tuple[int, ...]) -> int:
        """Pick a GM program from a non-empty candidate tuple."""
        return candidates[self._choice(self.instrument_indices, layer) % len(candidates)]

    def pick_style(self, layer: int, num_styles: int) -> int:
        """Pick a style index in ``range(num_styles)``."""
        return self._choice(self.style_choices, layer) % num_styles

    @staticmethod
    def _choice(values: tuple[int, ...], layer: int) -> int:
        # Layers past the drawn ones pick the first candidate
        return values[layer] if 0 <= layer < len(values) else 0

    def adjust_velocity(self, velocity: int) -> int:
        """Apply the velocity offset, clamped to 1-127."""
        return max(1, min(127, velocity + self.velocity_offset))

    def scaled_count(self, count: int) -> int:
        """Scale a note count by the note count factor, never below 1."""
        return max(1, round(count * self.note_count_factor))

    def get_contour(self, length: int) -> tuple[ContourStep, ...]:
        """
        Return a contour of ``length`` steps: 40% up, 40% down, 20% hold.

        Draws from its own generator seeded with ``contour_seed``, so calling
        it never shifts the generation RNG.
        """
        rng = random.Random(self.contour_seed)
        steps = []
        for _ in range(length):
            roll = rng.random()
            if roll < 0.4:
                steps.append(ContourStep.UP)
            elif roll < 0.8:
                steps.append(ContourStep.DOWN)
            else:
                steps.append(ContourStep.HOLD)
        return tuple(steps)

    def should_rest(self, rng: random.Random) -> bool:
        """Draw once from ``rng`` and report whether this slot rests."""
        return rng.random() < self.rest_probability
