"""
Melody module for moodstinger.

Provides phrases, contour-guided walks over scale tables, and the motif
transforms (repeat, inversion, compression, expansion) the melodic layers use
to grow a short phrase into a full line.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence
import random

from .note import Note
from .variation import ContourStep


class PhraseTransform(Enum):
    """Ways a phrase can be developed into its continuation."""

    REPEAT = "repeat"
    INVERT = "invert"
    COMPRESS = "compress"
    EXPAND = "expand"


# Shortest note a compressed phrase may contain, in beats
MIN_NOTE_LENGTH = 0.125


@dataclass
class Phrase:
    """
    A melodic phrase consisting of multiple notes.

    Attributes:
        notes: Notes in time order.
    """

    notes: list[Note] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def start(self) -> float:
        return min((n.offset for n in self.notes), default=0.0)

    @property
    def end(self) -> float:
        return max((n.end for n in self.notes), default=0.0)

    def span(self) -> float:
        """Return the time from the first onset to the last release."""
        return self.end - self.start

    def mean_pitch(self) -> float:
        if not self.notes:
            return 0.0
        return sum(n.pitch for n in self.notes) / len(self.notes)

    def shifted(self, beats: float) -> "Phrase":
        """Return a copy moved ``beats`` later in time."""
        return Phrase([
            Note(n.pitch, n.duration, n.velocity, n.offset + beats)
            for n in self.notes
        ])

    def inverted(self) -> "Phrase":
        """Mirror every pitch about the phrase's mean pitch."""
        pivot = self.mean_pitch()
        return Phrase([
            Note(round(2 * pivot - n.pitch), n.duration, n.velocity, n.offset)
            for n in self.notes
        ])

    def time_scaled(self, factor: float) -> "Phrase":
        """Scale onsets (relative to the phrase start) and durations."""
        start = self.start
        return Phrase([
            Note(
                n.pitch,
                max(MIN_NOTE_LENGTH, n.duration * factor),
                n.velocity,
                start + (n.offset - start) * factor,
            )
            for n in self.notes
        ])

    def develop(self, transform: PhraseTransform) -> "Phrase":
        """
        Return the continuation of this phrase, placed right after its end.

        Args:
            transform: How the continuation relates to this phrase.
        """
        if transform is PhraseTransform.INVERT:
            variant = self.inverted()
        elif transform is PhraseTransform.COMPRESS:
            variant = self.time_scaled(0.5)
        elif transform is PhraseTransform.EXPAND:
            variant = self.time_scaled(2.0)
        else:
            variant = Phrase(list(self.notes))
        return variant.shifted(self.span())

    def truncated(self, limit: float) -> "Phrase":
        """Drop notes starting at or after ``limit`` beats."""
        return Phrase([n for n in self.notes if n.offset < limit])


def choose_transforms(rng: random.Random, count: int) -> list[PhraseTransform]:
    """Draw ``count`` transforms from the generation RNG."""
    choices = list(PhraseTransform)
    return [choices[rng.randrange(len(choices))] for _ in range(count)]


def extend_phrase(
    phrase: Phrase,
    transforms: Sequence[PhraseTransform],
    limit: Optional[float] = None,
) -> Phrase:
    """
    Grow a phrase by chaining developments onto its end.

    Each transform is applied to the most recent segment, so an inversion
    followed by a repeat plays the inverted segment twice.

    Args:
        phrase: The opening phrase.
        transforms: Transforms to apply in order.
        limit: If given, drop notes that would start at or after this beat.

    Returns:
        The opening phrase followed by each developed segment.
    """
    notes = list(phrase.notes)
    segment = phrase
    for transform in transforms:
        if not segment.notes:
            break
        segment = segment.develop(transform)
        notes.extend(segment.notes)

    result = Phrase(notes)
    if limit is not None:
        result = result.truncated(limit)
    return result


# =========================================================================
# CONTOUR WALKS
# =========================================================================

def walk_contour(
    scale_notes: Sequence[int],
    start_index: int,
    contour: Sequence[ContourStep],
    count: int,
    step_size: int = 1,
) -> list[int]:
    """
    Walk a sorted pitch table following a contour.

    The first pitch is at ``start_index``. Each following pitch moves
    ``step_size`` entries in the contour's direction, cycling through the
    contour. A step that would leave the table bounces back the other way.

    Args:
        scale_notes: Sorted, non-empty pitch table.
        start_index: Starting index; clamped into the table.
        contour: Non-empty sequence of contour steps.
        count: Number of pitches to produce.
        step_size: Entries moved per up or down step.

    Returns:
        ``count`` pitches from the table.
    """
    last = len(scale_notes) - 1
    idx = max(0, min(last, start_index))
    pitches = []
    for i in range(count):
        pitches.append(scale_notes[idx])
        move = int(contour[i % len(contour)]) * step_size
        nxt = idx + move
        if nxt < 0 or nxt > last:
            nxt = idx - move
        idx = max(0, min(last, nxt))
    return pitches


def step_in_scale(scale_notes: Sequence[int], pitch: int, direction: int) -> int:
    """
    Move one entry up or down a sorted pitch table from ``pitch``.

    ``pitch`` need not be in the table. At either edge the pitch is returned
    unchanged.
    """
    if direction > 0:
        higher = [n for n in scale_notes if n > pitch]
        return higher[0] if higher else pitch
    lower = [n for n in scale_notes if n < pitch]
    return lower[-1] if lower else pitch
