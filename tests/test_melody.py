import random

from moodstinger.melody import (
    MIN_NOTE_LENGTH,
    Phrase,
    PhraseTransform,
    choose_transforms,
    extend_phrase,
    step_in_scale,
    walk_contour,
)
from moodstinger.note import Note
from moodstinger.variation import ContourStep

UP, DOWN, HOLD = ContourStep.UP, ContourStep.DOWN, ContourStep.HOLD


def _motif() -> Phrase:
    return Phrase([Note(60, 1.0, 80, 0.0), Note(62, 1.0, 80, 1.0)])


def test_repeat_follows_phrase() -> None:
    cont = _motif().develop(PhraseTransform.REPEAT)
    assert [(n.pitch, n.offset) for n in cont.notes] == [(60, 2.0), (62, 3.0)]


def test_invert_mirrors_about_mean() -> None:
    cont = _motif().develop(PhraseTransform.INVERT)
    assert [n.pitch for n in cont.notes] == [62, 60]
    assert [n.offset for n in cont.notes] == [2.0, 3.0]


def test_compress_and_expand() -> None:
    compressed = _motif().develop(PhraseTransform.COMPRESS)
    assert [n.duration for n in compressed.notes] == [0.5, 0.5]
    assert [n.offset for n in compressed.notes] == [2.0, 2.5]

    expanded = _motif().develop(PhraseTransform.EXPAND)
    assert [n.duration for n in expanded.notes] == [2.0, 2.0]
    assert [n.offset for n in expanded.notes] == [2.0, 4.0]


def test_compress_keeps_minimum_length() -> None:
    short = Phrase([Note(60, 0.125, 80, 0.0)]).time_scaled(0.5)
    assert short.notes[0].duration == MIN_NOTE_LENGTH


def test_extend_phrase_and_limit() -> None:
    phrase = extend_phrase(_motif(), [PhraseTransform.REPEAT, PhraseTransform.REPEAT])
    assert [n.offset for n in phrase.notes] == [0.0, 1.0, 2.0, 3.0, 4.0, 5.0]

    limited = extend_phrase(_motif(), [PhraseTransform.REPEAT, PhraseTransform.REPEAT], limit=3)
    assert [n.offset for n in limited.notes] == [0.0, 1.0, 2.0]


def test_extend_empty_phrase() -> None:
    assert len(extend_phrase(Phrase(), [PhraseTransform.INVERT])) == 0


def test_choose_transforms_uses_rng() -> None:
    first = choose_transforms(random.Random(4), 5)
    assert len(first) == 5
    assert first == choose_transforms(random.Random(4), 5)


def test_walk_contour_follows_steps() -> None:
    table = [60, 62, 64, 65, 67]
    assert walk_contour(table, 0, (UP, UP, DOWN), 5) == [60, 62, 64, 62, 64]
    assert walk_contour(table, 2, (HOLD,), 3) == [64, 64, 64]
    assert walk_contour(table, 0, (UP,), 3, step_size=2) == [60, 64, 67]


def test_walk_contour_bounces_at_edges() -> None:
    assert walk_contour([60, 62], 1, (UP,), 3) == [62, 60, 62]
    assert walk_contour([60, 62, 64], 0, (DOWN,), 3) == [60, 62, 60]
    assert walk_contour([60, 62], 9, (HOLD,), 1) == [62]


def test_step_in_scale() -> None:
    table = [48, 50, 52]
    assert step_in_scale(table, 50, 1) == 52
    assert step_in_scale(table, 50, -1) == 48
    assert step_in_scale(table, 52, 1) == 52
    assert step_in_scale(table, 48, -1) == 48
    assert step_in_scale(table, 49, 1) == 50
    assert step_in_scale(table, 49, -1) == 48
