import random

import pytest

from moodstinger.rhythm import (
    get_beat_strength,
    humanize,
    is_offbeat,
    seconds_to_beats,
    swing_offset,
)


def test_tempo_conversion() -> None:
    assert seconds_to_beats(4, 60) == 4.0
    assert seconds_to_beats(5, 90) == 7.5


def test_beat_strength() -> None:
    assert get_beat_strength(0) == 1.0
    assert get_beat_strength(4) == 1.0
    assert get_beat_strength(2) == 0.8
    assert get_beat_strength(1) == 0.6
    assert get_beat_strength(3) == 0.6
    assert get_beat_strength(0.5) == 0.3


def test_offbeats() -> None:
    assert is_offbeat(0.5)
    assert is_offbeat(2.75)
    assert not is_offbeat(1.0)
    assert not is_offbeat(1.25)


def test_swing_pushes_offbeats_late() -> None:
    rng = random.Random(0)
    for _ in range(50):
        assert 0.02 <= swing_offset(0.5, rng) <= 0.08
        assert -0.02 <= swing_offset(1.0, rng) <= 0.02


def test_humanize_never_negative() -> None:
    rng = random.Random(1)
    assert all(humanize(0.0, rng, amount=1.0) >= 0.0 for _ in range(100))
    assert humanize(4.0, random.Random(2)) == pytest.approx(4.0, abs=0.1)
