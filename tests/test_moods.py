import pytest
from pydantic import ValidationError

from moodstinger.errors import UnknownKeyError, UnknownMoodError
from moodstinger.harmony import Key
from moodstinger.moods import DESCRIPTIONS, GENERATORS, Mood, PresetConfig, generate_mood
from moodstinger.variation import Variation
from moodstinger.writer import midi_bytes

ALL_MOODS = list(Mood)


def test_mood_parse_names_and_aliases() -> None:
    assert Mood.parse("suspense") is Mood.SUSPENSE
    assert Mood.parse("Tense") is Mood.SUSPENSE
    assert Mood.parse("spooky") is Mood.EERIE
    assert Mood.parse("happy") is Mood.UPBEAT
    assert Mood.parse("serene") is Mood.CALM
    assert Mood.parse("drone") is Mood.AMBIENT
    assert Mood.parse(" SWING ") is Mood.JAZZ


def test_mood_parse_unknown() -> None:
    with pytest.raises(UnknownMoodError) as excinfo:
        Mood.parse("melancholy")
    assert "jazz" in excinfo.value.choices
    assert "Unknown mood: melancholy" in str(excinfo.value)


def test_every_mood_has_generator_and_description() -> None:
    assert set(GENERATORS) == set(Mood)
    assert set(DESCRIPTIONS) == set(Mood)
    assert Mood.JAZZ.default_key is Key.F
    assert Mood.SUSPENSE.default_key.is_minor


class TestPresetConfig:
    def test_defaults(self) -> None:
        config = PresetConfig()
        assert config.duration_secs == 5.0
        assert config.key is Key.Am
        assert config.intensity == 50
        assert config.seed == 42
        assert config.tempo == 90

    def test_key_from_string(self) -> None:
        assert PresetConfig(key="bbm").key is Key.Bbm
        assert PresetConfig(key=Key.G).key is Key.G

    def test_unknown_key(self) -> None:
        with pytest.raises(UnknownKeyError):
            PresetConfig(key="H")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"intensity": 101},
            {"intensity": -1},
            {"duration_secs": -0.5},
            {"seed": -1},
            {"tempo": 0},
        ],
    )
    def test_rejects_out_of_range(self, kwargs: dict) -> None:
        with pytest.raises(ValidationError):
            PresetConfig(**kwargs)

    def test_frozen(self) -> None:
        config = PresetConfig()
        with pytest.raises(ValidationError):
            config.seed = 7


@pytest.mark.parametrize("mood", ALL_MOODS)
def test_same_seed_same_output(mood: Mood) -> None:
    config = PresetConfig(seed=1234, intensity=80)
    first = generate_mood(mood, config)
    second = generate_mood(mood, config)
    assert first == second
    assert midi_bytes(first) == midi_bytes(second)


@pytest.mark.parametrize("mood", ALL_MOODS)
def test_seeds_vary_foundation_instrument(mood: Mood) -> None:
    instruments = {
        generate_mood(mood, PresetConfig(seed=seed))[0].instrument
        for seed in range(1, 16)
    }
    assert len(instruments) >= 2


@pytest.mark.parametrize("mood", ALL_MOODS)
def test_sequences_share_effective_tempo(mood: Mood) -> None:
    config = PresetConfig(seed=77, intensity=100)
    expected = Variation.from_seed(77).effective_tempo(config.tempo)
    for sequence in generate_mood(mood, config):
        assert sequence.tempo == expected


@pytest.mark.parametrize("mood", ALL_MOODS)
@pytest.mark.parametrize("seed", [0, 1, 5, 99, 2 ** 40])
@pytest.mark.parametrize("intensity", [0, 50, 100])
def test_notes_are_valid(mood: Mood, seed: int, intensity: int) -> None:
    config = PresetConfig(seed=seed, intensity=intensity, duration_secs=8.0)
    sequences = generate_mood(mood, config)
    assert sequences
    for sequence in sequences:
        assert 0 <= sequence.instrument <= 127
        assert 0 <= sequence.channel <= 15
        for note in sequence.notes:
            assert 0 <= note.pitch <= 127
            assert 1 <= note.velocity <= 127
            assert note.duration > 0
            assert note.offset >= 0


@pytest.mark.parametrize("mood", ALL_MOODS)
def test_zero_duration_gives_empty_foundation(mood: Mood) -> None:
    sequences = generate_mood(mood, PresetConfig(duration_secs=0.0, intensity=100))
    expected = 2 if mood is Mood.AMBIENT else 1
    assert len(sequences) == expected
    assert all(len(s) == 0 for s in sequences)


def test_zero_intensity_keeps_only_foundation() -> None:
    for seed in range(10):
        sequences = generate_mood(Mood.SUSPENSE, PresetConfig(seed=seed, intensity=0))
        assert len(sequences) == 1
        assert len(sequences[0]) > 0


def test_suspense_drone_sits_two_octaves_down() -> None:
    (drone, *_rest) = generate_mood(Mood.SUSPENSE, PresetConfig(key="Am", intensity=0))
    assert min(n.pitch for n in drone.notes) == Key.Am.root - 24
    assert all(n.offset == 0.0 for n in drone.notes)


def test_ambient_drones_use_interval() -> None:
    low, high = generate_mood(Mood.AMBIENT, PresetConfig(key="Em", seed=3))[:2]
    gap = high.notes[0].pitch - low.notes[0].pitch
    assert gap in (7, 5, 12, 3)
    assert low.notes[0].pitch == Key.Em.root - 12
