import json

import pytest
from pydantic import ValidationError

from moodstinger.errors import (
    BadDurationError,
    BadFormatError,
    BadPitchError,
    PresetNotFoundError,
    StingerError,
    StoreError,
)
from moodstinger.harmony import Key
from moodstinger.moods import Mood
from moodstinger.store import (
    PresetStore,
    SavedMelody,
    SavedPreset,
    default_store_path,
    parse_melody_notes,
)


def test_default_path_follows_home(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("MOODSTINGER_HOME", str(tmp_path))
    assert default_store_path() == tmp_path / "presets.json"
    assert PresetStore().path == tmp_path / "presets.json"


def test_preset_round_trip(tmp_path) -> None:
    store = PresetStore(tmp_path / "presets.json")
    assert store.list_presets() == []

    store.save_preset(SavedPreset(name="b", mood="jazz", seed=9))
    store.save_preset(SavedPreset(name="a", mood="tense", key="Dm", intensity=70))

    assert [p.name for p in store.list_presets()] == ["a", "b"]

    reopened = PresetStore(tmp_path / "presets.json")
    preset = reopened.get_preset("a")
    assert preset.intensity == 70

    mood, config = preset.to_config()
    assert mood is Mood.SUSPENSE
    assert config.key is Key.Dm
    assert config.intensity == 70


def test_file_is_indented_json(tmp_path) -> None:
    path = tmp_path / "nested" / "presets.json"
    PresetStore(path).save_preset(SavedPreset(name="x", mood="calm"))
    text = path.read_text(encoding="utf-8")
    assert text.startswith("{\n  ")
    assert json.loads(text)["presets"][0]["mood"] == "calm"


def test_missing_key_uses_mood_default() -> None:
    mood, config = SavedPreset(name="j", mood="jazz", seed=3).to_config()
    assert config.key is Mood.JAZZ.default_key
    assert config.seed == 3


def test_non_positive_seed_gets_time_seed(monkeypatch) -> None:
    monkeypatch.setattr("moodstinger.store.time_seed", lambda: 4242)
    _mood, config = SavedPreset(name="t", mood="calm", seed=0).to_config()
    assert config.seed == 4242


def test_save_keeps_created_at(tmp_path) -> None:
    store = PresetStore(tmp_path / "presets.json")
    first = store.save_preset(SavedPreset(name="p", mood="eerie", created_at="2020-01-01T00:00:00+00:00"))
    second = store.save_preset(SavedPreset(name="p", mood="calm"))

    assert second.created_at == first.created_at
    assert second.mood == "calm"
    assert len(store.list_presets()) == 1


def test_mark_generated(tmp_path) -> None:
    store = PresetStore(tmp_path / "presets.json")
    store.save_preset(SavedPreset(name="p", mood="upbeat"))
    assert store.get_preset("p").last_generated is None
    store.mark_generated("p")
    assert store.get_preset("p").last_generated is not None


def test_preset_not_found(tmp_path) -> None:
    store = PresetStore(tmp_path / "presets.json")
    store.save_preset(SavedPreset(name="keep", mood="calm"))
    with pytest.raises(PresetNotFoundError) as excinfo:
        store.get_preset("nope")
    assert excinfo.value.choices == ("keep",)
    with pytest.raises(PresetNotFoundError):
        store.delete_preset("nope")

    store.delete_preset("keep")
    assert store.list_presets() == []


@pytest.mark.parametrize("content", [b"{not json", b'{"presets": "nope"}', b"\xff\xfe"])
def test_corrupt_store_is_a_store_error(tmp_path, content: bytes) -> None:
    path = tmp_path / "presets.json"
    path.write_bytes(content)
    store = PresetStore(path)
    with pytest.raises(StoreError) as excinfo:
        store.list_presets()
    assert isinstance(excinfo.value, StingerError)
    assert str(path) in str(excinfo.value)
    with pytest.raises(StoreError):
        store.save_melody(SavedMelody(name="m"))
    assert path.exists()


class TestMelodies:
    def test_parse_with_rests(self) -> None:
        notes = parse_melody_notes("C4:1:80, rest:0.5, Eb4:0.5:90")
        assert [n.pitch for n in notes] == ["C4", "rest", "D#4"]
        assert notes[1].is_rest
        assert notes[1].duration == 0.5

    @pytest.mark.parametrize(
        ("text", "error"),
        [
            ("rest:0", BadDurationError),
            ("rest:soon", BadDurationError),
            ("rest:inf", BadDurationError),
            ("C4:1:80@2", BadFormatError),
            ("Q4:1:80", BadPitchError),
        ],
    )
    def test_parse_errors(self, text: str, error: type) -> None:
        with pytest.raises(error):
            parse_melody_notes(text)

    def test_to_sequence_lays_notes_end_to_end(self) -> None:
        melody = SavedMelody(
            name="m",
            instrument="flute",
            tempo=100,
            notes=parse_melody_notes("C4:1:80,rest:1,E4:0.5:70,G4:0.5:70"),
        )
        seq = melody.to_sequence()
        assert seq.instrument == 73
        assert seq.tempo == 100
        assert [(n.pitch, n.offset) for n in seq.notes] == [(60, 0.0), (64, 2.0), (67, 2.5)]

    def test_all_rests_is_an_error(self) -> None:
        melody = SavedMelody(name="quiet", notes=parse_melody_notes("rest:1,rest:2"))
        with pytest.raises(BadFormatError):
            melody.to_sequence()

    def test_store_round_trip(self, tmp_path) -> None:
        store = PresetStore(tmp_path / "presets.json")
        store.save_melody(SavedMelody(name="tune", notes=parse_melody_notes("A4:1:80")))
        assert [m.name for m in store.list_melodies()] == ["tune"]
        assert store.get_melody("tune").notes[0].pitch == "A4"

        store.delete_melody("tune")
        with pytest.raises(PresetNotFoundError) as excinfo:
            store.get_melody("tune")
        assert excinfo.value.kind == "melody"

    @pytest.mark.parametrize("tempo", [0, -60, 3, 1001])
    def test_unwritable_tempo_is_invalid(self, tempo: int) -> None:
        with pytest.raises(ValidationError):
            SavedMelody(name="m", tempo=tempo, notes=parse_melody_notes("C4:1:80"))
