import pytest
from pydantic import ValidationError

from moodstinger.errors import BadPitchError, BadTempoError
from moodstinger.note import Note
from moodstinger.sequence import (
    MAX_SEQUENCE_TEMPO,
    MIN_SEQUENCE_TEMPO,
    NoteInput,
    NoteSequence,
    SequenceInput,
    check_tempo,
    instrument_name,
    resolve_instrument,
)


def test_resolve_instrument_names_and_numbers() -> None:
    assert resolve_instrument("piano") == 0
    assert resolve_instrument("Cello") == 42
    assert resolve_instrument(" synth_pad ") == 88
    assert resolve_instrument("40") == 40
    assert resolve_instrument("128") is None
    assert resolve_instrument("kazoo") is None
    assert resolve_instrument("²") is None


def test_instrument_name_reverse_lookup() -> None:
    assert instrument_name(0) == "piano"
    assert instrument_name(42) == "cello"
    assert instrument_name(127) == "unknown"


def test_durations() -> None:
    assert NoteSequence().duration_beats() == 0.0

    seq = NoteSequence([Note(62, 2.0, 80, 1.0), Note(60, 1.0, 80, 0.0)], tempo=120)
    assert seq.duration_beats() == 3.0
    assert seq.duration_seconds() == pytest.approx(1.5)
    assert len(seq) == 2


def test_from_notes_defaults() -> None:
    seq = NoteSequence.from_notes([Note(60, 1.0)])
    assert seq.instrument == 0
    assert seq.channel == 0
    assert seq.tempo == 120


class TestSequenceInput:
    """JSON documents describing explicit notes."""

    def test_top_level_notes_use_defaults(self) -> None:
        doc = SequenceInput.model_validate_json(
            '{"notes": [{"pitch": "C4", "duration": 1, "velocity": 80},'
            ' {"pitch": "E4", "duration": 0.5, "velocity": 90, "offset": 1}]}'
        )
        (seq,) = doc.to_sequences()
        assert seq.tempo == 120
        assert seq.instrument == 0
        assert seq.notes == [Note(60, 1.0, 80, 0.0), Note(64, 0.5, 90, 1.0)]

    def test_tracks(self) -> None:
        doc = SequenceInput.model_validate({
            "tempo": 90,
            "tracks": [
                {"instrument": "piano", "notes": [{"pitch": "C4", "duration": 1, "velocity": 80}]},
                {"instrument": "bass", "channel": 1, "notes": [{"pitch": "C2", "duration": 2, "velocity": 100}]},
            ],
        })
        piano, bass = doc.to_sequences()
        assert (piano.instrument, bass.instrument) == (0, 33)
        assert bass.channel == 1
        assert bass.notes[0].pitch == 36
        assert piano.tempo == bass.tempo == 90

    def test_unknown_instrument_falls_back_to_piano(self) -> None:
        doc = SequenceInput.model_validate({
            "instrument": "theremin",
            "notes": [{"pitch": "A4", "duration": 1, "velocity": 70}],
        })
        assert doc.to_sequences()[0].instrument == 0

    def test_bad_pitch_propagates(self) -> None:
        doc = SequenceInput.model_validate({"notes": [{"pitch": "H2", "duration": 1, "velocity": 70}]})
        with pytest.raises(BadPitchError):
            doc.to_sequences()

    def test_empty_document(self) -> None:
        assert SequenceInput.model_validate({}).to_sequences() == []

    @pytest.mark.parametrize("tempo", [0, -120, 3, 1001])
    def test_unwritable_tempo_is_invalid(self, tempo: int) -> None:
        with pytest.raises(ValidationError):
            SequenceInput.model_validate({"tempo": tempo, "notes": [{"pitch": "C4", "duration": 1, "velocity": 80}]})


@pytest.mark.parametrize(
    "fields",
    [
        {"duration": 0},
        {"duration": -1},
        {"duration": "nan"},
        {"duration": 1, "offset": -1},
    ],
)
def test_note_input_rejects_bad_timing(fields: dict) -> None:
    with pytest.raises(ValidationError):
        NoteInput.model_validate({"pitch": "C4", "velocity": 80, **fields})


def test_check_tempo_bounds() -> None:
    assert check_tempo(MIN_SEQUENCE_TEMPO) == MIN_SEQUENCE_TEMPO
    assert check_tempo(MAX_SEQUENCE_TEMPO) == MAX_SEQUENCE_TEMPO
    with pytest.raises(BadTempoError):
        check_tempo(0)
