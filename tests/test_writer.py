import io

import mido
import pytest

from moodstinger.errors import BadTempoError, EmptySequencesError, MidiWriteError, StingerError
from moodstinger.note import Note
from moodstinger.sequence import NoteSequence
from moodstinger.writer import (
    TICKS_PER_BEAT,
    beats_to_ticks,
    describe_midi,
    midi_bytes,
    ticks_to_beats,
    write_midi,
    write_midi_single,
)


def _parse(data: bytes) -> mido.MidiFile:
    return mido.MidiFile(file=io.BytesIO(data))


def _channel_messages(track: mido.MidiTrack) -> list[mido.Message]:
    return [msg for msg in track if not msg.is_meta]


def test_tick_conversion() -> None:
    assert beats_to_ticks(1.0) == 480
    assert beats_to_ticks(0.25) == 120
    assert beats_to_ticks(1 / 3) == 160
    for beats in (0.0, 0.125, 0.5, 1.0, 2.75, 16.0):
        assert ticks_to_beats(beats_to_ticks(beats)) == pytest.approx(beats, abs=1 / TICKS_PER_BEAT)


def test_header_and_track_count() -> None:
    sequences = [
        NoteSequence([Note(60, 1.0)]),
        NoteSequence([Note(36, 2.0)], instrument=33, channel=1),
    ]
    data = midi_bytes(sequences)
    assert data[:4] == b"MThd"
    assert data[8:10] == b"\x00\x01"
    assert data[10:12] == (3).to_bytes(2, "big")
    assert data[12:14] == (TICKS_PER_BEAT).to_bytes(2, "big")

    midi = _parse(data)
    assert midi.type == 1
    assert len(midi.tracks) == len(sequences) + 1


def test_tempo_track() -> None:
    midi = _parse(midi_bytes([NoteSequence([Note(60, 1.0)], tempo=90)]))
    meta = {msg.type: msg for msg in midi.tracks[0]}
    assert meta["set_tempo"].tempo == 60_000_000 // 90
    assert meta["time_signature"].numerator == 4
    assert meta["time_signature"].denominator == 4
    assert "end_of_track" in meta


def test_program_change_and_channel() -> None:
    midi = _parse(midi_bytes([NoteSequence([Note(40, 1.0)], instrument=33, channel=1)]))
    first = _channel_messages(midi.tracks[1])[0]
    assert first.type == "program_change"
    assert first.program == 33
    assert first.channel == 1
    assert midi.tracks[1][-1].type == "end_of_track"


def test_note_off_precedes_note_on_at_same_tick() -> None:
    seq = NoteSequence([Note(60, 1.0, 80, 1.0), Note(60, 1.0, 90, 0.0)])
    messages = _channel_messages(_parse(midi_bytes([seq])).tracks[1])

    assert [m.type for m in messages] == [
        "program_change", "note_on", "note_off", "note_on", "note_off",
    ]
    assert [m.time for m in messages] == [0, 0, 480, 0, 480]
    assert messages[1].velocity == 90
    assert messages[2].velocity == 0


def test_unsorted_notes_get_non_negative_deltas() -> None:
    seq = NoteSequence([Note(67, 0.5, 80, 3.0), Note(60, 4.0, 80, 0.0), Note(64, 1.0, 80, 1.5)])
    messages = _channel_messages(_parse(midi_bytes([seq])).tracks[1])
    assert all(m.time >= 0 for m in messages)
    onsets = []
    tick = 0
    for m in messages:
        tick += m.time
        if m.type == "note_on":
            onsets.append((tick, m.note))
    assert onsets == [(0, 60), (720, 64), (1440, 67)]


def test_empty_sequences_rejected(tmp_path) -> None:
    target = tmp_path / "empty.mid"
    with pytest.raises(EmptySequencesError):
        write_midi([], target)
    assert not target.exists()
    with pytest.raises(MidiWriteError):
        midi_bytes([])


def test_empty_sequence_still_gets_track() -> None:
    midi = _parse(midi_bytes([NoteSequence()]))
    assert len(midi.tracks) == 2
    assert [m.type for m in _channel_messages(midi.tracks[1])] == ["program_change"]


def test_write_to_path_and_file_object(tmp_path) -> None:
    sequences = [NoteSequence([Note(60, 1.0), Note(64, 1.0, 80, 1.0)])]
    path = tmp_path / "out.mid"
    write_midi(sequences, path)
    assert path.read_bytes() == midi_bytes(sequences)

    buffer = io.BytesIO()
    write_midi(sequences, buffer)
    assert buffer.getvalue() == midi_bytes(sequences)

    single = tmp_path / "single.mid"
    write_midi_single(sequences[0], str(single))
    assert single.read_bytes() == path.read_bytes()


def test_unwritable_destination(tmp_path) -> None:
    with pytest.raises(MidiWriteError) as excinfo:
        write_midi([NoteSequence([Note(60, 1.0)])], tmp_path / "missing" / "out.mid")
    assert isinstance(excinfo.value.__cause__, OSError)


def test_describe_midi(tmp_path) -> None:
    path = tmp_path / "song.mid"
    write_midi([NoteSequence([Note(60, 2.0)], tempo=120), NoteSequence([Note(48, 4.0)])], path)

    info = describe_midi(path)
    assert info.format_type == 1
    assert info.ticks_per_beat == 480
    assert len(info.track_event_counts) == 3
    assert info.tempo_bpm == pytest.approx(120.0)
    assert info.length_seconds == pytest.approx(2.0)


def test_describe_midi_bad_file(tmp_path) -> None:
    path = tmp_path / "junk.mid"
    path.write_bytes(b"not a midi file")
    with pytest.raises(StingerError):
        describe_midi(path)
    with pytest.raises(StingerError):
        describe_midi(tmp_path / "absent.mid")


@pytest.mark.parametrize("tempo", [0, 3, -5, 1001])
def test_unencodable_tempo_is_rejected(tempo: int) -> None:
    with pytest.raises(BadTempoError) as excinfo:
        midi_bytes([NoteSequence([Note(60, 1.0)], tempo=tempo)])
    assert isinstance(excinfo.value, StingerError)
    assert excinfo.value.tempo == tempo


def test_slowest_tempo_is_written() -> None:
    midi = _parse(midi_bytes([NoteSequence([Note(60, 1.0)], tempo=4)]))
    tempos = [msg.tempo for msg in midi.tracks[0] if msg.type == "set_tempo"]
    assert tempos == [15_000_000]
