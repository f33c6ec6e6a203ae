"""
MIDI writer for moodstinger.

Encodes note sequences as a type 1 Standard MIDI File at 480 ticks per
quarter note. Track 0 carries tempo and time signature; every sequence gets
its own track with a program change followed by its note events.
"""

from dataclasses import dataclass
import io
import logging
import os
from typing import BinaryIO, Optional, Sequence, Union

import mido

from .errors import EmptySequencesError, MidiWriteError, StingerError
from .sequence import NoteSequence, check_tempo

_LOGGER = logging.getLogger("moodstinger.writer")

TICKS_PER_BEAT = 480

Destination = Union[str, os.PathLike, BinaryIO]


def beats_to_ticks(beats: float) -> int:
    """Convert beats to ticks, rounding to the nearest tick."""
    return round(beats * TICKS_PER_BEAT)


def ticks_to_beats(ticks: int) -> float:
    return ticks / TICKS_PER_BEAT


def _tempo_track(bpm: int) -> mido.MidiTrack:
    track = mido.MidiTrack()
    track.append(mido.MetaMessage("set_tempo", tempo=60_000_000 // bpm, time=0))
    track.append(mido.MetaMessage(
        "time_signature",
        numerator=4,
        denominator=4,
        clocks_per_click=24,
        notated_32nd_notes_per_beat=8,
        time=0,
    ))
    track.append(mido.MetaMessage("end_of_track", time=0))
    return track


def _note_events(sequence: NoteSequence) -> list[tuple[int, bool, int, int]]:
    """
    Return ``(tick, is_on, pitch, velocity)`` for every note start and end.

    Sorted by tick; at equal ticks note-offs come first so a repeated pitch
    is released before it is struck again.
    """
    events = []
    for note in sequence.notes:
        start = beats_to_ticks(note.offset)
        end = beats_to_ticks(note.offset + note.duration)
        events.append((start, True, note.pitch, note.velocity))
        events.append((end, False, note.pitch, 0))
    events.sort(key=lambda event: (event[0], event[1]))
    return events


def _sequence_track(sequence: NoteSequence) -> mido.MidiTrack:
    channel = sequence.channel
    track = mido.MidiTrack()
    track.append(mido.Message("program_change", program=sequence.instrument, channel=channel, time=0))

    last_tick = 0
    for tick, is_on, pitch, velocity in _note_events(sequence):
        delta = max(0, tick - last_tick)
        kind = "note_on" if is_on else "note_off"
        track.append(mido.Message(kind, note=pitch, velocity=velocity, channel=channel, time=delta))
        last_tick = max(last_tick, tick)

    track.append(mido.MetaMessage("end_of_track", time=0))
    return track


def build_midi_file(sequences: Sequence[NoteSequence]) -> mido.MidiFile:
    """
    Build a type 1 MIDI file from one or more sequences.

    The tempo is taken from the first sequence.

    Raises:
        EmptySequencesError: If ``sequences`` is empty.
        BadTempoError: If the first sequence's tempo cannot be encoded.
    """
    if not sequences:
        raise EmptySequencesError()

    midi = mido.MidiFile(type=1, ticks_per_beat=TICKS_PER_BEAT)
    midi.tracks.append(_tempo_track(check_tempo(sequences[0].tempo)))
    for sequence in sequences:
        midi.tracks.append(_sequence_track(sequence))
    return midi


def midi_bytes(sequences: Sequence[NoteSequence]) -> bytes:
    """Serialize sequences to SMF bytes in memory."""
    buffer = io.BytesIO()
    build_midi_file(sequences).save(file=buffer)
    return buffer.getvalue()


def write_midi(sequences: Sequence[NoteSequence], destination: Destination):
    """
    Write sequences as a MIDI file.

    The whole file is encoded in memory first and written in one call, so a
    failed encode never leaves a partial file behind.

    Args:
        sequences: Sequences to write, one track each.
        destination: A filesystem path or a binary file object.

    Raises:
        EmptySequencesError: If ``sequences`` is empty.
        BadTempoError: If the first sequence's tempo cannot be encoded.
        MidiWriteError: If the destination cannot be written.
    """
    data = midi_bytes(sequences)

    try:
        if hasattr(destination, "write"):
            destination.write(data)
        else:
            with open(destination, "wb") as f:
                f.write(data)
    except OSError as exc:
        raise MidiWriteError(f"Failed to write MIDI file: {exc}") from exc

    _LOGGER.debug("Wrote %d bytes, %d tracks", len(data), len(sequences) + 1)


def write_midi_single(sequence: NoteSequence, destination: Destination):
    """Write one sequence as a MIDI file."""
    write_midi([sequence], destination)


# =========================================================================
# INSPECTION
# =========================================================================

@dataclass
class MidiInfo:
    """
    Summary of a MIDI file.

    Attributes:
        format_type: SMF format (0, 1 or 2).
        ticks_per_beat: Timing resolution.
        track_event_counts: Number of events in each track.
        tempo_bpm: First tempo found, or None if the file sets none.
        length_seconds: Playing time.
    """

    format_type: int
    ticks_per_beat: int
    track_event_counts: list[int]
    tempo_bpm: Optional[float]
    length_seconds: float


def describe_midi(path: Union[str, os.PathLike]) -> MidiInfo:
    """
    Read a MIDI file and summarize it.

    Raises:
        StingerError: If the file cannot be read or parsed.
    """
    try:
        midi = mido.MidiFile(path)
    except (OSError, EOFError, ValueError) as exc:
        raise StingerError(f"Failed to read MIDI file {path}: {exc}") from exc

    tempo_bpm = None
    for track in midi.tracks:
        for message in track:
            if message.type == "set_tempo":
                tempo_bpm = mido.tempo2bpm(message.tempo)
                break
        if tempo_bpm is not None:
            break

    return MidiInfo(
        format_type=midi.type,
        ticks_per_beat=midi.ticks_per_beat,
        track_event_counts=[len(track) for track in midi.tracks],
        tempo_bpm=tempo_bpm,
        length_seconds=midi.length,
    )
