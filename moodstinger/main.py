#!/usr/bin/env python3
"""
moodstinger - Mood Stinger Generator

Command line entry point. Composes short multi-layer pieces from a mood and
a seed, writes them as MIDI, and optionally renders WAV audio via FluidSynth.

Usage:
    moodstinger <command> [options]
    python run.py <command> [options]

Commands:
    generate     Write explicit notes (token list or JSON) to a MIDI file
    preset       Compose a stinger from a mood
    render       Render an existing MIDI file to WAV
    instruments  List instrument names
    moods        List moods, aliases and default keys
    info         Summarize a MIDI file
    presets      Manage saved presets
    melodies     Manage saved melodies
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from . import __version__
from .errors import StingerError, UnknownInstrumentError
from .harmony import Key
from .logging_utils import configure_logging, debug_enabled, log_exception
from .moods import Mood, PresetConfig, generate_mood
from .note import parse_notes
from .render import render_wav
from .sequence import (
    INSTRUMENT_MAP,
    NoteSequence,
    SequenceInput,
    check_tempo,
    instrument_name,
    resolve_instrument,
)
from .store import PresetStore, SavedMelody, SavedPreset, parse_melody_notes, time_seed
from .writer import describe_midi, write_midi

_LOGGER = logging.getLogger("moodstinger.main")


EPILOG = """
Note Format:
  PITCH:DURATION:VELOCITY[@OFFSET]
  C4:1:80         Middle C, one beat, velocity 80
  F#3:0.5:100@2   F# below middle C, half a beat, at beat 2

Moods:
  suspense, eerie, upbeat, calm, ambient, jazz

Examples:
  moodstinger generate --notes "C4:1:80,E4:1:80,G4:2:90" -o chord.mid
  moodstinger preset -m suspense -d 5 -o intro.wav
  moodstinger preset -m jazz -k Bb --intensity 70 -s 7 -o outro.mid
  moodstinger presets save creepy-intro -m eerie -d 6 -s 12
  moodstinger presets play creepy-intro -o creepy.wav
"""


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="moodstinger",
        description="moodstinger - Mood Stinger Generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"moodstinger {__version__}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    # generate
    gen = commands.add_parser("generate", help="Write explicit notes to a MIDI file")
    source = gen.add_mutually_exclusive_group(required=True)
    source.add_argument("-n", "--notes", help="Comma-separated note tokens")
    source.add_argument(
        "--json", nargs="?", const="-", metavar="FILE",
        help="Read a JSON sequence from FILE, or stdin when omitted",
    )
    gen.add_argument("-i", "--instrument", default="piano", help="Instrument name or program (default: piano)")
    gen.add_argument("-t", "--tempo", type=int, default=120, help="Tempo in BPM (default: 120)")
    _add_output_args(gen)
    gen.set_defaults(func=cmd_generate)

    # preset
    pre = commands.add_parser("preset", help="Compose a stinger from a mood")
    _add_mood_args(pre, seed_default=1)
    _add_output_args(pre)
    pre.set_defaults(func=cmd_preset)

    # render
    ren = commands.add_parser("render", help="Render a MIDI file to WAV")
    ren.add_argument("-i", "--input", required=True, type=Path, help="Input MIDI file")
    ren.add_argument("-o", "--output", required=True, type=Path, help="Output WAV file")
    ren.add_argument("--soundfont", type=Path, default=None, help="SoundFont (.sf2) to use")
    ren.set_defaults(func=cmd_render)

    commands.add_parser("instruments", help="List instrument names").set_defaults(func=cmd_instruments)
    commands.add_parser("moods", help="List moods").set_defaults(func=cmd_moods)

    info = commands.add_parser("info", help="Summarize a MIDI file")
    info.add_argument("file", type=Path)
    info.set_defaults(func=cmd_info)

    # presets
    presets = commands.add_parser("presets", help="Manage saved presets")
    preset_commands = presets.add_subparsers(dest="action", required=True)
    preset_commands.add_parser("list", help="List saved presets").set_defaults(func=cmd_presets_list)
    save = preset_commands.add_parser("save", help="Save or replace a preset")
    save.add_argument("name")
    _add_mood_args(save, seed_default=1)
    save.set_defaults(func=cmd_presets_save)
    show = preset_commands.add_parser("show", help="Show a preset")
    show.add_argument("name")
    show.set_defaults(func=cmd_presets_show)
    delete = preset_commands.add_parser("delete", help="Delete a preset")
    delete.add_argument("name")
    delete.set_defaults(func=cmd_presets_delete)
    play = preset_commands.add_parser("play", help="Generate a saved preset")
    play.add_argument("name")
    _add_output_args(play)
    play.set_defaults(func=cmd_presets_play)

    # melodies
    melodies = commands.add_parser("melodies", help="Manage saved melodies")
    melody_commands = melodies.add_subparsers(dest="action", required=True)
    melody_commands.add_parser("list", help="List saved melodies").set_defaults(func=cmd_melodies_list)
    msave = melody_commands.add_parser("save", help="Save or replace a melody")
    msave.add_argument("name")
    msave.add_argument(
        "-n", "--notes", required=True,
        help="Comma-separated PITCH:DURATION:VELOCITY tokens; rest:DURATION for rests",
    )
    msave.add_argument("-i", "--instrument", default="piano", help="Instrument name or program (default: piano)")
    msave.add_argument("-t", "--tempo", type=int, default=120, help="Tempo in BPM (default: 120)")
    msave.set_defaults(func=cmd_melodies_save)
    mdelete = melody_commands.add_parser("delete", help="Delete a melody")
    mdelete.add_argument("name")
    mdelete.set_defaults(func=cmd_melodies_delete)
    mplay = melody_commands.add_parser("play", help="Write a saved melody")
    mplay.add_argument("name")
    _add_output_args(mplay)
    mplay.set_defaults(func=cmd_melodies_play)

    return parser


def _add_output_args(parser: argparse.ArgumentParser):
    parser.add_argument(
        "-o", "--output", required=True, type=Path,
        help="Output file; a .wav path writes the .mid next to it and renders it",
    )
    parser.add_argument("--soundfont", type=Path, default=None, help="SoundFont (.sf2) for WAV output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print layer details")


def _add_mood_args(parser: argparse.ArgumentParser, seed_default: int):
    parser.add_argument("-m", "--mood", required=True, help="Mood name or alias")
    parser.add_argument("-d", "--duration", type=float, default=5.0, help="Duration in seconds (default: 5)")
    parser.add_argument("-k", "--key", default=None, help="Key, e.g. Am, C, Eb (default: the mood's key)")
    parser.add_argument("--intensity", type=int, default=50, help="Intensity 0-100 (default: 50)")
    parser.add_argument("-t", "--tempo", type=int, default=90, help="Base tempo in BPM (default: 90)")
    parser.add_argument(
        "-s", "--seed", type=int, default=seed_default,
        help=f"Variation seed; 0 or below picks one from the clock (default: {seed_default})",
    )


# =========================================================================
# OUTPUT
# =========================================================================

def write_output(
    sequences: Sequence[NoteSequence],
    output: Path,
    soundfont: Optional[Path] = None,
    target_duration: Optional[float] = None,
) -> Path:
    """
    Write sequences to ``output``.

    A ``.wav`` output writes the MIDI file beside it first, then renders.
    """
    if output.suffix.lower() != ".wav":
        write_midi(sequences, output)
        print(f"Wrote {output}")
        return output

    midi_path = output.with_suffix(".mid")
    _LOGGER.debug("Writing %s before rendering %s", midi_path, output)
    write_midi(sequences, midi_path)
    print(f"Wrote {midi_path}")
    render_wav(midi_path, output, soundfont, target_duration)
    print(f"Rendered {output}")
    return output


def print_layers(sequences: Sequence[NoteSequence]):
    for i, seq in enumerate(sequences, 1):
        print(
            f"  Layer {i}: {instrument_name(seq.instrument)} ({seq.instrument}) "
            f"ch {seq.channel}, {len(seq)} notes, {seq.duration_beats():.2f} beats"
        )
        for note in seq.notes[:8]:
            print(f"    {note.to_token()}")
        if len(seq) > 8:
            print(f"    ... {len(seq) - 8} more")


def _resolve_program(name: str) -> int:
    program = resolve_instrument(name)
    if program is None:
        raise UnknownInstrumentError(name, [n for n, _ in INSTRUMENT_MAP])
    return program


def _read_json(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as exc:
        raise StingerError(f"Cannot read {source}: {exc}") from exc


def _stinger(mood_name: str, duration: float, key_name: Optional[str], intensity: int, tempo: int, seed: int):
    """Resolve CLI mood settings, replacing a non-positive seed with a fresh one."""
    mood = Mood.parse(mood_name)
    key = Key.parse(key_name) if key_name else mood.default_key
    if seed <= 0:
        seed = time_seed()
        print(f"Using seed {seed}")
    config = PresetConfig(duration_secs=duration, key=key, intensity=intensity, seed=seed, tempo=tempo)
    return mood, config


def _compose(mood: Mood, config: PresetConfig, args: argparse.Namespace):
    sequences = generate_mood(mood, config)
    print(
        f"{mood.value} in {config.key.value}, {config.duration_secs:g}s, "
        f"intensity {config.intensity}, seed {config.seed}: {len(sequences)} layers"
    )
    if args.verbose:
        print_layers(sequences)
    write_output(sequences, args.output, args.soundfont, config.duration_secs)


# =========================================================================
# COMMANDS
# =========================================================================

def cmd_generate(args: argparse.Namespace):
    if args.json is not None:
        sequences = SequenceInput.model_validate_json(_read_json(args.json)).to_sequences()
    else:
        program = _resolve_program(args.instrument)
        sequences = [NoteSequence(parse_notes(args.notes), program, tempo=check_tempo(args.tempo))]

    if args.verbose:
        print_layers(sequences)
    write_output(sequences, args.output, args.soundfont)


def cmd_preset(args: argparse.Namespace):
    mood, config = _stinger(args.mood, args.duration, args.key, args.intensity, args.tempo, args.seed)
    _compose(mood, config, args)


def cmd_render(args: argparse.Namespace):
    render_wav(args.input, args.output, args.soundfont)
    print(f"Rendered {args.output}")


def cmd_instruments(args: argparse.Namespace):
    print("Instruments (name: GM program):")
    for name, program in INSTRUMENT_MAP:
        print(f"  {name:<20} {program}")
    print("\nAny program number 0-127 is also accepted.")


def cmd_moods(args: argparse.Namespace):
    print("Moods:")
    for mood in Mood:
        aliases = ", ".join(mood.aliases)
        print(f"  {mood.value:<10} key {mood.default_key.value:<4} ({aliases})")
        print(f"             {mood.description}")


def cmd_info(args: argparse.Namespace):
    info = describe_midi(args.file)
    print(f"File:            {args.file}")
    print(f"Format:          {info.format_type}")
    print(f"Ticks per beat:  {info.ticks_per_beat}")
    if info.tempo_bpm is not None:
        print(f"Tempo:           {info.tempo_bpm:.1f} BPM")
    print(f"Length:          {info.length_seconds:.2f}s")
    print(f"Tracks:          {len(info.track_event_counts)}")
    for i, count in enumerate(info.track_event_counts):
        print(f"  Track {i}: {count} events")


def cmd_presets_list(args: argparse.Namespace):
    presets = PresetStore().list_presets()
    if not presets:
        print("No saved presets.")
        return
    for p in presets:
        key = p.key or "default"
        print(f"  {p.name:<20} {p.mood:<9} {p.duration:g}s key {key} intensity {p.intensity} seed {p.seed}")


def cmd_presets_save(args: argparse.Namespace):
    mood = Mood.parse(args.mood)
    key = Key.parse(args.key).value if args.key else None
    preset = SavedPreset(
        name=args.name,
        mood=mood.value,
        duration=args.duration,
        key=key,
        intensity=args.intensity,
        tempo=args.tempo,
        seed=args.seed,
    )
    # Reject settings that could never generate
    preset.to_config()
    PresetStore().save_preset(preset)
    print(f"Saved preset {args.name}")


def cmd_presets_show(args: argparse.Namespace):
    print(PresetStore().get_preset(args.name).model_dump_json(indent=2))


def cmd_presets_delete(args: argparse.Namespace):
    PresetStore().delete_preset(args.name)
    print(f"Deleted preset {args.name}")


def cmd_presets_play(args: argparse.Namespace):
    store = PresetStore()
    mood, config = store.get_preset(args.name).to_config()
    _compose(mood, config, args)
    store.mark_generated(args.name)


def cmd_melodies_list(args: argparse.Namespace):
    melodies = PresetStore().list_melodies()
    if not melodies:
        print("No saved melodies.")
        return
    for m in melodies:
        print(f"  {m.name:<20} {m.instrument:<16} {m.tempo} BPM, {len(m.notes)} notes")


def cmd_melodies_save(args: argparse.Namespace):
    _resolve_program(args.instrument)
    melody = SavedMelody(
        name=args.name,
        instrument=args.instrument,
        tempo=args.tempo,
        notes=parse_melody_notes(args.notes),
    )
    melody.to_sequence()
    PresetStore().save_melody(melody)
    print(f"Saved melody {args.name}")


def cmd_melodies_delete(args: argparse.Namespace):
    PresetStore().delete_melody(args.name)
    print(f"Deleted melody {args.name}")


def cmd_melodies_play(args: argparse.Namespace):
    sequence = PresetStore().get_melody(args.name).to_sequence()
    if args.verbose:
        print_layers([sequence])
    write_output([sequence], args.output, args.soundfont)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for moodstinger. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    try:
        args.func(args)
    except StingerError as e:
        print(f"Error: {e}", file=sys.stderr)
        if debug_enabled():
            log_exception(args.command, e)
        return 1
    except ValidationError as e:
        print(f"Invalid settings:\n{e}", file=sys.stderr)
        return 1
    except Exception as e:
        path = log_exception(args.command, e)
        print(f"Unexpected error: {e}", file=sys.stderr)
        if path is not None:
            print(f"Details written to {path}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
