"""
Audio rendering for moodstinger.

Turns a MIDI file into a WAV file by running FluidSynth with a General MIDI
SoundFont, then optionally trims the reverb tail with ffmpeg.
"""

import logging
import os
from pathlib import Path
import shutil
import subprocess
from typing import Optional, Union

from .errors import RenderError, ToolNotFoundError

_LOGGER = logging.getLogger("moodstinger.render")

SOUNDFONT_ENV = "MOODSTINGER_SOUNDFONT"

FLUIDSYNTH_PATHS = (
    "/opt/homebrew/bin/fluidsynth",
    "/usr/local/bin/fluidsynth",
    "/usr/bin/fluidsynth",
)

SOUNDFONT_PATHS = (
    # Project local
    "./soundfonts/FluidR3_GM.sf2",
    "./soundfonts/GeneralUser_GS.sf2",
    "./soundfonts/MuseScore_General.sf2",
    "./soundfonts/default.sf2",
    # macOS Homebrew
    "/opt/homebrew/share/sounds/sf2/FluidR3_GM.sf2",
    "/opt/homebrew/share/soundfonts/default.sf2",
    "/usr/local/share/soundfonts/default.sf2",
    # Linux
    "/usr/share/sounds/sf2/FluidR3_GM.sf2",
    "/usr/share/soundfonts/FluidR3_GM.sf2",
    "/usr/share/soundfonts/default.sf2",
    "/usr/share/soundfonts/freepats-general-midi.sf2",
)

FADE_SECONDS = 0.5
DEFAULT_SAMPLE_RATE = 44100

PathLike = Union[str, os.PathLike]


def find_fluidsynth() -> str:
    """
    Locate the FluidSynth executable.

    Raises:
        ToolNotFoundError: With install hints if FluidSynth is missing.
    """
    found = shutil.which("fluidsynth")
    if found:
        return found
    for path in FLUIDSYNTH_PATHS:
        if os.path.isfile(path):
            return path
    raise ToolNotFoundError(
        "FluidSynth not found. Install with:\n"
        "  macOS: brew install fluid-synth\n"
        "  Ubuntu: apt install fluidsynth"
    )


def find_soundfont(explicit: Optional[PathLike] = None) -> Path:
    """
    Locate a General MIDI SoundFont.

    Checks ``explicit`` first, then $MOODSTINGER_SOUNDFONT, then well-known
    install locations.

    Raises:
        ToolNotFoundError: If no candidate exists.
    """
    candidates = []
    if explicit:
        candidates.append(explicit)
    configured = os.environ.get(SOUNDFONT_ENV)
    if configured:
        candidates.append(configured)
    candidates.extend(SOUNDFONT_PATHS)

    for candidate in candidates:
        path = Path(candidate).expanduser()
        if path.is_file():
            return path

    raise ToolNotFoundError(
        "No SoundFont found. Install FluidR3_GM or pass --soundfont.\n"
        "  macOS: brew install fluid-synth (includes SoundFont)\n"
        "  Ubuntu: apt install fluid-soundfont-gm"
    )


def fluidsynth_command(
    fluidsynth: str,
    soundfont: PathLike,
    midi_path: PathLike,
    wav_path: PathLike,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> list[str]:
    # -F must come before the soundfont and MIDI file
    return [
        fluidsynth,
        "-ni",
        "-g", "1.0",
        "-r", str(sample_rate),
        "-F", str(wav_path),
        str(soundfont),
        str(midi_path),
    ]


def ffmpeg_trim_command(source: PathLike, target: PathLike, duration: float) -> list[str]:
    fade_start = max(0.0, duration - FADE_SECONDS)
    return [
        "ffmpeg",
        "-y",
        "-i", str(source),
        "-t", f"{duration:.2f}",
        "-af", f"afade=t=out:st={fade_start:.2f}:d={FADE_SECONDS:.2f}",
        str(target),
    ]


def render_wav(
    midi_path: PathLike,
    wav_path: PathLike,
    soundfont: Optional[PathLike] = None,
    target_duration: Optional[float] = None,
    sample_rate: int = DEFAULT_SAMPLE_RATE,
) -> Path:
    """
    Render a MIDI file to WAV.

    Args:
        midi_path: Input MIDI file.
        wav_path: Output WAV file.
        soundfont: SoundFont to use; searched for when None.
        target_duration: If given, trim to this many seconds with a short
            fade out. Without ffmpeg the untrimmed render is kept.
        sample_rate: Output sample rate in Hz.

    Returns:
        Path of the written WAV file.

    Raises:
        ToolNotFoundError: If FluidSynth or a SoundFont cannot be found.
        RenderError: If FluidSynth fails.
    """
    fluidsynth = find_fluidsynth()
    sf = find_soundfont(soundfont)
    wav_path = Path(wav_path)
    render_path = wav_path.with_suffix(".tmp.wav") if target_duration else wav_path

    command = fluidsynth_command(fluidsynth, sf, midi_path, render_path, sample_rate)
    _LOGGER.debug("Running %s", " ".join(command))
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError as exc:
        raise RenderError(f"Failed to run FluidSynth: {exc}") from exc
    if result.returncode != 0:
        raise RenderError(f"FluidSynth failed with status {result.returncode}: {result.stderr.strip()}")

    if target_duration:
        _trim(render_path, wav_path, target_duration)

    return wav_path


def _trim(render_path: Path, wav_path: Path, duration: float):
    """Trim ``render_path`` into ``wav_path``, keeping the untrimmed render on failure."""
    command = ffmpeg_trim_command(render_path, wav_path, duration)
    try:
        result = subprocess.run(command, capture_output=True, text=True)
    except OSError:
        _LOGGER.warning("ffmpeg not found, audio may be longer than requested")
        os.replace(render_path, wav_path)
        return

    if result.returncode != 0:
        _LOGGER.warning("ffmpeg trim failed, using untrimmed audio: %s", result.stderr.strip())
        os.replace(render_path, wav_path)
        return

    render_path.unlink(missing_ok=True)
