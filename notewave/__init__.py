from __future__ import annotations

from .audio import (
    SAMPLE_RATE,
    add_note,
    ensure_audio_contract,
    normalize_peak,
    write_sample_dump,
    write_wav,
)
from .config import SynthConfig
from .errors import (
    ConfigurationError,
    DataFormatError,
    NoteWaveError,
    PlaybackError,
    ResourceUnavailableError,
)
from .logging_utils import configure_logging as _configure_logging
from .overtones import OvertoneTable, get_overtone_table, load_overtone_table
from .pairing import ResolvedNote, find_sustain, iter_notes
from .render import Audio, render_song, synthesize_song
from .song import Instrument, NoteEvent, NoteStatus, Song, load_song, save_song
from .synth import pitch_to_frequency, synthesize
from .timing import beats_to_samples, song_duration

__all__ = [
    "SAMPLE_RATE",
    "Audio",
    "ConfigurationError",
    "DataFormatError",
    "Instrument",
    "NoteEvent",
    "NoteStatus",
    "NoteWaveError",
    "OvertoneTable",
    "PlaybackError",
    "ResolvedNote",
    "ResourceUnavailableError",
    "Song",
    "SynthConfig",
    "add_note",
    "beats_to_samples",
    "ensure_audio_contract",
    "find_sustain",
    "get_overtone_table",
    "iter_notes",
    "load_overtone_table",
    "load_song",
    "normalize_peak",
    "pitch_to_frequency",
    "render_song",
    "save_song",
    "song_duration",
    "synthesize",
    "synthesize_song",
    "write_sample_dump",
    "write_wav",
]

__version__ = "0.1.0"

_configure_logging()
del _configure_logging
