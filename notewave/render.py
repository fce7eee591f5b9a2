from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import numpy as np
from numpy.typing import DTypeLike, NDArray
from pydantic import BaseModel, ConfigDict

from .audio import FloatArray, add_note, normalize_peak, write_sample_dump, write_wav
from .config import (
    SAMPLE_RATE,
    ConfigInput,
    coerce_config,
    require_positive_bpm,
    require_positive_sample_rate,
)
from .errors import PlaybackError
from .overtones import OvertoneTable, get_overtone_table
from .pairing import ResolvedNote, iter_notes
from .song import NoteEvent, Song
from .spinner import render_error
from .synth import synthesize
from .timing import song_duration

_LOGGER = logging.getLogger("notewave.render")


def _needs_overtones(notes: Sequence[ResolvedNote]) -> bool:
    return any(note.event.instrument == "Piano" for note in notes)


def synthesize_song(
    events: Sequence[NoteEvent],
    bpm: float,
    sample_rate: int = SAMPLE_RATE,
    *,
    config: ConfigInput = None,
) -> tuple[float, FloatArray]:
    """Render an event sequence to ``(duration_seconds, waveform)``.

    ``sample_rate`` wins over ``config.sample_rate``; the config only selects
    the piano model and its overtone table. Overtone resource errors surface
    before any note is rendered.
    """
    settings = coerce_config(config)
    require_positive_bpm(bpm)
    rate = require_positive_sample_rate(sample_rate)

    notes = list(iter_notes(events, bpm, rate))
    overtones: OvertoneTable | None = None
    if settings.piano_model == "overtone" and _needs_overtones(notes):
        overtones = get_overtone_table(settings.resolved_overtone_path())

    seconds, total = song_duration(events, bpm, rate)
    waveform: FloatArray = np.zeros(total, dtype=np.float32)

    for note in notes:
        samples = synthesize(
            note.event.pitch,
            note.event.instrument,
            note.event.velocity,
            note.sustain,
            rate,
            piano_model=settings.piano_model,
            overtones=overtones,
        )
        add_note(waveform, samples, note.start)

    _LOGGER.debug(
        "Rendered %d notes from %d events into %d samples (%.2fs)",
        len(notes),
        len(events),
        total,
        seconds,
    )
    return seconds, normalize_peak(waveform)


class Audio(BaseModel):
    samples: FloatArray
    sample_rate: int = SAMPLE_RATE
    duration: float = 0.0

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    def to_numpy(self) -> FloatArray:
        return self.samples

    def __array__(
        self, dtype: DTypeLike | None = None, copy: bool | None = None
    ) -> NDArray[np.generic]:
        return np.asarray(self.samples, dtype=dtype)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    def save(self, path: str | Path) -> Path:
        return write_wav(path, self.samples, sample_rate=self.sample_rate)

    def dump(self, path: str | Path) -> Path:
        return write_sample_dump(path, self.samples)

    def play(self) -> None:
        from .playback import play_audio

        try:
            play_audio(self.samples, sample_rate=self.sample_rate, duration=self.duration)
        except PlaybackError as exc:
            render_error("playback", exc)
            raise


def render_song(song: Song, config: ConfigInput = None) -> Audio:
    settings = coerce_config(config)
    duration, samples = synthesize_song(
        song.packets,
        song.bpm,
        settings.sample_rate,
        config=settings,
    )
    _LOGGER.info("Rendered %r by %s: %.2fs", song.songname, song.artist, duration)
    return Audio(samples=samples, sample_rate=settings.sample_rate, duration=duration)
