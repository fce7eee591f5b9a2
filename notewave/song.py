from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import DataFormatError, ResourceUnavailableError

_LOGGER = logging.getLogger("notewave.song")

Instrument = Literal["Sine", "Square", "Triangle", "Saw", "Piano"]
NoteStatus = Literal["On", "Off"]


class NoteEvent(BaseModel):
    """One On or Off record in the timeline.

    ``note_delta`` is measured in beats since the previous event, whatever
    that event's status. Pitches above 127 are accepted but fall outside the
    musical range.
    """

    pitch: int = Field(ge=0, le=255)
    instrument: Instrument
    note_status: NoteStatus
    note_delta: float = Field(ge=0.0, allow_inf_nan=False)
    velocity: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def is_on(self) -> bool:
        return self.note_status == "On"

    def matches_off(self, other: "NoteEvent") -> bool:
        return (
            other.note_status == "Off"
            and other.pitch == self.pitch
            and other.instrument == self.instrument
        )


class Song(BaseModel):
    songname: str
    artist: str
    bpm: float = Field(gt=0.0, allow_inf_nan=False)
    packets: tuple[NoteEvent, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")


def parse_song(text: str | bytes) -> Song:
    try:
        return Song.model_validate_json(text)
    except ValidationError as exc:
        raise DataFormatError(f"Malformed song document: {exc}") from exc


def load_song(path: str | Path) -> Song:
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise ResourceUnavailableError(f"Cannot read song {source}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise DataFormatError(f"Song {source} is not UTF-8 text: {exc}") from exc
    song = parse_song(text)
    _LOGGER.debug("Loaded song %r (%d events) from %s", song.songname, len(song.packets), source)
    return song


def save_song(song: Song, path: str | Path) -> Path:
    target = Path(path)
    payload = song.model_dump(mode="json")
    target.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return target
