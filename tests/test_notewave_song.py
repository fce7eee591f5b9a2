from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from notewave.errors import DataFormatError, ResourceUnavailableError
from notewave.song import NoteEvent, Song, load_song, parse_song, save_song

EXAMPLE_SONG = Path(__file__).resolve().parents[1] / "examples" / "piano_arpeggio.json"


def _packet(**overrides: Any) -> dict[str, Any]:
    packet: dict[str, Any] = {
        "pitch": 60,
        "instrument": "Sine",
        "note_status": "On",
        "note_delta": 0.0,
        "velocity": 1.0,
    }
    packet.update(overrides)
    return packet


def _document(*packets: dict[str, Any], bpm: float = 120.0) -> str:
    return json.dumps(
        {"songname": "Test", "artist": "Nobody", "bpm": bpm, "packets": list(packets)}
    )


def test_example_song_loads() -> None:
    song = load_song(EXAMPLE_SONG)
    assert song.songname == "Piano Arpeggio"
    assert song.bpm == 96.0
    assert song.packets[1] == NoteEvent(
        pitch=60, instrument="Piano", note_status="On", note_delta=0.0, velocity=0.8
    )


def test_save_and_load_round_trip(tmp_path: Path) -> None:
    song = Song(
        songname="Round Trip",
        artist="Tester",
        bpm=90.0,
        packets=(
            NoteEvent(pitch=64, instrument="Saw", note_status="On", note_delta=0.0, velocity=0.5),
            NoteEvent(pitch=64, instrument="Saw", note_status="Off", note_delta=1.5, velocity=0.5),
        ),
    )
    path = save_song(song, tmp_path / "song.json")
    assert load_song(path) == song


def test_missing_song_is_resource_unavailable(tmp_path: Path) -> None:
    with pytest.raises(ResourceUnavailableError):
        load_song(tmp_path / "nope.json")


def test_invalid_json_is_data_format_error() -> None:
    with pytest.raises(DataFormatError):
        parse_song("{not json")


@pytest.mark.parametrize(
    "packet",
    [
        _packet(instrument="Banjo"),
        _packet(note_status="Held"),
        _packet(note_delta=-0.5),
        _packet(pitch=256),
        _packet(velocity="loud"),
        {"pitch": 60, "instrument": "Sine", "note_status": "On", "velocity": 1.0},
    ],
)
def test_malformed_packet_is_data_format_error(packet: dict[str, Any]) -> None:
    with pytest.raises(DataFormatError):
        parse_song(_document(packet))


def test_non_positive_bpm_is_data_format_error() -> None:
    with pytest.raises(DataFormatError):
        parse_song(_document(_packet(), bpm=0.0))


def test_out_of_range_values_are_accepted() -> None:
    song = parse_song(_document(_packet(pitch=200, velocity=1.5)))
    assert song.packets[0].pitch == 200
    assert song.packets[0].velocity == 1.5


def test_events_are_immutable() -> None:
    event = NoteEvent(**_packet())
    with pytest.raises(ValidationError):
        event.pitch = 61  # type: ignore[misc]


def test_non_utf8_song_is_data_format_error(tmp_path: Path) -> None:
    path = tmp_path / "song.json"
    path.write_bytes(b'{"songname": "\xff", "artist": "Nobody", "bpm": 120, "packets": []}')
    with pytest.raises(DataFormatError):
        load_song(path)


@pytest.mark.parametrize("field", ["note_delta", "velocity"])
def test_non_finite_event_values_are_rejected(field: str) -> None:
    with pytest.raises(ValidationError):
        NoteEvent(**_packet(**{field: float("inf")}))
    with pytest.raises(ValidationError):
        NoteEvent(**_packet(**{field: float("nan")}))


def test_overflowing_numbers_are_data_format_error() -> None:
    document = _document(_packet()).replace('"note_delta": 0.0', '"note_delta": 1e999')
    with pytest.raises(DataFormatError):
        parse_song(document)
    with pytest.raises(DataFormatError):
        parse_song(_document(_packet()).replace('"bpm": 120.0', '"bpm": 1e999'))
