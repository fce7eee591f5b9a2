from __future__ import annotations

from collections.abc import Sequence

from .config import require_positive_bpm, require_positive_sample_rate
from .song import NoteEvent


def seconds_per_beat(bpm: float) -> float:
    return 60.0 / require_positive_bpm(bpm)


def beats_to_samples(delta_beats: float, bpm: float, sample_rate: int) -> int:
    """Convert a beat delta at ``bpm`` into a sample count, truncated toward zero."""
    rate = require_positive_sample_rate(sample_rate)
    return int(delta_beats * seconds_per_beat(bpm) * rate)


def song_duration(events: Sequence[NoteEvent], bpm: float, sample_rate: int) -> tuple[float, int]:
    """Total length as ``(seconds, samples)``.

    Sums every event's delta, not per-note sustains, so trailing Off events
    still extend the song.
    """
    rate = require_positive_sample_rate(sample_rate)
    beat = seconds_per_beat(bpm)
    seconds = sum((event.note_delta * beat for event in events), 0.0)
    return seconds, int(seconds * rate)
