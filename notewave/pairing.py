from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .song import NoteEvent
from .timing import beats_to_samples

_LOGGER = logging.getLogger("notewave.pairing")


@dataclass(frozen=True)
class ResolvedNote:
    """An On event paired with its Off event, positioned in samples."""

    index: int
    event: NoteEvent
    start: int
    sustain: int


def find_sustain(
    events: Sequence[NoteEvent],
    index: int,
    bpm: float,
    sample_rate: int,
) -> int | None:
    """Samples between ``events[index]`` and the first matching Off after it.

    Pairing is not voice-aware: a repeated On of the same pitch and
    instrument resolves against the same first Off.
    """
    note = events[index]
    sustain = 0
    for position in range(index + 1, len(events)):
        candidate = events[position]
        sustain += beats_to_samples(candidate.note_delta, bpm, sample_rate)
        if note.matches_off(candidate):
            return sustain
    return None


def iter_notes(
    events: Sequence[NoteEvent],
    bpm: float,
    sample_rate: int,
) -> Iterator[ResolvedNote]:
    """Yield every sounding note in sequence order."""
    start = 0
    last = len(events) - 1
    for index, event in enumerate(events):
        start += beats_to_samples(event.note_delta, bpm, sample_rate)
        if not event.is_on or index == last:
            continue
        sustain = find_sustain(events, index, bpm, sample_rate)
        if sustain is None:
            _LOGGER.debug(
                "Dropping unmatched note: pitch=%d instrument=%s at event %d",
                event.pitch,
                event.instrument,
                index,
            )
            continue
        yield ResolvedNote(index=index, event=event, start=start, sustain=sustain)
