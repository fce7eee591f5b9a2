from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import numpy as np
import soundfile as sf  # type: ignore[import]
from numpy.typing import NDArray

from .config import SAMPLE_RATE, require_positive_sample_rate

FloatArray = NDArray[np.float32]
AudioNumbers = NDArray[np.floating[Any]] | Sequence[float] | FloatArray

__all__ = [
    "SAMPLE_RATE",
    "AudioNumbers",
    "FloatArray",
    "add_note",
    "ensure_audio_contract",
    "normalize_peak",
    "write_sample_dump",
    "write_wav",
]


def normalize_peak(audio: AudioNumbers) -> FloatArray:
    """Divide by ``max(1.0, peak)`` so clipping material is attenuated and
    quiet material is left untouched."""

    samples: FloatArray = np.asarray(audio, dtype=np.float32)
    if samples.size == 0:
        return samples
    peak = max(1.0, float(np.max(np.abs(samples))))
    if peak == 1.0:
        return samples
    return (samples / np.float32(peak)).astype(np.float32)


def ensure_audio_contract(
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
) -> FloatArray:
    """Normalize dtype/range/shape to the mono float32 contract."""

    require_positive_sample_rate(sample_rate)
    mono: FloatArray = np.asarray(audio, dtype=np.float32).reshape(-1)
    return normalize_peak(mono)


def add_note(signal: FloatArray, note: AudioNumbers, start_index: int) -> None:
    """Add ``note`` into ``signal`` in place, dropping samples past the end."""
    if start_index >= len(signal):
        return

    available = len(signal) - start_index
    clipped = np.asarray(note, dtype=signal.dtype)[:available]
    signal[start_index : start_index + len(clipped)] += clipped


def write_sample_dump(path: str | Path, audio: AudioNumbers) -> Path:
    """Write one sample per line, in playback order, with no header."""

    target = Path(path)
    samples = np.asarray(audio, dtype=np.float32).reshape(-1)
    # %.9g round-trips float32 exactly.
    np.savetxt(target, samples, fmt="%.9g")
    return target


def write_wav(
    path: str | Path,
    audio: AudioNumbers,
    *,
    sample_rate: int = SAMPLE_RATE,
) -> Path:
    """Write a mono 32-bit float wav file."""

    target = Path(path)
    normalized = ensure_audio_contract(audio, sample_rate=sample_rate)
    sf.write(target, normalized, sample_rate, subtype="FLOAT")
    return target
