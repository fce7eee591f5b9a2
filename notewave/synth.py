# pyright: reportUnknownMemberType=false

"""
Per-instrument timbres.

Every generator takes a frequency and a sample count and returns raw float64
samples; :func:`synthesize` resolves the pitch, dispatches on the instrument
tag and applies velocity.
"""

from __future__ import annotations

import math
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

from .audio import FloatArray
from .config import SAMPLE_RATE, PianoModel
from .errors import ConfigurationError
from .overtones import OvertoneTable, get_overtone_table
from .song import Instrument

# =============================================================================
# CONSTANTS
# =============================================================================

CONCERT_A_HZ = 440.0
CONCERT_A_PITCH = 69

# Harmonic piano (Inigo Quilez's decaying overtone stack)
PIANO_HARMONICS = 6
PIANO_DECAY_PER_HZ = -0.0015

# Overtone piano
BASE_DECAY_RATE = -0.0001
DECAY_TIME_SCALE = 50.0
PARTIAL_THRESHOLD = 0.0005
TAIL_FACTOR = 1.5
SILENCE_CHECK_START = 1000

RawArray: TypeAlias = NDArray[np.float64]

TWO_PI = 2.0 * np.pi


# =============================================================================
# OSCILLATORS
# =============================================================================


def pitch_to_frequency(pitch: float) -> float:
    """Equal-tempered frequency, MIDI pitch 69 = 440 Hz."""
    try:
        return CONCERT_A_HZ * 2.0 ** ((pitch - CONCERT_A_PITCH) / 12.0)
    except OverflowError:
        return math.inf


def time_axis(sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    return np.arange(sample_count, dtype=np.float64) / sr


def generate_sine(freq: float, sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    t = time_axis(sample_count, sr)
    return np.sin(TWO_PI * freq * t)


def generate_square(freq: float, sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    """+1 while the sine is positive, -1 otherwise (zero crossings included)."""
    return np.where(generate_sine(freq, sample_count, sr) > 0.0, 1.0, -1.0)


def generate_triangle(freq: float, sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    # Peaks at +-pi/2; the song normalizer handles the range.
    return np.arcsin(generate_sine(freq, sample_count, sr))


def generate_saw(freq: float, sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    t = time_axis(sample_count, sr)
    return 2.0 * np.mod(freq * t, 1.0) - 1.0


def generate_piano_harmonic(freq: float, sample_count: int, sr: int = SAMPLE_RATE) -> RawArray:
    """Six halving harmonics under a shared decay, cubic saturation and a swell."""
    t = time_axis(sample_count, sr)
    decay = np.exp(PIANO_DECAY_PER_HZ * TWO_PI * freq * t)
    note = np.zeros(sample_count, dtype=np.float64)
    for harmonic in range(1, PIANO_HARMONICS + 1):
        note += np.sin(harmonic * TWO_PI * freq * t) * decay / 2.0 ** (harmonic - 1)
    note += note**3
    return note * (1.0 + 16.0 * t * np.exp(-6.0 * t))


def generate_piano_overtone(
    freq: float,
    sample_count: int,
    table: OvertoneTable,
    sr: int = SAMPLE_RATE,
) -> RawArray:
    """Additive piano driven by an overtone table.

    Renders ``TAIL_FACTOR`` times the requested length so the decay can ring
    past note-off. For each sample the partial sum stops at the first partial
    whose decayed amplitude is below ``PARTIAL_THRESHOLD``; the table is
    ordered strongest first. Output ends at the first exactly-silent sample
    after ``SILENCE_CHECK_START``.
    """
    total = int(sample_count * TAIL_FACTOR)
    t = time_axis(total, sr)
    scaled_time = t * DECAY_TIME_SCALE
    note = np.zeros(total, dtype=np.float64)
    audible = np.ones(total, dtype=bool)

    for relative_freq, amplitude in table:
        partial_freq = relative_freq * freq
        envelope = amplitude * np.exp(BASE_DECAY_RATE * partial_freq * scaled_time)
        audible &= np.abs(envelope) >= PARTIAL_THRESHOLD
        if not audible.any():
            break
        note[audible] += envelope[audible] * np.sin(TWO_PI * partial_freq * t[audible])

    silent = np.flatnonzero(note[SILENCE_CHECK_START + 1 :] == 0.0)
    if silent.size:
        note = note[: SILENCE_CHECK_START + 1 + int(silent[0])]
    return note


# =============================================================================
# DISPATCH
# =============================================================================


def synthesize(
    pitch: int,
    instrument: Instrument,
    velocity: float,
    sample_count: int,
    sample_rate: int = SAMPLE_RATE,
    *,
    piano_model: PianoModel = "harmonic",
    overtones: OvertoneTable | None = None,
) -> FloatArray:
    """Render one note as float32 samples scaled by ``velocity``.

    Returns ``sample_count`` samples, except the overtone piano which may run
    longer (decay tail) or shorter (silence cut). A zero length or a
    non-finite frequency renders as an empty array.
    """
    freq = pitch_to_frequency(pitch)
    if sample_count <= 0 or not math.isfinite(freq):
        return np.zeros(0, dtype=np.float32)

    match instrument:
        case "Sine":
            raw = generate_sine(freq, sample_count, sample_rate)
        case "Square":
            raw = generate_square(freq, sample_count, sample_rate)
        case "Triangle":
            raw = generate_triangle(freq, sample_count, sample_rate)
        case "Saw":
            raw = generate_saw(freq, sample_count, sample_rate)
        case "Piano" if piano_model == "overtone":
            table = overtones if overtones is not None else get_overtone_table()
            raw = generate_piano_overtone(freq, sample_count, table, sample_rate)
        case "Piano":
            raw = generate_piano_harmonic(freq, sample_count, sample_rate)
        case _:
            raise ConfigurationError(f"Unknown instrument: {instrument!r}")

    return (raw * velocity).astype(np.float32)
