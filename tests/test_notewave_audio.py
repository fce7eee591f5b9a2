from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf  # type: ignore[import]

from notewave.audio import (
    add_note,
    ensure_audio_contract,
    normalize_peak,
    write_sample_dump,
    write_wav,
)
from notewave.errors import ConfigurationError


def test_normalize_attenuates_clipping() -> None:
    out = normalize_peak(np.array([2.0, -4.0, 1.0], dtype=np.float32))
    assert out.dtype == np.float32
    assert np.allclose(out, [0.5, -1.0, 0.25])


def test_normalize_never_amplifies() -> None:
    quiet = np.array([0.1, -0.05], dtype=np.float32)
    assert np.array_equal(normalize_peak(quiet), quiet)


def test_normalize_is_idempotent() -> None:
    once = normalize_peak(np.array([3.0, -1.5, 0.75], dtype=np.float32))
    twice = normalize_peak(once)
    assert np.array_equal(once, twice)
    assert float(np.max(np.abs(twice))) <= 1.0


def test_normalize_empty() -> None:
    assert normalize_peak([]).size == 0


def test_ensure_audio_contract_flattens() -> None:
    out = ensure_audio_contract(np.array([[0.5], [-2.0]]))
    assert out.shape == (2,)
    assert np.allclose(out, [0.25, -1.0])


def test_ensure_audio_contract_rejects_bad_rate() -> None:
    with pytest.raises(ConfigurationError):
        ensure_audio_contract([0.0], sample_rate=0)


def test_add_note_in_place() -> None:
    signal = np.zeros(6, dtype=np.float32)
    add_note(signal, np.array([1.0, 2.0]), 2)
    add_note(signal, np.array([0.5, 0.5]), 3)
    assert np.allclose(signal, [0.0, 0.0, 1.0, 2.5, 0.5, 0.0])


def test_add_note_discards_samples_past_end() -> None:
    signal = np.zeros(4, dtype=np.float32)
    add_note(signal, np.ones(10), 2)
    assert np.allclose(signal, [0.0, 0.0, 1.0, 1.0])


def test_add_note_starting_past_end_is_noop() -> None:
    signal = np.zeros(4, dtype=np.float32)
    add_note(signal, np.ones(3), 4)
    add_note(signal, np.ones(3), 40)
    assert not signal.any()


def test_mix_order_does_not_matter() -> None:
    first = np.linspace(-1.0, 1.0, 50)
    second = np.cos(np.arange(80) / 3.0)
    forward = np.zeros(200, dtype=np.float32)
    add_note(forward, first, 10)
    add_note(forward, second, 100)
    backward = np.zeros(200, dtype=np.float32)
    add_note(backward, second, 100)
    add_note(backward, first, 10)
    assert np.array_equal(forward, backward)


def test_sample_dump_one_value_per_line(tmp_path: Path) -> None:
    samples = np.array([0.0, 0.1, -0.5, 1.0], dtype=np.float32)
    path = write_sample_dump(tmp_path / "song.csv", samples)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    assert np.array_equal(np.array([float(line) for line in lines], dtype=np.float32), samples)


def test_write_wav_round_trips(tmp_path: Path) -> None:
    samples = np.array([0.0, 0.25, -0.25, 0.5], dtype=np.float32)
    path = write_wav(tmp_path / "song.wav", samples, sample_rate=22_050)
    data, rate = sf.read(path, dtype="float32")
    assert rate == 22_050
    assert np.allclose(data, samples)
