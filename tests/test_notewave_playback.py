from __future__ import annotations

import numpy as np
import pytest

from notewave import playback
from notewave.audio import FloatArray
from notewave.errors import PlaybackError
from notewave.playback import PlaybackBackend, play_audio


def test_missing_backend_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(playback, "_load_backend", lambda: None)
    with pytest.raises(PlaybackError):
        play_audio(np.zeros(10, dtype=np.float32), sample_rate=8_000)


def test_backend_receives_normalized_samples(monkeypatch: pytest.MonkeyPatch) -> None:
    received: list[tuple[FloatArray, int]] = []

    def _fake_play(samples: FloatArray, sample_rate: int) -> None:
        received.append((samples, sample_rate))

    monkeypatch.setattr(
        playback, "_load_backend", lambda: PlaybackBackend(name="fake", play_audio=_fake_play)
    )
    play_audio(np.array([0.5, -2.0], dtype=np.float32), sample_rate=8_000, duration=0.1)

    samples, rate = received[0]
    assert rate == 8_000
    assert np.allclose(samples, [0.25, -1.0])


def test_backend_errors_propagate(monkeypatch: pytest.MonkeyPatch) -> None:
    def _broken(samples: FloatArray, sample_rate: int) -> None:
        raise RuntimeError("device unplugged")

    monkeypatch.setattr(
        playback, "_load_backend", lambda: PlaybackBackend(name="broken", play_audio=_broken)
    )
    with pytest.raises(RuntimeError, match="unplugged"):
        play_audio(np.zeros(4, dtype=np.float32), sample_rate=8_000)
