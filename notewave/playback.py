from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel, ConfigDict

from .audio import FloatArray, ensure_audio_contract
from .errors import PlaybackError
from .spinner import ProgressBar

_LOGGER = logging.getLogger("notewave.playback")


class PlaybackBackend(BaseModel):
    name: str
    play_audio: Callable[[FloatArray, int], None]

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )


def _load_backend() -> PlaybackBackend | None:
    return _load_sounddevice() or _load_simpleaudio()


def _resolve_backend() -> PlaybackBackend:
    backend = _load_backend()
    if backend is None:
        raise PlaybackError(
            "Playback requires sounddevice or simpleaudio. "
            "Install one of them (pip install 'notewave[playback]') or export with --wav."
        )
    _LOGGER.debug("Using %s playback backend", backend.name)
    return backend


def play_audio(
    samples: FloatArray,
    *,
    sample_rate: int,
    duration: float | None = None,
) -> None:
    """Play ``samples`` at ``sample_rate`` for roughly ``duration`` seconds."""
    backend = _resolve_backend()
    normalized = ensure_audio_contract(samples, sample_rate=sample_rate)
    if duration is None:
        duration = len(normalized) / sample_rate

    def _run() -> None:
        backend.play_audio(normalized, sample_rate)

    _play_with_progress(_run, duration=duration, message="♪ Playing audio ... ")


def _play_with_progress(
    play_fn: Callable[[], None],
    *,
    duration: float,
    message: str,
) -> None:
    progress = ProgressBar(message, total=max(duration, 0.0))
    error: list[BaseException] = []

    def _runner() -> None:
        try:
            play_fn()
        except BaseException as exc:
            error.append(exc)

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    start = time.monotonic()
    progress.start()
    try:
        while thread.is_alive():
            progress.update(time.monotonic() - start)
            time.sleep(0.1)
    finally:
        thread.join(timeout=0.2)
        progress.update(duration)
        progress.stop()
    if error:
        raise error[0]


def _load_sounddevice() -> PlaybackBackend | None:
    try:
        import sounddevice as sd_module  # type: ignore[import]
    except (ImportError, OSError) as exc:
        _LOGGER.info("sounddevice not available: %s", exc, exc_info=True)
        return None
    sd: Any = sd_module

    def _play_audio(samples: FloatArray, sample_rate: int) -> None:
        sd.play(samples, sample_rate)
        sd.wait()

    return PlaybackBackend(name="sounddevice", play_audio=_play_audio)


def _load_simpleaudio() -> PlaybackBackend | None:
    try:
        import simpleaudio as sa_module  # type: ignore[import]
    except ImportError as exc:
        _LOGGER.info("simpleaudio not available: %s", exc, exc_info=True)
        return None
    sa: Any = sa_module

    def _to_int16(samples: FloatArray) -> NDArray[np.int16]:
        clipped = np.clip(samples, -1.0, 1.0)
        return (clipped * 32_767).astype(np.int16)

    def _play_audio(samples: FloatArray, sample_rate: int) -> None:
        play = sa.play_buffer(_to_int16(samples), 1, 2, sample_rate)
        play.wait_done()

    return PlaybackBackend(name="simpleaudio", play_audio=_play_audio)
