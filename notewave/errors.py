from __future__ import annotations


class NoteWaveError(Exception):
    """Base error for the notewave library."""


class ConfigurationError(NoteWaveError):
    """Raised when tempo, sample rate or synth settings are invalid."""


class ResourceUnavailableError(NoteWaveError):
    """Raised when a song or overtone resource cannot be opened."""


class DataFormatError(NoteWaveError):
    """Raised when a song or overtone resource cannot be parsed."""


class PlaybackError(NoteWaveError):
    """Raised when no audio output backend is usable."""
