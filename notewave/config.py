from __future__ import annotations

import logging
import math
import os
from collections.abc import Mapping
from numbers import Real
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

_LOGGER = logging.getLogger("notewave.config")

SAMPLE_RATE = 44_100
OVERTONES_ENV = "NOTEWAVE_OVERTONES_PATH"
DEFAULT_OVERTONES_PATH = Path(__file__).resolve().parent / "data" / "piano_overtones.csv"

PianoModel = Literal["harmonic", "overtone"]


class SynthConfig(BaseModel):
    """Render settings shared by every note of a song."""

    sample_rate: int = Field(default=SAMPLE_RATE)
    piano_model: PianoModel = "harmonic"
    overtone_path: Path | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("sample_rate")
    @classmethod
    def _positive_rate(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"sample_rate must be positive, got {value}")
        return value

    def resolved_overtone_path(self) -> Path:
        if self.overtone_path is not None:
            return self.overtone_path
        return resolve_overtone_path(None)


ConfigInput = SynthConfig | Mapping[str, Any] | None


def coerce_config(config: ConfigInput) -> SynthConfig:
    match config:
        case None:
            return SynthConfig()
        case SynthConfig():
            return config
        case Mapping():
            try:
                return SynthConfig.model_validate(dict(config))
            except ValidationError as exc:
                raise ConfigurationError(f"Invalid synth config: {exc}") from exc
        case _:
            raise ConfigurationError(f"Unsupported config type: {type(config).__name__}")


def resolve_overtone_path(path: str | Path | None) -> Path:
    if path is not None:
        return Path(path).expanduser()
    configured = os.environ.get(OVERTONES_ENV)
    if configured:
        _LOGGER.debug("Using overtone table from %s=%s", OVERTONES_ENV, configured)
        return Path(configured).expanduser()
    return DEFAULT_OVERTONES_PATH


def require_positive_bpm(bpm: float) -> float:
    try:
        value = float(bpm)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"bpm must be a positive number, got {bpm!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"bpm must be a positive number, got {bpm!r}")
    return value


def require_positive_sample_rate(sample_rate: int) -> int:
    if (
        isinstance(sample_rate, bool)
        or not isinstance(sample_rate, Real)
        or not math.isfinite(sample_rate)
        or int(sample_rate) != sample_rate
        or sample_rate <= 0
    ):
        raise ConfigurationError(f"sample_rate must be a positive integer, got {sample_rate!r}")
    return int(sample_rate)
