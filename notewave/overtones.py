"""Overtone table for the data-driven piano model.

The table is read from a CSV resource (one header row, then
``frequency,amplitude`` rows) the first time it is needed and shared
read-only for the rest of the process.
"""

from __future__ import annotations

import csv
import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from .config import resolve_overtone_path
from .errors import DataFormatError, ResourceUnavailableError

_LOGGER = logging.getLogger("notewave.overtones")

Partial = tuple[float, float]


@dataclass(frozen=True)
class OvertoneTable:
    """(relative frequency, relative amplitude) pairs, strongest first."""

    partials: tuple[Partial, ...]
    source: Path | None = None

    def __len__(self) -> int:
        return len(self.partials)

    def __iter__(self) -> Iterator[Partial]:
        return iter(self.partials)


def _parse_row(row: list[str], line: int, source: Path) -> Partial:
    if len(row) != 2:
        raise DataFormatError(f"{source}:{line}: expected 2 columns, got {len(row)}")
    try:
        return float(row[0]), float(row[1])
    except ValueError as exc:
        raise DataFormatError(f"{source}:{line}: {exc}") from exc


def load_overtone_table(path: str | Path) -> OvertoneTable:
    """Read a table from disk. Uncached; see :func:`get_overtone_table`."""
    source = Path(path)
    try:
        handle = source.open("r", encoding="utf-8", newline="")
    except OSError as exc:
        raise ResourceUnavailableError(f"Cannot open overtone table {source}: {exc}") from exc

    partials: list[Partial] = []
    with handle:
        reader = csv.reader(handle)
        try:
            next(reader, None)
            for row in reader:
                if not row or all(not cell.strip() for cell in row):
                    continue
                partials.append(_parse_row(row, reader.line_num, source))
        except (UnicodeDecodeError, csv.Error) as exc:
            raise DataFormatError(f"{source}:{reader.line_num + 1}: {exc}") from exc

    _LOGGER.debug("Loaded %d overtones from %s", len(partials), source)
    return OvertoneTable(partials=tuple(partials), source=source)


_CACHE: dict[Path, OvertoneTable] = {}
_CACHE_LOCK = threading.Lock()


def get_overtone_table(path: str | Path | None = None) -> OvertoneTable:
    """Return the shared table for ``path``, loading it at most once.

    Failed loads are not cached; the error propagates to every caller.
    """
    key = resolve_overtone_path(path).resolve()
    table = _CACHE.get(key)
    if table is not None:
        return table
    with _CACHE_LOCK:
        table = _CACHE.get(key)
        if table is None:
            table = load_overtone_table(key)
            _CACHE[key] = table
    return table


def clear_overtone_cache() -> None:
    with _CACHE_LOCK:
        _CACHE.clear()
