"""Logging for the ``notewave`` logger tree.

Console records go to stderr with an emoji level marker; everything at DEBUG
and above is also appended to ``notewave.log`` under ``NOTEWAVE_LOG_DIR``
(default ``~/.cache/notewave/logs``).
"""

from __future__ import annotations

import logging
import os
import sys
import traceback
from datetime import datetime
from pathlib import Path

_LOGGER = logging.getLogger("notewave.logging")
_ROOT_LOGGER = "notewave"
_LOG_DIR_ENV = "NOTEWAVE_LOG_DIR"
_DEBUG_ENV = "NOTEWAVE_DEBUG"
_LOG_FILE = "notewave.log"
_FILE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_logging_configured = False


class _EmojiFormatter(logging.Formatter):
    PREFIXES = {
        logging.DEBUG: "🐛",
        logging.INFO: "🎵",
        logging.WARNING: "⚠️",
        logging.ERROR: "❌",
        logging.CRITICAL: "💥",
    }

    def __init__(self) -> None:
        super().__init__("%(level_prefix)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.level_prefix = self.PREFIXES.get(record.levelno, "")
        return super().format(record)


def debug_enabled() -> bool:
    return bool(os.environ.get(_DEBUG_ENV))


def get_log_dir() -> Path:
    configured = os.environ.get(_LOG_DIR_ENV)
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".cache" / "notewave" / "logs"


def get_log_path() -> Path:
    return get_log_dir() / _LOG_FILE


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(stream=sys.__stderr__)
    handler.setLevel(logging.DEBUG if debug_enabled() else logging.INFO)
    handler.setFormatter(_EmojiFormatter())
    return handler


def _file_handler() -> logging.Handler:
    path = get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATE_FORMAT))
    return handler


def configure_logging(*, force: bool = False) -> None:
    """Attach notewave's handlers once per process.

    ``force`` drops the existing handlers first, picking up changed
    environment variables. The console handler is skipped when the host
    application already configured the root logger.
    """
    global _logging_configured
    if _logging_configured and not force:
        return

    logger = logging.getLogger(_ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    if force:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

    if force or not logging.getLogger().handlers:
        logger.addHandler(_console_handler())
    try:
        logger.addHandler(_file_handler())
    except OSError as exc:
        _LOGGER.warning("Failed to configure file logging: %s", exc)

    # caplog listens on the root logger.
    logger.propagate = True
    _logging_configured = True


def log_exception(context: str, exc: BaseException) -> Path | None:
    """Append ``exc`` with its traceback to the log file; never raises."""
    path = get_log_path()
    lines = [f"[{datetime.now().isoformat()}] {context} failed: {type(exc).__name__}: {exc}\n"]
    lines.extend(traceback.format_exception(type(exc), exc, exc.__traceback__))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as handle:
            handle.writelines(lines)
            handle.write("\n")
    except OSError as log_exc:
        _LOGGER.warning("Failed to write log file %s: %s", path, log_exc)
        return None
    return path
