"""
Logging configuration — console output plus the installation log.

Called by main.py: once at startup for the console, and again by ``run``
to attach the installation log.  Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

Levels are resolved in precedence order:
    --debug / --verbose / --quiet  >  DOTSTRAP_LOG_LEVEL  >  INFO

The installation log is appended on every run and never rotated; each
record is one ``YYYY-MM-DD HH:MM:SS [LEVEL] message`` line.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

LEVEL_ENV = "DOTSTRAP_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

# ── Format strings ──────────────────────────────────────────────

_ENTRY_FMT = "%(asctime)s [%(levelname)s] %(message)s"
_ENTRY_DATEFMT = "%Y-%m-%d %H:%M:%S"

# console, keyed by the most verbose level each one covers
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, _ENTRY_FMT, _ENTRY_DATEFMT),
    (logging.CRITICAL, "[%(levelname)s] %(message)s", None),
]


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from the CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LEVEL_ENV) or DEFAULT_LEVEL


def setup_logging(
    level: str = DEFAULT_LEVEL,
    log_file: str | Path | None = None,
    log_file_level: str = DEFAULT_LEVEL,
) -> None:
    """Configure Python logging for the entire process.

    Replaces whatever handlers the root logger had, so calling it again
    (e.g. to add the log file) never duplicates output.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to the installation log. Parent
            directories are created; the file is opened for append.
        log_file_level: Level for the log file. INFO keeps every step
            in the file even when the console is quiet.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    if log_file:
        handlers.append(_file_handler(Path(log_file), _parse_level(log_file_level)))

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))

    # A broken stream must not take a run down with it.
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for ceiling, f, d in _CONSOLE_FORMATS if level <= ceiling)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_ENTRY_FMT, datefmt=_ENTRY_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    """Level name to its numeric constant; unknown names mean INFO."""
    numeric = getattr(logging, (level or "").upper(), None)
    return numeric if isinstance(numeric, int) else logging.INFO
