"""
Housekeeping — clear stale files out of the downloads directory.

Age is counted in whole days and compared with ``>`` just like
``find -mtime +N``: with the default of 7 a file must be at least 8
full days old to go.  Only regular files are removed; directories and
symlinks are left alone.  No confirmation, and no undo.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from pathlib import Path

from dotstrap.core.engine.executor import StepContext
from dotstrap.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

STEP = "housekeeping"

SECONDS_PER_DAY = 86400


def age_in_days(path: Path, now: float) -> int:
    """Whole days since ``path`` was last modified."""
    return int((now - path.stat().st_mtime) // SECONDS_PER_DAY)


def stale_files(directory: Path, max_age_days: int, now: float | None = None) -> Iterator[Path]:
    """Regular files under ``directory`` older than ``max_age_days``."""
    now = time.time() if now is None else now
    for path in sorted(directory.rglob("*")):
        if path.is_symlink() or not path.is_file():
            continue
        if age_in_days(path, now) > max_age_days:
            yield path


def clear_old_files(
    directory: Path,
    max_age_days: int,
    *,
    dry_run: bool = False,
    now: float | None = None,
) -> list[Path]:
    """Delete stale files.

    Returns:
        The files removed (or, in dry-run, the files that would be).
    """
    logger.info("Clearing files older than %d days from %s...", max_age_days, directory)
    if not directory.is_dir():
        logger.info("%s does not exist. Nothing to clear.", directory)
        return []

    stale = list(stale_files(directory, max_age_days, now))
    if dry_run:
        logger.info("[DRY-RUN] Would clear %d old files from %s.", len(stale), directory)
        return stale

    removed: list[Path] = []
    for path in stale:
        try:
            path.unlink()
            removed.append(path)
        except OSError as e:
            logger.error("Could not remove %s: %s", path, e)
    logger.info("Cleanup of %s complete (%d files removed).", directory, len(removed))
    return removed


def clear_old_downloads(ctx: StepContext) -> Receipt:
    removed = clear_old_files(
        ctx.path("downloads"),
        ctx.config.housekeeping.max_age_days,
        dry_run=ctx.dry_run,
    )
    metadata = {"files": [str(p) for p in removed], "count": len(removed)}
    if ctx.dry_run:
        return Receipt.skip(step=STEP, reason=f"[dry-run] {len(removed)} files kept", metadata=metadata)
    return Receipt.success(step=STEP, output=f"{len(removed)} files removed", metadata=metadata)
