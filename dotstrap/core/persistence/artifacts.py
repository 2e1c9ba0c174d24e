"""
Artifact writes — all-or-nothing replacement of generated config files.

Content goes to a temp file in the target directory which is then
renamed over the target, so a crash mid-write leaves either the old
file or the new one, never half of each.  When requested, the previous
version is copied to a single ``.bak`` sibling first (overwritten on
every run, no history).
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path

from dotstrap.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def backup_path(path: Path) -> Path:
    """The single backup location for ``path``."""
    return path.with_name(path.name + BACKUP_SUFFIX)


def atomic_write_text(path: Path, content: str) -> None:
    """Replace ``path`` with ``content`` atomically.

    Uses write-to-temp-then-rename to prevent partial files.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=f".{path.name}_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def write_generated(generated: GeneratedFile, *, dry_run: bool = False) -> bool:
    """Write a generated artifact, honoring dry-run.

    Returns:
        True if the file was written, False in dry-run.
    """
    target = generated.path

    if dry_run:
        logger.info("[DRY-RUN] Would write %s", target)
        return False

    if generated.backup and target.is_file():
        shutil.copy2(target, backup_path(target))
        logger.debug("Backed up %s → %s", target, backup_path(target))

    atomic_write_text(target, generated.content)
    logger.debug("Wrote %d bytes to %s", len(generated.content), target)
    return True
